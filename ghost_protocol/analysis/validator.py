"""Builds a ContentAnalysis from the model's parsed JSON."""

from typing import Any

from ghost_protocol.analysis.exceptions import AnalysisValidationError
from ghost_protocol.analysis.models import ContentAnalysis, DetectedInfluence

_MAX_INFLUENCES = 20


def validate_and_build(data: dict[str, Any]) -> ContentAnalysis:
    """Validate raw parsed JSON and build a ContentAnalysis.

    Title, genre and description are required. Optional fields that have the
    wrong shape are dropped rather than rejected.

    Raises:
        AnalysisValidationError: if a required field is missing or blank.
    """
    return ContentAnalysis(
        title=_require_text(data, "title"),
        genre=_require_text(data, "genre"),
        description=_require_text(data, "description"),
        publication_year=_coerce_year(data.get("publicationYear")),
        detected_influences=_build_influences(data.get("detectedInfluences")),
    )


def _require_text(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise AnalysisValidationError(f"Missing required field in AI response: {key}")
    return value.strip()


def _coerce_year(raw: Any) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw or None
    if isinstance(raw, float) and raw.is_integer():
        return int(raw) or None
    if isinstance(raw, str) and raw.strip().isdigit():
        return int(raw.strip()) or None
    return None


def _build_influences(raw: Any) -> list[DetectedInfluence]:
    if not isinstance(raw, list):
        return []
    influences: list[DetectedInfluence] = []
    for item in raw[:_MAX_INFLUENCES]:
        influence = _build_influence(item)
        if influence is not None:
            influences.append(influence)
    return influences


def _build_influence(raw: Any) -> DetectedInfluence | None:
    # The short prompt variant asks for plain names.
    if isinstance(raw, str):
        return DetectedInfluence(name=raw.strip()) if raw.strip() else None
    if not isinstance(raw, dict):
        return None
    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        return None
    creator = raw.get("creator")
    return DetectedInfluence(
        name=name.strip(),
        creator=creator.strip() if isinstance(creator, str) else "",
        year=_coerce_year(raw.get("year")),
        confidence=_clamp_confidence(raw.get("confidence")),
    )


def _clamp_confidence(raw: Any) -> int:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return 0
    return int(max(0, min(100, round(raw))))
