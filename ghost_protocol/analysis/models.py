from dataclasses import dataclass, field

FALLBACK_TITLE = "Untitled Work"
FALLBACK_GENRE = "Unknown"
FALLBACK_DESCRIPTION = "AI analysis unavailable. Please enter details manually."

INFLUENCE_INCLUDE_THRESHOLD = 70


@dataclass(frozen=True)
class DetectedInfluence:
    """A well-known work the model believes influenced the upload."""

    name: str
    creator: str = ""
    year: int | None = None
    confidence: int = 0

    @property
    def include(self) -> bool:
        return self.confidence > INFLUENCE_INCLUDE_THRESHOLD


@dataclass(frozen=True)
class ContentAnalysis:
    """Metadata extracted from an uploaded work."""

    title: str
    genre: str
    description: str
    publication_year: int | None = None
    detected_influences: list[DetectedInfluence] = field(default_factory=list)

    @classmethod
    def fallback(cls) -> "ContentAnalysis":
        return cls(
            title=FALLBACK_TITLE,
            genre=FALLBACK_GENRE,
            description=FALLBACK_DESCRIPTION,
        )


@dataclass(frozen=True)
class AnalysisOutcome:
    """What the analysis endpoint reports: always carries a usable analysis."""

    success: bool
    analysis: ContentAnalysis
    error: str | None = None
    text_preview: str = ""
    extraction_failed: bool = False
