"""AI-powered metadata extraction for uploaded works."""

import json
import re
from pathlib import Path

from ghost_protocol.analysis.client_base import BaseAnalysisClient
from ghost_protocol.analysis.exceptions import AnalysisError
from ghost_protocol.analysis.models import AnalysisOutcome, ContentAnalysis
from ghost_protocol.analysis.prompt_loader import load_prompt_template, load_response_format
from ghost_protocol.analysis.validator import validate_and_build
from ghost_protocol.extraction.exceptions import TextExtractionError
from ghost_protocol.extraction.extractor import TextExtractor
from ghost_protocol.logging.logger import Log
from ghost_protocol.storage.models import UploadedFile

_JSON_BLOCK_RE = re.compile(r"\{[\s\S]*\}")
_PREVIEW_CHARS = 500


class ContentAnalyzer:
    """Extracts text from an upload and asks a language model for its metadata.

    ``analyze`` never raises: any failure along the way degrades to
    ``ContentAnalysis.fallback()`` with ``success=False`` so a person can fill
    in the details by hand.
    """

    def __init__(
        self,
        *,
        client: BaseAnalysisClient,
        extractor: TextExtractor,
        model: str,
        temperature: float = 0.3,
        max_tokens: int = 2000,
        text_budget: int = 8000,
        prompt_template_path: Path | None = None,
        response_format_path: Path | None = None,
    ) -> None:
        self._client = client
        self._extractor = extractor
        self._model = model
        self._temperature = max(0.0, min(1.0, temperature))
        self._max_tokens = max_tokens
        self._text_budget = text_budget
        self._prompt_template = load_prompt_template(prompt_template_path)
        self._response_format = load_response_format(response_format_path)

    def analyze(self, file: UploadedFile) -> AnalysisOutcome:
        """Return the analysis of an upload, falling back to safe defaults."""
        try:
            text = self._extractor.extract(file)
        except TextExtractionError as exc:
            Log.warning(f"Text extraction failed for {file.file_name}: {exc}")
            return AnalysisOutcome(
                success=False,
                analysis=ContentAnalysis.fallback(),
                error=str(exc),
                extraction_failed=True,
            )

        preview = text[:_PREVIEW_CHARS]
        try:
            analysis = self.analyze_text(text)
        except Exception as exc:
            if isinstance(exc, AnalysisError):
                Log.error(f"AI analysis failed for {file.file_name}: {exc}")
            else:
                Log.exception(f"Unexpected analysis error for {file.file_name}")
            return AnalysisOutcome(
                success=False,
                analysis=ContentAnalysis.fallback(),
                error=str(exc),
                text_preview=preview,
            )
        return AnalysisOutcome(success=True, analysis=analysis, text_preview=preview)

    def analyze_text(self, text: str) -> ContentAnalysis:
        """Send extracted text to the model and validate its answer.

        Raises:
            AnalysisError: on provider, parsing or validation failure.
        """
        prompt = self._build_prompt(text)
        Log.debug(f"Analysis prompt:\n{prompt}")

        raw_response = self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
            user_prompt=prompt,
        )
        Log.debug(f"AI raw response:\n{raw_response}")

        analysis = validate_and_build(self._parse_json(raw_response))
        Log.info(
            f"Analysis complete: '{analysis.title}' ({analysis.genre}), "
            f"{len(analysis.detected_influences)} influences"
        )
        return analysis

    def _build_prompt(self, text: str) -> str:
        return self._prompt_template.format(
            content=text[: self._text_budget],
            response_format=self._response_format,
        )

    @staticmethod
    def _parse_json(raw: str) -> dict[str, object]:
        # Models often wrap the object in prose or code fences.
        match = _JSON_BLOCK_RE.search(raw)
        candidate = match.group(0) if match else raw.strip()
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError as exc:
            raise AnalysisError(f"AI returned invalid JSON format: {exc}") from exc
        if not isinstance(parsed, dict):
            raise AnalysisError("JSON response must be an object")
        return parsed
