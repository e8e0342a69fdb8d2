from typing import ClassVar

from ghost_protocol.analysis.analyzer import ContentAnalyzer
from ghost_protocol.analysis.example_client_adapter import ExampleClientAdapter
from ghost_protocol.analysis.openai_client_adapter import OpenAIClientAdapter
from ghost_protocol.config.settings import Settings
from ghost_protocol.extraction.extractor import TextExtractor
from ghost_protocol.extraction.factory import TextExtractorFactory


class AnalyzerFactory:
    """Creates the configured content analyzer."""

    OPENAI_COMPATIBLE_PROVIDERS: ClassVar[tuple[str, ...]] = ("groq", "openai_compatible")

    @classmethod
    def create(
        cls,
        settings: Settings,
        extractor: TextExtractor | None = None,
    ) -> ContentAnalyzer:
        if extractor is None:
            extractor = TextExtractorFactory.create(settings)
        provider = settings.analysis_provider.lower()
        if provider == "example":
            return ContentAnalyzer(
                client=ExampleClientAdapter(),
                extractor=extractor,
                model="example",
                temperature=0.0,
                text_budget=settings.analysis_text_budget,
            )
        if provider not in cls.OPENAI_COMPATIBLE_PROVIDERS:
            supported = ["example", *cls.OPENAI_COMPATIBLE_PROVIDERS]
            raise ValueError(
                f"Unknown analysis provider '{provider}'. Choose from: {supported}"
            )
        client = OpenAIClientAdapter(
            api_key=settings.groq_api_key,
            timeout_seconds=settings.groq_timeout_seconds,
            base_url=settings.groq_base_url,
        )
        return ContentAnalyzer(
            client=client,
            extractor=extractor,
            model=settings.groq_model_name,
            temperature=settings.analysis_temperature,
            max_tokens=settings.analysis_max_tokens,
            text_budget=settings.analysis_text_budget,
        )
