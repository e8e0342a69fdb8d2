from ghost_protocol.analysis.analyzer import ContentAnalyzer
from ghost_protocol.analysis.factory import AnalyzerFactory
from ghost_protocol.analysis.models import AnalysisOutcome, ContentAnalysis, DetectedInfluence

__all__ = [
    "AnalysisOutcome",
    "AnalyzerFactory",
    "ContentAnalysis",
    "ContentAnalyzer",
    "DetectedInfluence",
]
