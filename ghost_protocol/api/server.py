"""HTTP proxy in front of the pinning service and the analysis model.

Browsers never see the Pinata or Groq keys: uploads and analysis requests go
through these endpoints, which hold the credentials server-side.
"""

from fastapi import FastAPI, File, Form, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ghost_protocol.analysis.analyzer import ContentAnalyzer
from ghost_protocol.analysis.factory import AnalyzerFactory
from ghost_protocol.analysis.models import ContentAnalysis
from ghost_protocol.chain.base import BaseChainClient
from ghost_protocol.chain.exceptions import ChainError
from ghost_protocol.chain.factory import ChainClientFactory
from ghost_protocol.config.settings import Settings
from ghost_protocol.graph.influence import Era, InfluenceGraphBuilder
from ghost_protocol.logging.logger import Log
from ghost_protocol.storage.base import BaseStorage
from ghost_protocol.storage.exceptions import PinningError, StorageError
from ghost_protocol.storage.factory import StorageFactory
from ghost_protocol.storage.models import UploadedFile

DEFAULT_MEDIA_TYPE = "application/octet-stream"


def _read_upload(upload: UploadFile, max_bytes: int) -> UploadedFile:
    """Read at most one byte past the limit so oversized uploads still fail validation."""
    return UploadedFile(
        file_name=upload.filename or "upload",
        media_type=upload.content_type or DEFAULT_MEDIA_TYPE,
        content=upload.file.read(max_bytes + 1),
    )


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def create_app(
    settings: Settings,
    *,
    storage: BaseStorage | None = None,
    analyzer: ContentAnalyzer | None = None,
    chain: BaseChainClient | None = None,
) -> FastAPI:
    storage = storage or StorageFactory.create(settings)
    analyzer = analyzer or AnalyzerFactory.create(settings)
    chain = chain or ChainClientFactory.create(settings)

    app = FastAPI(title="Ghost Protocol API")
    # Successful analyses by content hash; their influences become graph edges
    # once the content is registered.
    app.state.analyses = {}
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/health")
    def health() -> dict:
        return {"status": "OK", "message": "Ghost Protocol API Server is running"}

    @app.post("/api/upload-to-ipfs")
    def upload_to_ipfs(file: UploadFile | None = File(None)):
        if file is None:
            return _error(400, "No file provided")
        uploaded = _read_upload(file, settings.max_upload_bytes)
        try:
            stored = storage.store(uploaded)
        except PinningError as exc:
            Log.error(f"Upload API error: {exc}")
            return _error(500, str(exc) or "Failed to upload file")
        except StorageError as exc:
            return _error(400, str(exc))

        return {
            "success": True,
            "message": "File uploaded successfully",
            "data": {
                "ipfsHash": stored.content_hash,
                "ipfsUrl": stored.url,
                "fileName": stored.file_name,
                "fileSize": stored.size,
                "fileType": stored.media_type,
                "timestamp": stored.timestamp,
            },
        }

    @app.post("/api/analyze-content")
    def analyze_content(
        file: UploadFile | None = File(None),
        ipfsHash: str | None = Form(None),
    ):
        if file is None:
            return _error(400, "No file provided")
        uploaded = _read_upload(file, settings.max_upload_bytes)
        outcome = analyzer.analyze(uploaded)
        analysis = outcome.analysis
        if outcome.success and ipfsHash:
            app.state.analyses[ipfsHash] = analysis

        if outcome.extraction_failed:
            message = "Text extraction not available for this file type"
        elif outcome.success:
            message = "Content analyzed successfully"
        else:
            message = "Analysis completed with errors"

        return {
            "success": outcome.success,
            "message": message,
            "data": {
                "title": analysis.title,
                "publicationYear": analysis.publication_year,
                "genre": analysis.genre,
                "description": analysis.description,
                "detectedInfluences": [
                    {
                        "name": i.name,
                        "creator": i.creator,
                        "year": i.year,
                        "confidence": i.confidence,
                    }
                    for i in analysis.detected_influences
                ],
                "ipfsHash": ipfsHash,
                "fileName": uploaded.file_name,
                "textPreview": outcome.text_preview,
                "extractionFailed": outcome.extraction_failed,
            },
            "aiError": outcome.error,
        }

    @app.get("/api/influence-graph")
    def influence_graph(q: str = "", era: str = Era.ALL.value):
        try:
            era_filter = Era(era.lower())
        except ValueError:
            return _error(400, f"Unknown era '{era}'. Choose from: {[e.value for e in Era]}")

        builder = InfluenceGraphBuilder()
        try:
            assets = [chain.get_asset(i) for i in range(1, chain.get_total_assets() + 1)]
        except ChainError as exc:
            Log.error(f"Influence graph unavailable: {exc}")
            return _error(502, "Failed to read registered assets")
        for asset in assets:
            builder.add_asset(asset)
        analyses: dict[str, ContentAnalysis] = app.state.analyses
        for asset in assets:
            analysis = analyses.get(asset.content_hash)
            if analysis is not None:
                builder.add_influences(str(asset.id), analysis.detected_influences)
        return builder.build().filter(q, era_filter).to_dict()

    return app
