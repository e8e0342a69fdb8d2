import io
from unittest.mock import MagicMock

import pytest
from fastapi import UploadFile
from fastapi.testclient import TestClient

from ghost_protocol.analysis.analyzer import ContentAnalyzer
from ghost_protocol.analysis.example_client_adapter import ExampleClientAdapter
from ghost_protocol.analysis.models import AnalysisOutcome, ContentAnalysis, DetectedInfluence
from ghost_protocol.api.server import _read_upload, create_app
from ghost_protocol.chain.example_adapter import ExampleChainAdapter
from ghost_protocol.chain.models import ZERO_ADDRESS, AssetRegistrationRequest
from ghost_protocol.config.settings import Settings
from ghost_protocol.extraction.extractor import TextExtractor
from ghost_protocol.extraction.plain_text_adapter import PlainTextAdapter
from ghost_protocol.storage.base import BaseStorage
from ghost_protocol.storage.example_adapter import ExampleStorageAdapter
from ghost_protocol.storage.exceptions import PinningError


def _make_client(
    *,
    storage: BaseStorage | None = None,
    chain: ExampleChainAdapter | None = None,
    analyzer: ContentAnalyzer | None = None,
) -> TestClient:
    analyzer = analyzer or ContentAnalyzer(
        client=ExampleClientAdapter(),
        extractor=TextExtractor({"text/plain": PlainTextAdapter()}),
        model="example",
    )
    app = create_app(
        Settings(_env_file=None),  # type: ignore[call-arg]
        storage=storage or ExampleStorageAdapter(max_upload_bytes=1024),
        analyzer=analyzer,
        chain=chain or ExampleChainAdapter(),
    )
    return TestClient(app)


def _register(chain: ExampleChainAdapter, title: str, creator: str, deceased: bool) -> None:
    chain.register_asset(
        AssetRegistrationRequest(
            owner=ZERO_ADDRESS,
            beneficiary_contract=ZERO_ADDRESS,
            content_hash=f"Qm{title}",
            title=title,
            creator_name=creator,
            is_deceased=deceased,
        ),
        gas_limit=1,
    )


class TestHealth:
    def test_health(self) -> None:
        response = _make_client().get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "OK"


class TestUploadEndpoint:
    def test_uploads_file(self) -> None:
        response = _make_client().post(
            "/api/upload-to-ipfs",
            files={"file": ("tale.txt", b"Once upon a time.", "text/plain")},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["ipfsHash"].startswith("sha256-")
        assert body["data"]["fileName"] == "tale.txt"
        assert body["data"]["fileSize"] == 17
        assert body["data"]["fileType"] == "text/plain"

    def test_missing_file(self) -> None:
        response = _make_client().post("/api/upload-to-ipfs")
        assert response.status_code == 400
        assert response.json()["error"] == "No file provided"

    def test_rejects_media_type(self) -> None:
        response = _make_client().post(
            "/api/upload-to-ipfs",
            files={"file": ("a.exe", b"MZ", "application/x-msdownload")},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "File type not supported"

    def test_rejects_oversized_file(self) -> None:
        response = _make_client().post(
            "/api/upload-to-ipfs",
            files={"file": ("big.txt", b"x" * 2048, "text/plain")},
        )
        assert response.status_code == 400
        assert "exceeds" in response.json()["error"]

    def test_pinning_failure_is_500(self) -> None:
        storage = MagicMock(spec=BaseStorage)
        storage.store.side_effect = PinningError("Failed to upload to IPFS: 503")
        response = _make_client(storage=storage).post(
            "/api/upload-to-ipfs",
            files={"file": ("tale.txt", b"text", "text/plain")},
        )
        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Failed to upload to IPFS: 503"}


class TestAnalyzeEndpoint:
    def test_analyzes_text(self) -> None:
        response = _make_client().post(
            "/api/analyze-content",
            files={"file": ("tale.txt", b"Once upon a time.", "text/plain")},
            data={"ipfsHash": "QmTale"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["aiError"] is None
        assert body["data"]["title"] == "Example Work"
        assert body["data"]["ipfsHash"] == "QmTale"
        assert body["data"]["textPreview"] == "Once upon a time."

    def test_unsupported_type_falls_back(self) -> None:
        response = _make_client().post(
            "/api/analyze-content",
            files={"file": ("a.zip", b"PK", "application/zip")},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is False
        assert body["data"]["title"] == "Untitled Work"
        assert body["data"]["extractionFailed"] is True
        assert body["message"] == "Text extraction not available for this file type"

    def test_missing_file(self) -> None:
        assert _make_client().post("/api/analyze-content").status_code == 400


class TestInfluenceGraphEndpoint:
    @pytest.fixture()
    def chain(self) -> ExampleChainAdapter:
        chain = ExampleChainAdapter()
        _register(chain, "Dracula", "Bram Stoker", True)
        _register(chain, "Twilight", "Stephenie Meyer", False)
        return chain

    def test_lists_registered_assets(self, chain: ExampleChainAdapter) -> None:
        body = _make_client(chain=chain).get("/api/influence-graph").json()
        assert [n["title"] for n in body["nodes"]] == ["Dracula", "Twilight"]
        assert body["nodes"][0]["kind"] == "ghost"

    def test_search(self, chain: ExampleChainAdapter) -> None:
        body = _make_client(chain=chain).get("/api/influence-graph", params={"q": "meyer"}).json()
        assert [n["title"] for n in body["nodes"]] == ["Twilight"]

    def test_unknown_era(self, chain: ExampleChainAdapter) -> None:
        response = _make_client(chain=chain).get("/api/influence-graph", params={"era": "jurassic"})
        assert response.status_code == 400

    def test_analysed_influences_become_edges(self, chain: ExampleChainAdapter) -> None:
        analyzer = MagicMock(spec=ContentAnalyzer)
        analyzer.analyze.return_value = AnalysisOutcome(
            success=True,
            analysis=ContentAnalysis(
                title="Twilight",
                genre="Romance",
                description="Vampire romance.",
                detected_influences=[
                    DetectedInfluence(name="Dracula", creator="Bram Stoker", year=1897, confidence=85),
                    DetectedInfluence(name="Carmilla", creator="Sheridan Le Fanu", year=1872, confidence=30),
                ],
            ),
        )
        client = _make_client(chain=chain, analyzer=analyzer)
        client.post(
            "/api/analyze-content",
            files={"file": ("twilight.txt", b"Bella.", "text/plain")},
            data={"ipfsHash": "QmTwilight"},
        )

        body = client.get("/api/influence-graph").json()

        assert [n["title"] for n in body["nodes"]] == ["Dracula", "Twilight"]
        assert body["edges"] == [{"source": "1", "target": "2", "strength": 85, "distance": 65}]

    def test_failed_analysis_adds_no_edges(self, chain: ExampleChainAdapter) -> None:
        client = _make_client(chain=chain)
        client.post(
            "/api/analyze-content",
            files={"file": ("a.zip", b"PK", "application/zip")},
            data={"ipfsHash": "QmTwilight"},
        )
        assert client.get("/api/influence-graph").json()["edges"] == []


class TestReadUpload:
    def test_reads_one_byte_past_the_limit(self) -> None:
        upload = UploadFile(io.BytesIO(b"x" * 5000), filename="big.txt")
        uploaded = _read_upload(upload, 1024)
        assert uploaded.size == 1025
        assert uploaded.media_type == "application/octet-stream"

    def test_small_upload_is_read_whole(self) -> None:
        upload = UploadFile(io.BytesIO(b"Once upon a time."), filename="tale.txt")
        assert _read_upload(upload, 1024).content == b"Once upon a time."

    def test_oversized_upload_is_still_rejected(self) -> None:
        app = create_app(
            Settings(_env_file=None, max_upload_bytes=1024),  # type: ignore[call-arg]
            storage=ExampleStorageAdapter(max_upload_bytes=1024),
            analyzer=MagicMock(spec=ContentAnalyzer),
            chain=ExampleChainAdapter(),
        )
        response = TestClient(app).post(
            "/api/upload-to-ipfs",
            files={"file": ("big.txt", b"x" * 5000, "text/plain")},
        )
        assert response.status_code == 400
        assert "exceeds" in response.json()["error"]
