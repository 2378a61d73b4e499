"""Tests for the HTTP API: routes, upload validation and error mapping."""

from unittest.mock import MagicMock

import pytest
from starlette.testclient import TestClient

from decoding import ScanResult, SymbolType
from errors import EngineUnavailable, RemoteDecodeError
from scan import ScanOrchestrator
from web import create_app

from fakes import FakeDecoder, FakeEngine

MAX_BYTES = 1024 * 1024


def _client(tmp_path, decoder=None, engine=None, remote=None, **kwargs):
    orchestrator = ScanOrchestrator(engine or FakeEngine(), decoder or FakeDecoder())
    app = create_app(
        orchestrator=orchestrator,
        remote_decoder=remote or MagicMock(),
        upload_dir=tmp_path / "uploads",
        max_upload_bytes=MAX_BYTES,
    )
    return TestClient(app, **kwargs)


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


def _left_in(upload_dir):
    return list(upload_dir.iterdir()) if upload_dir.exists() else []


# =============================================================================
# Pages
# =============================================================================


class TestPages:
    def test_index_has_upload_form(self, tmp_path):
        response = _client(tmp_path).get("/")
        assert response.status_code == 200
        assert 'name="barcode"' in response.text
        assert 'action="/decode"' in response.text

    def test_health(self, tmp_path):
        response = _client(tmp_path).get("/health")
        assert response.json() == {"status": "ok"}


# =============================================================================
# POST /scan
# =============================================================================


class TestScanEndpoint:
    def test_qr_code(self, tmp_path, png_bytes, upload_dir):
        client = _client(tmp_path, FakeDecoder({"original": "QR-Code:https://example.com"}))
        response = client.post("/scan", files={"image": ("a.png", png_bytes, "image/png")})
        assert response.status_code == 200
        assert response.json() == {"symbolType": "QRCode", "data": "https://example.com"}
        assert _left_in(upload_dir) == []

    def test_barcode_after_preprocessing(self, tmp_path, png_bytes, upload_dir):
        client = _client(tmp_path, FakeDecoder({"median_blur": "4006381333931"}))
        response = client.post("/scan", files={"image": ("a.png", png_bytes, "image/png")})
        assert response.json() == {"symbolType": "Barcode", "data": "4006381333931"}
        assert _left_in(upload_dir) == []

    def test_multiple_codes(self, tmp_path, png_bytes):
        client = _client(tmp_path, FakeDecoder({"original": "QR-Code:A\n123"}))
        response = client.post("/scan", files={"image": ("a.png", png_bytes, "image/png")})
        assert response.json() == {
            "symbolType": "Multiple",
            "codes": [
                {"symbolType": "QRCode", "data": "A"},
                {"symbolType": "Barcode", "data": "123"},
            ],
        }

    def test_nothing_detected_is_400(self, tmp_path, png_bytes, upload_dir):
        response = _client(tmp_path).post(
            "/scan", files={"image": ("a.png", png_bytes, "image/png")}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Could not detect any valid barcode or QR code"
        assert _left_in(upload_dir) == []

    def test_missing_file_is_400(self, tmp_path):
        response = _client(tmp_path).post("/scan", data={"other": "x"})
        assert response.status_code == 400
        assert response.json()["error"] == "File upload error"

    def test_non_image_is_400(self, tmp_path):
        decoder = FakeDecoder()
        response = _client(tmp_path, decoder).post(
            "/scan", files={"image": ("a.txt", b"hello", "text/plain")}
        )
        assert response.status_code == 400
        assert response.json() == {
            "error": "File upload error",
            "details": "Only image files are allowed!",
        }
        assert decoder.calls == []

    def test_oversized_upload_rejected_before_scanning(self, tmp_path, upload_dir):
        decoder = FakeDecoder()
        response = _client(tmp_path, decoder).post(
            "/scan", files={"image": ("big.png", b"x" * (MAX_BYTES + 1), "image/png")}
        )
        assert response.status_code == 400
        assert "File too large" in response.json()["details"]
        assert decoder.calls == []
        assert _left_in(upload_dir) == []

    def test_missing_engine_is_500(self, tmp_path, png_bytes):
        class MissingEngine(FakeEngine):
            def transform(self, source, destination, operations):
                raise EngineUnavailable("ImageMagick executable not found: convert")

        response = _client(tmp_path, engine=MissingEngine()).post(
            "/scan", files={"image": ("a.png", png_bytes, "image/png")}
        )
        assert response.status_code == 500
        assert response.json()["error"] == "Server error"

    def test_unexpected_error_is_500_and_cleans_up(self, tmp_path, png_bytes, upload_dir):
        client = _client(
            tmp_path,
            engine=FakeEngine(crash_on=("auto_rotate",)),
            raise_server_exceptions=False,
        )
        response = client.post("/scan", files={"image": ("a.png", png_bytes, "image/png")})
        assert response.status_code == 500
        assert response.json()["error"] == "Server error"
        assert _left_in(upload_dir) == []


# =============================================================================
# POST /decode (HTML form)
# =============================================================================


class TestDecodeForm:
    def test_renders_result(self, tmp_path, png_bytes):
        client = _client(tmp_path, FakeDecoder({"original": "QR-Code:<hello>"}))
        response = client.post("/decode", files={"barcode": ("a.png", png_bytes, "image/png")})
        assert response.status_code == 200
        assert "Decoded Text:" in response.text
        assert "&lt;hello&gt;" in response.text

    def test_renders_every_code(self, tmp_path, png_bytes):
        client = _client(tmp_path, FakeDecoder({"original": "111\n222"}))
        response = client.post("/decode", files={"barcode": ("a.png", png_bytes, "image/png")})
        assert "111" in response.text and "222" in response.text

    def test_renders_error_page(self, tmp_path, png_bytes):
        response = _client(tmp_path).post(
            "/decode", files={"barcode": ("a.png", png_bytes, "image/png")}
        )
        assert response.status_code == 400
        assert "Error:" in response.text
        assert "Could not detect any valid barcode or QR code" in response.text

    def test_missing_file(self, tmp_path):
        response = _client(tmp_path).post("/decode", data={"other": "x"})
        assert response.status_code == 400
        assert "No image file provided" in response.text


# =============================================================================
# POST /upload (remote service)
# =============================================================================


class TestRemoteUpload:
    def test_success(self, tmp_path, png_bytes):
        remote = MagicMock()
        remote.decode_bytes.return_value = ScanResult(SymbolType.QRCODE, "REMOTE")
        response = _client(tmp_path, remote=remote).post(
            "/upload", files={"image": ("a.png", png_bytes, "image/png")}
        )
        assert response.json() == {"symbolType": "QRCode", "data": "REMOTE"}
        remote.decode_bytes.assert_called_once()

    def test_nothing_found_is_400(self, tmp_path, png_bytes):
        remote = MagicMock()
        remote.decode_bytes.return_value = None
        response = _client(tmp_path, remote=remote).post(
            "/upload", files={"image": ("a.png", png_bytes, "image/png")}
        )
        assert response.status_code == 400
        assert response.json()["details"] == "No barcode found in the image"

    def test_service_error_is_500(self, tmp_path, png_bytes):
        remote = MagicMock()
        remote.decode_bytes.side_effect = RemoteDecodeError("Decoding service returned invalid JSON")
        response = _client(tmp_path, remote=remote).post(
            "/upload", files={"image": ("a.png", png_bytes, "image/png")}
        )
        assert response.status_code == 500
        assert response.json() == {
            "error": "Decoding service error",
            "details": "Decoding service returned invalid JSON",
        }

    def test_non_image_never_reaches_service(self, tmp_path):
        remote = MagicMock()
        response = _client(tmp_path, remote=remote).post(
            "/upload", files={"image": ("a.txt", b"x", "text/plain")}
        )
        assert response.status_code == 400
        remote.decode_bytes.assert_not_called()
