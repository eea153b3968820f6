"""
Integration tests for the HTTP API.

Stores point at a temporary SQLite file, uploads at a temporary directory, and
the generator is a fake, so tests need neither provider keys nor network.
"""

import base64
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_carousel_store, get_document_store, get_generator, get_upload_dir
from app.core.db import CarouselStore, DocumentStore
from app.core.errors import UpstreamError
from app.main import app
from app.services.agent_service import EMPTY_QUESTION_MESSAGE, MISSING_PROVIDER_MESSAGE, NOT_FOUND_ANSWER


class FakeGenerator:
    def __init__(self, reply: str = "Câu trả lời thử") -> None:
        self.reply = reply
        self.prompts: list[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.reply


@pytest.fixture
def upload_dir(tmp_path) -> Path:
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def client(tmp_path, upload_dir, generator):
    db_path = tmp_path / "app.db"
    app.dependency_overrides[get_document_store] = lambda: DocumentStore(db_path)
    app.dependency_overrides[get_carousel_store] = lambda: CarouselStore(db_path)
    app.dependency_overrides[get_upload_dir] = lambda: upload_dir
    app.dependency_overrides[get_generator] = lambda: generator
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"ok": True}


# --- Chat data ---

def test_create_and_list_data_newest_first(client: TestClient) -> None:
    """POST /api/data returns the document; GET lists newest first."""
    first = client.post("/api/data", json={"title": "Một", "content": "nội dung 1"})
    second = client.post("/api/data", json={"title": "Hai", "content": "nội dung 2"})
    assert first.status_code == 200
    body = first.json()
    assert set(body) == {"id", "title", "content", "fileType", "htmlContent", "imageCount", "date"}
    assert body["fileType"] == "text"
    assert body["htmlContent"] is None
    assert body["imageCount"] == 0
    assert body["date"]

    listed = client.get("/api/data").json()
    assert [d["id"] for d in listed] == [second.json()["id"], first.json()["id"]]


def test_create_data_keeps_submitted_whitespace(client: TestClient) -> None:
    """Only the emptiness check trims; the stored text is what was sent."""
    response = client.post("/api/data", json={"title": " Lịch họp ", "content": "  dòng 1\n  dòng 2\n"})
    assert response.status_code == 200
    assert response.json()["title"] == " Lịch họp "
    assert client.get("/api/data").json()[0]["content"] == "  dòng 1\n  dòng 2\n"


def test_create_word_document_keeps_html(client: TestClient) -> None:
    response = client.post(
        "/api/data",
        json={
            "title": "Hướng dẫn",
            "content": "văn bản",
            "fileType": "word",
            "htmlContent": "<p>văn bản</p>",
            "imageCount": 2,
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert body["fileType"] == "word"
    assert body["htmlContent"] == "<p>văn bản</p>"
    assert body["imageCount"] == 2


def test_text_document_drops_html(client: TestClient) -> None:
    response = client.post(
        "/api/data", json={"title": "t", "content": "c", "fileType": "text", "htmlContent": "<b>x</b>"}
    )
    assert response.json()["htmlContent"] is None


@pytest.mark.parametrize(
    "payload",
    [
        {"content": "c"},
        {"title": "t"},
        {"title": "  ", "content": "c"},
        {"title": "t", "content": ""},
    ],
)
def test_create_data_missing_fields_returns_400(client: TestClient, payload: dict) -> None:
    response = client.post("/api/data", json=payload)
    assert response.status_code == 400
    assert "error" in response.json()


@pytest.mark.parametrize(
    "payload",
    [
        {"title": "t", "content": "c", "fileType": "pdf"},
        {"title": "t", "content": "c", "imageCount": -1},
    ],
)
def test_create_data_invalid_fields_returns_400(client: TestClient, payload: dict) -> None:
    response = client.post("/api/data", json=payload)
    assert response.status_code == 400
    assert "error" in response.json()


def test_delete_data_and_unknown_id_is_idempotent(client: TestClient) -> None:
    created = client.post("/api/data", json={"title": "t", "content": "c"}).json()
    assert client.delete(f"/api/data/{created['id']}").json() == {"message": "Deleted successfully"}
    assert client.get("/api/data").json() == []
    again = client.delete(f"/api/data/{created['id']}")
    assert again.status_code == 200
    assert client.delete("/api/data/does-not-exist").status_code == 200


# --- Ask ---

def test_ask_scenario_single_match(client: TestClient, generator: FakeGenerator) -> None:
    """The literal match is the only reference and appears in the prompt."""
    created = client.post("/api/data", json={"title": "Lịch họp", "content": "Họp vào thứ 2"}).json()
    client.post("/api/data", json={"title": "Khác", "content": "không liên quan"})

    response = client.post("/api/ask", json={"question": "lịch"})
    assert response.status_code == 200
    body = response.json()
    assert body["answer"] == "Câu trả lời thử"
    assert [r["id"] for r in body["references"]] == [created["id"]]
    assert set(body["references"][0]) == {
        "id", "title", "content", "fileType", "htmlContent", "imageCount", "date",
    }
    assert "Mục 1: Lịch họp" in generator.prompts[0]
    assert generator.prompts[0].endswith("lịch")


def test_ask_empty_corpus_blank_answer(client: TestClient, generator: FakeGenerator) -> None:
    generator.reply = "   "
    response = client.post("/api/ask", json={"question": "xyz"})
    assert response.status_code == 200
    assert response.json() == {"answer": NOT_FOUND_ANSWER, "references": []}


def test_ask_regex_noise_question(client: TestClient) -> None:
    client.post("/api/data", json={"title": "abc", "content": "abc"})
    response = client.post("/api/ask", json={"question": "a.b*c"})
    assert response.status_code == 200
    # no literal match, so the recent document is used
    assert [r["title"] for r in response.json()["references"]] == ["abc"]


@pytest.mark.parametrize("payload", [{"question": ""}, {"question": "   "}, {}])
def test_ask_empty_question_returns_400(client: TestClient, payload: dict) -> None:
    response = client.post("/api/ask", json=payload)
    assert response.status_code == 400
    assert response.json() == {"error": EMPTY_QUESTION_MESSAGE}


def test_ask_without_provider_returns_500(client: TestClient) -> None:
    app.dependency_overrides[get_generator] = lambda: None
    response = client.post("/api/ask", json={"question": "lịch"})
    assert response.status_code == 500
    assert response.json() == {"error": MISSING_PROVIDER_MESSAGE}


def test_ask_generation_failure_is_generic_500(client: TestClient) -> None:
    def failing(prompt: str) -> str:
        raise UpstreamError()

    app.dependency_overrides[get_generator] = lambda: failing
    response = client.post("/api/ask", json={"question": "lịch"})
    assert response.status_code == 500
    assert response.json() == {"error": UpstreamError().message}


def test_ask_unexpected_generator_error_is_json_500(client: TestClient) -> None:
    """Any exception from the generator comes back as the generic {"error"} body."""
    def broken(prompt: str) -> str:
        raise RuntimeError("provider exploded: secret detail")

    app.dependency_overrides[get_generator] = lambda: broken
    response = TestClient(app, raise_server_exceptions=False).post("/api/ask", json={"question": "lịch"})
    assert response.status_code == 500
    assert response.headers["content-type"].startswith("application/json")
    assert response.json() == {"error": UpstreamError().message}


def test_unexpected_store_error_is_json_500(client: TestClient) -> None:
    class BrokenStore:
        def list_all(self):
            raise RuntimeError("disk on fire")

    app.dependency_overrides[get_document_store] = lambda: BrokenStore()
    response = TestClient(app, raise_server_exceptions=False).get("/api/data")
    assert response.status_code == 500
    assert response.json() == {"error": UpstreamError().message}


# --- Carousel ---

def test_carousel_register_defaults_and_order(client: TestClient) -> None:
    """Missing title/alt/order are filled with defaults; listing is by order."""
    second = client.post("/api/carousel", json={"title": "B", "imageUrl": "https://x/b.png", "order": 2})
    first = client.post("/api/carousel", json={"imageUrl": "https://x/a.png", "order": 1})
    plain = client.post("/api/carousel", json={"imageUrl": "https://x/c.png"})
    assert first.status_code == 200
    assert first.json()["title"] == "Untitled"
    assert plain.json()["alt"] == ""
    assert plain.json()["order"] == 0

    listed = client.get("/api/carousel").json()
    assert [i["imageUrl"] for i in listed] == ["https://x/c.png", "https://x/a.png", "https://x/b.png"]
    assert second.json()["id"] in {i["id"] for i in listed}


def test_carousel_register_without_url_returns_400(client: TestClient) -> None:
    response = client.post("/api/carousel", json={"title": "x"})
    assert response.status_code == 400


def test_carousel_multipart_upload_and_delete(client: TestClient, upload_dir: Path) -> None:
    """Upload stores a uniquely named file; delete removes record and file."""
    response = client.post(
        "/api/carousel/upload",
        files={"image": ("banner.PNG", b"\x89PNG fake", "image/png")},
        data={"title": "Banner", "alt": "mô tả", "order": "3"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    data = body["data"]
    assert data["title"] == "Banner"
    assert data["order"] == 3
    assert data["imageUrl"].startswith("/uploads/")
    assert data["imageUrl"].endswith(".png")
    stored = upload_dir / data["imageUrl"].rsplit("/", 1)[-1]
    assert stored.read_bytes() == b"\x89PNG fake"

    assert client.delete(f"/api/carousel/{data['id']}").status_code == 200
    assert not stored.exists()
    assert client.get("/api/carousel").json() == []


def test_carousel_upload_rejects_non_image(client: TestClient, upload_dir: Path) -> None:
    response = client.post(
        "/api/carousel/upload",
        files={"image": ("doc.pdf", b"%PDF", "application/pdf")},
    )
    assert response.status_code == 400
    assert list(upload_dir.iterdir()) == []


def test_carousel_upload_without_file_returns_400(client: TestClient) -> None:
    response = client.post("/api/carousel/upload", data={"title": "x"})
    assert response.status_code == 400


def test_carousel_base64_upload(client: TestClient, upload_dir: Path) -> None:
    payload = "data:image/jpeg;base64," + base64.b64encode(b"jpeg-bytes").decode()
    response = client.post("/api/carousel/upload-base64", json={"imageData": payload})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["title"] == "Untitled"
    name = data["imageUrl"].rsplit("/", 1)[-1]
    assert name.startswith("base64-") and name.endswith(".png")
    assert (upload_dir / name).read_bytes() == b"jpeg-bytes"


@pytest.mark.parametrize("payload", [{}, {"imageData": ""}, {"imageData": "abc"}])
def test_carousel_base64_invalid_returns_400(client: TestClient, payload: dict) -> None:
    response = client.post("/api/carousel/upload-base64", json=payload)
    assert response.status_code == 400


def test_carousel_delete_unknown_and_external_url(client: TestClient, upload_dir: Path) -> None:
    keep = upload_dir / "keep.png"
    keep.write_bytes(b"x")
    created = client.post("/api/carousel", json={"imageUrl": "https://cdn.example/keep.png"}).json()
    assert client.delete(f"/api/carousel/{created['id']}").status_code == 200
    assert keep.exists()
    assert client.delete("/api/carousel/unknown").status_code == 200
