import json

import httpx
import pytest
from fastapi.testclient import TestClient

from cv_tailor.client import ServiceClient
import web.app as web_app
from web.app import (
    UNREADABLE_PAGE_MESSAGE, app, extract_job_text, get_client_factory, get_page_transport,
)


def service_handler(tailor_status=200, score_status=200):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/tailor-cv":
            if tailor_status != 200:
                return httpx.Response(tailor_status)
            return httpx.Response(200, json={"tailoredCV": "Jane Doe\nSKILLS\nLanguages: Go"})
        if score_status != 200:
            return httpx.Response(score_status)
        return httpx.Response(200, json={
            "score": 84,
            "breakdown": {"keywords": 80, "skills": 90, "experience": 80, "format": 85, "structure": 85},
            "recommendations": ["Mention Terraform"],
        })
    return handler


@pytest.fixture
def make_client():
    def factory(**kwargs):
        transport = httpx.MockTransport(service_handler(**kwargs))
        app.dependency_overrides[get_client_factory] = (
            lambda: (lambda: ServiceClient("http://service.test", transport=transport))
        )
        return TestClient(app)

    yield factory
    app.dependency_overrides.clear()


def test_index_page(make_client):
    response = make_client().get("/")
    assert response.status_code == 200
    assert 'accept=".pdf,.txt"' in response.text


def test_new_upload_hides_previous_results(make_client):
    page = make_client().get("/").text
    start = page.index('$("cv-file").addEventListener("change"')
    upload_handler = page[start:page.index('fetch("/api/extract"', start)]
    assert 'show("score-card", false);' in upload_handler
    assert 'show("result-card", false);' in upload_handler


def test_health(make_client):
    response = make_client().get("/api/health")
    assert response.json()["status"] == "healthy"


def test_extract_text_file(make_client):
    response = make_client().post(
        "/api/extract", files={"file": ("cv.txt", b"Jane Doe\nSKILLS", "text/plain")}
    )
    assert response.status_code == 200
    assert response.json()["text"] == "Jane Doe\nSKILLS"
    assert response.json()["filename"] == "cv.txt"


def test_extract_rejects_unsupported_type(make_client):
    response = make_client().post(
        "/api/extract", files={"file": ("cv.docx", b"PK\x03\x04", "application/octet-stream")}
    )
    assert response.status_code == 415
    assert response.json()["detail"] == "Please upload a PDF or TXT file"


def test_extract_reports_broken_pdf(make_client):
    response = make_client().post(
        "/api/extract", files={"file": ("cv.pdf", b"garbage", "application/pdf")}
    )
    assert response.status_code == 422
    assert "Could not extract text from PDF" in response.json()["detail"]


def test_optimize_success(make_client):
    response = make_client().post("/api/optimize", json={"cv_text": "Jane", "job_description": "Go dev"})
    assert response.status_code == 200
    data = response.json()
    assert data["phase"] == "done"
    assert data["tailored_cv"].startswith("Jane Doe")
    assert data["ats_score"]["score"] == 84
    assert data["rating"] == "Excellent!"
    assert data["error"] == ""


def test_optimize_missing_input(make_client):
    response = make_client().post("/api/optimize", json={"cv_text": "Jane", "job_description": ""})
    assert response.status_code == 400
    assert response.json()["detail"] == "Please provide both CV and job description"


def test_optimize_tailoring_failure(make_client):
    response = make_client(tailor_status=500).post(
        "/api/optimize", json={"cv_text": "Jane", "job_description": "Go dev"}
    )
    assert response.status_code == 502
    assert response.json()["detail"] == "Error: Failed to tailor CV"


def test_optimize_scoring_failure_degrades(make_client):
    response = make_client(score_status=500).post(
        "/api/optimize", json={"cv_text": "Jane", "job_description": "Go dev"}
    )
    assert response.status_code == 200
    score = response.json()["ats_score"]
    assert score["score"] == 0
    assert score["recommendations"] == ["Unable to calculate score. Please try again."]


def test_optimize_stream_emits_progress_then_result(make_client):
    response = make_client().post(
        "/api/optimize/stream", json={"cv_text": "Jane", "job_description": "Go dev"}
    )
    assert response.status_code == 200
    events = [
        json.loads(chunk[len("data: "):])
        for chunk in response.text.split("\n\n")
        if chunk.startswith("data: ")
    ]
    steps = [event["step"] for event in events]
    assert steps == ["scoring_original", "tailoring", "scoring_tailored", "complete", "result"]
    assert events[-1]["ats_score"]["score"] == 84


def test_format_returns_fragment(make_client):
    response = make_client().post("/api/format", json={"tailored_cv": "Jane Doe\nSKILLS\nLanguages: Go, Rust"})
    assert "<h4>Languages</h4><p>Go, Rust</p>" in response.json()["html"]


def test_download_is_an_html_attachment(make_client):
    response = make_client().post("/api/download", data={"tailored_cv": "Jane Doe\nSUMMARY\nHello"})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "ats_optimized_resume.html" in response.headers["content-disposition"]
    assert '<h1 class="name">Jane Doe</h1>' in response.text


def test_download_requires_content(make_client):
    response = make_client().post("/api/download", data={"tailored_cv": "  "})
    assert response.status_code == 400


def test_extract_job_text_prefers_main_content():
    page = """
    <html><body>
      <nav>Menu</nav>
      <main><h1>Backend Engineer</h1><p>Python and Go</p></main>
      <script>var x = 1;</script>
    </body></html>
    """
    assert extract_job_text(page, "https://jobs.example.com/1") == "Backend Engineer\nPython and Go"


@pytest.fixture
def import_client():
    def factory(handler):
        transport = httpx.MockTransport(handler)
        app.dependency_overrides[get_page_transport] = lambda: transport
        return TestClient(app)

    yield factory
    app.dependency_overrides.clear()


def test_import_url_returns_job_text(import_client):
    page = '<html><body><div id="content"><p>Senior Go Developer</p></div><p>Apply now</p></body></html>'
    client = import_client(lambda request: httpx.Response(200, text=page))
    response = client.post("/api/import-url", json={"url": "https://boards.greenhouse.io/acme/jobs/1"})
    assert response.status_code == 200
    assert response.json()["job_description"] == "Senior Go Developer"


def test_import_url_reports_connection_failure(import_client):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    response = import_client(handler).post("/api/import-url", json={"url": "https://jobs.example.com/1"})
    assert response.status_code == 400
    assert response.json()["detail"].startswith("Failed to fetch URL")


def test_import_url_reports_error_status(import_client):
    client = import_client(lambda request: httpx.Response(404))
    response = client.post("/api/import-url", json={"url": "https://jobs.example.com/gone"})
    assert response.status_code == 400
    assert response.json()["detail"].startswith("Failed to fetch URL")


def test_import_url_rejects_malformed_url(import_client):
    client = import_client(lambda request: httpx.Response(200, text="<main>never fetched</main>"))
    response = client.post("/api/import-url", json={"url": "http://jobs.example.com:notaport/1"})
    assert response.status_code == 400
    assert response.json()["detail"].startswith("Failed to fetch URL")


def test_import_url_reports_unreadable_page(import_client, monkeypatch):
    def broken_parser(page_html, url=""):
        raise RuntimeError("parser exploded")

    monkeypatch.setattr(web_app, "extract_job_text", broken_parser)
    client = import_client(lambda request: httpx.Response(200, text="<main>Job</main>"))
    response = client.post("/api/import-url", json={"url": "https://jobs.example.com/1"})
    assert response.status_code == 422
    assert response.json()["detail"] == UNREADABLE_PAGE_MESSAGE


def test_import_url_empty_page_is_unreadable(import_client):
    client = import_client(lambda request: httpx.Response(200, text="<html><body><script>x()</script></body></html>"))
    response = client.post("/api/import-url", json={"url": "https://jobs.example.com/1"})
    assert response.status_code == 422
    assert response.json()["detail"] == UNREADABLE_PAGE_MESSAGE


def test_extract_job_text_uses_board_container():
    page = '<html><body><div class="description__text">Build pipelines</div><main>Other jobs</main></body></html>'
    assert extract_job_text(page, "https://www.linkedin.com/jobs/view/1") == "Build pipelines"
    assert extract_job_text(page, "https://jobs.example.com/1") == "Other jobs"
