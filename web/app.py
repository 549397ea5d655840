"""
FastAPI web application for the ATS CV Tailor.
Serves the single-page UI and runs extraction, tailoring and formatting.
"""

import json
import logging
from pathlib import Path
from typing import Callable, List, Optional
from urllib.parse import urlsplit

import httpx
from bs4 import BeautifulSoup
from fastapi import Depends, FastAPI, File, Form, HTTPException, UploadFile
from fastapi.staticfiles import StaticFiles
from fastapi.responses import HTMLResponse, JSONResponse, Response, StreamingResponse
from pydantic import BaseModel

from cv_tailor import __version__
from cv_tailor.client import ServiceClient
from cv_tailor.config import Settings, configure_logging
from cv_tailor.document import DOWNLOAD_FILENAME, render_document
from cv_tailor.errors import ExtractionError, UnsupportedFileType
from cv_tailor.formatter import format_cv_content
from cv_tailor.extractor import extract_text
from cv_tailor.state import Failed, MISSING_INPUT_MESSAGE
from cv_tailor.workflow import TailorWorkflow


settings = Settings.from_env()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="ATS CV Tailor", version=__version__)

static_path = Path(__file__).parent / "static"
app.mount("/static", StaticFiles(directory=str(static_path)), name="static")

MAX_JOB_TEXT = 15000
FETCH_FAILED_MESSAGE = "Failed to fetch URL"
UNREADABLE_PAGE_MESSAGE = "Could not read a job description from that page"

BROWSER_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36"
}

# Host suffix -> container holding the posting text
JOB_BOARD_SELECTORS = {
    "linkedin.com": "div.description__text",
    "greenhouse.io": "div#content",
    "lever.co": "div.section-wrapper",
}
GENERIC_SELECTORS = ("main", "article", '[role="main"]', ".job-description", "#job-description", "body")


# === Models ===

class OptimizeRequest(BaseModel):
    cv_text: str = ""
    job_description: str = ""


class FormatRequest(BaseModel):
    tailored_cv: str


class URLImportRequest(BaseModel):
    url: str


# === Dependencies ===

def get_client_factory() -> Callable[[], ServiceClient]:
    """Each run opens, and closes, its own client."""
    return lambda: ServiceClient(settings.service_url, settings.timeout)


def get_page_transport() -> Optional[httpx.AsyncBaseTransport]:
    """Transport for job page fetches; None uses the network."""
    return None


# === Routes ===

@app.get("/", response_class=HTMLResponse)
async def root():
    html_path = static_path / "index.html"
    return HTMLResponse(content=html_path.read_text(encoding="utf-8"))


@app.get("/api/health")
async def health_check():
    return {
        "status": "healthy",
        "version": __version__,
        "service_url": settings.service_url,
    }


@app.post("/api/extract")
async def extract_cv(file: UploadFile = File(...)):
    """Extract plain text from an uploaded PDF or TXT CV."""
    data = await file.read()
    try:
        document = extract_text(file.filename or "", file.content_type, data)
    except UnsupportedFileType as e:
        raise HTTPException(status_code=415, detail=e.message)
    except ExtractionError as e:
        raise HTTPException(status_code=422, detail=e.message)

    return JSONResponse({
        "filename": document.filename,
        "text": document.text,
        "preview": document.preview,
    })


@app.post("/api/optimize")
async def optimize_cv(request: OptimizeRequest, client_factory=Depends(get_client_factory)):
    """Score, tailor and re-score a CV (non-streaming)."""
    async with client_factory() as client:
        workflow = TailorWorkflow(client)
        workflow.load(request.cv_text, request.job_description)
        state = await workflow.run()

    if isinstance(state.phase, Failed):
        status = 400 if state.error == MISSING_INPUT_MESSAGE else 502
        raise HTTPException(status_code=status, detail=state.error)

    return JSONResponse(state.to_dict())


@app.post("/api/optimize/stream")
async def optimize_cv_stream(request: OptimizeRequest, client_factory=Depends(get_client_factory)):
    """Same run as /api/optimize, with progress updates via SSE."""

    async def generate_events():
        try:
            async with client_factory() as client:
                workflow = TailorWorkflow(client)
                workflow.load(request.cv_text, request.job_description)
                async for update in workflow.run_with_progress():
                    if update.get("step") == "result":
                        final_data = {"step": "result", **update["state"].to_dict()}
                        yield f"data: {json.dumps(final_data)}\n\n"
                    else:
                        yield f"data: {json.dumps(update)}\n\n"
        except Exception as e:
            logger.exception("Streaming run failed")
            yield f"data: {json.dumps({'step': 'error', 'message': str(e)})}\n\n"

    return StreamingResponse(
        generate_events(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no"
        }
    )


@app.post("/api/format")
async def format_cv(request: FormatRequest):
    """Formatted HTML fragment for previewing the tailored CV."""
    return JSONResponse({"html": format_cv_content(request.tailored_cv)})


@app.post("/api/download")
async def download_cv(tailored_cv: str = Form(...)):
    """Download the tailored CV as a styled HTML document."""
    if not tailored_cv.strip():
        raise HTTPException(status_code=400, detail="Nothing to download yet")

    return Response(
        content=render_document(tailored_cv),
        media_type="text/html; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename={DOWNLOAD_FILENAME}"}
    )


@app.post("/api/import-url")
async def import_job_url(request: URLImportRequest, transport=Depends(get_page_transport)):
    """Import a job description from a posting URL."""
    try:
        async with httpx.AsyncClient(
            follow_redirects=True,
            timeout=settings.timeout,
            transport=transport,
            headers=BROWSER_HEADERS,
        ) as client:
            response = await client.get(request.url)
            response.raise_for_status()
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.warning("Job page fetch failed for %s: %s", request.url, e)
        raise HTTPException(status_code=400, detail=f"{FETCH_FAILED_MESSAGE}: {e}")

    try:
        job_text = extract_job_text(response.text, request.url)
    except Exception:
        logger.exception("Job page parsing failed for %s", request.url)
        raise HTTPException(status_code=422, detail=UNREADABLE_PAGE_MESSAGE)

    if not job_text:
        raise HTTPException(status_code=422, detail=UNREADABLE_PAGE_MESSAGE)

    return JSONResponse({
        "success": True,
        "job_description": job_text,
        "url": request.url
    })


def _selectors_for(url: str) -> List[str]:
    host = urlsplit(url).hostname or ""
    board = [selector for domain, selector in JOB_BOARD_SELECTORS.items() if host.endswith(domain)]
    return board + list(GENERIC_SELECTORS)


def extract_job_text(page_html: str, url: str = "") -> str:
    """
    Pull the readable job description out of a posting page.

    Known job boards are tried with their own container first, then the
    generic content containers, then the whole body. Returns "" when the
    page has no visible text.
    """
    soup = BeautifulSoup(page_html, "html.parser")
    for element in soup(["script", "style", "nav", "footer", "header"]):
        element.decompose()

    job_text = ""
    for selector in _selectors_for(url):
        node = soup.select_one(selector)
        if node:
            job_text = node.get_text(separator="\n", strip=True)
            if job_text:
                break

    job_text = "\n".join(line.strip() for line in job_text.splitlines() if line.strip())
    if len(job_text) > MAX_JOB_TEXT:
        job_text = job_text[:MAX_JOB_TEXT] + "\n\n[Truncated...]"
    return job_text


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
