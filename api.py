"""
Hebrew Palindrome Finder — FastAPI Server
==========================================

RESTful API for finding letter palindromes in Hebrew text.

Endpoints:
    POST /palindromes         Search raw Hebrew text
    POST /palindromes/file    Upload a text file to search
    POST /source              Identify the Biblical source of a text
    POST /discover            Ask the LLM for notable palindromes
    GET  /health              Health check / readiness probe

Run:
    uvicorn api:app --reload              # Dev (http://localhost:8000)
    uvicorn api:app --host 0.0.0.0        # Production

Docs:
    http://localhost:8000/docs             # Swagger UI (auto-generated)
    http://localhost:8000/redoc            # ReDoc (alternative)
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

import asyncio

from fastapi import FastAPI, HTTPException, Query, UploadFile
from pydantic import BaseModel, Field

from palindrome_finder import __version__
from palindrome_finder.exceptions import InvalidRangeError
from palindrome_finder.models import Discovery, SearchReport, SourceReference
from palindrome_finder.pipeline import DEFAULT_MAX_LENGTH, PalindromeSearchPipeline
from palindrome_finder.scanner import DEFAULT_MIN_LENGTH
from palindrome_finder.source_lookup import identify_source, lookup_available

# ─── Load .env if available ──────────────────────────────────────────
try:
    from dotenv import load_dotenv

    load_dotenv()
except ImportError:
    pass


# ─── Request Limits ──────────────────────────────────────────────────
# The scan is quadratic in the text length and grows with max_length, so
# both are capped per request.

MAX_TEXT_CODEPOINTS = 2_000
MAX_LENGTH_LIMIT = 100


# ─── Application Lifespan ────────────────────────────────────────────

_pipeline: PalindromeSearchPipeline | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the pipeline once on startup."""
    global _pipeline  # noqa: PLW0603
    _pipeline = PalindromeSearchPipeline()
    yield
    _pipeline = None


# ─── FastAPI App ─────────────────────────────────────────────────────

app = FastAPI(
    title="Hebrew Palindrome Finder API",
    description=(
        "Finds letter palindromes in Hebrew text. Vowel points, punctuation "
        "and chapter:verse citations are ignored, final letters are folded, "
        "and every span of the original text is tested. Optional LLM lookup "
        "of each match's Biblical source."
    ),
    version=__version__,
    lifespan=lifespan,
)


# ─── Request / Response Schemas ─────────────────────────────────────


class SearchRequest(BaseModel):
    """Request body for the /palindromes endpoint."""

    text: str = Field(
        ...,
        min_length=1,
        max_length=MAX_TEXT_CODEPOINTS,
        description="The Hebrew text to search (at most 2,000 codepoints).",
        json_schema_extra={"example": "אבא ואמא שמעו את קול הנביא"},
    )
    min_length: int = Field(DEFAULT_MIN_LENGTH, ge=1, description="Minimum letters per palindrome.")
    max_length: int = Field(
        DEFAULT_MAX_LENGTH, ge=1, le=MAX_LENGTH_LIMIT, description="Maximum letters per palindrome."
    )
    lookup_sources: bool = Field(
        False, description="Ask the LLM for the Biblical source of each match."
    )


class SourceRequest(BaseModel):
    """Request body for the /source endpoint."""

    text: str = Field(..., min_length=1, description="Hebrew text to locate.")


class DiscoverRequest(BaseModel):
    """Request body for the /discover endpoint."""

    context: Optional[str] = Field(
        None, description="Text to search; omit to search the whole Tanakh."
    )


class DiscoverResponse(BaseModel):
    count: int
    palindromes: list[Discovery]


class HealthResponse(BaseModel):
    status: str
    version: str
    default_min_length: int
    default_max_length: int
    source_lookup_available: bool


# ─── Helpers ─────────────────────────────────────────────────────────


def _get_pipeline() -> PalindromeSearchPipeline:
    if _pipeline is None:
        raise HTTPException(status_code=503, detail="Pipeline not initialised")
    return _pipeline


def _run_search(
    pipeline: PalindromeSearchPipeline,
    text: str,
    min_length: int,
    max_length: int,
    lookup_sources: bool,
) -> SearchReport:
    """Run the pipeline, turning a malformed range into a 422."""
    try:
        return pipeline.run(
            text,
            min_length=min_length,
            max_length=max_length,
            lookup_sources=lookup_sources,
        )
    except InvalidRangeError as e:
        raise HTTPException(
            status_code=422,
            detail={"code": e.code, "message": str(e), **e.details},
        )


# ─── Endpoints ───────────────────────────────────────────────────────


@app.post(
    "/palindromes",
    summary="Find palindromes in Hebrew text",
    tags=["Search"],
    responses={
        422: {"description": "Invalid text or length range"},
        503: {"description": "Pipeline not yet initialised"},
    },
)
def search_palindromes(request: SearchRequest) -> SearchReport:
    """Search raw Hebrew text for letter palindromes.

    Returns a report with:
    - **matches**: one entry per distinct palindrome, longest first
    - **findings**: notes such as an unavailable source lookup
    - **text_hash**: SHA-256 of the input text
    """
    pipeline = _get_pipeline()
    return _run_search(
        pipeline,
        request.text,
        request.min_length,
        request.max_length,
        request.lookup_sources,
    )


@app.post(
    "/palindromes/file",
    summary="Find palindromes in an uploaded text file",
    tags=["Search"],
    responses={
        413: {"description": "File larger than 1 MB or text over 2,000 codepoints"},
        400: {"description": "File is not valid UTF-8 text"},
        422: {"description": "Empty file or invalid length range"},
        503: {"description": "Pipeline not yet initialised"},
    },
)
async def search_palindromes_file(
    file: UploadFile,
    min_length: int = Query(DEFAULT_MIN_LENGTH, ge=1),
    max_length: int = Query(DEFAULT_MAX_LENGTH, ge=1, le=MAX_LENGTH_LIMIT),
    lookup_sources: bool = False,
) -> SearchReport:
    """Upload a `.txt` file of Hebrew text to search.

    Accepts a UTF-8 text file up to 1 MB holding at most 2,000 codepoints.
    The scan is quadratic in the text length, so a verse or a short chapter
    is the practical size.
    """
    if file.size and file.size > 1_048_576:
        raise HTTPException(status_code=413, detail="File too large (max 1 MB)")

    content = await file.read()
    try:
        raw_text = content.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="File must be UTF-8 encoded text")

    if not raw_text.strip():
        raise HTTPException(status_code=422, detail="File is empty")

    if len(raw_text) > MAX_TEXT_CODEPOINTS:
        raise HTTPException(
            status_code=413,
            detail=f"Text too long (max {MAX_TEXT_CODEPOINTS:,} codepoints)",
        )

    pipeline = _get_pipeline()
    return await asyncio.to_thread(
        _run_search, pipeline, raw_text, min_length, max_length, lookup_sources
    )


@app.post(
    "/source",
    summary="Identify the Biblical source of a text",
    tags=["Sources"],
    responses={503: {"description": "Source lookup unavailable"}},
)
def lookup_source(request: SourceRequest) -> SourceReference:
    """Ask the LLM for the book, chapter and verse of a Hebrew text."""
    source = identify_source(request.text)
    if source is None:
        raise HTTPException(status_code=503, detail="Source lookup unavailable")
    return source


@app.post(
    "/discover",
    summary="Discover notable palindromes",
    tags=["Sources"],
    responses={503: {"description": "Pipeline not yet initialised"}},
)
def discover(request: DiscoverRequest) -> DiscoverResponse:
    """Ask the LLM for palindromes in the given context, or in the Tanakh.

    An unavailable lookup service yields an empty list.
    """
    pipeline = _get_pipeline()
    found = pipeline.discover(request.context)
    return DiscoverResponse(count=len(found), palindromes=found)


@app.get(
    "/health",
    summary="Health check",
    tags=["System"],
    responses={503: {"description": "Pipeline not yet initialised"}},
)
def health_check() -> HealthResponse:
    """Returns service status and configuration info."""
    pipeline = _get_pipeline()
    return HealthResponse(
        status="healthy",
        version=__version__,
        default_min_length=pipeline.min_length,
        default_max_length=pipeline.max_length,
        source_lookup_available=lookup_available(),
    )
