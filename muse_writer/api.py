from contextlib import asynccontextmanager
from pathlib import Path
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from pydantic import BaseModel, Field

from .config import Config
from .critique import CacheCheck, CritiqueData, locate_quote, parse_critique
from .critique.cache import open_file_cache
from .editing import DiffParagraph, analyze_differences, merge_paragraphs
from .providers import ModelRouter, ProviderNotConfiguredError, UnsupportedModelError
from .review import ChapterReviewer, ReviewOutcome

# Global reviewer instance
reviewer: Optional[ChapterReviewer] = None


def build_reviewer(config: Config) -> ChapterReviewer:
    cache = open_file_cache(config.cache.cache_dir, config.cache.key_prefix)
    return ChapterReviewer(ModelRouter(config), cache, config)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the reviewer from config.yaml and the environment on startup."""
    global reviewer

    config_path = Path("config.yaml")
    config = Config.from_yaml(config_path) if config_path.exists() else Config()
    reviewer = build_reviewer(config.with_env())
    logger.info(f"Critique cache at {config.cache.cache_dir}")

    yield

    reviewer = None


app = FastAPI(
    title="Muse Writer API",
    description="Critique, cache and revise novel chapters",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


class ParseRequest(BaseModel):
    content: str = Field(..., description="Raw critique text")


class ReviewRequest(BaseModel):
    chapter_id: str
    novel_title: str = ""
    chapter_title: str = ""
    content: str = Field(..., description="Current chapter text")
    model: Optional[str] = Field(default=None, description='Model selection, e.g. "Qwen3-Plus"')
    force: bool = False


class CacheCheckRequest(BaseModel):
    chapter_id: str
    content: str


class DiffRequest(BaseModel):
    original: str
    improved: str


class MergeRequest(DiffRequest):
    selected_indices: List[int] = Field(default_factory=list)


class MergeResponse(BaseModel):
    content: str


class LocateRequest(BaseModel):
    content: str
    quote: str


class LocateResponse(BaseModel):
    offsets: List[int]


def _require_reviewer() -> ChapterReviewer:
    if reviewer is None:
        raise HTTPException(status_code=503, detail="Reviewer not initialised")
    return reviewer


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    _require_reviewer()
    return {"status": "healthy"}


@app.post("/critique/parse", response_model=CritiqueData)
async def parse_endpoint(request: ParseRequest):
    """Parse raw critique text."""
    data = parse_critique(request.content)
    if data is None:
        raise HTTPException(status_code=422, detail="Critique is empty or could not be parsed")
    return data


@app.post("/critique", response_model=ReviewOutcome)
def review_chapter(request: ReviewRequest):
    """Critique a chapter, reusing the cached critique when it is current."""
    current = _require_reviewer()

    try:
        return current.review(
            chapter_id=request.chapter_id,
            novel_title=request.novel_title,
            chapter_title=request.chapter_title,
            content=request.content,
            model=request.model,
            force=request.force,
        )
    except UnsupportedModelError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ProviderNotConfiguredError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Critique generation failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/critique/cache/check", response_model=CacheCheck)
async def check_cache(request: CacheCheckRequest):
    return _require_reviewer().cache.check(request.chapter_id, request.content)


@app.delete("/critique/cache/{chapter_id}")
async def clear_cache(chapter_id: str):
    _require_reviewer().cache.clear(chapter_id)
    return {"cleared": chapter_id}


@app.post("/diff", response_model=List[DiffParagraph])
async def diff_chapter(request: DiffRequest):
    """Paragraph-level diff between a chapter and its revision."""
    return analyze_differences(request.original, request.improved)


@app.post("/merge", response_model=MergeResponse)
async def merge_chapter(request: MergeRequest):
    return MergeResponse(
        content=merge_paragraphs(request.original, request.improved, request.selected_indices)
    )


@app.post("/locate", response_model=LocateResponse)
async def locate(request: LocateRequest):
    return LocateResponse(offsets=locate_quote(request.content, request.quote))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
