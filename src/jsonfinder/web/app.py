"""FastAPI application exposing the JsonFinder store over HTTP."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, List

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from jsonfinder import __version__
from jsonfinder.config import AppConfig
from jsonfinder.errors import InvalidOperator
from jsonfinder.index.indexer import Indexer
from jsonfinder.index.search import Searcher
from jsonfinder.index.storage import DocumentStore

LOGGER = logging.getLogger(__name__)


class ClausePayload(BaseModel):
    key: str
    operator: str
    value: Any = None


class SearchPayload(BaseModel):
    clauses: List[ClausePayload] = Field(default_factory=list)
    operator: str = "AND"
    limit: int | None = None


class DocumentsPayload(BaseModel):
    documents: List[Dict[str, Any]]


class IndexPayload(BaseModel):
    paths: List[str]


def _get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def _get_config(request: Request) -> AppConfig:
    return request.app.state.config


def _resolve_paths(raw_paths: List[str], config: AppConfig) -> List[Path]:
    resolved: List[Path] = []
    for raw in raw_paths:
        clean_path = raw.strip().replace("\r", "").replace("\n", "")
        if not clean_path:
            continue
        if "\0" in clean_path:
            raise HTTPException(status_code=400, detail="Invalid path: contains null byte")
        path = config.resolve_paths([Path(clean_path)], Path.cwd())[0]
        if not path.exists():
            raise HTTPException(status_code=404, detail="Path not found: %s" % clean_path)
        resolved.append(path)
    return resolved


def create_app(store: DocumentStore | None = None, config: AppConfig | None = None) -> FastAPI:
    """Build an API bound to ``store``; a fresh store is created when none is given."""
    application = FastAPI(title="JsonFinder API", version=__version__)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.state.store = store if store is not None else DocumentStore()
    application.state.config = config if config is not None else AppConfig()

    @application.on_event("startup")
    async def startup_event() -> None:
        logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")

    @application.post("/documents")
    async def ingest_documents(payload: DocumentsPayload, request: Request) -> dict[str, Any]:
        store = _get_store(request)
        results = [store.ingest(document) for document in payload.documents]
        return {
            "status": "ok",
            "results": [
                {"inserted": result.inserted, "document_id": result.document_id}
                for result in results
            ],
            "stats": store.stats().as_dict(),
        }

    @application.post("/index")
    async def index_files(payload: IndexPayload, request: Request) -> dict[str, Any]:
        if not payload.paths:
            raise HTTPException(status_code=400, detail="No path provided")

        config = _get_config(request)
        paths = _resolve_paths(payload.paths, config)
        indexer = Indexer(_get_store(request), suffixes=config.suffixes, encoding=config.encoding)
        stats = await asyncio.to_thread(indexer.index, paths)
        return {"status": "ok", "stats": stats.as_dict()}

    @application.post("/search")
    async def search_documents(payload: SearchPayload, request: Request) -> dict[str, Any]:
        config = _get_config(request)
        limit = config.max_results if payload.limit is None else payload.limit
        limit = max(1, min(limit, config.max_results))
        searcher = Searcher(_get_store(request))
        try:
            results = searcher.search(
                [clause.model_dump() for clause in payload.clauses],
                payload.operator,
                limit=limit,
            )
        except InvalidOperator as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return {
            "results": [result.to_dict(config.id_field) for result in results],
            "count": len(results),
        }

    @application.get("/documents/{document_id}")
    async def get_document(document_id: str, request: Request) -> dict[str, Any]:
        document = _get_store(request).get(document_id)
        if document is None:
            raise HTTPException(status_code=404, detail=f"Document {document_id} not found")
        return {**document, _get_config(request).id_field: document_id}

    @application.get("/keys")
    async def list_keys(request: Request, prefix: str = "") -> dict[str, List[str]]:
        keys = [key for key in _get_store(request).available_keys() if key.startswith(prefix)]
        return {"keys": keys}

    @application.get("/stats")
    async def get_stats(request: Request) -> dict[str, Any]:
        return _get_store(request).stats().as_dict()

    @application.delete("/documents")
    async def clear_documents(request: Request) -> dict[str, str]:
        _get_store(request).clear()
        return {"status": "ok"}

    return application


app = create_app()
