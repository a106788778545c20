from __future__ import annotations

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .. import __version__
from ..features.integrity import IntegrityConfig, IntegrityService, create_integrity_router
from ..features.integrity.concurrency import shutdown_pool
from ..store.json_store import SpotStore


@asynccontextmanager
async def _lifespan(_: FastAPI) -> AsyncIterator[None]:
    yield
    shutdown_pool()


def create_app(service: IntegrityService | None = None) -> FastAPI:
    """Build the HTTP app around ``service`` (or one bound to the configured store)."""

    if service is None:
        service = IntegrityService(store=SpotStore(IntegrityConfig.from_env().store_path))

    app = FastAPI(title="GTO Spots", version=__version__, lifespan=_lifespan)
    app.include_router(create_integrity_router(service))

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    return app


def main() -> None:  # pragma: no cover - runner
    import uvicorn

    host = os.environ.get("BIND", "127.0.0.1")
    port = int(os.environ.get("PORT", "8000"))
    uvicorn.run(create_app(), host=host, port=port)


if __name__ == "__main__":  # pragma: no cover
    main()
