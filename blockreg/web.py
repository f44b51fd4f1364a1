"""Read-only HTTP view over a finalized registry.

The registry is built and finalized in the lifespan hook, before the first
request, and never written afterwards; handlers read it without locking.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Path, Query, Request, status

from .loader import build_registry
from .models import BlockResponse, FamilyListResponse, FamilyResponse
from .registry import MAX_COMBINED_ID, BlockRegistry
from .settings import Settings

LOG = logging.getLogger(__name__)


def _family_response(registry: BlockRegistry, family) -> FamilyResponse:
    placed = []
    for block in family.variants:
        cid = registry.combined_id_of(block)
        if cid is not None:
            placed.append(BlockResponse.from_block(block, cid))
    return FamilyResponse(
        id=family.id,
        display_name=family.default.display_name(),
        kind=family.default.kind.name,
        supports_data=family.supports_data,
        variant_count=len(family),
        placed=placed,
    )


def create_app(registry: Optional[BlockRegistry] = None, settings: Optional[Settings] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        cfg = settings or Settings.from_env()
        reg = registry
        if reg is None:
            reg = build_registry(cfg.declarations, default_plugin=cfg.default_plugin)
        if not reg.finalized:
            raise RuntimeError("registry must be finalized before it is served")
        LOG.info("serving %d block families", len(reg))
        app.state.settings = cfg
        app.state.registry = reg
        yield

    app = FastAPI(title="Block Registry", lifespan=lifespan)

    def get_registry(request: Request) -> BlockRegistry:
        return request.app.state.registry

    def get_settings(request: Request) -> Settings:
        return request.app.state.settings

    @app.get("/healthz")
    def healthz(registry: BlockRegistry = Depends(get_registry)) -> dict:
        return {"status": "ok", "families": len(registry)}

    # declared before /api/blocks/{combined_id} so "resolve" is not parsed as an id
    @app.get("/api/blocks/resolve", response_model=BlockResponse)
    def resolve_block(
        state: str = Query(min_length=1),
        registry: BlockRegistry = Depends(get_registry),
        cfg: Settings = Depends(get_settings),
    ) -> BlockResponse:
        block = registry.resolve(state, cfg.default_plugin)
        return BlockResponse.from_block(block, registry.combined_id_of(block))

    @app.get("/api/blocks/{combined_id}", response_model=BlockResponse)
    def get_block(
        combined_id: int = Path(ge=0, le=MAX_COMBINED_ID),
        registry: BlockRegistry = Depends(get_registry),
    ) -> BlockResponse:
        block = registry.lookup(combined_id)
        return BlockResponse.from_block(block, registry.combined_id_of(block))

    @app.get("/api/families", response_model=FamilyListResponse)
    def list_families(registry: BlockRegistry = Depends(get_registry)) -> FamilyListResponse:
        return FamilyListResponse(families=[_family_response(registry, f) for f in registry.families()])

    @app.get("/api/families/{family_id}", response_model=FamilyResponse)
    def get_family(family_id: int, registry: BlockRegistry = Depends(get_registry)) -> FamilyResponse:
        family = registry.family(family_id)
        if family is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown family id {family_id}")
        return _family_response(registry, family)

    return app


app = create_app()
