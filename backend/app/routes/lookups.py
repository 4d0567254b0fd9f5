"""
Wine Catalog Backend — Lookup List Route Handlers
===================================================

What:  POST/GET endpoints for the six dropdown lists.
How:   One pair of handlers per LookupList, registered in a loop. Each pair
       is bound to its list's generated schemas, so the OpenAPI docs show
       e.g. POST /wine-varieties taking {"variety": "..."}.

    POST /wine-varieties   {"variety": "Syrah"}   → 201 {"varietyId", "message"}
    GET  /wine-varieties                           → [{"_id", "variety"}, ...]
    (same for /countries, /appellations, /vintages, /regions, /producers)
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.models.lookup import LOOKUP_LISTS, LookupList
from app.schemas.common import ErrorResponse
from app.schemas.lookup import LOOKUP_SCHEMAS
from app.services.lookup_service import lookup_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Lookup lists"])


def _register(lookup: LookupList) -> None:
    schemas = LOOKUP_SCHEMAS[lookup.key]
    create_schema = schemas.create

    async def add_entry(
        payload: create_schema,  # type: ignore[valid-type]
        db: AsyncSession = Depends(get_db_session),
    ):
        value = getattr(payload, lookup.field)
        return await lookup_service.add_entry(db=db, lookup=lookup, value=value)

    async def list_entries(db: AsyncSession = Depends(get_db_session)):
        return await lookup_service.list_entries(db=db, lookup=lookup)

    router.add_api_route(
        lookup.path,
        add_entry,
        methods=["POST"],
        status_code=201,
        response_model=schemas.created,
        responses={409: {"description": f"{lookup.label} already exists", "model": ErrorResponse}},
        summary=f"Add a {lookup.label.lower()}",
        name=f"add_{lookup.field}",
    )
    router.add_api_route(
        lookup.path,
        list_entries,
        methods=["GET"],
        response_model=List[schemas.item],
        summary=f"List {lookup.key}",
        name=f"list_{lookup.key}",
    )


for _lookup in LOOKUP_LISTS.values():
    _register(_lookup)
