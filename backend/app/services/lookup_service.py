"""
Wine Catalog Backend — Lookup List Service
============================================

What:  Add and list entries of the reference lists (varieties, countries,
       appellations, vintages, regions, producers).
How:   One generic implementation driven by a LookupList descriptor; the
       value column is looked up by name on the descriptor's model.
"""

import logging
import uuid
from typing import List

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ConflictError, DatabaseError, WineCatalogError
from app.models.lookup import LookupList
from app.schemas.lookup import LOOKUP_SCHEMAS

logger = logging.getLogger(__name__)


class LookupService:

    async def add_entry(self, db: AsyncSession, lookup: LookupList, value: str) -> BaseModel:
        """
        Insert a value into a lookup list.

        Returns: The list's `<Label>Created` model, e.g.
                 {"varietyId": "...", "message": "Variety added successfully"}
        Raises:  ConflictError if the value is already in the list.
        """
        column = getattr(lookup.model, lookup.field)
        schemas = LOOKUP_SCHEMAS[lookup.key]

        try:
            existing = await db.execute(select(lookup.model.id).where(column == value))
            if existing.scalar_one_or_none() is not None:
                raise ConflictError(
                    message=f"{lookup.label} '{value}' already exists",
                    context={"list": lookup.key, "value": value},
                )

            entry = lookup.model(id=uuid.uuid4(), **{lookup.field: value})
            db.add(entry)
            await db.flush()

        except IntegrityError:
            # Lost a race with a concurrent insert of the same value
            raise ConflictError(
                message=f"{lookup.label} '{value}' already exists",
                context={"list": lookup.key, "value": value},
            )
        except WineCatalogError:
            raise
        except Exception as e:
            logger.error("Failed to add %s '%s': %s", lookup.field, value, str(e), exc_info=True)
            raise DatabaseError(
                message=f"Failed to add {lookup.field}",
                context={"list": lookup.key},
            )

        logger.info("%s added: %s", lookup.label, value)
        return schemas.created(
            message=f"{lookup.label} added successfully",
            **{f"{lookup.field}Id": entry.id},
        )

    async def list_entries(self, db: AsyncSession, lookup: LookupList) -> List[BaseModel]:
        """All entries of a list, sorted by value."""
        column = getattr(lookup.model, lookup.field)
        item_schema = LOOKUP_SCHEMAS[lookup.key].item

        try:
            result = await db.execute(select(lookup.model).order_by(column))
            entries = list(result.scalars().all())
        except Exception as e:
            logger.error("Failed to list %s: %s", lookup.key, str(e))
            raise DatabaseError(
                message=f"Failed to fetch {lookup.key}",
                context={"list": lookup.key},
            )
        return [item_schema.model_validate(entry) for entry in entries]


# ── Singleton Instance ────────────────────────────────────────────────────
lookup_service = LookupService()
