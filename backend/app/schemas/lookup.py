"""
Wine Catalog Backend — Lookup List Schemas
============================================

What:  Builds the request/response models for one lookup list.
Why:   The six lists differ only in their field name ("variety", "country", ...),
       and the client expects that name both in the body and in the
       `<field>Id` key of the create response.
How:   pydantic.create_model() produces named classes per list, so OpenAPI
       shows e.g. VarietyCreate / VarietyItem / VarietyCreated.
"""

import uuid
from datetime import datetime
from typing import Dict, NamedTuple, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, create_model

from app.models.lookup import LOOKUP_LISTS, LookupList


class LookupItemBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: uuid.UUID = Field(alias="_id")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")


class LookupSchemas(NamedTuple):
    create: Type[BaseModel]
    item: Type[BaseModel]
    created: Type[BaseModel]


def build_lookup_schemas(lookup: LookupList) -> LookupSchemas:
    """
    Create the three models for a lookup list.

    Example (varieties):
        VarietyCreate:  {"variety": "Syrah"}
        VarietyItem:    {"_id": "...", "variety": "Syrah", "createdAt": "..."}
        VarietyCreated: {"varietyId": "...", "message": "Variety added successfully"}
    """
    value_field = (str, Field(min_length=1, max_length=255))

    create = create_model(
        f"{lookup.label}Create",
        __config__=ConfigDict(coerce_numbers_to_str=True, str_strip_whitespace=True),
        **{lookup.field: value_field},
    )
    item = create_model(
        f"{lookup.label}Item",
        __base__=LookupItemBase,
        **{lookup.field: (str, ...)},
    )
    created = create_model(
        f"{lookup.label}Created",
        message=(str, ...),
        **{f"{lookup.field}Id": (uuid.UUID, ...)},
    )
    return LookupSchemas(create=create, item=item, created=created)


LOOKUP_SCHEMAS: Dict[str, LookupSchemas] = {
    key: build_lookup_schemas(lookup) for key, lookup in LOOKUP_LISTS.items()
}
