"""Payloads for the generic tenant record endpoints.

Field-level validation happens against the table catalog in the record
helpers; these models only fix the envelope.
"""

from typing import Any

from pydantic import BaseModel, Field


class RecordWrite(BaseModel):
    fields: dict[str, Any] = Field(
        json_schema_extra={"examples": [{"name": "Maria Souza", "tags": ["vip"]}]},
    )


class RecordList(BaseModel):
    items: list[dict[str, Any]]
    limit: int
    offset: int
