from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Asset(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: int | str = Field(..., description="Freshservice asset identifier")
    name: str | None = ""
    asset_tag: str | None = None
    serial_number: str | None = None
    asset_type_id: int | str | None = Field(default=None, description="Category identifier")
    description: str | None = None
