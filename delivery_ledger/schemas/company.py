"""
Pydantic schemas for companies and their display preferences.
"""

import re
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


def _check_colors(v: dict[str, str] | None) -> dict[str, str] | None:
    if v is None:
        return v
    for key, color in v.items():
        if not HEX_COLOR.match(color):
            raise ValueError(f"color for '{key}' must be #RRGGBB, got '{color}'")
    return v


class CompanyCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    logo_url: str | None = Field(default=None, max_length=500)
    column_colors: dict[str, str] | None = None
    row_colors: dict[str, str] | None = None

    @field_validator("column_colors", "row_colors")
    @classmethod
    def colors_must_be_hex(cls, v):
        return _check_colors(v)


class CompanyUpdate(BaseModel):
    """Partial update; color maps are merged into the stored ones."""
    name: str | None = Field(default=None, min_length=1, max_length=100)
    logo_url: str | None = Field(default=None, max_length=500)
    column_colors: dict[str, str] | None = None
    row_colors: dict[str, str] | None = None

    @field_validator("column_colors", "row_colors")
    @classmethod
    def colors_must_be_hex(cls, v):
        return _check_colors(v)


class CompanyResponse(BaseModel):
    id: int
    name: str
    logo_url: str | None
    column_colors: dict[str, str]
    row_colors: dict[str, str]
    manual_order: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
