"""Schemas for list queries."""

from pydantic import BaseModel, Field, field_validator

from .engine import SortOrder


class BookQuery(BaseModel):
    """Search text plus sort selection for the book list."""

    search_text: str = Field(default="", max_length=500)
    sort: SortOrder = Field(default=SortOrder.NAME_ASC)

    @field_validator("search_text", mode="before")
    @classmethod
    def none_is_empty(cls, v):
        return "" if v is None else v

    @property
    def is_filtered(self) -> bool:
        return bool(self.search_text)
