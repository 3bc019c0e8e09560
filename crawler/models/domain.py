"""Domain models for the crawl pipeline."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")


class Article(BaseModel):
    """Working copy of an article record held by the store."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, coerce_numbers_to_str=True)

    id: str = Field(..., alias="_id", description="Store-assigned identifier")
    link: str = Field(..., description="Canonical URL of the article")
    source: str = Field(..., description="Extractor pipeline tag (e.g., cna)")
    text: str = ""
    text_length: Optional[int] = None
    date_published: Optional[str] = None
    is_processing: Optional[bool] = Field(None, alias="isProcessing", description="Advisory lock flag")

    @field_validator("text", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def set_text(self, text: str) -> None:
        self.text = text
        self.text_length = len(text)

    def to_payload(self) -> Dict[str, Any]:
        """Serialize the record for the store.

        Only fields received from the store or changed since are sent, and an
        unlocked record omits ``isProcessing`` entirely.
        """
        payload = self.model_dump(mode="json", by_alias=True, exclude_unset=True)
        if not self.is_processing:
            payload.pop("isProcessing", None)
        return payload


class StoreFailure(str, Enum):
    TRANSPORT = "transport"
    SERVER = "server"
    CLIENT = "client"
    DECODE = "decode"


class StoreResult(BaseModel, Generic[T]):
    """Outcome of a single article store call."""

    ok: bool
    value: Optional[T] = None
    failure: Optional[StoreFailure] = None
    detail: Optional[str] = None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "StoreResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def error(cls, failure: StoreFailure, detail: str) -> "StoreResult[T]":
        return cls(ok=False, failure=failure, detail=detail)

    def __bool__(self) -> bool:
        return self.ok
