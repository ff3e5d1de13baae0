"""Typed response shapes returned by the SDK."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field


class ApifyModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, arbitrary_types_allowed=True)


class PaginationList(ApifyModel):
    """One page of a paginated collection rebuilt from the pagination headers."""

    items: Any = None
    total: int | None = None
    offset: int | None = None
    count: int | None = None
    limit: int | None = None


class KeyValueStoreRecord(ApifyModel):
    key: str | None = None
    body: Any = None
    content_type: str | None = None


class KeyValueStoreKeys(ApifyModel):
    """One page of record keys; ``next_exclusive_start_key`` continues the listing."""

    items: list[dict[str, Any]] = Field(default_factory=list)
    count: int | None = None
    limit: int | None = None
    exclusive_start_key: str | None = Field(default=None, alias="exclusiveStartKey")
    is_truncated: bool | None = Field(default=None, alias="isTruncated")
    next_exclusive_start_key: str | None = Field(default=None, alias="nextExclusiveStartKey")


@dataclass(frozen=True)
class RawResponse:
    """Status, headers and undecoded body of a single HTTP attempt."""

    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    content: bytes = b""

    def header(self, name: str) -> str | None:
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None

    @property
    def content_type(self) -> str:
        return self.header("content-type") or ""
