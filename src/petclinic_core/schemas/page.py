"""
Page schema shared by every paginated repository method.

``Page`` is the one result shape exposed to callers that page through
owners or vets, so its field set is kept small and stable.
"""

import math
from typing import Generic, List, TypeVar

from pydantic import BaseModel, Field, computed_field, model_validator

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """One page of mapped domain objects plus the paging metadata."""

    content: List[T] = Field(default_factory=list, description="Items on this page")
    page_number: int = Field(0, ge=0, description="Zero-based page index")
    page_size: int = Field(0, ge=0, description="Requested page size")
    total_elements: int = Field(0, ge=0, description="Rows matching the query")

    @model_validator(mode="after")
    def correct_total_elements(self) -> "Page[T]":
        """Never report fewer elements than were actually observed."""
        observed = self.offset + len(self.content)
        if self.content and observed > self.total_elements:
            self.total_elements = observed
        return self

    @property
    def offset(self) -> int:
        return self.page_number * self.page_size

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_pages(self) -> int:
        if self.page_size == 0:
            return 1
        return math.ceil(self.total_elements / self.page_size)

    @classmethod
    def of(cls, content: List[T]) -> "Page[T]":
        """Wrap an unpaged result as a single page."""
        return cls(
            content=content,
            page_number=0,
            page_size=len(content),
            total_elements=len(content),
        )

    def is_empty(self) -> bool:
        return not self.content

    def __len__(self) -> int:
        return len(self.content)
