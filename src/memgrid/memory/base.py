"""
Memory entity and row store interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any


class Category(Enum):
    KNOWLEDGE = "Knowledge"
    EXPERIENCE = "Experience"
    LESSON = "Lesson"
    MISTAKE = "Mistake"


class Visibility(Enum):
    PRIVATE = "private"
    PUBLIC = "public"


@dataclass(frozen=True)
class Memory:
    """Single memory record. Immutable once created."""

    id: str
    title: str
    category: Category
    content: str
    visibility: Visibility
    owner_id: str | None
    author_label: str | None  # only set for public memories
    created_at_epoch: int  # milliseconds
    created_at_display: str


@dataclass
class MemoryDraft:
    """User input for a new memory, before validation."""

    title: str
    category: Category | str
    content: str
    visibility: Visibility | str | None = None


Row = dict[str, Any]


class RowStore(ABC):
    """Row-oriented access to the external data store."""

    @abstractmethod
    async def select(
        self,
        table: str,
        filters: dict[str, Any],
        order_by: str | None = None,
        descending: bool = True,
    ) -> list[Row]:
        """Return rows matching all equality filters."""
        ...

    @abstractmethod
    async def insert(self, table: str, row: Row) -> Row:
        """Insert one row and return it as stored."""
        ...
