"""Conversion between store rows and Memory entities."""

from typing import Any

from memgrid.core.errors import StoreError
from memgrid.memory.base import Category, Memory, Row, Visibility

# Row column names (snake_case, as the managed schema defines them)
COLUMNS = (
    "id",
    "title",
    "category",
    "content",
    "visibility",
    "user_id",
    "author_email",
    "timestamp",
    "date_added",
)


def row_to_memory(row: Row) -> Memory:
    """Build a Memory from a store row.

    Missing visibility is read as private, matching the write default.
    Rows that do not fit the schema raise StoreError.
    """
    try:
        return Memory(
            id=str(row["id"]),
            title=row["title"],
            category=Category(row["category"]),
            content=row["content"],
            visibility=Visibility(row.get("visibility") or Visibility.PRIVATE.value),
            owner_id=row.get("user_id"),
            author_label=row.get("author_email"),
            created_at_epoch=int(row["timestamp"]),
            created_at_display=row["date_added"],
        )
    except (KeyError, ValueError, TypeError) as e:
        raise StoreError("map row", f"malformed row {row.get('id')!r}: {e!r}") from e


def memory_to_row(memory: Memory, include_id: bool = True) -> Row:
    """Build a store row from a Memory.

    include_id=False leaves id assignment to the store.
    """
    row: dict[str, Any] = {
        "id": memory.id,
        "title": memory.title,
        "category": memory.category.value,
        "content": memory.content,
        "visibility": memory.visibility.value,
        "user_id": memory.owner_id,
        "author_email": memory.author_label,
        "timestamp": memory.created_at_epoch,
        "date_added": memory.created_at_display,
    }
    if not include_id:
        del row["id"]
    return row
