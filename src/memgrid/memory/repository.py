"""
Memory repository.

Mediates every read and write of Memory rows and enforces the visibility and
ownership rules the store only filters on:

- Reads are passive. A store failure is logged and yields an empty list.
- Writes are user-triggered. The acting identity comes from the live session,
  never from the caller, and failures are raised.
- Exports are user-triggered reads, so failures are raised too.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any

from memgrid.auth.base import SessionProvider
from memgrid.core.errors import InvalidInput, StoreError, Unauthenticated
from memgrid.core.logging import get_logger
from memgrid.memory.base import Category, Memory, MemoryDraft, RowStore, Visibility
from memgrid.memory.export import ExportSink, export_filename, serialize_memories
from memgrid.memory.mapping import memory_to_row, row_to_memory

logger = get_logger("memory.repository")

ORDER_COLUMN = "timestamp"

# en-US month names, independent of the host locale
MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def display_date(moment: datetime) -> str:
    """Human-readable creation date, e.g. 'October 19, 2026'."""
    return f"{MONTHS[moment.month - 1]} {moment.day}, {moment.year}"


def _coerce_enum(enum_cls: Any, value: Any, field: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidInput(field, f"Unknown {field}: {value!r}") from None


class MemoryRepository:
    """Data-access layer for Memory entities."""

    def __init__(
        self,
        store: RowStore,
        auth: SessionProvider,
        table: str = "memories",
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.auth = auth
        self.table = table
        self.clock = clock

    async def _select(self, filters: dict[str, Any]) -> list[Memory]:
        rows = await self.store.select(self.table, filters, order_by=ORDER_COLUMN, descending=True)
        return [row_to_memory(row) for row in rows]

    # Reads

    async def fetch_public_memories(self) -> list[Memory]:
        """All public memories, newest first. Empty on store failure."""
        try:
            return await self._select({"visibility": Visibility.PUBLIC.value})
        except StoreError as e:
            logger.error(f"Failed to fetch public memories: {e}")
            return []

    async def fetch_private_memories(self, owner_id: str | None) -> list[Memory]:
        """Private memories of owner_id, newest first. Empty on store failure."""
        if not owner_id:
            return []
        try:
            return await self._select({"visibility": Visibility.PRIVATE.value, "user_id": owner_id})
        except StoreError as e:
            logger.error(f"Failed to fetch private memories: {e}")
            return []

    async def fetch_all_visible(self, owner_id: str | None = None) -> list[Memory]:
        """Public memories followed by owner_id's private ones.

        Convenience composition of the two reads above; grouping for display
        is left to the caller.
        """
        public = await self.fetch_public_memories()
        private = await self.fetch_private_memories(owner_id)
        return public + private

    # Writes

    async def create_memory(self, draft: MemoryDraft) -> Memory:
        """Validate draft, attribute it to the live session and insert it.

        Raises:
            Unauthenticated: no active session
            InvalidInput: first failing field, in order title, content, category
            StoreError: session lookup or insert failed
        """
        session = await self.auth.get_session()
        if session is None or not session.user_id:
            raise Unauthenticated()

        title = (draft.title or "").strip()
        if not title:
            raise InvalidInput("title", "Title is required")
        content = (draft.content or "").strip()
        if not content:
            raise InvalidInput("content", "Content is required")
        category = _coerce_enum(Category, draft.category, "category")
        visibility = (
            Visibility.PRIVATE
            if draft.visibility is None
            else _coerce_enum(Visibility, draft.visibility, "visibility")
        )

        now = self.clock()
        pending = Memory(
            id="",
            title=title,
            category=category,
            content=content,
            visibility=visibility,
            owner_id=session.user_id,
            # Authorship of private memories is never recorded
            author_label=session.email if visibility == Visibility.PUBLIC else None,
            created_at_epoch=int(now.timestamp() * 1000),
            created_at_display=display_date(now),
        )

        try:
            stored = await self.store.insert(self.table, memory_to_row(pending, include_id=False))
            memory = row_to_memory(stored)
        except StoreError as e:
            raise StoreError("create memory", str(e)) from e

        logger.info(f"Created {memory.visibility.value} memory {memory.id}")
        return memory

    # Export

    async def export_visible(self, sink: ExportSink, owner_id: str | None = None) -> Any:
        """Serialize the visible set and hand it to sink.

        Unlike fetch_all_visible, store failures propagate.
        """
        memories = await self._select({"visibility": Visibility.PUBLIC.value})
        if owner_id:
            memories += await self._select({"visibility": Visibility.PRIVATE.value, "user_id": owner_id})

        data = serialize_memories(memories).encode("utf-8")
        filename = export_filename(self.clock().date())
        logger.info(f"Exporting {len(memories)} memories as {filename}")
        return sink.save(data, filename)
