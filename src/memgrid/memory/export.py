"""
Export document and sinks.

The export document is a pretty-printed JSON array of Memory objects keyed by
entity field names (not row column names).
"""

import json
from abc import ABC, abstractmethod
from dataclasses import asdict
from datetime import date
from pathlib import Path
from typing import Any

from memgrid.core.logging import get_logger
from memgrid.memory.base import Category, Memory, Visibility

logger = get_logger("memory.export")

EXPORT_PREFIX = "humanity-memory-grid"


def export_filename(day: date) -> str:
    """Suggested filename for an export made on the given day."""
    return f"{EXPORT_PREFIX}-{day.isoformat()}.json"


def _memory_to_dict(memory: Memory) -> dict[str, Any]:
    data = asdict(memory)
    data["category"] = memory.category.value
    data["visibility"] = memory.visibility.value
    return data


def _memory_from_dict(data: dict[str, Any]) -> Memory:
    return Memory(
        id=data["id"],
        title=data["title"],
        category=Category(data["category"]),
        content=data["content"],
        visibility=Visibility(data["visibility"]),
        owner_id=data.get("owner_id"),
        author_label=data.get("author_label"),
        created_at_epoch=int(data["created_at_epoch"]),
        created_at_display=data["created_at_display"],
    )


def serialize_memories(memories: list[Memory]) -> str:
    return json.dumps([_memory_to_dict(m) for m in memories], indent=2, ensure_ascii=False)


def parse_export(text: str) -> list[Memory]:
    """Read an export document back into Memory entities."""
    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError("Export document must be a JSON array")
    return [_memory_from_dict(item) for item in data]


class ExportSink(ABC):
    """Destination for an export buffer."""

    @abstractmethod
    def save(self, data: bytes, filename: str) -> Any:
        """Persist the buffer under the suggested filename."""
        ...


class FileExportSink(ExportSink):
    """Writes exports into a local directory."""

    def __init__(self, directory: Path):
        self.directory = directory

    def save(self, data: bytes, filename: str) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        # Only the final path component of the suggested name is used
        path = self.directory / Path(filename).name
        path.write_bytes(data)
        logger.info(f"Exported {len(data)} bytes to {path}")
        return path
