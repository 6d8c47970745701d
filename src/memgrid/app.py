"""Backend wiring: picks the session provider and row store from settings."""

import contextlib
from collections.abc import AsyncIterator
from dataclasses import dataclass

from memgrid.auth.base import SessionProvider
from memgrid.core.config import Settings
from memgrid.core.logging import get_logger
from memgrid.memory.base import RowStore
from memgrid.memory.repository import MemoryRepository

logger = get_logger("app")


@dataclass
class Backend:
    """Connected collaborators for one process."""

    auth: SessionProvider
    store: RowStore
    repository: MemoryRepository


@contextlib.asynccontextmanager
async def open_backend(settings: Settings) -> AsyncIterator[Backend]:
    """Connect the configured backend and close it on exit."""
    if settings.backend == "supabase":
        from memgrid.auth.rest import RestAuthProvider
        from memgrid.memory.rest import RestRowStore

        if not settings.supabase_url or not settings.supabase_anon_key:
            raise ValueError(
                "Supabase backend needs MEMGRID_SUPABASE_URL and MEMGRID_SUPABASE_ANON_KEY"
            )
        auth = RestAuthProvider(
            settings.supabase_url, settings.supabase_anon_key, timeout=settings.request_timeout
        )
        store = RestRowStore(
            settings.supabase_url,
            settings.supabase_anon_key,
            auth=auth,
            timeout=settings.request_timeout,
        )
        logger.info(f"Using managed backend at {settings.supabase_url}")
        yield Backend(auth, store, MemoryRepository(store, auth, table=settings.table_name))
        return

    from memgrid.auth.local import LocalAuthProvider
    from memgrid.memory.store import SQLiteRowStore

    local_auth = LocalAuthProvider(settings.db_path)
    local_store = SQLiteRowStore(settings.db_path)
    await local_auth.connect()
    try:
        await local_store.connect()
        try:
            yield Backend(local_auth, local_store, MemoryRepository(local_store, local_auth))
        finally:
            await local_store.close()
    finally:
        await local_auth.close()
