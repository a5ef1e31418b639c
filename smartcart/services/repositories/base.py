"""Base repository with shared Supabase client."""
import asyncio
from typing import Any, Callable

from supabase import Client


class BaseRepository:
    """Base class for all repositories.

    Holds the sync Supabase client; queries run through `_execute`
    so they happen off the event loop.
    """

    table_name: str = ""

    def __init__(self, client: Client) -> None:
        self.client = client

    def table(self):
        return self.client.table(self.table_name)

    async def _execute(self, build_query: Callable[[], Any]) -> list[dict[str, Any]]:
        """Run a query builder in a worker thread and return its rows."""
        result = await asyncio.to_thread(lambda: build_query().execute())
        return result.data or []
