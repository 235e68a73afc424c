"""Remote (CRM) task store over the Supabase PostgREST API."""

from typing import Any, Dict, List, Optional
import logging

import httpx

from ..core.config import BridgeConfig
from ..core.exceptions import ConfigurationError, RemoteStoreError
from ..core.models import RemoteTask


TASKS_TABLE = "tasks"
ACTIVITY_TABLE = "agent_activity"


class RemoteTaskStore:
    """Async access to the remote ``tasks`` and ``agent_activity`` tables.

    Every failure, transport or HTTP, surfaces as ``RemoteStoreError`` with
    the server's message so callers can report it without inspecting httpx
    types.
    """

    def __init__(
        self,
        config: BridgeConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[logging.Logger] = None,
    ):
        if not config.is_configured:
            raise ConfigurationError(
                "Bridge Supabase not configured. Set BRIDGE_SUPABASE_URL and "
                "BRIDGE_SUPABASE_SERVICE_KEY"
            )

        self.logger = logger or logging.getLogger(__name__)
        base_url = f"{config.supabase_url.rstrip('/')}/rest/v1"
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={
                "apikey": config.supabase_key,
                "Authorization": f"Bearer {config.supabase_key}",
                "Content-Type": "application/json",
            },
            timeout=config.request_timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        table: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        prefer: Optional[str] = None,
    ) -> httpx.Response:
        headers = {"Prefer": prefer} if prefer else None
        try:
            response = await self._client.request(
                method, f"/{table}", params=params, json=json, headers=headers
            )
        except httpx.HTTPError as e:
            raise RemoteStoreError(f"{method} {table} failed: {e}") from e

        if response.is_error:
            raise RemoteStoreError(self._error_message(response), status_code=response.status_code)
        return response

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        if isinstance(body, dict):
            return body.get("message") or body.get("error") or str(body)
        return str(body)

    @staticmethod
    def _rows(response: httpx.Response) -> List[Dict[str, Any]]:
        if not response.content:
            return []
        body = response.json()
        return body if isinstance(body, list) else [body]

    # ------------------------------------------------------------------
    # Tasks

    async def fetch_changed_since(
        self,
        watermark: str,
        exclude_source: str,
        limit: int = 50,
    ) -> List[RemoteTask]:
        """Tasks modified strictly after ``watermark``, oldest first.

        Rows with no origin tag are kept; ``neq`` alone would drop them
        because NULL never compares unequal in SQL.
        """
        params = {
            "select": "*",
            "updated_at": f"gt.{watermark}",
            "or": f"(sync_source.is.null,sync_source.neq.{exclude_source})",
            "order": "updated_at.asc",
            "limit": str(limit),
        }
        response = await self._request("GET", TASKS_TABLE, params=params)
        return [RemoteTask.from_dict(row) for row in self._rows(response)]

    async def find_by_cross_reference(self, mc_task_id: str) -> Optional[RemoteTask]:
        params = {"select": "*", "mc_task_id": f"eq.{mc_task_id}", "limit": "1"}
        response = await self._request("GET", TASKS_TABLE, params=params)
        rows = self._rows(response)
        return RemoteTask.from_dict(rows[0]) if rows else None

    async def insert_task(self, payload: Dict[str, Any]) -> Optional[RemoteTask]:
        response = await self._request(
            "POST", TASKS_TABLE, json=payload, prefer="return=representation"
        )
        rows = self._rows(response)
        return RemoteTask.from_dict(rows[0]) if rows else None

    async def update_task_by_cross_reference(self, mc_task_id: str, payload: Dict[str, Any]) -> int:
        response = await self._request(
            "PATCH",
            TASKS_TABLE,
            params={"mc_task_id": f"eq.{mc_task_id}"},
            json=payload,
            prefer="return=representation",
        )
        return len(self._rows(response))

    async def update_task(self, remote_id: str, payload: Dict[str, Any]) -> int:
        response = await self._request(
            "PATCH",
            TASKS_TABLE,
            params={"id": f"eq.{remote_id}"},
            json=payload,
            prefer="return=representation",
        )
        return len(self._rows(response))

    async def count_tasks(self) -> int:
        """Exact row count, read from the ``Content-Range`` header."""
        response = await self._request(
            "HEAD", TASKS_TABLE, params={"select": "*"}, prefer="count=exact"
        )
        content_range = response.headers.get("content-range", "")
        total = content_range.rsplit("/", 1)[-1]
        return int(total) if total.isdigit() else 0

    # ------------------------------------------------------------------
    # Agent activity

    async def insert_activity(self, payload: Dict[str, Any]) -> None:
        await self._request("POST", ACTIVITY_TABLE, json=payload, prefer="return=minimal")
