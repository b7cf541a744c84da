import logging
from typing import Any

import httpx

from smart_inventory.exceptions import NetworkError

logger = logging.getLogger("smart_inventory.boltic")

def _remote_message(resp: httpx.Response) -> str | None:
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return body.get("message")
    return None

class BolticClient:
    """Thin async wrapper over the Boltic table and workflow endpoints."""

    def __init__(
        self,
        base_url: str,
        *,
        api_key: str = "",
        sales_loop_url: str = "",
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self.sales_loop_url = sales_loop_url
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "BolticClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> dict[str, Any]:
        try:
            resp = await self._http.request(method, url, **kwargs)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            message = _remote_message(e.response) or str(e)
            logger.error("Boltic %s %s failed: %s", method, url, message)
            raise NetworkError(
                message,
                code=f"HTTP_{e.response.status_code}",
                details={"url": str(e.request.url)},
            ) from e
        except httpx.HTTPError as e:
            logger.error("Boltic %s %s failed: %s", method, url, e)
            raise NetworkError(str(e) or e.__class__.__name__, code="TRANSPORT") from e

        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as e:
            raise NetworkError("Boltic returned a non-JSON response", code="BAD_RESPONSE") from e

    async def list_table(self, table: str) -> list[dict[str, Any]]:
        """Return every row of ``table`` (``result.data`` of the response)."""
        body = await self._request("GET", f"/tables/{table}/records")
        return list((body.get("result") or {}).get("data") or [])

    async def upsert_rows(self, table: str, rows: list[dict[str, Any]]) -> dict[str, Any]:
        """Bulk upsert; returns ``{success, inserted, updated, errors}``."""
        body = await self._request("POST", f"/tables/{table}/upsert", json={"rows": rows})
        return {
            "success": bool(body.get("success", False)),
            "inserted": int(body.get("inserted") or 0),
            "updated": int(body.get("updated") or 0),
            "errors": list(body.get("errors") or []),
        }

    async def insert_rows(self, table: str, rows: list[dict[str, Any]]) -> dict[str, Any]:
        return await self._request("POST", f"/tables/{table}/records", json={"rows": rows})

    async def trigger_workflow(self, workflow_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", f"/workflows/{workflow_id}/trigger", json=payload)

    async def list_workflow_runs(self, workflow_id: str, limit: int = 5) -> list[dict[str, Any]]:
        body = await self._request("GET", f"/workflows/{workflow_id}/runs", params={"limit": limit})
        return list((body.get("result") or {}).get("data") or [])

    async def post_sales_loop(self, envelope: dict[str, Any]) -> dict[str, Any]:
        """POST a ``{payload: {sales: [...]}}`` envelope to the sales-loop workflow."""
        if not self.sales_loop_url:
            raise NetworkError("Sales loop endpoint is not configured", code="NOT_CONFIGURED")
        return await self._request("POST", self.sales_loop_url, json=envelope)
