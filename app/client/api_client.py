import logging
from typing import Any, Dict, List, Optional

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class HazardApiClient:
    """Async client for the road hazard HTTP API, as used by the map/list views."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 10,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.API_BASE_URL,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "HazardApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        resp = await self._client.request(method, path, **kwargs)
        if resp.is_success:
            return resp.json()
        try:
            message = resp.json().get("error") or resp.reason_phrase
        except ValueError:
            message = resp.text or resp.reason_phrase
        logger.warning("API %s %s failed: %s %s", method, path, resp.status_code, message)
        raise ApiError(resp.status_code, message)

    async def get_stats(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/stats")

    async def get_hazard_map(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/hazard-map")

    async def get_hazard(self, hazard_id: int) -> Optional[Dict[str, Any]]:
        return await self._request("GET", f"/hazard/{hazard_id}")

    async def get_workers(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/workers")

    async def get_repair(self, hazard_id: int) -> Dict[str, Any]:
        return await self._request("GET", f"/repair/{hazard_id}") or {}

    async def update_repair(
        self,
        hazard_id: int,
        status: str,
        worker_id: Optional[int] = None,
        photo_url: Optional[str] = None,
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {"status": status}
        if worker_id is not None:
            body["worker_id"] = worker_id
        if photo_url:
            body["photo_url"] = photo_url
        result = await self._request("POST", f"/update-repair/{hazard_id}", json=body)
        return result["data"]
