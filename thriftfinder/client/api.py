"""
ThriftFinder REST API client.
Every authenticated call fetches a fresh bearer token from the Identity Resolver.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from thriftfinder.client.errors import ApiError
from thriftfinder.client.identity import IdentityResolver
from thriftfinder.core.config import settings

logger = logging.getLogger(__name__)


def error_reason(response: httpx.Response) -> str:
    """Human-readable reason from an error response ({detail: {message}} or {error})."""
    try:
        data = response.json()
    except ValueError:
        return response.text[:300] if response.text else f"HTTP {response.status_code}"
    if isinstance(data, dict):
        detail = data.get("detail")
        if isinstance(detail, dict) and detail.get("message"):
            return detail["message"]
        if isinstance(detail, str):
            return detail
        if data.get("error"):
            return str(data["error"])
        if data.get("message"):
            return str(data["message"])
    return f"HTTP {response.status_code}"


class ApiClient:
    def __init__(
        self,
        identity: IdentityResolver,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.identity = identity
        self.base_url = (base_url or settings.API_URL).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout or settings.HTTP_TIMEOUT,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _headers(self, auth: bool) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if auth:
            headers["Authorization"] = f"Bearer {await self.identity.get_token()}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        auth: bool = True,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        headers = await self._headers(auth)
        try:
            r = await self._client.request(method, path, headers=headers, json=json, params=params)
        except httpx.RequestError as e:
            logger.warning(f"{method} {path} request error: {e}")
            raise ApiError(str(e) or e.__class__.__name__)

        if r.status_code >= 400:
            reason = error_reason(r)
            logger.warning(f"{method} {path} failed {r.status_code}: {reason}")
            raise ApiError(reason, status_code=r.status_code, body=r.text)
        if not r.content:
            return {}
        try:
            return r.json()
        except ValueError:
            logger.warning(f"{method} {path} returned a non-JSON body")
            raise ApiError("Invalid response from server", status_code=r.status_code, body=r.text)

    # --- Auth ---

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        return await self._request(
            "POST", "/api/auth/login", json={"email": email, "password": password}, auth=False
        )

    async def get_role(self, uid: str) -> str:
        data = await self._request("POST", "/api/auth/getRole", json={"uid": uid})
        role = data.get("role") if isinstance(data, dict) else None
        if not role:
            raise ApiError("Role missing from response", body=data)
        return role

    # --- Stores, items, users ---

    async def get_user(self, uid: str) -> Dict[str, Any]:
        return await self._request("GET", f"/api/stores/users/{uid}")

    async def get_item(self, item_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/api/stores/items/{item_id}")

    async def get_store(self, store_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/api/stores/{store_id}")

    async def get_store_items(self, store_id: str) -> List[Dict[str, Any]]:
        return await self._request("GET", f"/api/stores/{store_id}/items")

    async def search_items(self, **filters: Any) -> List[Dict[str, Any]]:
        """Item search; filters use the wire names (searchTerm, category, minPrice, ...)."""
        params = {k: v for k, v in filters.items() if v is not None}
        return await self._request("GET", "/api/stores/items/search", params=params)

    async def create_store(self, store: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/api/stores", json=store)

    async def create_item(self, store_id: str, item: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", f"/api/stores/{store_id}/items", json=item)

    # --- Chats and messages ---

    async def get_chat(self, chat_id: str) -> Optional[Dict[str, Any]]:
        """Chat metadata, or None when the chat does not exist."""
        try:
            return await self._request("GET", f"/api/stores/chats/{chat_id}")
        except ApiError as e:
            if e.not_found:
                return None
            raise

    async def get_messages(self, chat_id: str) -> List[Dict[str, Any]]:
        return await self._request("GET", f"/api/stores/chats/{chat_id}/messages")

    async def send_message(
        self,
        receiver_id: str,
        message: str,
        item_id: Optional[str] = None,
        store_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {"receiverId": receiver_id, "message": message}
        if item_id:
            body["itemId"] = item_id
        if store_id:
            body["storeId"] = store_id
        return await self._request("POST", "/api/stores/messages", json=body)

    async def mark_chat_read(self, chat_id: str) -> Dict[str, Any]:
        return await self._request("PUT", f"/api/stores/chats/{chat_id}/read", json={})

    # --- Reservations ---

    async def reserve_item(self, item_id: str, store_id: str) -> Dict[str, Any]:
        return await self._request(
            "PUT", f"/api/stores/reserve/{item_id}", json={"storeId": store_id}
        )

    async def get_reservations(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/api/stores/reservations")

    async def update_reservation(self, reservation_id: str, status: str) -> Dict[str, Any]:
        return await self._request(
            "PUT", f"/api/stores/reservations/{reservation_id}", json={"status": status}
        )
