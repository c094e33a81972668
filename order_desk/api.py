"""REST client for the order API: menu, orders, status updates and stats."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from order_desk.config import API_BASE_URL, API_TIMEOUT_SECONDS, API_TOKEN
from order_desk.models import MenuItemRef, Order, OrderStatus, OrderSubmission, StatsData
from order_desk.result import Err, Ok, Result
from order_desk.schemas import CREATED_ADAPTER, MENU_ADAPTER, ORDERS_ADAPTER, STATS_ADAPTER, OrderCreate

logger = logging.getLogger(__name__)

NO_TOKEN = "No authentication token found. Please log in."
AUTH_FAILED = "Authentication failed. Please log in again."
HTML_RESPONSE = "Server returned HTML error page. Check authentication."
INVALID_RESPONSE = "Invalid response format from API"


@dataclass
class Credentials:
    """Bearer token for the order API, passed explicitly to the client."""

    token: str | None = API_TOKEN

    def clear(self) -> None:
        self.token = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)


class DashboardClient:
    """Thin wrapper over the order API returning Ok/Err results."""

    def __init__(
        self,
        credentials: Credentials,
        base_url: str = API_BASE_URL,
        timeout: float = API_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.credentials = credentials
        self._client = httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout, transport=transport)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> DashboardClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def fetch_menu(self) -> Result[list[MenuItemRef], str]:
        result = self._validated(self._request("GET", "/api/menu", action="fetch menu"), MENU_ADAPTER)
        if not result.ok:
            return result
        return Ok([item.to_domain() for item in result.value])

    def list_orders(self, status: str = "all") -> Result[list[Order], str]:
        params = {} if status == "all" else {"status": status}
        result = self._validated(
            self._request("GET", "/api/orders", action="fetch orders", params=params), ORDERS_ADAPTER
        )
        if not result.ok:
            return result
        return Ok([order.to_domain() for order in result.value])

    def create_order(self, submission: OrderSubmission) -> Result[str, str]:
        payload = OrderCreate.from_submission(submission).payload()
        result = self._validated(
            self._request("POST", "/api/orders", action="submit order", json=payload), CREATED_ADAPTER, empty={}
        )
        if not result.ok:
            return result
        order_id = result.value.order_id or result.value.id
        if not order_id:
            return Err("Order API did not return an order id")
        return Ok(order_id)

    def update_order_status(self, order_id: str, status: str) -> Result[None, str]:
        try:
            new_status = OrderStatus(status)
        except ValueError:
            return Err(f"Unknown order status: {status}")
        result = self._request(
            "PATCH",
            f"/api/orders/{order_id}/status",
            action="update order status",
            json={"status": new_status.value},
        )
        if not result.ok:
            return result
        logger.info("order %s moved to %s", order_id, new_status.value)
        return Ok(None)

    def fetch_stats(self) -> Result[StatsData, str]:
        result = self._validated(
            self._request("GET", "/api/orders/stats", action="fetch stats", forbidden="view stats"),
            STATS_ADAPTER,
            empty={},
        )
        if not result.ok:
            return result
        return Ok(result.value.to_domain())

    def _validated(self, result: Result[Any, str], adapter: TypeAdapter, empty: Any = None) -> Result[Any, str]:
        """Check a decoded body against its wire schema."""
        if not result.ok:
            return result
        body = empty if result.value is None else result.value
        try:
            return Ok(adapter.validate_python(body))
        except ValidationError as exc:
            logger.warning("unexpected response body: %d validation errors", exc.error_count(), exc_info=True)
            return Err(INVALID_RESPONSE)

    def _request(
        self,
        method: str,
        path: str,
        action: str,
        forbidden: str | None = None,
        **kwargs: Any,
    ) -> Result[Any, str]:
        token = self.credentials.token
        if not token:
            return Err(NO_TOKEN)

        headers = {"Authorization": f"Bearer {token}", "Content-Type": "application/json"}
        try:
            response = self._client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            return Err(f"Network error: {exc}")

        content_type = response.headers.get("content-type", "")
        if "text/html" in content_type:
            logger.warning("%s %s returned HTML (status %s)", method, path, response.status_code)
            return Err(HTML_RESPONSE)
        if response.status_code == 401:
            # Drop the rejected token.
            self.credentials.clear()
            return Err(AUTH_FAILED)
        if response.status_code == 403:
            return Err(f"You don't have permission to {forbidden or action}.")
        if not response.is_success:
            logger.warning("%s %s returned %s", method, path, response.status_code)
            return Err(f"Failed to {action}: {response.status_code}")

        if not response.content:
            return Ok(None)
        try:
            return Ok(response.json())
        except ValueError:
            return Err(f"Expected JSON response but received {response.status_code} {response.reason_phrase}")
