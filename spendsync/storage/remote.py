"""Remote stores.

HttpRemoteStore talks to the expenses REST backend over httpx.
InMemoryRemoteStore is a dict-backed stand-in with the same idempotent
semantics, used by tests and for running without a backend.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

import httpx

from spendsync.protocols import RemoteStoreError
from spendsync.types import Expense, RemotePage
from spendsync.utils import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)


class HttpRemoteStore:
    """REST client for ``<base_url>/expenses``.

    Every non-2xx response and every transport error (including timeouts)
    raises :class:`RemoteStoreError`. Replays are tolerated: a 409 on create
    is followed by a PUT of the same payload, so a queued add that absorbed
    later edits still lands, and a 404 on remove counts as success.

    Args:
        base_url: Backend root, e.g. ``https://api.example.com/v1``.
        auth_token: Optional bearer token.
        timeout: Per-request timeout in seconds.
        client: Pre-built ``httpx.Client`` (tests inject a MockTransport).
    """

    def __init__(
        self,
        base_url: str,
        auth_token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.Client] = None,
    ):
        self.base_url = base_url.rstrip("/")
        headers = {"Accept": "application/json", "Content-Type": "application/json"}
        if auth_token:
            headers["Authorization"] = f"Bearer {auth_token}"
        self._client = client or httpx.Client(timeout=timeout)
        self._client.headers.update(headers)

    @property
    def expenses_url(self) -> str:
        return f"{self.base_url}/expenses"

    def _request(self, method: str, url: str, ok_statuses=(), **kwargs) -> Optional[httpx.Response]:
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise RemoteStoreError(f"{method} {url} failed: {e}") from e

        if response.status_code in ok_statuses:
            logger.debug(f"{method} {url} returned {response.status_code}, treating as replay")
            return None
        if not response.is_success:
            raise RemoteStoreError(
                f"{method} {url} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return response

    def _parse_expense(self, response: Optional[httpx.Response], fallback: Expense) -> Expense:
        if response is None or not response.content:
            return fallback
        try:
            return Expense.from_dict(response.json())
        except ValueError as e:
            # json.JSONDecodeError is a ValueError
            logger.debug(f"Unparseable expense in response, keeping local copy: {e}")
            return fallback

    def create(self, expense: Expense) -> Expense:
        response = self._request("POST", self.expenses_url, ok_statuses=(409,), json=expense.to_dict())
        if response is None:
            # Already created by an earlier pass; push the current payload
            return self.replace(expense.id, expense)
        return self._parse_expense(response, expense)

    def replace(self, record_id: str, expense: Expense) -> Expense:
        response = self._request("PUT", f"{self.expenses_url}/{record_id}", json=expense.to_dict())
        return self._parse_expense(response, expense)

    def remove(self, record_id: str) -> None:
        self._request("DELETE", f"{self.expenses_url}/{record_id}", ok_statuses=(404,))

    def list(self, page: int, page_size: int, category: Optional[str] = None) -> RemotePage:
        params: Dict[str, Any] = {"page": page, "limit": page_size}
        if category and category != "All":
            params["category"] = category

        response = self._request("GET", self.expenses_url, params=params)
        try:
            data = response.json()
        except ValueError as e:
            raise RemoteStoreError(f"GET {self.expenses_url} returned invalid JSON: {e}") from e
        return self._parse_page(data)

    def _parse_page(self, data: Any) -> RemotePage:
        """Accept either a bare array or ``{"items"|"data": [...], "total": n}``."""
        total = None
        if isinstance(data, dict):
            raw_items = data.get("items", data.get("data", []))
            total = data.get("total")
        else:
            raw_items = data
        if not isinstance(raw_items, list):
            raise RemoteStoreError("Expense list response is not an array")

        items: List[Expense] = []
        for raw in raw_items:
            try:
                items.append(Expense.from_dict(raw))
            except ValueError as e:
                logger.warning(f"Skipping malformed expense from server: {e}")

        if not isinstance(total, int) or isinstance(total, bool):
            total = len(items)
        return RemotePage(items=items, total=total)

    def ping(self) -> bool:
        try:
            response = self._client.get(f"{self.base_url}/health")
        except httpx.HTTPError as e:
            logger.debug(f"Connectivity check failed: {e}")
            return False
        return response.status_code == 200

    def close(self):
        self._client.close()


class InMemoryRemoteStore:
    """Dict-backed remote store with the same replay semantics as the HTTP one.

    Args:
        expenses: Initial server contents.
        fail_on: Optional hook called as ``fail_on(operation, record_id)``
            before each mutation; returning True makes that call raise
            RemoteStoreError.
    """

    def __init__(
        self,
        expenses: Optional[List[Expense]] = None,
        fail_on: Optional[Callable[[str, Optional[str]], bool]] = None,
    ):
        self._records: Dict[str, Expense] = {e.id: e for e in (expenses or [])}
        self.fail_on = fail_on
        self.reachable = True
        self.calls: List[tuple] = []

    def _check(self, operation: str, record_id: Optional[str]):
        self.calls.append((operation, record_id))
        if not self.reachable:
            raise RemoteStoreError(f"{operation} failed: remote unreachable")
        if self.fail_on and self.fail_on(operation, record_id):
            raise RemoteStoreError(f"{operation} {record_id} rejected", status_code=500)

    @property
    def records(self) -> List[Expense]:
        # Newest first by insertion, mirroring a server that lists recent rows first
        return list(reversed(list(self._records.values())))

    def create(self, expense: Expense) -> Expense:
        self._check("create", expense.id)
        self._records[expense.id] = expense
        return expense

    def replace(self, record_id: str, expense: Expense) -> Expense:
        self._check("replace", record_id)
        if record_id not in self._records:
            raise RemoteStoreError(f"replace {record_id}: not found", status_code=404)
        self._records[record_id] = expense
        return expense

    def remove(self, record_id: str) -> None:
        self._check("remove", record_id)
        self._records.pop(record_id, None)

    def list(self, page: int, page_size: int, category: Optional[str] = None) -> RemotePage:
        self._check("list", None)
        items = self.records
        if category and category != "All":
            items = [e for e in items if e.category == category]
        start = (page - 1) * page_size
        return RemotePage(items=items[start : start + page_size], total=len(items))

    def ping(self) -> bool:
        return self.reachable
