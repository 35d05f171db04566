# client/api.py
from typing import Any, Optional

import requests

from core.logger import get_logger

logger = get_logger(__name__)


class ApiError(Exception):
    """Non-2xx response from the storefront API."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ApiClient:
    """
    Thin JSON client for the storefront API.

    `session` is anything with a requests-style `request(method, url, ...)`;
    a plain `requests.Session` by default.
    """

    def __init__(self, base_url: str = "http://localhost:8000", session=None, timeout: int = 5):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.token: Optional[str] = None

    def _headers(self) -> dict:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    def request(self, method: str, path: str, json: Any = None) -> dict:
        url = f"{self.base_url}{path}"
        logger.debug(f"ApiClient {method} {url}")
        resp = self.session.request(method, url, json=json, headers=self._headers(), timeout=self.timeout)

        try:
            data = resp.json()
        except ValueError:
            data = {}

        if resp.status_code >= 400:
            message = data.get("message") if isinstance(data, dict) else None
            raise ApiError(resp.status_code, message or f"Request failed with status {resp.status_code}")
        return data

    def get(self, path: str) -> dict:
        return self.request("GET", path)

    def post(self, path: str, json: Any = None) -> dict:
        return self.request("POST", path, json=json)

    def put(self, path: str, json: Any = None) -> dict:
        return self.request("PUT", path, json=json)

    def delete(self, path: str, json: Any = None) -> dict:
        return self.request("DELETE", path, json=json)

    def login(self, email: str, password: str) -> dict:
        data = self.post("/auth/login", {"email": email, "password": password})
        self.token = data["token"]
        return data["user"]

    def logout(self) -> None:
        self.token = None
