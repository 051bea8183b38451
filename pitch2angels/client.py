# pitch2angels/client.py
import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:4000"


class ApplicationClientError(Exception):
    def __init__(self, status_code: Optional[int], message: str, payload: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.payload = payload or {}


class ApplicationClient:
    """Thin wrapper around the portal's REST API"""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        admin_key: Optional[str] = None,
        http: Optional[httpx.Client] = None,
        timeout: float = 30.0
    ):
        self.admin_key = admin_key
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self):
        self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _admin_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.admin_key}"} if self.admin_key else {}

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = self.http.request(method, path, **kwargs)
        except httpx.RequestError as e:
            logger.error(f"Network error calling {method} {path}: {e}")
            raise ApplicationClientError(None, "Network error while contacting the application service")

        if response.is_error:
            try:
                payload = response.json()
            except ValueError:
                payload = {}
            message = (
                payload.get("message")
                or payload.get("error")
                or f"Request failed with status {response.status_code}"
            )
            raise ApplicationClientError(response.status_code, message, payload)
        return response

    # ------------------ Public endpoints ------------------

    def submit_application(self, fields: Dict[str, str], files: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/api/applications", data=fields, files=files).json()

    def validate_step(self, step: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", f"/api/applications/validate/{step}", json=data).json()

    def get_application(self, application_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/api/applications/{application_id}").json()["data"]

    def health(self) -> Dict[str, Any]:
        return self._request("GET", "/api/health").json()

    # ------------------ Admin endpoints ------------------

    def list_applications(self, **params) -> Dict[str, Any]:
        params = {key: value for key, value in params.items() if value is not None}
        response = self._request("GET", "/api/admin/applications", params=params, headers=self._admin_headers())
        return response.json()["data"]

    def update_review(self, application_id: int, **changes) -> Dict[str, Any]:
        response = self._request(
            "PATCH",
            f"/api/admin/applications/{application_id}",
            json=changes,
            headers=self._admin_headers()
        )
        return response.json()["data"]

    def delete_application(self, application_id: int) -> Dict[str, Any]:
        return self._request(
            "DELETE",
            f"/api/admin/applications/{application_id}",
            headers=self._admin_headers()
        ).json()

    def statistics(self) -> Dict[str, Any]:
        return self._request("GET", "/api/admin/statistics", headers=self._admin_headers()).json()["data"]

    def export_csv(self, **params) -> str:
        params = {key: value for key, value in params.items() if value is not None}
        return self._request("GET", "/api/admin/export", params=params, headers=self._admin_headers()).text
