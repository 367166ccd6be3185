"""
Async HTTP client for the Pravas API.

Uses ``httpx.AsyncClient`` because the recorder runs on an asyncio event
loop alongside microphone capture.
"""

import logging
from datetime import date

import httpx

from pravas.core.models import Identity

logger = logging.getLogger(__name__)


class APIError(Exception):
    """User-friendly API error with categorized message.

    Categories: "connection", "timeout", "http", "network", "unknown".
    ``status_code`` is set for "http" errors.
    """

    def __init__(self, message: str, category: str = "unknown", status_code: int | None = None) -> None:
        self.message = message
        self.category = category
        self.status_code = status_code
        super().__init__(message)


class PravasClient:
    """Thin async wrapper around httpx for calling the Pravas backend.

    All methods return parsed JSON dicts or raise ``APIError`` with
    user-friendly messages.

    Args:
        base_url: Base URL of the Pravas FastAPI backend.
        token: Bearer token identifying the signed-in user.
        transport: Optional httpx transport (tests inject ``httpx.ASGITransport``).
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "PravasClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Execute an HTTP request with user-friendly error handling.

        Raises:
            APIError: On connection, timeout, HTTP status, or network errors.
        """
        try:
            resp = await self._client.request(method, path, **kwargs)
            resp.raise_for_status()
            return resp
        except httpx.ConnectError:
            raise APIError(
                f"Backend server is not reachable at {self._base_url}. "
                "Start it with: `pravas serve`",
                category="connection",
            ) from None
        except httpx.TimeoutException:
            raise APIError(
                "Request timed out. The server may be overloaded.",
                category="timeout",
            ) from None
        except httpx.HTTPStatusError as exc:
            try:
                detail = exc.response.json().get("detail", exc.response.text)
            except ValueError:
                detail = exc.response.text or str(exc)
            raise APIError(
                str(detail), category="http", status_code=exc.response.status_code
            ) from None
        except httpx.HTTPError as exc:
            raise APIError(f"Network error: {exc}", category="network") from None

    # -- session --

    async def whoami(self) -> Identity | None:
        """Return the identity behind the client's token, or None if signed out."""
        try:
            resp = await self._request("GET", "/api/v1/me")
        except APIError as exc:
            if exc.status_code == 401:
                return None
            raise
        return Identity.model_validate(resp.json())

    # -- trips --

    async def create_trip(self, title: str) -> dict:
        return (await self._request("POST", "/api/v1/trips", json={"title": title})).json()

    async def list_trips(self, limit: int = 50, offset: int = 0) -> list[dict]:
        params = {"limit": limit, "offset": offset}
        return (await self._request("GET", "/api/v1/trips", params=params)).json()

    async def list_entries(self, trip_id: str) -> list[dict]:
        return (await self._request("GET", f"/api/v1/trips/{trip_id}/entries")).json()

    # -- entries --

    async def create_entry(
        self,
        trip_id: str,
        audio_url: str,
        audio_mime: str,
        entry_date: date,
    ) -> dict:
        body = {
            "audio_url": audio_url,
            "audio_mime": audio_mime,
            "entry_date": entry_date.isoformat(),
        }
        return (await self._request("POST", f"/api/v1/trips/{trip_id}/entries", json=body)).json()

    async def get_entry(self, entry_id: str) -> dict:
        return (await self._request("GET", f"/api/v1/entries/{entry_id}")).json()

    async def transcribe_entry(self, entry_id: str) -> dict:
        """Trigger the transcription pipeline; can take minutes for long memos."""
        return (
            await self._request("POST", f"/api/v1/entries/{entry_id}/transcribe", timeout=600.0)
        ).json()

    # -- object storage --

    async def upload_audio(self, key: str, data: bytes, content_type: str) -> dict:
        """Upload a recording and return ``{key, public_url, content_type, size}``."""
        return (
            await self._request(
                "POST",
                "/api/v1/audio",
                params={"key": key},
                content=data,
                headers={"Content-Type": content_type},
                timeout=120.0,
            )
        ).json()
