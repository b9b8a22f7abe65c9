"""
Async HTTP client for the scheduler API.

Reproduces the flows a browser front end drives itself, most notably deleting
a recurring series one lesson at a time.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

import httpx
import structlog

from app.api.lessons.schemas import LessonResponse
from app.core.recurrence import delete_series

logger = structlog.get_logger(__name__)


class ApiError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class SchedulerClient:
    """
    Thin wrapper over httpx.AsyncClient that carries the session id.

    Use as an async context manager, or call aclose() when done. A custom
    transport can be passed to talk to an in-process app.
    """

    def __init__(
        self,
        base_url: str,
        session_id: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ) -> None:
        self.session_id = session_id
        self._client = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self) -> "SchedulerClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self) -> Dict[str, str]:
        if not self.session_id:
            return {}
        return {"Authorization": f"Bearer {self.session_id}"}

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        response = await self._client.request(method, url, headers=self._headers(), **kwargs)
        if response.is_error:
            try:
                message = response.json().get("detail", response.text)
            except ValueError:
                message = response.text
            logger.warning("api_error", method=method, url=url, status=response.status_code)
            raise ApiError(response.status_code, str(message))
        if response.status_code == httpx.codes.NO_CONTENT or not response.content:
            return None
        return response.json()

    async def login(self, username: str, password: str) -> str:
        data = await self._request("POST", "/api/auth/login", json={"username": username, "password": password})
        self.session_id = data["sessionId"]
        return self.session_id

    async def logout(self) -> None:
        await self._request("POST", "/api/auth/logout")
        self.session_id = None

    async def list_lessons(self) -> List[LessonResponse]:
        data = await self._request("GET", "/api/lessons")
        return [LessonResponse.model_validate(item) for item in data]

    async def delete_lesson(self, lesson_id: UUID) -> None:
        await self._request("DELETE", f"/api/lessons/{lesson_id}")

    async def delete_series(self, lesson_id: UUID) -> int:
        """
        Delete a lesson and every later lesson in the same weekly slot, one request each.

        Stops at the first failed request with SeriesDeleteError; lessons
        already deleted stay deleted.
        """
        lesson_id = UUID(str(lesson_id))
        lessons = sorted(await self.list_lessons(), key=lambda l: l.date_time)
        reference = next((l for l in lessons if l.id == lesson_id), None)
        if reference is None:
            raise ApiError(httpx.codes.NOT_FOUND, "Lesson not found")
        return await delete_series(reference, lessons, self.delete_lesson)

    async def delete_series_bulk(self, lesson_id: UUID) -> int:
        """Server-side, all-or-nothing series delete."""
        data = await self._request("DELETE", f"/api/lessons/{lesson_id}/series")
        return data["deleted"]
