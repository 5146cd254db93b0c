import logging
from typing import Any, ClassVar
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from .exceptions import (
    AuthError,
    PickerSessionError,
    PreconditionError,
    QuotaError,
    UpstreamError,
    UpstreamTimeoutError,
)
from .models.picker import MediaItem, MediaItemsPage, PickerSession
from .utils._http import DEFAULT_TIMEOUT, send_request

logger = logging.getLogger(__name__)


def map_picker_error(
    status_code: int | None, code: str | None, message: str
) -> PickerSessionError:
    if status_code == 401 or code == "UNAUTHENTICATED":
        return AuthError("Invalid or expired access token", status_code, code)

    if code == "FAILED_PRECONDITION":
        return PreconditionError(
            "User does not have a linked Google Photos library", status_code, code
        )

    if code == "RESOURCE_EXHAUSTED" or status_code == 429:
        return QuotaError(
            "Too many active picker sessions. Delete unused sessions.",
            status_code,
            code,
        )

    return UpstreamError(message, status_code, code)


class PickerSessionManager:
    """Stateless client for the Photos Picker session lifecycle.

    Every call takes the access token explicitly and re-reads the session
    from Google, so one instance can be shared by any number of concurrent
    requests. Polling is left to the caller: call `get_status` no more often
    than `session.polling_config.poll_interval_seconds`.
    """

    base_url: ClassVar[str] = "https://photospicker.googleapis.com/v1"

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.http_client = http_client
        self.timeout = timeout

    async def _request(
        self, method: str, path: str, access_token: str, **kwargs: Any
    ) -> httpx.Response:
        headers = {"Authorization": f"Bearer {access_token}", **kwargs.pop("headers", {})}

        try:
            response = await send_request(
                method,
                f"{self.base_url}{path}",
                client=self.http_client,
                timeout=self.timeout,
                headers=headers,
                **kwargs,
            )
        except httpx.RequestError as e:
            logger.error(f"Failed to reach Picker API: {str(e)}")

            raise UpstreamError(f"Failed to reach Picker API: {str(e)}") from e

        if response.is_error:
            raise self._error_from_response(response)

        return response

    def _error_from_response(self, response: httpx.Response) -> PickerSessionError:
        message = f"Picker API request failed with status {response.status_code}"
        code: str | None = None

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
            error = payload["error"]
            message = error.get("message") or message

            # Google puts the canonical code in "status"; "code" is numeric.
            code = error.get("status")

            if code is None and isinstance(error.get("code"), str):
                code = error["code"]

        logger.warning(
            f"Picker API error: status={response.status_code} code={code} message={message}"
        )

        return map_picker_error(response.status_code, code, message)

    def _session_path(self, session_id: str) -> str:
        # Session ids come from the browser; escape them as one path segment.
        return "/sessions/" + quote(session_id, safe="")

    def _parse(self, model: type, response: httpx.Response) -> Any:
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"Invalid Picker API response: {str(e)}")

            raise UpstreamError(
                "Invalid Picker API response", response.status_code
            ) from e

    async def create(self, access_token: str) -> PickerSession:
        response = await self._request(
            "POST", "/sessions", access_token, json={}
        )

        session: PickerSession = self._parse(PickerSession, response)

        logger.info(f"Created picker session {session.id}")

        return session

    async def get_status(self, session_id: str, access_token: str) -> PickerSession:
        response = await self._request(
            "GET", self._session_path(session_id), access_token
        )

        return self._parse(PickerSession, response)

    async def list_media_items(
        self,
        session_id: str,
        access_token: str,
        page_token: str | None = None,
        page_size: int | None = None,
    ) -> MediaItemsPage:
        params: dict[str, str | int] = {"sessionId": session_id}

        if page_token:
            params["pageToken"] = page_token

        if page_size:
            params["pageSize"] = page_size

        response = await self._request(
            "GET", "/mediaItems", access_token, params=params
        )

        return self._parse(MediaItemsPage, response)

    async def list_all_media_items(
        self, session_id: str, access_token: str
    ) -> list[MediaItem]:
        items: list[MediaItem] = []
        page_token: str | None = None

        while True:
            page = await self.list_media_items(session_id, access_token, page_token)
            items.extend(page.media_items)

            if not page.next_page_token:
                return items

            page_token = page.next_page_token

    async def delete(self, session_id: str, access_token: str) -> None:
        await self._request("DELETE", self._session_path(session_id), access_token)

        logger.info(f"Deleted picker session {session_id}")

    async def release(self, session_id: str, access_token: str) -> bool:
        """Delete a session without letting a failure reach the caller.

        Google caps the number of open sessions per user, so callers release
        every session once they have its items.
        """
        try:
            await self.delete(session_id, access_token)
        except (PickerSessionError, UpstreamTimeoutError) as e:
            logger.warning(f"Failed to delete picker session {session_id}: {e}")

            return False

        return True
