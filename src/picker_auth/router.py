import logging
from typing import Any

import httpx
from fastapi import APIRouter, Query, Request, Response
from fastapi.responses import JSONResponse, RedirectResponse

from ._config import OAuthConfig
from ._flow import AuthorizationFlow
from ._picker import PickerSessionManager
from ._storage import SessionStateStore
from ._token_exchange import TokenExchangeClient
from .exceptions import AuthenticationRequiredError, PickerAuthException
from .models.picker import PickerSession
from .utils._response import error_redirect, exception_response
from .utils._signing import new_session_id, sign_session_id, unsign_session_id

logger = logging.getLogger(__name__)


def session_payload(session: PickerSession) -> dict[str, Any]:
    payload = session.model_dump(
        mode="json", by_alias=True, exclude={"polling_config"}
    )
    payload["state"] = session.state.value
    payload["pollInterval"] = session.polling_config.poll_interval_seconds

    return payload


class PickerRouter(APIRouter):
    """HTTP surface for the login flow and the Picker session lifecycle.

    Tokens stay in the state store; the browser only holds a signed session
    id cookie.
    """

    def __init__(
        self,
        config: OAuthConfig,
        store: SessionStateStore,
        http_client: httpx.AsyncClient | None = None,
        flow: AuthorizationFlow | None = None,
        picker: PickerSessionManager | None = None,
        prefix: str = "",
    ):
        super().__init__(prefix=prefix)

        config.validate_credentials()
        config.validate_session_secret()

        self.config = config
        self.flow = flow or AuthorizationFlow(
            config,
            store,
            token_client=TokenExchangeClient(
                http_client=http_client, timeout=config.http_timeout
            ),
        )
        self.picker = picker or PickerSessionManager(
            http_client=http_client, timeout=config.http_timeout
        )

        self.add_api_route(
            "/auth/login",
            self.login,
            methods=["GET"],
            operation_id="login",
            summary="Redirect to Google to grant Photos Picker access",
        )
        self.add_api_route(
            "/auth/callback",
            self.callback,
            methods=["GET"],
            operation_id="oauth_callback",
            summary="OAuth 2.0 redirect target",
        )
        self.add_api_route(
            "/auth/logout",
            self.logout,
            methods=["POST"],
            operation_id="logout",
            summary="Forget the stored tokens",
        )
        self.add_api_route(
            "/picker/sessions",
            self.create_session,
            methods=["POST"],
            operation_id="create_picker_session",
            summary="Create a Photos Picker session",
        )
        self.add_api_route(
            "/picker/sessions/{session_id}",
            self.get_session,
            methods=["GET"],
            operation_id="get_picker_session",
            summary="Get the status of a Photos Picker session",
        )
        self.add_api_route(
            "/picker/sessions/{session_id}",
            self.delete_session,
            methods=["DELETE"],
            operation_id="delete_picker_session",
            summary="Delete a Photos Picker session",
        )
        self.add_api_route(
            "/picker/sessions/{session_id}/media-items",
            self.list_media_items,
            methods=["GET"],
            operation_id="list_picker_media_items",
            summary="List the media items picked in a session",
        )

    def get_browser_session_id(self, request: Request) -> str | None:
        return unsign_session_id(
            request.cookies.get(self.config.cookie_name), self.config.session_secret
        )

    def set_session_cookie(self, response: Response, session_id: str) -> None:
        response.set_cookie(
            self.config.cookie_name,
            sign_session_id(session_id, self.config.session_secret),
            max_age=self.config.cookie_max_age,
            path="/",
            secure=self.config.cookie_secure,
            httponly=True,
            samesite="lax",
        )

    async def _access_token(self, request: Request) -> str:
        session_id = self.get_browser_session_id(request)

        if session_id is None:
            raise AuthenticationRequiredError()

        return await self.flow.get_access_token(session_id)

    async def login(self, request: Request) -> Response:
        session_id = self.get_browser_session_id(request) or new_session_id()

        try:
            url = self.flow.begin(
                session_id, login_hint=request.query_params.get("login_hint")
            )
        except PickerAuthException as e:
            return exception_response(e)

        response = RedirectResponse(url, status_code=302)
        self.set_session_cookie(response, session_id)

        return response

    async def callback(
        self,
        request: Request,
        code: str | None = None,
        state: str | None = None,
        error: str | None = None,
    ) -> Response:
        session_id = self.get_browser_session_id(request)

        if error:
            logger.warning(f"Authorization denied by provider: {error}")

            if session_id is not None:
                self.flow.cancel(session_id)

            return error_redirect(self.config.post_login_redirect, error)

        if session_id is None:
            logger.error("OAuth callback without a session cookie")

            return error_redirect(
                self.config.post_login_redirect,
                "invalid_state",
                "No login in progress for this session",
            )

        try:
            await self.flow.complete(session_id, state, code)
        except PickerAuthException as e:
            return error_redirect(
                self.config.post_login_redirect, e.error, e.error_description
            )

        return RedirectResponse(self.config.post_login_redirect, status_code=302)

    async def logout(self, request: Request) -> Response:
        session_id = self.get_browser_session_id(request)

        if session_id is not None:
            self.flow.logout(session_id)

        response = JSONResponse({"message": "Logged out"})
        response.delete_cookie(self.config.cookie_name, path="/")

        return response

    async def create_session(self, request: Request) -> Response:
        try:
            access_token = await self._access_token(request)
            session = await self.picker.create(access_token)
        except PickerAuthException as e:
            return exception_response(e)

        return JSONResponse(session_payload(session), status_code=201)

    async def get_session(self, request: Request, session_id: str) -> Response:
        try:
            access_token = await self._access_token(request)
            session = await self.picker.get_status(session_id, access_token)
        except PickerAuthException as e:
            return exception_response(e)

        return JSONResponse(session_payload(session))

    async def delete_session(self, request: Request, session_id: str) -> Response:
        try:
            access_token = await self._access_token(request)
            await self.picker.delete(session_id, access_token)
        except PickerAuthException as e:
            return exception_response(e)

        return Response(status_code=204)

    async def list_media_items(
        self,
        request: Request,
        session_id: str,
        page_token: str | None = Query(None, alias="pageToken"),
        release: bool = True,
    ) -> Response:
        """Return one page of picked items.

        Once the last page of a non-empty selection has been served, the
        session is deleted on a best-effort basis unless `release=false`.
        """
        try:
            access_token = await self._access_token(request)
            page = await self.picker.list_media_items(
                session_id, access_token, page_token=page_token
            )
        except PickerAuthException as e:
            return exception_response(e)

        payload = page.model_dump(mode="json", by_alias=True, exclude_none=True)
        payload["released"] = False

        if release and not page.next_page_token and (page.media_items or page_token):
            payload["released"] = await self.picker.release(session_id, access_token)

        return JSONResponse(payload)
