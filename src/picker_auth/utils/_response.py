from urllib.parse import urlencode

from fastapi.responses import JSONResponse, RedirectResponse

from ..exceptions import PickerAuthException


def error_response(
    error: str,
    error_description: str | None = None,
    status_code: int = 400,
) -> JSONResponse:
    body = {"error": error}

    if error_description:
        body["error_description"] = error_description

    return JSONResponse(
        status_code=status_code,
        content=body,
        headers={"Cache-Control": "no-store"},
    )


def exception_response(exc: PickerAuthException) -> JSONResponse:
    return error_response(
        exc.error, exc.error_description, status_code=exc.http_status
    )


def error_redirect(
    redirect_uri: str,
    error: str,
    error_description: str | None = None,
) -> RedirectResponse:
    query_params = {"error": error}

    if error_description:
        query_params["error_description"] = error_description

    separator = "&" if "?" in redirect_uri else "?"

    return RedirectResponse(
        f"{redirect_uri}{separator}{urlencode(query_params)}", status_code=302
    )
