import httpx
from infra.exceptions import (
    ApiError,
    ServiceConnectionError,
    ServiceUnavailableError,
)
from typing import Optional, Type


def map_httpx_error_to_exception(exc: httpx.HTTPError, service: str, hint: Optional[str] = None) -> BaseException:
    """Map httpx transport errors to exceptions (switch-case)."""
    match exc:
        case httpx.ConnectError():
            return ServiceConnectionError(service, "connection failed", hint)
        case httpx.TimeoutException():
            return ServiceConnectionError(service, "timeout", hint)
        case httpx.RemoteProtocolError():
            return ServiceConnectionError(service, "protocol error", hint)
        case httpx.NetworkError():
            return ServiceConnectionError(service, "network error", hint)
        case httpx.HTTPStatusError():
            return map_httpx_status_to_exception(exc.response.status_code)(service, exc.response.status_code, exc.response.text)
        case _:
            return ServiceConnectionError(service, str(exc) or type(exc).__name__, hint)


def map_httpx_status_to_exception(status: int) -> Type[BaseException]:
    """Map HTTP status codes to exception factories (switch-case)."""
    match status:
        case 429 | 500 | 502 | 503 | 504:
            return _unavailable
        case _:
            return ApiError


def _unavailable(service: str, status: int, body: object = None) -> ServiceUnavailableError:
    return ServiceUnavailableError(service, f"HTTP {status} - {body!r}")


def raise_for_status(response: httpx.Response, service: str) -> None:
    """Raise ApiError / ServiceUnavailableError for non-2xx responses."""
    if response.is_success:
        return
    try:
        body = response.json()
    except ValueError:
        body = response.text
    raise map_httpx_status_to_exception(response.status_code)(service, response.status_code, body)
