"""HTTP plumbing: endpoint parsing, responses, service errors and a urllib transport."""

from __future__ import annotations

import json
import re
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from typing import Any, Mapping

HTTP_SCHEME = "http://"
HTTPS_SCHEME = "https://"
DEFAULT_REQUEST_TIMEOUT = 60.0
REQUEST_ID_HEADER = "x-log-requestid"

_IP_PATTERN = re.compile(r"\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}.*")


class SlsError(Exception):
    """Base class of every error this package raises for a service call."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message


class ClientError(SlsError):
    """The request could not be built, sent or read."""

    def __init__(self, message: str) -> None:
        super().__init__("ClientError", message)


class ServiceError(SlsError):
    """The service answered with an error document."""

    def __init__(
        self, code: str, message: str, request_id: str = "", http_code: int = 0
    ) -> None:
        super().__init__(code, message)
        self.request_id = request_id
        self.http_code = http_code


class BadResponseError(SlsError):
    """The service answered with something that could not be understood."""

    def __init__(
        self, body: str, headers: Mapping[str, str] | None, status_code: int
    ) -> None:
        super().__init__("BadResponse", body)
        self.body = body
        self.headers = dict(headers or {})
        self.status_code = status_code


@dataclass
class Response:
    """A received HTTP response; header names are stored in lower case."""

    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    def __post_init__(self) -> None:
        self.headers = {str(k).lower(): v for k, v in self.headers.items()}

    def json(self) -> Any:
        """Decode the body as JSON; raise ValueError if it is not JSON."""
        return json.loads(self.body.decode("utf-8"))


class UrllibTransport:
    """Sends requests with urllib, optionally through a fixed proxy."""

    def __init__(
        self, timeout: float = DEFAULT_REQUEST_TIMEOUT, proxy: str | None = None
    ) -> None:
        self.timeout = timeout
        self.proxy = proxy

    def _opener(self) -> urllib.request.OpenerDirector:
        if self.proxy:
            handler = urllib.request.ProxyHandler(
                {"http": self.proxy, "https": self.proxy}
            )
            return urllib.request.build_opener(handler)
        return urllib.request.build_opener()

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
    ) -> Response:
        """Send one request; HTTP error statuses are returned, not raised."""
        request = urllib.request.Request(
            url, data=body, headers=dict(headers or {}), method=method
        )
        try:
            with self._opener().open(request, timeout=self.timeout) as reply:
                return Response(reply.status, dict(reply.headers.items()), reply.read())
        except urllib.error.HTTPError as exc:
            with exc:
                data = exc.read()
            return Response(exc.code, dict(exc.headers.items()), data)
        except (urllib.error.URLError, OSError, ValueError) as exc:
            raise ClientError(str(exc)) from exc


@dataclass(frozen=True)
class Endpoint:
    """A parsed service endpoint."""

    scheme: str
    host: str
    base_url: str
    proxy: str | None = None


def parse_endpoint(
    endpoint: str,
    project_name: str = "",
    using_http: bool = False,
    force_http: bool = False,
) -> Endpoint:
    """Split an endpoint into scheme and host and build the project's base URL.

    Plain HTTP is the default scheme. An endpoint given as an IP address is
    also returned as the proxy to send requests through.
    """
    scheme = HTTP_SCHEME
    host = endpoint
    if endpoint.startswith(HTTP_SCHEME):
        host = endpoint[len(HTTP_SCHEME):]
    elif endpoint.startswith(HTTPS_SCHEME):
        scheme = HTTPS_SCHEME
        host = endpoint[len(HTTPS_SCHEME):]
    if force_http or using_http:
        scheme = HTTP_SCHEME
    proxy = f"{scheme}{host}" if _IP_PATTERN.search(host) else None
    if project_name:
        base_url = f"{scheme}{project_name}.{host}"
    else:
        base_url = f"{scheme}{host}"
    return Endpoint(scheme=scheme, host=host, base_url=base_url, proxy=proxy)


def error_from_response(response: Response) -> SlsError:
    """Build the error an unsuccessful response stands for."""
    try:
        data = response.json()
    except (ValueError, UnicodeDecodeError):
        data = None
    if not isinstance(data, dict):
        return BadResponseError(
            response.body.decode("utf-8", errors="replace"),
            response.headers,
            response.status_code,
        )
    folded = {str(k).lower(): v for k, v in data.items()}
    request_id = folded.get("requestid") or response.headers.get(REQUEST_ID_HEADER, "")
    return ServiceError(
        code=str(folded.get("errorcode", "")),
        message=str(folded.get("errormessage", "")),
        request_id=str(request_id),
        http_code=response.status_code,
    )