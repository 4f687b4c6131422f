"""Synchronous Hub client: authenticate, then upload a scan document."""

from __future__ import annotations

import httpx
import structlog

from hubscan.engines.binary_scanner.report import InventoryReport
from hubscan.engines.hub_upload.models import AuthSession, SessionCookie
from hubscan.exceptions import AuthenticationError, HubConnectionError, UploadError

log = structlog.get_logger("hubscan.engine")

AUTH_PATH = "j_spring_security_check"
UPLOAD_PATH = "api/v1/scans/upload"
CSRF_TOKEN_HEADER = "X-CSRF-TOKEN"

_AUTH_OK = frozenset({200, 204})
_UPLOAD_OK = frozenset({200, 201})


def _join(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path}"


def parse_set_cookie(header: str, domain: str) -> SessionCookie | None:
    """Reduce a ``Set-Cookie`` header to its ``name=value`` pair.

    Attributes (path, expiry, flags) are dropped; the cookie is scoped to
    *domain*.
    """
    pair = header.split(";", 1)[0].strip()
    if "=" not in pair:
        return None
    name, value = pair.split("=", 1)
    if not name.strip():
        return None
    return SessionCookie(name=name.strip(), value=value.strip(), domain=domain)


class UploadClient:
    """Two-phase Hub upload. No retries: any failure ends the operation.

    A fresh ``httpx.Client`` is opened for each request and closed as soon
    as the response status is read.
    """

    username_field = "j_username"
    password_field = "j_password"

    def __init__(
        self,
        base_url: str,
        *,
        transport: httpx.BaseTransport | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url
        self._transport = transport
        self._timeout = timeout

    # ── public ─────────────────────────────────────────────────────────────

    def authenticate(self, username: str, password: str) -> AuthSession:
        """POST credentials and capture the session cookies and CSRF token."""
        url = _join(self.base_url, AUTH_PATH)
        response = self._post(
            "authentication",
            url,
            data={self.username_field: username, self.password_field: password},
        )
        if response.status_code not in _AUTH_OK:
            raise AuthenticationError(
                "authentication", response.reason_phrase, response.status_code
            )

        domain = httpx.URL(self.base_url).host
        cookies = tuple(
            c
            for c in (
                parse_set_cookie(h, domain) for h in response.headers.get_list("set-cookie")
            )
            if c is not None
        )
        token = response.headers.get(CSRF_TOKEN_HEADER)
        if not token:
            raise AuthenticationError(
                "authentication",
                f"response carried no {CSRF_TOKEN_HEADER} header",
                response.status_code,
            )
        log.info("hub.authenticated", url=url, cookies=len(cookies))
        return AuthSession(cookies=cookies, csrf_token=token)

    def upload(self, session: AuthSession, payload: bytes) -> httpx.Response:
        """POST *payload* as the ``file`` part of a multipart form."""
        url = _join(self.base_url, UPLOAD_PATH)
        response = self._post(
            "upload",
            url,
            files={"file": ("scan.json", payload, "application/json")},
            headers={CSRF_TOKEN_HEADER: session.csrf_token},
            cookies=session.cookie_jar(),
        )
        if response.status_code not in _UPLOAD_OK:
            raise UploadError("upload", response.reason_phrase, response.status_code)
        log.info("hub.uploaded", url=url, status=response.status_code, size=len(payload))
        return response

    def upload_report(
        self, username: str, password: str, report: InventoryReport
    ) -> httpx.Response:
        """Authenticate, then upload *report*. Nothing is sent if login fails."""
        session = self.authenticate(username, password)
        return self.upload(session, report.to_bytes())

    # ── internal ───────────────────────────────────────────────────────────

    def _post(
        self,
        operation: str,
        url: str,
        *,
        cookies: httpx.Cookies | None = None,
        **kwargs,
    ) -> httpx.Response:
        try:
            with httpx.Client(
                transport=self._transport,
                timeout=self._timeout,
                cookies=cookies,
            ) as client:
                return client.post(url, **kwargs)
        except httpx.HTTPError as exc:
            raise HubConnectionError(operation, str(exc) or type(exc).__name__) from exc
