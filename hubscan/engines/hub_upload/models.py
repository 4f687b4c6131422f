"""Data models for the Hub upload engine."""

from __future__ import annotations

from dataclasses import dataclass

import httpx


@dataclass(frozen=True)
class SessionCookie:
    name: str
    value: str
    domain: str


@dataclass(frozen=True)
class AuthSession:
    """Cookies and CSRF token from one successful login; used for one upload."""

    cookies: tuple[SessionCookie, ...]
    csrf_token: str

    def cookie_jar(self) -> httpx.Cookies:
        # No domain: each client only talks to base_url, and the cookiejar
        # treats dotless hosts (localhost, "hub") as "<host>.local".
        jar = httpx.Cookies()
        for c in self.cookies:
            jar.set(c.name, c.value)
        return jar
