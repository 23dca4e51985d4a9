"""Profile provider client — fetches one profile record over REST."""

from __future__ import annotations

from typing import Any

import httpx


class ProfileFetchError(Exception):
    """The profile could not be retrieved (network, HTTP status or payload)."""


class ProfileClient:
    """Async client for a LinkedIn-style profile endpoint.

    A caller-supplied ``httpx.AsyncClient`` is used as-is and left open on
    ``close()``; otherwise one is created lazily and owned by this client.
    """

    def __init__(
        self,
        base_url: str = "https://api.linkedin.com",
        profile_path: str = "/v2/userinfo",
        timeout_s: float = 15.0,
        http: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.profile_path = profile_path if profile_path.startswith("/") else f"/{profile_path}"
        self.timeout_s = timeout_s
        self._http = http
        self._owns_http = http is None

    @property
    def url(self) -> str:
        return f"{self.base_url}{self.profile_path}"

    async def _get_http(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(timeout=self.timeout_s)
            self._owns_http = True
        return self._http

    async def close(self) -> None:
        if self._owns_http and self._http and not self._http.is_closed:
            await self._http.aclose()

    async def fetch_profile(self, token: str) -> Any:
        """Fetch and decode the profile for *token*.

        An empty token is sent without an Authorization header.

        Raises:
            ProfileFetchError: on transport errors, an invalid URL, non-2xx
                responses or a body that is not JSON.
        """
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        http = await self._get_http()
        try:
            resp = await http.get(self.url, headers=headers)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ProfileFetchError(
                f"Profile provider returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.InvalidURL as exc:
            raise ProfileFetchError(f"Invalid profile URL {self.url!r}: {exc}") from exc
        except httpx.HTTPError as exc:
            raise ProfileFetchError(f"Network error fetching profile: {exc}") from exc

        try:
            return resp.json()
        except ValueError as exc:
            raise ProfileFetchError(f"Malformed profile payload: {exc}") from exc
