import base64
import logging
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import quote

import httpx

from .cache import ExpiringCache
from .errors import AccountsAPIError, InvalidArgument
from .resolver import BatchResolver
from .settings import settings

logger = logging.getLogger(__name__)


def _encode_component(value: str) -> str:
    # same character set as JavaScript's encodeURIComponent
    return quote(value, safe="!~*'()")


class AccountsAPI:
    """Async client for the Accounts API.

    Parameters
    ----------
    app_id : str
        Application ID.
    secret : str
        Application secret. Sent with `app_id` as HTTP Basic credentials.
    base_url : Optional[str]
        Base URL of the service. Defaults to `settings.base_url`.
    cache_timeout : Optional[float]
        Seconds a fetched user stays cached. Defaults to `settings.cache_timeout`.
    transport : Optional[httpx.AsyncBaseTransport]
        Transport handed to every `httpx.AsyncClient`, mainly for tests.

    Notes
    -----
    - Uses `httpx` with `settings.request_timeout` per request.
    - User lookups go through a per-instance `ExpiringCache`; app info is never cached.
    - Error responses are raised as `AccountsAPIError`; transport errors are not wrapped.
    """

    def __init__(self, app_id: str, secret: str, base_url: Optional[str] = None,
                 cache_timeout: Optional[float] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.app_id = app_id
        self.base_url = (base_url or settings.base_url).rstrip("/")
        token = base64.b64encode(f"{app_id}:{secret}".encode()).decode()
        self._headers = {"Authorization": f"Basic {token}"}
        self._transport = transport
        self.cache = ExpiringCache(cache_timeout or settings.cache_timeout)
        self.resolver = BatchResolver(self.cache, self)

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request to `{base_url}/api{path}` and return the parsed JSON payload.

        Raises
        ------
        AccountsAPIError
            If the response has a 4xx/5xx status code.
        httpx.RequestError
            For transport-level errors (DNS, timeouts, etc.).
        """

        url = f"{self.base_url}/api{path}"
        logger.debug("%s %s", method, url)
        async with httpx.AsyncClient(timeout=settings.request_timeout, headers=self._headers,
                                     transport=self._transport) as client:
            r = await client.request(method, url, **kwargs)
            try:
                r.raise_for_status()
            except httpx.HTTPStatusError as exc:
                raise self._translate_error(exc.response) from exc
            return r.json()

    @staticmethod
    def _translate_error(response: httpx.Response) -> AccountsAPIError:
        message = response.reason_phrase
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            message = body["message"]
        logger.warning("Accounts API error %s: %s", response.status_code, message)
        return AccountsAPIError(message, response.status_code)

    async def fetch_one(self, key: str) -> Dict[str, Any]:
        return await self._request("GET", f"/users/{key}")

    async def fetch_many(self, keys: Sequence[str]) -> List[Dict[str, Any]]:
        return await self._request("GET", "/users/multiple", params={"ids": ",".join(keys)})

    async def get_app_info(self) -> Dict[str, Any]:
        """Fetch the registered application's info (`id`, `name`, `redirect_uris`, ...)."""

        return await self._request("GET", "/me")

    async def get_user(self, user_id: str, force: bool = False) -> Dict[str, Any]:
        """Fetch a user, served from the cache when available.

        Parameters
        ----------
        user_id : str
            User ID.
        force : bool
            Fetch from the API even if the user is cached.
        """

        return await self.resolver.resolve(user_id, force=force)

    async def get_users(self, ids: Sequence[str], force: bool = False) -> List[Dict[str, Any]]:
        """Fetch up to 100 users with a single request for the ones not cached.

        Parameters
        ----------
        ids : Sequence[str]
            User IDs. Duplicates are not removed.
        force : bool
            Fetch every user from the API even if cached.

        Returns
        -------
        List[Dict[str, Any]]
            Cached users in the order of `ids`, then fetched users in the order
            the API returned them. Sort by `id` if input order matters.

        Raises
        ------
        InvalidArgument
            If more than 100 IDs are given.
        """

        return await self.resolver.resolve_many(ids, force=force)

    async def verify_user(self, code: str) -> Dict[str, Any]:
        """Exchange an authorization code for the user and the granted scope.

        The returned user is cached like one fetched by `get_user`.
        """

        data = await self._request("POST", "/users/verify", json={"code": code})
        user = data["user"]
        self.cache.set(user["id"], user)
        return data

    async def generate_auth_url(self, redirect_uri: Optional[str], scope: Optional[Sequence[str]] = None,
                                prompt: bool = False) -> str:
        """Build the URL a user visits to authorize this application.

        Parameters
        ----------
        redirect_uri : str
            Where the user is sent back with a `code`. Must be one of the
            application's registered redirect URIs.
        scope : Optional[Sequence[str]]
            Requested scopes. Defaults to `["basic"]`.
        prompt : bool
            Show the authorization screen even if the user already authorized
            the application. When false, `prompt=none` is appended.

        Raises
        ------
        InvalidArgument
            If `redirect_uri` is missing or not registered for the application.
        """

        if not scope:
            scope = ["basic"]
        if not redirect_uri:
            raise InvalidArgument("Redirect URI is required")
        app = await self.get_app_info()
        if redirect_uri not in app.get("redirect_uris", []):
            raise InvalidArgument("Redirect URI is not allowed")
        url = (f"{self.base_url}/auth/authorize?id={self.app_id}"
               f"&scope={_encode_component(','.join(scope))}"
               f"&redirect_uri={_encode_component(redirect_uri)}")
        if not prompt:
            url += "&prompt=none"
        return url

    def clear_cache(self) -> None:
        self.cache.clear()
