import logging

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import RedirectResponse

from .client import AccountsAPI
from .errors import AccountsAPIError, InvalidArgument
from .schemas import ALL_SCOPES, User, UsersResponse, VerifyUserResponse
from .settings import settings

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Accounts API Example", version="1.0.0")
client = AccountsAPI(settings.app_id, settings.app_secret)


@app.get("/health")
async def health():
    """Liveness probe for the service.

    Returns
    -------
    dict
        A fixed payload `{"status": "ok"}` used by orchestrators and uptime checks.
    """

    return {"status": "ok"}


@app.get("/login")
async def login(prompt: bool = Query(False, description="Always show the authorization screen")):
    """Redirect the browser to the Accounts authorization page.

    Notes
    -----
    - Requests every scope and sends the user back to `settings.redirect_uri`,
      which must be registered for the application.
    """

    try:
        url = await client.generate_auth_url(settings.redirect_uri, scope=ALL_SCOPES, prompt=prompt)
    except InvalidArgument as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except AccountsAPIError as exc:
        raise HTTPException(status_code=exc.code, detail=exc.message)
    logger.info("Redirecting to %s", url)
    return RedirectResponse(url)


@app.get("/callback", response_model=VerifyUserResponse)
async def callback(code: str = Query(..., description="Authorization code issued by Accounts")):
    """Exchange the authorization `code` for the user and granted scope."""

    try:
        return await client.verify_user(code)
    except AccountsAPIError as exc:
        raise HTTPException(status_code=exc.code, detail=exc.message)


@app.get("/v1/users/{user_id}", response_model=User)
async def get_user(user_id: str, force: bool = Query(False, description="Bypass the user cache")):
    try:
        return await client.get_user(user_id, force=force)
    except AccountsAPIError as exc:
        raise HTTPException(status_code=exc.code, detail=exc.message)


@app.get("/v1/users", response_model=UsersResponse)
async def get_users(ids: str = Query(..., description="Comma-separated user IDs (max 100)"),
                    force: bool = Query(False, description="Bypass the user cache"),
                    ordered: bool = Query(False, description="Return users in the order of `ids`")):
    """Look up several users at once.

    Notes
    -----
    - Cached users come first, then the ones fetched from Accounts, unless
      `ordered` is set, in which case the result follows the order of `ids`.
    """

    keys = [k for k in (s.strip() for s in ids.split(",")) if k]
    try:
        users = await client.get_users(keys, force=force)
    except InvalidArgument as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except AccountsAPIError as exc:
        raise HTTPException(status_code=exc.code, detail=exc.message)
    if ordered:
        position = {k: i for i, k in reversed(list(enumerate(keys)))}
        users = sorted(users, key=lambda u: position.get(u.get("id"), len(keys)))
    return {"count": len(users), "data": users}
