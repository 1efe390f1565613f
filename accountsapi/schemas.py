from typing import List, Literal, Optional

from pydantic import BaseModel

Scope = Literal["basic", "email", "roles", "metadata", "security"]

ALL_SCOPES: List[str] = ["basic", "email", "roles", "metadata", "security"]


class AppInfo(BaseModel):
    """Registered application, as returned by `GET /api/me`.

    Notes
    -----
    - `redirect_uris` is the allow-list checked before building an authorization URL.
    - `created_at` is a Unix timestamp.
    """

    id: str
    name: str
    image: str
    redirect_uris: List[str]
    flags: List[str]
    created_at: int


class UserMetadata(BaseModel):
    avatar: Optional[str] = None


class User(BaseModel):
    """User record. Which fields are present depends on the granted scopes."""

    id: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    roles: Optional[List[str]] = None
    flags: Optional[List[str]] = None
    created_at: Optional[int] = None
    metadata: Optional[UserMetadata] = None


class UsersResponse(BaseModel):
    count: int
    data: List[User]


class VerifyUserResponse(BaseModel):
    user: User
    scope: str
