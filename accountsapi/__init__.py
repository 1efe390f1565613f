from .cache import ExpiringCache
from .client import AccountsAPI
from .errors import AccountsAPIError, InvalidArgument
from .resolver import MAX_BATCH_SIZE, BatchResolver

__all__ = [
    "AccountsAPI",
    "AccountsAPIError",
    "BatchResolver",
    "ExpiringCache",
    "InvalidArgument",
    "MAX_BATCH_SIZE",
]
