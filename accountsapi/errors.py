class InvalidArgument(ValueError):
    """Raised before any network access when a call's arguments are unusable."""


class AccountsAPIError(Exception):
    """Error response returned by the Accounts API.

    Parameters
    ----------
    message : str
        The `message` field of the error body, or the HTTP reason phrase.
    code : int
        HTTP status code of the response.
    """

    def __init__(self, message: str, code: int):
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        return f"{self.message} (HTTP {self.code})"
