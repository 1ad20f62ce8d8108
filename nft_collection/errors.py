"""
Errors raised by the registry and the local node.

All failures are precondition violations, so none of them is retryable
without changing the inputs (token id, caller or account).
"""


class RegistryError(Exception):
    """
    Base class of all registry errors
    """


class NotFound(RegistryError):
    """
    Raised when addressing a token id (or registry address) that does not exist
    """

    def __init__(self, key, message: str = None):
        self.key = key
        super().__init__(message or f"invalid token ID: {key}")


class Unauthorized(RegistryError):
    """
    Raised when a restricted operation is called by someone other than the owner
    """

    def __init__(self, caller: bytes = None, message: str = "caller is not the owner"):
        self.caller = caller
        super().__init__(message)


class InvalidAccount(RegistryError, ValueError):
    """
    Raised for the null account or a malformed account identity
    """

    def __init__(self, account, message: str = None):
        self.account = account
        super().__init__(message or f"invalid account: {account!r}")
