class CredentialStoreError(Exception):
    """Base class for credential store failures."""


class NotFound(CredentialStoreError):
    """No credential record has been written yet.

    Callers recover by running the initial authorization.
    """

    def __init__(self, message: str = "No Spotify token found in database") -> None:
        super().__init__(message)


class StorageError(CredentialStoreError):
    """The backing database could not be read or rejected a write.

    The underlying exception is kept as ``__cause__``.
    """


class ValidationError(CredentialStoreError):
    """A required field was empty or missing. Nothing was written."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
