class ProviderError(Exception):
    """The identity provider rejected a call.

    ``definitive`` is False when the provider never answered (transport
    failure), so the call may still have taken effect.
    """

    def __init__(self, message: str, status: int | None = None, definitive: bool = True):
        super().__init__(message)
        self.message = message
        self.status = status or 500
        self.definitive = definitive


class StorageError(Exception):
    """Object storage failed to store or remove a file."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ProfileWriteError(Exception):
    """A profile row could not be written."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
