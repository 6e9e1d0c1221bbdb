"""Engine exceptions."""


class SyncError(Exception):
    """Base exception for the sync engine."""


class ConfigurationError(SyncError):
    """Raised when a job cannot be created or started (unknown target, job or operation)."""


class TransientAuthError(SyncError):
    """Raised when the remote system rejects the bearer credential (HTTP 401)."""


class RemoteWriteError(SyncError):
    """Raised when a remote write call fails as a whole."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class JobStateError(SyncError):
    """Raised when a job update would move its status backwards."""
