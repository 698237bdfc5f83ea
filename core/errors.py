from __future__ import annotations


class ValidationError(ValueError):
    """User input rejected; state is left unchanged."""


class DecodeError(ValueError):
    def __init__(self, key: str, detail: str):
        super().__init__(f"Stored document '{key}' is not valid JSON: {detail}")
        self.key = key
        self.detail = detail


class SnapshotError(ValueError):
    pass


class RemoteSyncError(RuntimeError):
    pass


class RemoteNotConfigured(RemoteSyncError):
    pass
