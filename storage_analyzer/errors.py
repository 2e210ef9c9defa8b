"""Error types raised by the storage analysis engine.

Only ``VolumeUnavailable`` and ``InvalidVolumeIdentifier`` ever reach a
caller. ``EntryUnreadable`` and ``TimestampUnparseable`` describe conditions
that the scanner and ranker absorb locally; they exist so the absorbing code
can name what it is skipping.
"""


class StorageAnalyzerError(Exception):
    """Base class for all engine errors."""


class VolumeUnavailable(StorageAnalyzerError):
    """Capacity query or root listing failed for a volume."""

    def __init__(self, volume_id: str, reason: str):
        self.volume_id = volume_id
        self.reason = reason
        super().__init__(f"Volume '{volume_id}' is unavailable: {reason}")


class InvalidVolumeIdentifier(StorageAnalyzerError):
    """Volume identifier is malformed or does not name an existing directory."""

    def __init__(self, volume_id: str, reason: str):
        self.volume_id = volume_id
        self.reason = reason
        super().__init__(f"Invalid volume '{volume_id}': {reason}")


class EntryUnreadable(StorageAnalyzerError):
    """A single file or directory could not be listed or stat'd."""


class TimestampUnparseable(StorageAnalyzerError):
    """A raw filesystem timestamp could not be converted to a datetime."""
