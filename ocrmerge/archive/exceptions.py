class ArchiveError(Exception):
    """Base exception for archive handling."""


class CorruptArchiveError(ArchiveError):
    """Raised when an archive cannot be opened or fully read."""
