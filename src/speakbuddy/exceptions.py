class SpeakBuddyError(Exception):
    """Base exception for the progress engine."""


class CorruptDocumentError(SpeakBuddyError):
    """Raised when a persisted document cannot be decoded into domain state."""
