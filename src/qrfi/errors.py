from __future__ import annotations

# Error types surfaced by the qrfi pipeline.


class QrfiError(Exception):
    """Base exception for known qrfi failures."""


class InvalidCredential(QrfiError, ValueError):
    """Raised when Wi-Fi credentials are missing or malformed."""


class EncodingFailure(QrfiError):
    """Raised when a payload cannot be encoded as a QR symbol."""


class IOFailure(QrfiError):
    """Raised when rendered output cannot be written."""
