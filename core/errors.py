"""
Error taxonomy for the envelope layer.

Every public operation either returns a fully-formed result or raises one of
these. None of them are retried internally.
"""


class NostrEnvelopeError(Exception):
    """Base class for all envelope-layer errors."""


class InvalidInputError(NostrEnvelopeError, ValueError):
    """Malformed pubkey/privkey, tags, or a missing required field."""


class UnknownPrivacyLevelError(InvalidInputError):
    """Privacy level string is not one of the supported levels."""

    def __init__(self, privacy_level: object):
        self.privacy_level = privacy_level
        super().__init__(f"Unknown privacy level: {privacy_level!r}")


class CryptoOperationError(NostrEnvelopeError):
    """Cipher or key-derivation failure. Never carries key material."""


class ProtocolViolationError(NostrEnvelopeError):
    """A structurally required part of an event is absent or wrong."""
