"""
ECIES Error Types

All errors raised by the ECIES core derive from EciesError, which is a
ValueError: callers that already catch ValueError around crypto input keep
working unchanged.
"""


class EciesError(ValueError):
    """Base class for every ECIES failure."""


class UnrecognizedKeyLength(EciesError):
    """Key container length does not match any supported curve/key type."""

    def __init__(self, length: int, expected):
        self.length = length
        self.expected = tuple(expected)
        super().__init__(
            f"Unknown DER key length: {length} (expected one of {list(self.expected)})"
        )


class MalformedKeyContainer(EciesError):
    """Key container has the right size but not the expected DER structure."""


class InvalidPeerKey(EciesError):
    """Public point is not a valid, non-identity point of the curve."""


class InvalidPrivateKey(EciesError):
    """Private scalar is out of range or inconsistent with its public point."""


class CurveMismatch(EciesError):
    """Raw key material does not belong to the requested curve."""


class EnvelopeTooShort(EciesError):
    """Envelope is shorter than ephemeral key plus authentication tag."""

    def __init__(self, length: int, minimum: int):
        self.length = length
        self.minimum = minimum
        super().__init__(f"Envelope too short: {length} bytes (minimum {minimum})")


class AuthenticationFailed(EciesError):
    """AES-GCM tag verification failed; no plaintext is released."""


class UnsupportedAlgorithm(EciesError):
    """Algorithm configuration differs from the fixed ECIES suite."""
