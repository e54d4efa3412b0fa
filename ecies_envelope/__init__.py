"""
ECIES Envelope

ECIES hybrid encryption for short messages on NIST P-256, P-384 and P-521,
using the fixed suite ECDH (cofactor) + X9.63-KDF-SHA384 + AES-128-GCM with
the nonce taken from the KDF output.

Module Structure:
- core/: Curve table, errors, DER key extraction, ECDH/KDF/AEAD primitives
- security/: Envelope layout and the ECIES engine
- config/: Algorithm configuration and library constants
- utils/: Logging and PEM/Base64 transport helpers
- cli: Command line front end

Author: SecureRoad PKI Project
Date: November 2025
"""

__version__ = "1.0.0"

# Core types and primitives
from .core import (
    # Enums
    Curve,

    # Errors
    EciesError,
    UnrecognizedKeyLength,
    MalformedKeyContainer,
    InvalidPeerKey,
    InvalidPrivateKey,
    CurveMismatch,
    EnvelopeTooShort,
    AuthenticationFailed,
    UnsupportedAlgorithm,

    # Key extraction
    extract_public_key,
    extract_private_key,

    # Cryptographic operations
    ecdh_agree,
    derive_key_x963,
    aead_seal,
    aead_open,
)

# Configuration
from .config import ECIES_ALGORITHM, AlgorithmConfig

# ECIES engine
from .security import (
    EciesEngine,
    EciesEnvelope,
    assemble_envelope,
    parse_envelope,
    ecies_encrypt,
    ecies_decrypt,
)

__all__ = [
    "__version__",
    "Curve",
    "EciesError",
    "UnrecognizedKeyLength",
    "MalformedKeyContainer",
    "InvalidPeerKey",
    "InvalidPrivateKey",
    "CurveMismatch",
    "EnvelopeTooShort",
    "AuthenticationFailed",
    "UnsupportedAlgorithm",
    "extract_public_key",
    "extract_private_key",
    "ecdh_agree",
    "derive_key_x963",
    "aead_seal",
    "aead_open",
    "ECIES_ALGORITHM",
    "AlgorithmConfig",
    "EciesEngine",
    "EciesEnvelope",
    "assemble_envelope",
    "parse_envelope",
    "ecies_encrypt",
    "ecies_decrypt",
]
