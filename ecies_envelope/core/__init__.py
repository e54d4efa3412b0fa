"""
ECIES Core Types and Primitives

This module provides the foundational types, key extraction and
cryptographic primitives of the ECIES envelope implementation.

Submodules:
- types: Curve table, algorithm enumerations, fixed sizes
- errors: Error kinds raised by the core
- primitives: DER key container walking and raw key helpers
- crypto: ECDH, X9.63 KDF, AES-GCM, secret buffers

Author: SecureRoad PKI Project
Date: November 2025
"""

# Re-export all core functionality for convenience
from .types import (
    # Constants
    UNCOMPRESSED_POINT_PREFIX,
    GCM_TAG_LENGTH,
    ECIES_LOGGER_NAME,

    # Enums
    Curve,
    KdfHash,
    KdfScheme,
    AeadAlgorithm,
    IvVariant,
)

from .errors import (
    EciesError,
    UnrecognizedKeyLength,
    MalformedKeyContainer,
    InvalidPeerKey,
    InvalidPrivateKey,
    CurveMismatch,
    EnvelopeTooShort,
    AuthenticationFailed,
    UnsupportedAlgorithm,
)

from .primitives import (
    extract_public_key,
    extract_private_key,
    public_container_curve,
    private_container_curve,
    split_private_key,
    encode_public_point,
    decode_public_point,
)

from .crypto import (
    wipe_buffer,
    secret_buffer,
    load_private_scalar,
    ecdh_agree,
    derive_key_x963,
    aead_seal,
    aead_open,
)

__all__ = [
    # Constants
    "UNCOMPRESSED_POINT_PREFIX",
    "GCM_TAG_LENGTH",
    "ECIES_LOGGER_NAME",

    # Enums
    "Curve",
    "KdfHash",
    "KdfScheme",
    "AeadAlgorithm",
    "IvVariant",

    # Errors
    "EciesError",
    "UnrecognizedKeyLength",
    "MalformedKeyContainer",
    "InvalidPeerKey",
    "InvalidPrivateKey",
    "CurveMismatch",
    "EnvelopeTooShort",
    "AuthenticationFailed",
    "UnsupportedAlgorithm",

    # Key extraction
    "extract_public_key",
    "extract_private_key",
    "public_container_curve",
    "private_container_curve",
    "split_private_key",
    "encode_public_point",
    "decode_public_point",

    # Crypto
    "wipe_buffer",
    "secret_buffer",
    "load_private_scalar",
    "ecdh_agree",
    "derive_key_x963",
    "aead_seal",
    "aead_open",
]
