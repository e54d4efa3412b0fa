"""
ECIES Cryptographic Operations

Provides the building blocks of the ECIES scheme:
- ECDH shared secret computation (cofactor variant, NIST curves have h = 1)
- ANSI X9.63 key derivation
- AES-GCM seal/open with detached 16-byte tag
- Scoped secret buffers wiped on exit

Standards Reference:
- NIST SP 800-56A Rev. 3 - ECDH (Section 5.7.1.2, cofactor ECC CDH)
- ANSI X9.63 / SEC 1 v2.0 Section 3.6.1 - Key Derivation Function
- NIST SP 800-38D - AES-GCM

Author: SecureRoad PKI Project
Date: November 2025
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional, Tuple, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.ec import EllipticCurvePrivateKey
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.x963kdf import X963KDF

from .errors import AuthenticationFailed, CurveMismatch, InvalidPrivateKey
from .primitives import decode_public_point
from .types import ECIES_LOGGER_NAME, GCM_TAG_LENGTH, Curve, KdfHash

logger = logging.getLogger(ECIES_LOGGER_NAME)

_KDF_HASHES = {
    KdfHash.SHA256: hashes.SHA256,
    KdfHash.SHA384: hashes.SHA384,
    KdfHash.SHA512: hashes.SHA512,
}


# ============================================================================
# SECRET BUFFERS
# ============================================================================


def wipe_buffer(buffer: bytearray):
    """Overwrite a mutable buffer with zeros in place."""
    for i in range(len(buffer)):
        buffer[i] = 0


@contextmanager
def secret_buffer(data: Union[bytes, bytearray]) -> Iterator[bytearray]:
    """
    Hold secret bytes in a bytearray that is zeroed when the block exits.

    The wipe runs on every exit path, including exceptions. Immutable
    copies handed out by the cryptography library cannot be wiped; they are
    dropped as soon as their content has been copied here.
    """
    buffer = data if isinstance(data, bytearray) else bytearray(data)
    try:
        yield buffer
    finally:
        wipe_buffer(buffer)


# ============================================================================
# ECDH KEY AGREEMENT (NIST SP 800-56A)
# ============================================================================


def load_private_scalar(scalar: bytes, curve: Curve) -> EllipticCurvePrivateKey:
    """
    Build a private key from a big-endian scalar.

    Raises:
        InvalidPrivateKey: If the scalar has the wrong size or is not in [1, n-1]
    """
    if len(scalar) != curve.scalar_byte_length:
        raise InvalidPrivateKey(
            f"{curve} scalar must be {curve.scalar_byte_length} bytes, got {len(scalar)}"
        )
    try:
        return ec.derive_private_key(int.from_bytes(scalar, "big"), curve.ec_curve)
    except ValueError as e:
        raise InvalidPrivateKey(f"Private scalar out of range for {curve}") from e


def ecdh_agree(
    private_key: Union[bytes, EllipticCurvePrivateKey],
    peer_public_point: bytes,
    curve: Curve,
) -> bytearray:
    """
    Compute the ECDH shared secret.

    The peer point is validated (uncompressed, on curve, not the identity)
    before the scalar multiplication.

    Args:
        private_key: Raw scalar bytes or a private key object on `curve`
        peer_public_point: Peer's uncompressed point 0x04 || X || Y
        curve: Curve both operands belong to

    Returns:
        bytearray: x-coordinate of the shared point, scalar_byte_length bytes

    Raises:
        InvalidPeerKey: If the peer point fails validation
        InvalidPrivateKey: If the raw scalar is out of range
        CurveMismatch: If the private key object lives on another curve
    """
    if isinstance(private_key, EllipticCurvePrivateKey):
        if private_key.curve.name != curve.ec_curve.name:
            raise CurveMismatch(
                f"Private key is on {private_key.curve.name}, expected {curve}"
            )
    else:
        private_key = load_private_scalar(private_key, curve)

    peer_public_key = decode_public_point(peer_public_point, curve)

    # exchange() already returns the x-coordinate left-padded to the field size
    shared = bytearray(private_key.exchange(ec.ECDH(), peer_public_key))
    if len(shared) != curve.scalar_byte_length:
        wipe_buffer(shared)
        raise ValueError(f"Unexpected ECDH output length {len(shared)} for {curve}")
    return shared


# ============================================================================
# X9.63 KEY DERIVATION (ANSI X9.63, SEC 1 Section 3.6.1)
# ============================================================================


def derive_key_x963(
    shared_secret: Union[bytes, bytearray],
    shared_info: Optional[bytes] = b"",
    length: int = 32,
    kdf_hash: KdfHash = KdfHash.SHA384,
) -> bytearray:
    """
    Stretch a shared secret with the ANSI X9.63 KDF.

    K = H(Z || 00000001 || SharedInfo) || H(Z || 00000002 || SharedInfo) || ...
    truncated to `length` bytes.

    Args:
        shared_secret: ECDH shared secret Z
        shared_info: Optional bytes-like context (empty = no context binding)
        length: Output length in bytes
        kdf_hash: Underlying hash function

    Returns:
        bytearray: Derived key stream

    Raises:
        ValueError: If the input is empty or the length is invalid
    """
    if not shared_secret:
        raise ValueError("Shared secret cannot be empty")

    if length < 1:
        raise ValueError(f"Invalid output length: {length}")

    kdf = X963KDF(
        algorithm=_KDF_HASHES[kdf_hash](),
        length=length,
        sharedinfo=bytes(shared_info) if shared_info else None,
    )
    return bytearray(kdf.derive(shared_secret))


# ============================================================================
# AES-GCM AUTHENTICATED ENCRYPTION (NIST SP 800-38D)
# ============================================================================


def aead_seal(
    key: Union[bytes, bytearray],
    nonce: Union[bytes, bytearray],
    plaintext: bytes,
    associated_data: Optional[bytes] = None,
) -> Tuple[bytes, bytes]:
    """
    Encrypt with AES-GCM.

    Args:
        key: AES key (16 bytes for AES-128)
        nonce: GCM nonce (the ECIES suite uses 16 bytes)
        plaintext: Data to encrypt (may be empty)
        associated_data: Optional authenticated-only data

    Returns:
        Tuple (ciphertext, tag) with len(ciphertext) == len(plaintext)
    """
    sealed = AESGCM(key).encrypt(nonce, plaintext, associated_data)
    return sealed[:-GCM_TAG_LENGTH], sealed[-GCM_TAG_LENGTH:]


def aead_open(
    key: Union[bytes, bytearray],
    nonce: Union[bytes, bytearray],
    ciphertext: bytes,
    tag: bytes,
    associated_data: Optional[bytes] = None,
) -> bytes:
    """
    Verify the tag and decrypt with AES-GCM.

    The backend checks the tag before releasing any plaintext.

    Raises:
        AuthenticationFailed: If the tag does not verify
    """
    if len(tag) != GCM_TAG_LENGTH:
        raise AuthenticationFailed(f"Authentication tag must be {GCM_TAG_LENGTH} bytes")

    try:
        return AESGCM(key).decrypt(nonce, bytes(ciphertext) + tag, associated_data)
    except InvalidTag as e:
        logger.warning("AES-GCM tag verification failed")
        raise AuthenticationFailed("ECIES authentication failed: tag mismatch") from e
