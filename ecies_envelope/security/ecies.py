"""
ECIES (Elliptic Curve Integrated Encryption Scheme) Implementation.

Implements ECIES encryption/decryption with the fixed suite
ECDH (cofactor) + X9.63-KDF-SHA384 + AES-128-GCM (variable IV), on the
NIST curves P-256, P-384 and P-521.

Security Properties:
- Forward Secrecy for the sender: each message uses a new ephemeral key pair
- Authenticated Encryption: AES-GCM provides integrity + confidentiality
- Fail-closed decryption: no plaintext is released when the tag is wrong

Output Format (no length prefixes, sizes follow from the curve):
    ephemeral_public_key (65 | 97 | 133 bytes) || ciphertext || auth_tag (16 bytes)

Standards Reference:
- SEC 1 v2.0 Section 5.1 (Elliptic Curve Integrated Encryption Scheme)
- ANSI X9.63 (KDF)
- NIST SP 800-38D (GCM)

Author: SecureRoad PKI Project
Date: November 2025
"""

from typing import NamedTuple, Optional, Tuple, Union

from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.ec import (
    EllipticCurvePrivateKey,
    EllipticCurvePublicKey,
)

from ..config import ECIES_ALGORITHM, ECIES_CONSTANTS, AlgorithmConfig, get_log_dir, get_log_level
from ..core.crypto import (
    aead_open,
    aead_seal,
    derive_key_x963,
    ecdh_agree,
    load_private_scalar,
    secret_buffer,
)
from ..core.errors import (
    CurveMismatch,
    EciesError,
    EnvelopeTooShort,
    InvalidPeerKey,
    InvalidPrivateKey,
)
from ..core.primitives import (
    encode_public_point,
    extract_private_key,
    extract_public_key,
    split_private_key,
)
from ..core.types import GCM_TAG_LENGTH, Curve
from ..utils.logger import EciesLogger


# ============================================================================
# ENVELOPE LAYOUT
# ============================================================================


class EciesEnvelope(NamedTuple):
    """The three parts of an ECIES ciphertext, in wire order."""

    ephemeral_public_key: bytes
    ciphertext: bytes
    tag: bytes

    def to_bytes(self) -> bytes:
        return assemble_envelope(self.ephemeral_public_key, self.ciphertext, self.tag)


def assemble_envelope(ephemeral_public_key: bytes, ciphertext: bytes, tag: bytes) -> bytes:
    """Concatenate ephemeral_public_key || ciphertext || tag."""
    return bytes(ephemeral_public_key) + bytes(ciphertext) + bytes(tag)


def parse_envelope(envelope: bytes, curve: Curve) -> EciesEnvelope:
    """
    Split an envelope into its three parts.

    The first point_byte_length bytes are the ephemeral key, the last 16
    the tag, everything in between the ciphertext (possibly empty).

    Raises:
        EnvelopeTooShort: If len(envelope) < point_byte_length + 16
    """
    minimum = curve.point_byte_length + GCM_TAG_LENGTH
    if len(envelope) < minimum:
        raise EnvelopeTooShort(len(envelope), minimum)

    envelope = bytes(envelope)
    return EciesEnvelope(
        ephemeral_public_key=envelope[:curve.point_byte_length],
        ciphertext=envelope[curve.point_byte_length:-GCM_TAG_LENGTH],
        tag=envelope[-GCM_TAG_LENGTH:],
    )


# ============================================================================
# ENGINE
# ============================================================================


class EciesEngine:
    """
    Stateless ECIES encrypt/decrypt engine.

    The engine keeps only its (immutable) algorithm configuration and a
    logger; every call works on its own buffers, so one instance can be
    shared between threads.
    """

    def __init__(self, config: AlgorithmConfig = ECIES_ALGORITHM, logger=None):
        config.validate()
        self.config = config
        self.logger = logger or EciesLogger.get_logger(
            name=ECIES_CONSTANTS.LOGGER_NAME,
            log_dir=get_log_dir(),
            level=get_log_level(),
        )

    def encrypt(
        self, plaintext: bytes, recipient_public_key: bytes, curve: Optional[Curve] = None
    ) -> bytes:
        """
        Encrypt message for the holder of recipient_public_key.

        Encryption Flow:
        1. Generate ephemeral key pair on the recipient's curve
        2. Perform ECDH key agreement with recipient's public key
        3. Derive 32 bytes with X9.63-KDF-SHA384 (SharedInfo: empty, static,
           or the ephemeral public key, depending on the config)
        4. Encrypt plaintext with AES-128-GCM (key = first 16, nonce = last 16)
        5. Assemble ephemeral_public_key || ciphertext || tag

        Args:
            plaintext: Data to encrypt (may be empty)
            recipient_public_key: Raw uncompressed point 0x04 || X || Y
            curve: Recipient's curve (inferred from the point size if omitted)

        Returns:
            bytes: Envelope of point_byte_length + len(plaintext) + 16 bytes

        Raises:
            CurveMismatch: If the point size does not fit `curve`
            InvalidPeerKey: If the recipient point is not on the curve
        """
        try:
            curve = self._public_key_curve(recipient_public_key, curve)

            # 1. Ephemeral key pair (scalar stays inside the backend, never exported)
            ephemeral_private_key = ec.generate_private_key(curve.ec_curve)
            ephemeral_public_bytes = encode_public_point(ephemeral_private_key.public_key())

            # 2. ECDH; the ephemeral private key is released right after
            try:
                shared_secret = ecdh_agree(ephemeral_private_key, recipient_public_key, curve)
            finally:
                del ephemeral_private_key

            # 3-4. KDF + AES-GCM, all intermediate secrets wiped on exit
            ciphertext, tag = self._seal(shared_secret, ephemeral_public_bytes, plaintext)

        except EciesError as e:
            self.logger.warning(f"ECIES encrypt ({curve}) failed: {type(e).__name__}")
            raise

        envelope = assemble_envelope(ephemeral_public_bytes, ciphertext, tag)
        self.logger.debug(
            f"ECIES encrypt ({curve}): plaintext {len(plaintext)} bytes -> "
            f"envelope {len(envelope)} bytes"
        )
        return envelope

    def decrypt(
        self, envelope: bytes, recipient_private_key: bytes, curve: Optional[Curve] = None
    ) -> bytes:
        """
        Decrypt an envelope with the recipient's raw private key.

        Decryption Flow:
        1. Split ephemeral public key, ciphertext and tag
        2. Perform ECDH key agreement with ephemeral public key
        3. Derive 32 bytes with X9.63-KDF-SHA384
        4. Verify tag and decrypt with AES-128-GCM

        Args:
            envelope: Output of encrypt()
            recipient_private_key: Raw point || scalar
            curve: Recipient's curve (inferred from the key size if omitted)

        Returns:
            bytes: Plaintext

        Raises:
            EnvelopeTooShort: If the envelope cannot hold key and tag
            InvalidPeerKey: If the ephemeral key is not on the curve
            InvalidPrivateKey: If the raw private key is inconsistent
            AuthenticationFailed: If the tag does not verify
        """
        try:
            curve = self._private_key_curve(recipient_private_key, curve)
            ephemeral_public_key, ciphertext, tag = parse_envelope(envelope, curve)
            public_point, scalar = split_private_key(recipient_private_key, curve)

            with secret_buffer(scalar) as scalar_buffer:
                private_key = load_private_scalar(scalar_buffer, curve)

            if encode_public_point(private_key.public_key()) != public_point:
                raise InvalidPrivateKey(
                    f"{curve} private scalar does not match its public point"
                )

            shared_secret = ecdh_agree(private_key, ephemeral_public_key, curve)
            del private_key

            plaintext = self._open(shared_secret, ephemeral_public_key, ciphertext, tag)

        except EciesError as e:
            self.logger.warning(f"ECIES decrypt ({curve}) failed: {type(e).__name__}")
            raise

        self.logger.debug(
            f"ECIES decrypt ({curve}): envelope {len(envelope)} bytes -> "
            f"plaintext {len(plaintext)} bytes"
        )
        return plaintext

    # ------------------------------------------------------------------------

    def _shared_info(self, ephemeral_public_key: bytes) -> bytes:
        if self.config.shared_info_from_ephemeral_key:
            return ephemeral_public_key
        return self.config.shared_info

    def _derive(self, shared_secret: bytearray, ephemeral_public_key: bytes) -> bytearray:
        with secret_buffer(shared_secret) as z:
            return derive_key_x963(
                z,
                shared_info=self._shared_info(ephemeral_public_key),
                length=self.config.derived_key_length,
                kdf_hash=self.config.kdf_hash,
            )

    def _seal(
        self, shared_secret: bytearray, ephemeral_public_key: bytes, plaintext: bytes
    ) -> Tuple[bytes, bytes]:
        split = self.config.aes_key_length
        with secret_buffer(self._derive(shared_secret, ephemeral_public_key)) as stream:
            with secret_buffer(stream[:split]) as key, secret_buffer(stream[split:]) as nonce:
                return aead_seal(key, nonce, plaintext)

    def _open(
        self, shared_secret: bytearray, ephemeral_public_key: bytes, ciphertext: bytes, tag: bytes
    ) -> bytes:
        split = self.config.aes_key_length
        with secret_buffer(self._derive(shared_secret, ephemeral_public_key)) as stream:
            with secret_buffer(stream[:split]) as key, secret_buffer(stream[split:]) as nonce:
                return aead_open(key, nonce, ciphertext, tag)

    @staticmethod
    def _public_key_curve(public_key: bytes, curve: Optional[Curve]) -> Curve:
        if curve is None:
            try:
                return Curve.from_point_length(len(public_key))
            except ValueError as e:
                raise InvalidPeerKey(str(e)) from e
        if len(public_key) != curve.point_byte_length:
            raise CurveMismatch(
                f"{curve} public key must be {curve.point_byte_length} bytes, "
                f"got {len(public_key)}"
            )
        return curve

    @staticmethod
    def _private_key_curve(private_key: bytes, curve: Optional[Curve]) -> Curve:
        if curve is None:
            try:
                return Curve.from_private_length(len(private_key))
            except ValueError as e:
                raise InvalidPrivateKey(str(e)) from e
        if len(private_key) != curve.private_key_length:
            raise CurveMismatch(
                f"{curve} raw private key must be {curve.private_key_length} bytes, "
                f"got {len(private_key)}"
            )
        return curve


# ============================================================================
# FUNCTIONAL INTERFACE
# ============================================================================


def raw_public_key(public_key: Union[bytes, EllipticCurvePublicKey]) -> bytes:
    """Raw point from a DER SubjectPublicKeyInfo or a public key object."""
    if isinstance(public_key, EllipticCurvePublicKey):
        return encode_public_point(public_key)
    return extract_public_key(public_key)


def raw_private_key(private_key: Union[bytes, EllipticCurvePrivateKey]) -> bytes:
    """Raw point || scalar from a DER SEC1 key or a private key object."""
    if isinstance(private_key, EllipticCurvePrivateKey):
        point = encode_public_point(private_key.public_key())
        curve = Curve.from_point_length(len(point))
        scalar = private_key.private_numbers().private_value.to_bytes(
            curve.scalar_byte_length, "big"
        )
        return point + scalar
    return extract_private_key(private_key)


def ecies_encrypt(
    plaintext: bytes,
    recipient_public_key: Union[bytes, EllipticCurvePublicKey],
    config: AlgorithmConfig = ECIES_ALGORITHM,
) -> bytes:
    """
    Encrypt message using ECIES (X9.63-KDF-SHA384, AES-128-GCM).

    Args:
        plaintext: Data to encrypt
        recipient_public_key: DER SubjectPublicKeyInfo bytes or a public key object

    Returns:
        Encrypted data: ephemeral_public_key || ciphertext || tag (16 bytes)

    Example:
        >>> from cryptography.hazmat.primitives.asymmetric import ec
        >>> recipient_key = ec.generate_private_key(ec.SECP256R1())
        >>> ciphertext = ecies_encrypt(b"secret message", recipient_key.public_key())
        >>> len(ciphertext) == 65 + len(b"secret message") + 16
        True
    """
    return EciesEngine(config).encrypt(plaintext, raw_public_key(recipient_public_key))


def ecies_decrypt(
    encrypted_data: bytes,
    recipient_private_key: Union[bytes, EllipticCurvePrivateKey],
    config: AlgorithmConfig = ECIES_ALGORITHM,
) -> bytes:
    """
    Decrypt message using ECIES (X9.63-KDF-SHA384, AES-128-GCM).

    Args:
        encrypted_data: Encrypted data from ecies_encrypt
        recipient_private_key: DER SEC1 private key bytes or a private key object

    Returns:
        Decrypted plaintext

    Raises:
        AuthenticationFailed: Wrong key or corrupted data
        EciesError: Any other envelope or key problem

    Example:
        >>> from cryptography.hazmat.primitives.asymmetric import ec
        >>> recipient_key = ec.generate_private_key(ec.SECP256R1())
        >>> ciphertext = ecies_encrypt(b"secret", recipient_key.public_key())
        >>> ecies_decrypt(ciphertext, recipient_key) == b"secret"
        True
    """
    return EciesEngine(config).decrypt(encrypted_data, raw_private_key(recipient_private_key))
