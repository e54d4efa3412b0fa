"""
ECIES Core Types and Constants

Defines the curve table, algorithm enumerations and fixed sizes used by the
ECIES envelope implementation.

Standards Reference:
- SEC 1 v2.0 Section 2.3.3 (Elliptic-Curve-Point-to-Octet-String)
- RFC 5480 (SubjectPublicKeyInfo for EC keys)
- RFC 5915 (SEC1 ECPrivateKey structure)
- ANSI X9.63 (Key Derivation Function)

Author: SecureRoad PKI Project
Date: November 2025
"""

from enum import Enum

from cryptography.hazmat.primitives.asymmetric import ec


# ============================================================================
# ENCODING CONSTANTS (SEC 1 Section 2.3.3)
# ============================================================================

# Prefix of an uncompressed EC point: 0x04 || X || Y
UNCOMPRESSED_POINT_PREFIX = 0x04

# AES-GCM authentication tag, always appended after the ciphertext
GCM_TAG_LENGTH = 16

# Object identifier id-ecPublicKey (1.2.840.10045.2.1), DER content bytes
OID_EC_PUBLIC_KEY = bytes.fromhex("2a8648ce3d0201")


# ============================================================================
# CURVES
# ============================================================================


class Curve(Enum):
    """
    Supported NIST curves.

    Each member carries the fixed sizes of its raw material and of the
    canonical DER containers produced by openssl:

        value = (name, point_len, scalar_len, spki_len, sec1_len, oid)
    """

    P256 = ("P-256", 65, 32, 91, 121, bytes.fromhex("2a8648ce3d030107"))
    P384 = ("P-384", 97, 48, 120, 167, bytes.fromhex("2b81040022"))
    P521 = ("P-521", 133, 66, 158, 223, bytes.fromhex("2b81040023"))

    def __init__(self, display_name, point_len, scalar_len, spki_len, sec1_len, oid):
        self.display_name = display_name
        self.point_byte_length = point_len
        self.scalar_byte_length = scalar_len
        self.public_container_length = spki_len
        self.private_container_length = sec1_len
        self.oid = oid

    @property
    def private_key_length(self) -> int:
        """Length of a raw private key (point || scalar)."""
        return self.point_byte_length + self.scalar_byte_length

    @property
    def ec_curve(self) -> ec.EllipticCurve:
        """Matching curve instance from the cryptography library."""
        return _EC_CURVES[self]()

    @classmethod
    def from_point_length(cls, length: int) -> "Curve":
        for curve in cls:
            if curve.point_byte_length == length:
                return curve
        raise ValueError(f"No supported curve has {length}-byte points")

    @classmethod
    def from_private_length(cls, length: int) -> "Curve":
        for curve in cls:
            if curve.private_key_length == length:
                return curve
        raise ValueError(f"No supported curve has {length}-byte raw private keys")

    @classmethod
    def from_oid(cls, oid: bytes) -> "Curve":
        for curve in cls:
            if curve.oid == oid:
                return curve
        raise ValueError(f"Unknown named curve OID: {oid.hex()}")

    def __str__(self):
        return self.display_name


_EC_CURVES = {
    Curve.P256: ec.SECP256R1,
    Curve.P384: ec.SECP384R1,
    Curve.P521: ec.SECP521R1,
}


# ============================================================================
# ALGORITHM ENUMERATIONS
# ============================================================================


class KdfHash(Enum):
    """Hash functions usable underneath the X9.63 KDF."""

    SHA256 = "sha256"
    SHA384 = "sha384"
    SHA512 = "sha512"


class KdfScheme(Enum):
    """Key derivation schemes."""

    X9_63 = "x9.63"


class AeadAlgorithm(Enum):
    """
    Authenticated encryption algorithms.

    Value is the AES key length in bytes.
    """

    AES128_GCM = 16
    AES256_GCM = 32


class IvVariant(Enum):
    """
    Nonce source for the AEAD.

    VARIABLE takes the nonce from the tail of the KDF output, FIXED uses an
    all-zero nonce (legacy, not accepted by the engine).
    """

    VARIABLE = "variable"
    FIXED = "fixed"


# ============================================================================
# LOGGING
# ============================================================================

# Name of the library logger shared by core, engine and CLI
ECIES_LOGGER_NAME = "ECIES"
