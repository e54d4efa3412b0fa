"""
Key Material Extraction

Recovers raw EC key material from standard DER key containers:
- SubjectPublicKeyInfo ("BEGIN PUBLIC KEY") -> uncompressed point 0x04 || X || Y
- SEC1 ECPrivateKey ("BEGIN EC PRIVATE KEY") -> point || scalar

The container size selects the curve first (fail-closed: any size outside
the six known ones is rejected). The container is then walked with a minimal
DER tag/length/value reader and every field is checked against the expected
shape, so an encoding with a different layout is rejected instead of being
sliced at the wrong offset.

Standards Reference:
- ITU-T X.690 (DER encoding rules)
- RFC 5480 Section 2 (SubjectPublicKeyInfo for EC keys)
- RFC 5915 Section 3 (ECPrivateKey)
- SEC 1 v2.0 Section 2.3.3 (point encoding)

Author: SecureRoad PKI Project
Date: November 2025
"""

import logging
from typing import List, Tuple

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.ec import EllipticCurvePublicKey

from .errors import InvalidPeerKey, MalformedKeyContainer, UnrecognizedKeyLength
from .types import ECIES_LOGGER_NAME, OID_EC_PUBLIC_KEY, UNCOMPRESSED_POINT_PREFIX, Curve

logger = logging.getLogger(ECIES_LOGGER_NAME)


# DER universal / context tags used by EC key containers
TAG_INTEGER = 0x02
TAG_BIT_STRING = 0x03
TAG_OCTET_STRING = 0x04
TAG_OID = 0x06
TAG_SEQUENCE = 0x30
TAG_CONTEXT_0 = 0xA0
TAG_CONTEXT_1 = 0xA1

# RFC 5915: ecPrivkeyVer1
EC_PRIVATE_KEY_VERSION = b"\x01"


# ============================================================================
# DER TAG/LENGTH/VALUE READER (ITU-T X.690)
# ============================================================================


def read_tlv(data: bytes, offset: int = 0) -> Tuple[int, bytes, int]:
    """
    Read one DER element starting at offset.

    Only definite, minimally encoded lengths up to 2 length octets are
    accepted, which covers every EC key container up to P-521.

    Args:
        data: DER encoded bytes
        offset: Position of the tag octet

    Returns:
        Tuple (tag, value, next_offset)

    Raises:
        MalformedKeyContainer: If the element is truncated or badly encoded
    """
    if offset + 2 > len(data):
        raise MalformedKeyContainer(f"Truncated DER element at offset {offset}")

    tag = data[offset]
    length = data[offset + 1]
    offset += 2

    if length & 0x80:
        num_octets = length & 0x7F
        if num_octets == 0 or num_octets > 2:
            raise MalformedKeyContainer(f"Unsupported DER length form 0x{length:02x}")
        if offset + num_octets > len(data):
            raise MalformedKeyContainer("Truncated DER length")
        length = int.from_bytes(data[offset:offset + num_octets], "big")
        # DER: long form only when short form is impossible, no leading zero octet
        if length < 0x80 or (num_octets == 2 and length < 0x100):
            raise MalformedKeyContainer("Non-minimal DER length encoding")
        offset += num_octets

    end = offset + length
    if end > len(data):
        raise MalformedKeyContainer(
            f"DER element overruns container ({end} > {len(data)})"
        )
    return tag, data[offset:end], end


def read_children(value: bytes) -> List[Tuple[int, bytes]]:
    """Split the content of a constructed element into (tag, value) pairs."""
    children = []
    offset = 0
    while offset < len(value):
        tag, child, offset = read_tlv(value, offset)
        children.append((tag, child))
    return children


def _read_single(data: bytes, expected_tag: int, what: str) -> bytes:
    """Read an element that must span the whole buffer."""
    tag, value, end = read_tlv(data, 0)
    if tag != expected_tag:
        raise MalformedKeyContainer(f"{what}: expected tag 0x{expected_tag:02x}, got 0x{tag:02x}")
    if end != len(data):
        raise MalformedKeyContainer(f"{what}: {len(data) - end} trailing bytes")
    return value


def _expect_tags(children: List[Tuple[int, bytes]], tags: Tuple[int, ...], what: str):
    found = tuple(tag for tag, _ in children)
    if found != tags:
        raise MalformedKeyContainer(
            f"{what}: unexpected layout "
            f"{[hex(t) for t in found]} (expected {[hex(t) for t in tags]})"
        )


def _bit_string_payload(value: bytes) -> bytes:
    """Strip the unused-bits octet from a BIT STRING; only 0 unused bits allowed."""
    if not value or value[0] != 0x00:
        raise MalformedKeyContainer("BIT STRING with unused bits is not an EC point")
    return value[1:]


def _check_curve_oid(oid: bytes, curve: Curve):
    if oid != curve.oid:
        try:
            named = Curve.from_oid(oid)
        except ValueError:
            raise MalformedKeyContainer(f"Unsupported named curve OID {oid.hex()}")
        raise MalformedKeyContainer(
            f"Container size implies {curve} but named curve is {named}"
        )


def _check_point(point: bytes, curve: Curve):
    if len(point) != curve.point_byte_length:
        raise MalformedKeyContainer(
            f"{curve} point must be {curve.point_byte_length} bytes, got {len(point)}"
        )
    if point[0] != UNCOMPRESSED_POINT_PREFIX:
        raise MalformedKeyContainer(
            f"Only uncompressed points are supported (prefix 0x{point[0]:02x})"
        )


# ============================================================================
# CONTAINER SIZE DISPATCH
# ============================================================================


def public_container_curve(container: bytes) -> Curve:
    """
    Select the curve of a SubjectPublicKeyInfo container by its total size.

    Raises:
        UnrecognizedKeyLength: If the size is not 91, 120 or 158
    """
    for curve in Curve:
        if curve.public_container_length == len(container):
            return curve
    raise UnrecognizedKeyLength(len(container), (c.public_container_length for c in Curve))


def private_container_curve(container: bytes) -> Curve:
    """
    Select the curve of a SEC1 private key container by its total size.

    Raises:
        UnrecognizedKeyLength: If the size is not 121, 167 or 223
    """
    for curve in Curve:
        if curve.private_container_length == len(container):
            return curve
    raise UnrecognizedKeyLength(len(container), (c.private_container_length for c in Curve))


# ============================================================================
# KEY MATERIAL EXTRACTION
# ============================================================================


def extract_public_key(container: bytes) -> bytes:
    """
    Extract the raw public point from a DER SubjectPublicKeyInfo.

    SubjectPublicKeyInfo ::= SEQUENCE {
        algorithm         SEQUENCE { id-ecPublicKey, namedCurve OID },
        subjectPublicKey  BIT STRING
    }

    Args:
        container: DER bytes (91 / 120 / 158 bytes for P-256 / P-384 / P-521)

    Returns:
        bytes: Uncompressed point 0x04 || X || Y

    Raises:
        UnrecognizedKeyLength: If the container size is unknown
        MalformedKeyContainer: If the structure is not the canonical EC SPKI
    """
    container = bytes(container)
    curve = public_container_curve(container)

    body = _read_single(container, TAG_SEQUENCE, "SubjectPublicKeyInfo")
    fields = read_children(body)
    _expect_tags(fields, (TAG_SEQUENCE, TAG_BIT_STRING), "SubjectPublicKeyInfo")

    algorithm = read_children(fields[0][1])
    _expect_tags(algorithm, (TAG_OID, TAG_OID), "AlgorithmIdentifier")
    if algorithm[0][1] != OID_EC_PUBLIC_KEY:
        raise MalformedKeyContainer(f"Not an EC public key (OID {algorithm[0][1].hex()})")
    _check_curve_oid(algorithm[1][1], curve)

    point = _bit_string_payload(fields[1][1])
    _check_point(point, curve)

    logger.debug(f"Extracted {curve} public key ({len(point)} bytes)")
    return point


def extract_private_key(container: bytes) -> bytes:
    """
    Extract raw private key material from a DER SEC1 ECPrivateKey.

    ECPrivateKey ::= SEQUENCE {
        version        INTEGER { ecPrivkeyVer1(1) },
        privateKey     OCTET STRING,
        parameters [0] ECParameters,
        publicKey  [1] BIT STRING
    }

    Both optional fields must be present: the raw private key carries the
    public point in front of the scalar.

    Args:
        container: DER bytes (121 / 167 / 223 bytes for P-256 / P-384 / P-521)

    Returns:
        bytes: point || scalar (97 / 145 / 199 bytes)

    Raises:
        UnrecognizedKeyLength: If the container size is unknown
        MalformedKeyContainer: If the structure is not the canonical SEC1 key
    """
    container = bytes(container)
    curve = private_container_curve(container)

    body = _read_single(container, TAG_SEQUENCE, "ECPrivateKey")
    fields = read_children(body)
    _expect_tags(
        fields,
        (TAG_INTEGER, TAG_OCTET_STRING, TAG_CONTEXT_0, TAG_CONTEXT_1),
        "ECPrivateKey",
    )

    if fields[0][1] != EC_PRIVATE_KEY_VERSION:
        raise MalformedKeyContainer(f"Unsupported ECPrivateKey version {fields[0][1].hex()}")

    scalar = fields[1][1]
    if len(scalar) != curve.scalar_byte_length:
        raise MalformedKeyContainer(
            f"{curve} scalar must be {curve.scalar_byte_length} bytes, got {len(scalar)}"
        )

    oid = _read_single(fields[2][1], TAG_OID, "ECParameters")
    _check_curve_oid(oid, curve)

    point = _bit_string_payload(_read_single(fields[3][1], TAG_BIT_STRING, "publicKey"))
    _check_point(point, curve)

    logger.debug(f"Extracted {curve} private key material")
    return point + scalar


# ============================================================================
# RAW KEY HELPERS
# ============================================================================


def split_private_key(raw_private_key: bytes, curve: Curve) -> Tuple[bytes, bytearray]:
    """
    Split a raw private key into (public point, scalar).

    The scalar is returned in a bytearray so the caller can wipe it.

    Raises:
        ValueError: If the length does not match the curve
    """
    if len(raw_private_key) != curve.private_key_length:
        raise ValueError(
            f"{curve} raw private key must be {curve.private_key_length} bytes, "
            f"got {len(raw_private_key)}"
        )
    view = memoryview(raw_private_key)
    return bytes(view[:curve.point_byte_length]), bytearray(view[curve.point_byte_length:])


def encode_public_point(public_key: EllipticCurvePublicKey) -> bytes:
    """Serialize a public key as an uncompressed X9.62 point."""
    return public_key.public_bytes(
        encoding=serialization.Encoding.X962,
        format=serialization.PublicFormat.UncompressedPoint,
    )


def decode_public_point(point: bytes, curve: Curve) -> EllipticCurvePublicKey:
    """
    Load and validate an uncompressed point on the given curve.

    The cryptography backend rejects points that are not on the curve,
    including the point at infinity.

    Raises:
        InvalidPeerKey: If the point is malformed or not on the curve
    """
    point = bytes(point)
    if len(point) != curve.point_byte_length:
        raise InvalidPeerKey(
            f"{curve} public point must be {curve.point_byte_length} bytes, got {len(point)}"
        )
    if point[0] != UNCOMPRESSED_POINT_PREFIX:
        raise InvalidPeerKey(f"Public point is not uncompressed (prefix 0x{point[0]:02x})")

    try:
        return ec.EllipticCurvePublicKey.from_encoded_point(curve.ec_curve, point)
    except ValueError as e:
        raise InvalidPeerKey(f"Public point is not on {curve}: {e}") from e
