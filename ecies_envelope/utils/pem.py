"""
PEM and Base64 transport helpers.

Keys arrive as PEM text and envelopes travel as Base64; both transcodings
live here, outside the cryptographic core:

    PEM text  --pem_to_der-->  DER container  --extract_*-->  raw key
    envelope  --envelope_to_base64-->  transport string
"""

import base64
import binascii
from typing import Tuple

from ..core.errors import MalformedKeyContainer
from ..core.primitives import extract_private_key, extract_public_key
from ..core.types import Curve


def pem_to_der(pem_text: str) -> bytes:
    """
    Convert PEM text to DER bytes.

    Drops the BEGIN/END lines, joins the remaining lines and decodes the
    Base64 body.

    Raises:
        MalformedKeyContainer: If there is no body or it is not valid Base64
    """
    body_lines = []
    for line in pem_text.strip().splitlines():
        line = line.strip()
        if not line or line.startswith("-----"):
            continue
        body_lines.append(line)

    if not body_lines:
        raise MalformedKeyContainer("PEM text contains no key data")

    try:
        return base64.b64decode("".join(body_lines), validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedKeyContainer(f"Error whilst decoding key DER from Base64: {e}") from e


def load_public_key_pem(pem_text: str) -> Tuple[bytes, Curve]:
    """Load a "PUBLIC KEY" PEM into (raw point, curve)."""
    raw = extract_public_key(pem_to_der(pem_text))
    return raw, Curve.from_point_length(len(raw))


def load_private_key_pem(pem_text: str) -> Tuple[bytes, Curve]:
    """Load an "EC PRIVATE KEY" PEM into (raw point || scalar, curve)."""
    raw = extract_private_key(pem_to_der(pem_text))
    return raw, Curve.from_private_length(len(raw))


def envelope_to_base64(envelope: bytes) -> str:
    return base64.b64encode(envelope).decode("ascii")


def envelope_from_base64(text: str) -> bytes:
    """
    Decode a Base64 envelope, ignoring surrounding whitespace and newlines.

    Raises:
        ValueError: If the text is not valid Base64
    """
    compact = "".join(text.split())
    try:
        return base64.b64decode(compact, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Error whilst decoding ciphertext from Base64: {e}") from e
