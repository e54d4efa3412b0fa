"""
Utils Package

Contains logging and PEM/Base64 transport helpers.
"""

from .logger import EciesLogger
from .pem import (
    envelope_from_base64,
    envelope_to_base64,
    load_private_key_pem,
    load_public_key_pem,
    pem_to_der,
)

__all__ = [
    # Logging
    "EciesLogger",
    # PEM / Base64
    "pem_to_der",
    "load_public_key_pem",
    "load_private_key_pem",
    "envelope_to_base64",
    "envelope_from_base64",
]
