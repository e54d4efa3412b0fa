"""
ECIES Security Operations

This module provides the ECIES envelope and engine:
- Envelope assembly/parsing (ephemeral key || ciphertext || tag)
- EciesEngine (class interface)
- ecies_encrypt / ecies_decrypt (functional interface)

Author: SecureRoad PKI Project
Date: November 2025
"""

from .ecies import (
    EciesEngine,
    EciesEnvelope,
    assemble_envelope,
    parse_envelope,
    raw_public_key,
    raw_private_key,
    ecies_encrypt,
    ecies_decrypt,
)

__all__ = [
    # Envelope
    "EciesEnvelope",
    "assemble_envelope",
    "parse_envelope",

    # ECIES encryption - class interface
    "EciesEngine",

    # ECIES encryption - functional interface
    "raw_public_key",
    "raw_private_key",
    "ecies_encrypt",
    "ecies_decrypt",
]
