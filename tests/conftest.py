"""
Pytest Configuration and Shared Fixtures

Fornisce fixture condivise per tutti i test:
- Chiavi di esempio P-256 (PEM generati con openssl) con valori raw attesi
- Envelope di esempio prodotto da un'altra implementazione (known answer)
- Coppie di chiavi fresche per ogni curva (DER + raw)
- Engine ECIES con configurazione di default

Author: SecureRoad PKI Project
Date: November 2025
"""

import os
import sys
from pathlib import Path

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ecies_envelope.core.types import Curve
from ecies_envelope.security.ecies import EciesEngine


# ============================================================================
# SAMPLE KEYS (openssl ecparam -name prime256v1 -genkey)
# ============================================================================

DATA_DIR = Path(__file__).parent / "data"

SAMPLE_PUBLIC_KEY_PEM = (DATA_DIR / "sample_public.pem").read_text(encoding="ascii")
SAMPLE_PRIVATE_KEY_PEM = (DATA_DIR / "sample_private.pem").read_text(encoding="ascii")

# Envelope prodotto da SecKeyCreateEncryptedData per la chiave di esempio
# (SharedInfo della KDF = chiave pubblica effimera)
SAMPLE_PLATFORM_ENVELOPE_B64 = (DATA_DIR / "sample_envelope.b64").read_text(encoding="ascii").strip()

SAMPLE_PUBLIC_KEY_DER = bytes.fromhex(
    "3059301306072a8648ce3d020106082a8648ce3d03010703420004"
    "eea3060961b42fb1d8029b558486cbcb1ddc17385de445d9d3d3295696660464"
    "bbc8221de564182ad9b2de04c2db8e62be5119ef9f593c582cb5832042866bb2"
)

SAMPLE_PRIVATE_KEY_DER = bytes.fromhex(
    "307702010104204f2f3481259b0c5247e661979368a04f8512ea448056cf6e7d2ade13086ddd81"
    "a00a06082a8648ce3d030107a14403420004"
    "eea3060961b42fb1d8029b558486cbcb1ddc17385de445d9d3d3295696660464"
    "bbc8221de564182ad9b2de04c2db8e62be5119ef9f593c582cb5832042866bb2"
)

SAMPLE_RAW_PUBLIC_KEY = bytes.fromhex(
    "04"
    "eea3060961b42fb1d8029b558486cbcb1ddc17385de445d9d3d3295696660464"
    "bbc8221de564182ad9b2de04c2db8e62be5119ef9f593c582cb5832042866bb2"
)

SAMPLE_SCALAR = bytes.fromhex(
    "4f2f3481259b0c5247e661979368a04f8512ea448056cf6e7d2ade13086ddd81"
)

SAMPLE_RAW_PRIVATE_KEY = SAMPLE_RAW_PUBLIC_KEY + SAMPLE_SCALAR

SAMPLE_MESSAGE = b"This is a test message."


# ============================================================================
# KEY FIXTURES
# ============================================================================


def make_key_material(curve: Curve) -> dict:
    """Genera una coppia di chiavi su `curve` e tutte le sue rappresentazioni."""
    private_key = ec.generate_private_key(curve.ec_curve)
    public_key = private_key.public_key()

    raw_public = public_key.public_bytes(
        encoding=serialization.Encoding.X962,
        format=serialization.PublicFormat.UncompressedPoint,
    )
    scalar = private_key.private_numbers().private_value.to_bytes(
        curve.scalar_byte_length, "big"
    )

    return {
        "curve": curve,
        "private_key": private_key,
        "public_key": public_key,
        "private_der": private_key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.TraditionalOpenSSL,
            encryption_algorithm=serialization.NoEncryption(),
        ),
        "public_der": public_key.public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        ),
        "private_pem": private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.TraditionalOpenSSL,
            encryption_algorithm=serialization.NoEncryption(),
        ).decode("ascii"),
        "public_pem": public_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        ).decode("ascii"),
        "raw_public": raw_public,
        "raw_private": raw_public + scalar,
        "scalar": scalar,
    }


@pytest.fixture(scope="session", params=list(Curve), ids=lambda c: c.display_name)
def curve_keys(request):
    """
    Coppia di chiavi per ogni curva supportata.
    Scope: session (generata una volta per curva).
    """
    return make_key_material(request.param)


@pytest.fixture(scope="session")
def keys_by_curve():
    """Una coppia di chiavi per curva, indicizzata per Curve."""
    return {curve: make_key_material(curve) for curve in Curve}


@pytest.fixture(scope="function")
def engine():
    """EciesEngine con l'algoritmo di default."""
    return EciesEngine()
