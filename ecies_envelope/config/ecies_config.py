"""
ECIES Configuration - algoritmo e costanti centralizzate

Questo file centralizza la scelta dell'algoritmo ECIES e le costanti della
libreria. L'algoritmo non viene mai dedotto da default di piattaforma: il
motore riceve sempre un AlgorithmConfig esplicito.

Usage:
    from ecies_envelope.config import ECIES_ALGORITHM

    engine = EciesEngine(config=ECIES_ALGORITHM)
"""

import logging
import os
from dataclasses import dataclass

from ..core.errors import UnsupportedAlgorithm
from ..core.types import (
    ECIES_LOGGER_NAME,
    GCM_TAG_LENGTH,
    AeadAlgorithm,
    IvVariant,
    KdfHash,
    KdfScheme,
)


@dataclass(frozen=True)
class AlgorithmConfig:
    """
    Combinazione fissa di algoritmi ECIES.

    Attributi:
        kdf_hash: Hash sotto la KDF X9.63
        kdf_scheme: Schema di derivazione
        aead: Cifrario autenticato (il valore e' la lunghezza chiave AES)
        iv_variant: Sorgente del nonce (VARIABLE = coda dell'output KDF)
        shared_info: SharedInfo della KDF (vuoto = nessun contesto)
        shared_info_from_ephemeral_key: Se True la SharedInfo e' la chiave
            pubblica effimera dell'envelope (formato SecKey / ecies-go)
        derived_key_length: Byte richiesti alla KDF (chiave || nonce)
    """
    kdf_hash: KdfHash = KdfHash.SHA384
    kdf_scheme: KdfScheme = KdfScheme.X9_63
    aead: AeadAlgorithm = AeadAlgorithm.AES128_GCM
    iv_variant: IvVariant = IvVariant.VARIABLE
    shared_info: bytes = b""
    shared_info_from_ephemeral_key: bool = False
    derived_key_length: int = 32

    @property
    def aes_key_length(self) -> int:
        return self.aead.value

    @property
    def nonce_length(self) -> int:
        return self.derived_key_length - self.aes_key_length

    @property
    def name(self) -> str:
        """Nome descrittivo dell'algoritmo (stile SecKeyAlgorithm)."""
        iv = "VariableIV" if self.iv_variant is IvVariant.VARIABLE else "FixedIV"
        return (
            f"ECIES-Cofactor-{iv}-X963-{self.kdf_hash.name}-"
            f"AES{self.aes_key_length * 8}-GCM"
            + ("-EphemeralSharedInfo" if self.shared_info_from_ephemeral_key else "")
        )

    def validate(self):
        """
        Verifica che la configurazione sia la suite ECIES supportata.

        Raises:
            UnsupportedAlgorithm: Se uno dei parametri esce dalla suite fissa
        """
        if self.kdf_scheme is not KdfScheme.X9_63:
            raise UnsupportedAlgorithm(f"Unsupported KDF scheme: {self.kdf_scheme}")
        if self.kdf_hash is not KdfHash.SHA384:
            raise UnsupportedAlgorithm(f"Unsupported KDF hash: {self.kdf_hash.name}")
        if self.aead is not AeadAlgorithm.AES128_GCM:
            raise UnsupportedAlgorithm(f"Unsupported AEAD: {self.aead.name}")
        if self.iv_variant is not IvVariant.VARIABLE:
            raise UnsupportedAlgorithm(f"Unsupported IV variant: {self.iv_variant.name}")
        if self.derived_key_length != 32:
            raise UnsupportedAlgorithm(
                f"Derived key length must be 32 bytes, got {self.derived_key_length}"
            )
        if not isinstance(self.shared_info, (bytes, bytearray)):
            raise UnsupportedAlgorithm("shared_info must be bytes")
        if self.shared_info_from_ephemeral_key and self.shared_info:
            raise UnsupportedAlgorithm(
                "shared_info and shared_info_from_ephemeral_key are mutually exclusive"
            )


# Algoritmo ECIES unico: ECDH (cofactor) + X9.63-KDF-SHA384 + AES-128-GCM, IV variabile
ECIES_COFACTOR_VARIABLE_IV_X963_SHA384_AES_GCM = AlgorithmConfig()
ECIES_ALGORITHM = ECIES_COFACTOR_VARIABLE_IV_X963_SHA384_AES_GCM

# Stessa suite con la chiave effimera come SharedInfo: decifra gli envelope
# prodotti da SecKeyCreateEncryptedData (P-256) e dalla versione Go
ECIES_EPHEMERAL_KEY_SHARED_INFO = AlgorithmConfig(shared_info_from_ephemeral_key=True)


@dataclass(frozen=True)
class EciesConstants:
    """
    Costanti centralizzate della libreria.
    """
    # Envelope
    TAG_LENGTH: int = GCM_TAG_LENGTH

    # Logging
    LOGGER_NAME: str = ECIES_LOGGER_NAME
    LOG_LEVEL_ENV: str = "ECIES_LOG_LEVEL"
    DEFAULT_LOG_LEVEL: str = "WARNING"
    LOG_DIR_ENV: str = "ECIES_LOG_DIR"


# Istanza singleton globale
ECIES_CONSTANTS = EciesConstants()


def get_log_level() -> int:
    """
    Livello di log della libreria, sovrascrivibile con ECIES_LOG_LEVEL.

    Valori non riconosciuti ricadono sul default (WARNING).
    """
    name = os.environ.get(ECIES_CONSTANTS.LOG_LEVEL_ENV, ECIES_CONSTANTS.DEFAULT_LOG_LEVEL)
    level = logging.getLevelName(name.strip().upper())
    if isinstance(level, int):
        return level
    return logging.getLevelName(ECIES_CONSTANTS.DEFAULT_LOG_LEVEL)


def get_log_dir():
    """Directory opzionale per i file di log (ECIES_LOG_DIR), None se assente."""
    return os.environ.get(ECIES_CONSTANTS.LOG_DIR_ENV) or None
