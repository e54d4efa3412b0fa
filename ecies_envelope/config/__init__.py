"""
ECIES Configuration Package

Centralizza algoritmo, costanti e livelli di log della libreria.
"""

from .ecies_config import (
    ECIES_ALGORITHM,
    ECIES_COFACTOR_VARIABLE_IV_X963_SHA384_AES_GCM,
    ECIES_CONSTANTS,
    ECIES_EPHEMERAL_KEY_SHARED_INFO,
    AlgorithmConfig,
    get_log_dir,
    get_log_level,
)

__all__ = [
    'ECIES_ALGORITHM',
    'ECIES_COFACTOR_VARIABLE_IV_X963_SHA384_AES_GCM',
    'ECIES_CONSTANTS',
    'ECIES_EPHEMERAL_KEY_SHARED_INFO',
    'AlgorithmConfig',
    'get_log_dir',
    'get_log_level',
]
