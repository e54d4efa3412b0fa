"""
Logger centralizzato per la libreria ECIES e la CLI.

Un logger per nome, creato una sola volta e riusato da tutte le istanze di
EciesEngine. L'output console va su stderr: stdout e' riservato
all'envelope o al testo in chiaro stampati dalla CLI.

Formato: [2025-11-04 14:30:45] [ECIES] [WARNING] ECIES decrypt (P-256) failed: ...
"""

import logging
import sys
import threading
from pathlib import Path
from typing import Optional


LOG_FORMAT = "[%(asctime)s] [%(name)s] [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _configured(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


class EciesLogger:
    """
    Factory di logger con cache per nome.

    Le chiamate concorrenti a get_logger() ottengono sempre la stessa
    istanza: la creazione avviene sotto lock.
    """

    _loggers = {}
    _lock = threading.Lock()

    @staticmethod
    def get_logger(
        name: str,
        log_dir: Optional[str] = None,
        level: int = logging.INFO,
        console_output: bool = True,
    ) -> logging.Logger:
        """
        Ottiene o crea un logger configurato.

        Args:
            name: Nome del logger (es. "ECIES")
            log_dir: Directory per il file <name>.log (opzionale)
            level: Livello minimo di log (default: INFO)
            console_output: Se True, scrive anche su stderr

        Returns:
            Logger configurato; i parametri sono ignorati se il logger
            esiste gia' in cache (usare set_level per cambiarne il livello)
        """
        with EciesLogger._lock:
            cached = EciesLogger._loggers.get(name)
            if cached is not None:
                return cached

            logger = logging.getLogger(name)
            logger.setLevel(level)
            logger.propagate = False
            logger.handlers.clear()

            if console_output:
                logger.addHandler(_configured(logging.StreamHandler(sys.stderr), level))

            if log_dir:
                log_path = Path(log_dir)
                log_path.mkdir(parents=True, exist_ok=True)
                file_handler = logging.FileHandler(log_path / f"{name}.log", encoding="utf-8")
                logger.addHandler(_configured(file_handler, level))

            # Libreria silenziosa: niente fallback su logging.lastResort
            if not logger.handlers:
                logger.addHandler(logging.NullHandler())

            EciesLogger._loggers[name] = logger
            return logger

    @staticmethod
    def set_level(name: str, level: int):
        """Cambia il livello di un logger gia' creato (e dei suoi handler)."""
        logger = EciesLogger._loggers.get(name)
        if logger is None:
            return
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)

    @staticmethod
    def clear_cache():
        """Svuota la cache chiudendo gli handler dei logger creati."""
        with EciesLogger._lock:
            for logger in EciesLogger._loggers.values():
                for handler in list(logger.handlers):
                    handler.close()
                    logger.removeHandler(handler)
            EciesLogger._loggers.clear()
