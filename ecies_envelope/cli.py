"""
Command line front end per cifrare/decifrare messaggi con ECIES.

Usage:
    # Cifra un messaggio per il destinatario (stampa l'envelope in Base64)
    ecies-envelope encrypt --public-key public.pem --message "This is a test message."

    # Cifra un file
    ecies-envelope encrypt --public-key public.pem --input file.bin

    # Decifra un envelope Base64
    ecies-envelope decrypt --private-key private.pem --ciphertext BNYuilyA9qKh...

    # Decifra da file e scrivi i byte in chiaro su file
    ecies-envelope decrypt --private-key private.pem --input msg.b64 --output msg.bin

    # Envelope prodotti da SecKeyCreateEncryptedData o dalla versione Go
    # (SharedInfo della KDF = chiave pubblica effimera)
    ecies-envelope decrypt --ephemeral-shared-info --private-key private.pem --ciphertext BNYuilyA9qKh...

Chiavi generate con openssl:
    openssl ecparam -name prime256v1 -genkey -noout -out private.pem
    openssl ec -in private.pem -pubout -out public.pem
"""

import argparse
import logging
import sys
from pathlib import Path

from .config import (
    ECIES_ALGORITHM,
    ECIES_CONSTANTS,
    ECIES_EPHEMERAL_KEY_SHARED_INFO,
    get_log_level,
)
from .core.errors import EciesError
from .security.ecies import EciesEngine
from .utils.logger import EciesLogger
from .utils.pem import (
    envelope_from_base64,
    envelope_to_base64,
    load_private_key_pem,
    load_public_key_pem,
)


def _read_text(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def cmd_encrypt(args, engine: EciesEngine) -> int:
    """Cifra --message o --input e stampa l'envelope Base64."""
    raw_public, curve = load_public_key_pem(_read_text(args.public_key))

    if args.input:
        plaintext = Path(args.input).read_bytes()
    else:
        plaintext = args.message.encode("utf-8")

    envelope = engine.encrypt(plaintext, raw_public, curve)
    encoded = envelope_to_base64(envelope)

    if args.output:
        Path(args.output).write_text(encoded + "\n", encoding="ascii")
    else:
        print(encoded)
    return 0


def cmd_decrypt(args, engine: EciesEngine) -> int:
    """Decifra --ciphertext o --input e stampa il testo in chiaro."""
    raw_private, curve = load_private_key_pem(_read_text(args.private_key))

    if args.input:
        envelope = envelope_from_base64(_read_text(args.input))
    else:
        envelope = envelope_from_base64(args.ciphertext)

    plaintext = engine.decrypt(envelope, raw_private, curve)

    if args.output:
        Path(args.output).write_bytes(plaintext)
    else:
        print(plaintext.decode("utf-8", errors="replace"))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ecies-envelope",
        description=f"Cifratura ECIES ({ECIES_ALGORITHM.name}) per chiavi P-256/P-384/P-521",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log di debug su stderr",
    )

    # Opzioni comuni ai due sottocomandi
    suite = argparse.ArgumentParser(add_help=False)
    suite.add_argument(
        "--ephemeral-shared-info",
        action="store_true",
        help="Usa la chiave pubblica effimera come SharedInfo della KDF "
             f"({ECIES_EPHEMERAL_KEY_SHARED_INFO.name})",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    encrypt = subparsers.add_parser("encrypt", parents=[suite], help="Cifra un messaggio")
    encrypt.add_argument("--public-key", required=True, help="File PEM della chiave pubblica")
    source = encrypt.add_mutually_exclusive_group(required=True)
    source.add_argument("--message", help="Messaggio di testo (UTF-8)")
    source.add_argument("--input", help="File da cifrare")
    encrypt.add_argument("--output", help="Scrivi l'envelope Base64 su file")
    encrypt.set_defaults(handler=cmd_encrypt)

    decrypt = subparsers.add_parser("decrypt", parents=[suite], help="Decifra un envelope")
    decrypt.add_argument("--private-key", required=True, help="File PEM della chiave privata (EC PRIVATE KEY)")
    source = decrypt.add_mutually_exclusive_group(required=True)
    source.add_argument("--ciphertext", help="Envelope in Base64")
    source.add_argument("--input", help="File con l'envelope in Base64")
    decrypt.add_argument("--output", help="Scrivi i byte in chiaro su file")
    decrypt.set_defaults(handler=cmd_decrypt)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.DEBUG if args.verbose else get_log_level()
    logger = EciesLogger.get_logger(name=ECIES_CONSTANTS.LOGGER_NAME, level=level)
    EciesLogger.set_level(ECIES_CONSTANTS.LOGGER_NAME, level)

    try:
        config = ECIES_EPHEMERAL_KEY_SHARED_INFO if args.ephemeral_shared_info else ECIES_ALGORITHM
        return args.handler(args, EciesEngine(config, logger=logger))
    except EciesError as e:
        print(f"❌ Errore: {type(e).__name__}: {e}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        print(f"❌ Errore: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
