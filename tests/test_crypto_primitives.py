"""
Test suite per le primitive crittografiche ECIES

Testa:
- ECDH: simmetria, lunghezza del segreto, validazione del punto
- KDF X9.63: confronto con la costruzione a contatore calcolata a mano
- AES-GCM: seal/open, tag separato, autenticazione fallita
- Buffer segreti azzerati all'uscita
"""

import hashlib
import secrets

import pytest
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ecies_envelope.core.crypto import (
    aead_open,
    aead_seal,
    derive_key_x963,
    ecdh_agree,
    load_private_scalar,
    secret_buffer,
    wipe_buffer,
)
from ecies_envelope.core.errors import (
    AuthenticationFailed,
    CurveMismatch,
    InvalidPeerKey,
    InvalidPrivateKey,
)
from ecies_envelope.core.primitives import decode_public_point, encode_public_point
from ecies_envelope.core.types import Curve, KdfHash

from conftest import SAMPLE_RAW_PUBLIC_KEY, SAMPLE_SCALAR


def x963_reference(shared_secret: bytes, shared_info: bytes, length: int, hash_fn=hashlib.sha384):
    """KDF X9.63 scritta a mano: H(Z || counter || SharedInfo) concatenati e troncati."""
    output = b""
    counter = 1
    while len(output) < length:
        output += hash_fn(shared_secret + counter.to_bytes(4, "big") + shared_info).digest()
        counter += 1
    return output[:length]


class TestECDH:
    """Test per ECDH key agreement"""

    def test_shared_secret_symmetric(self, curve_keys):
        """Test ECDH(a, B) == ECDH(b, A)"""
        curve = curve_keys["curve"]
        other = ec.generate_private_key(curve.ec_curve)
        other_point = encode_public_point(other.public_key())

        secret_a = ecdh_agree(curve_keys["scalar"], other_point, curve)
        secret_b = ecdh_agree(other, curve_keys["raw_public"], curve)

        assert secret_a == secret_b
        assert len(secret_a) == curve.scalar_byte_length
        print(f"✓ {curve}: shared secret {len(secret_a)} bytes")

    def test_shared_secret_is_x_coordinate(self, curve_keys):
        """Test segreto = coordinata x del punto condiviso (con zeri iniziali)"""
        curve = curve_keys["curve"]
        other = ec.generate_private_key(curve.ec_curve)

        secret = ecdh_agree(other, curve_keys["raw_public"], curve)
        expected = curve_keys["private_key"].exchange(ec.ECDH(), other.public_key())

        assert bytes(secret) == expected

    def test_returns_wipeable_buffer(self):
        """Test segreto restituito in un bytearray"""
        other = ec.generate_private_key(ec.SECP256R1())
        secret = ecdh_agree(other, SAMPLE_RAW_PUBLIC_KEY, Curve.P256)
        assert isinstance(secret, bytearray)

    def test_point_not_on_curve(self):
        """Test punto fuori curva -> InvalidPeerKey"""
        bogus = b"\x04" + bytes(64)
        with pytest.raises(InvalidPeerKey):
            ecdh_agree(SAMPLE_SCALAR, bogus, Curve.P256)

    def test_point_tampered_coordinate(self):
        """Test coordinata y alterata -> InvalidPeerKey"""
        tampered = bytearray(SAMPLE_RAW_PUBLIC_KEY)
        tampered[-1] ^= 0x01
        with pytest.raises(InvalidPeerKey):
            ecdh_agree(SAMPLE_SCALAR, bytes(tampered), Curve.P256)

    def test_point_compressed_prefix(self):
        """Test prefisso diverso da 0x04 -> InvalidPeerKey"""
        tampered = b"\x03" + SAMPLE_RAW_PUBLIC_KEY[1:]
        with pytest.raises(InvalidPeerKey, match="uncompressed"):
            ecdh_agree(SAMPLE_SCALAR, tampered, Curve.P256)

    def test_point_wrong_length(self):
        """Test punto P-256 usato su P-384 -> InvalidPeerKey"""
        scalar = secrets.token_bytes(47) + b"\x01"
        with pytest.raises(InvalidPeerKey):
            ecdh_agree(scalar, SAMPLE_RAW_PUBLIC_KEY, Curve.P384)

    def test_zero_scalar_rejected(self):
        """Test scalare nullo -> InvalidPrivateKey"""
        with pytest.raises(InvalidPrivateKey):
            ecdh_agree(bytes(32), SAMPLE_RAW_PUBLIC_KEY, Curve.P256)

    def test_scalar_wrong_length(self):
        """Test scalare di lunghezza sbagliata -> InvalidPrivateKey"""
        with pytest.raises(InvalidPrivateKey):
            load_private_scalar(SAMPLE_SCALAR[:31], Curve.P256)

    def test_private_key_object_on_other_curve(self):
        """Test chiave privata P-384 con curva P-256 -> CurveMismatch"""
        other = ec.generate_private_key(ec.SECP384R1())
        with pytest.raises(CurveMismatch):
            ecdh_agree(other, SAMPLE_RAW_PUBLIC_KEY, Curve.P256)

    def test_sample_scalar_matches_public_point(self):
        """Test scalare di esempio genera il punto pubblico di esempio"""
        private_key = load_private_scalar(SAMPLE_SCALAR, Curve.P256)
        assert encode_public_point(private_key.public_key()) == SAMPLE_RAW_PUBLIC_KEY

    def test_decode_public_point_roundtrip(self, curve_keys):
        """Test decode/encode del punto pubblico"""
        curve = curve_keys["curve"]
        public_key = decode_public_point(curve_keys["raw_public"], curve)
        assert encode_public_point(public_key) == curve_keys["raw_public"]


class TestX963KDF:
    """Test per la KDF ANSI X9.63"""

    def test_matches_counter_construction(self):
        """Test output identico alla costruzione a contatore"""
        shared_secret = secrets.token_bytes(32)
        derived = derive_key_x963(shared_secret, b"", 32)

        assert bytes(derived) == x963_reference(shared_secret, b"", 32)

    def test_single_block_is_first_digest(self):
        """Test primo blocco = SHA-384(Z || 00000001)"""
        shared_secret = bytes(range(32))
        derived = derive_key_x963(shared_secret, b"", 32)

        digest = hashlib.sha384(shared_secret + b"\x00\x00\x00\x01").digest()
        assert bytes(derived) == digest[:32]

    def test_multi_block_output(self):
        """Test output piu' lungo di un digest (contatore 1, 2, 3)"""
        shared_secret = secrets.token_bytes(66)
        derived = derive_key_x963(shared_secret, b"", 100)

        assert len(derived) == 100
        assert bytes(derived) == x963_reference(shared_secret, b"", 100)

    def test_shared_info_changes_output(self):
        """Test SharedInfo incluso nell'hash"""
        shared_secret = secrets.token_bytes(48)
        without_info = derive_key_x963(shared_secret, b"", 32)
        with_info = derive_key_x963(shared_secret, b"context", 32)

        assert without_info != with_info
        assert bytes(with_info) == x963_reference(shared_secret, b"context", 32)

    def test_none_shared_info_equals_empty(self):
        """Test SharedInfo None equivalente a vuoto"""
        shared_secret = secrets.token_bytes(32)
        assert derive_key_x963(shared_secret, None, 32) == derive_key_x963(shared_secret, b"", 32)

    def test_other_hash(self):
        """Test hash SHA-256 sotto la KDF"""
        shared_secret = secrets.token_bytes(32)
        derived = derive_key_x963(shared_secret, b"", 40, kdf_hash=KdfHash.SHA256)
        assert bytes(derived) == x963_reference(shared_secret, b"", 40, hashlib.sha256)

    def test_accepts_bytearray(self):
        """Test input bytearray (buffer azzerabile)"""
        shared_secret = bytearray(secrets.token_bytes(32))
        assert bytes(derive_key_x963(shared_secret)) == x963_reference(bytes(shared_secret), b"", 32)

    def test_bytearray_shared_info(self):
        """Test SharedInfo in bytearray equivalente a bytes"""
        shared_secret = secrets.token_bytes(32)
        derived = derive_key_x963(shared_secret, bytearray(b"context"), 32)

        assert derived == derive_key_x963(shared_secret, b"context", 32)

    def test_empty_secret_rejected(self):
        """Test segreto vuoto"""
        with pytest.raises(ValueError):
            derive_key_x963(b"", b"", 32)

    def test_invalid_length_rejected(self):
        """Test lunghezza non valida"""
        with pytest.raises(ValueError):
            derive_key_x963(secrets.token_bytes(32), b"", 0)


class TestAEAD:
    """Test per AES-GCM seal/open"""

    def test_seal_layout(self):
        """Test ciphertext lungo quanto il plaintext, tag di 16 byte"""
        key, nonce = secrets.token_bytes(16), secrets.token_bytes(16)
        ciphertext, tag = aead_seal(key, nonce, b"hello ECIES")

        assert len(ciphertext) == len(b"hello ECIES")
        assert len(tag) == 16
        # tag in coda, come restituito da AESGCM
        assert ciphertext + tag == AESGCM(key).encrypt(nonce, b"hello ECIES", None)

    def test_roundtrip(self):
        """Test seal/open"""
        key, nonce = secrets.token_bytes(16), secrets.token_bytes(16)
        ciphertext, tag = aead_seal(key, nonce, b"payload")
        assert aead_open(key, nonce, ciphertext, tag) == b"payload"

    def test_empty_plaintext(self):
        """Test messaggio vuoto: solo tag"""
        key, nonce = secrets.token_bytes(16), secrets.token_bytes(16)
        ciphertext, tag = aead_seal(key, nonce, b"")

        assert ciphertext == b""
        assert aead_open(key, nonce, ciphertext, tag) == b""

    def test_bytearray_key_and_nonce(self):
        """Test chiave e nonce in bytearray"""
        key, nonce = bytearray(secrets.token_bytes(16)), bytearray(secrets.token_bytes(16))
        ciphertext, tag = aead_seal(key, nonce, b"data")
        assert aead_open(key, nonce, ciphertext, tag) == b"data"

    def test_wrong_tag(self):
        """Test tag alterato -> AuthenticationFailed"""
        key, nonce = secrets.token_bytes(16), secrets.token_bytes(16)
        ciphertext, tag = aead_seal(key, nonce, b"payload")
        bad_tag = bytes([tag[0] ^ 0x80]) + tag[1:]

        with pytest.raises(AuthenticationFailed):
            aead_open(key, nonce, ciphertext, bad_tag)

    def test_wrong_key(self):
        """Test chiave sbagliata -> AuthenticationFailed"""
        key, nonce = secrets.token_bytes(16), secrets.token_bytes(16)
        ciphertext, tag = aead_seal(key, nonce, b"payload")

        with pytest.raises(AuthenticationFailed):
            aead_open(secrets.token_bytes(16), nonce, ciphertext, tag)

    def test_truncated_tag(self):
        """Test tag corto -> AuthenticationFailed"""
        key, nonce = secrets.token_bytes(16), secrets.token_bytes(16)
        ciphertext, tag = aead_seal(key, nonce, b"payload")

        with pytest.raises(AuthenticationFailed):
            aead_open(key, nonce, ciphertext, tag[:12])


class TestSecretBuffers:
    """Test per i buffer segreti"""

    def test_wipe_buffer(self):
        """Test azzeramento in place"""
        buffer = bytearray(b"\xff" * 32)
        wipe_buffer(buffer)
        assert buffer == bytearray(32)

    def test_secret_buffer_wiped_on_exit(self):
        """Test buffer azzerato all'uscita dal blocco"""
        with secret_buffer(b"secret-material") as buffer:
            assert bytes(buffer) == b"secret-material"
        assert buffer == bytearray(len(b"secret-material"))

    def test_secret_buffer_wiped_on_error(self):
        """Test buffer azzerato anche in caso di eccezione"""
        source = bytearray(b"\xaa" * 16)
        with pytest.raises(RuntimeError):
            with secret_buffer(source):
                raise RuntimeError("boom")
        # un bytearray viene usato direttamente, non copiato
        assert source == bytearray(16)


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short", "-s"])
