"""
Tests for key derivation and the AEAD wrapper.
"""
import pytest

from passvault.crypto import aead
from passvault.crypto.aead import NONCE_SIZE, TAG_SIZE, aead_decrypt, aead_encrypt
from passvault.crypto.kdf import KEY_LENGTH, derive_key, generate_salt, wipe
from passvault.utils.errors import AuthenticationFailure, DerivationError


SALT = bytes(range(16))


class TestDeriveKey:
    """Tests for Argon2id key derivation."""

    def test_key_is_256_bits(self, fast_params):
        key = derive_key("passphrase", SALT, fast_params)
        assert isinstance(key, bytearray)
        assert len(key) == KEY_LENGTH

    def test_deterministic(self, fast_params):
        assert derive_key("passphrase", SALT, fast_params) == derive_key("passphrase", SALT, fast_params)

    def test_passphrase_change_changes_key(self, fast_params):
        assert derive_key("passphrase", SALT, fast_params) != derive_key("passphrasf", SALT, fast_params)

    def test_salt_change_changes_key(self, fast_params):
        other = bytes(15) + b"\x01"
        assert derive_key("passphrase", SALT, fast_params) != derive_key("passphrase", other, fast_params)

    def test_params_change_changes_key(self, fast_params):
        from passvault.crypto.kdf import KdfParams
        slower = KdfParams(time_cost=2, memory_cost_kib=8, parallelism=1)
        assert derive_key("pw", SALT, fast_params) != derive_key("pw", SALT, slower)

    @pytest.mark.parametrize("passphrase", ["", " ", "ünïcødé 🔑", "x" * 10_000])
    def test_any_passphrase_is_accepted(self, fast_params, passphrase):
        assert len(derive_key(passphrase, SALT, fast_params)) == KEY_LENGTH

    @pytest.mark.parametrize("size", [0, 8, 15, 33, 64])
    def test_bad_salt_length(self, fast_params, size):
        with pytest.raises(DerivationError):
            derive_key("pw", bytes(size), fast_params)

    def test_salt_must_be_bytes(self, fast_params):
        with pytest.raises(DerivationError):
            derive_key("pw", "0123456789abcdef", fast_params)

    def test_invalid_argon2_params(self):
        from passvault.crypto.kdf import KdfParams
        with pytest.raises(DerivationError):
            derive_key("pw", SALT, KdfParams(time_cost=0, memory_cost_kib=8, parallelism=1))

    def test_generate_salt(self):
        a, b = generate_salt(), generate_salt()
        assert len(a) == 16
        assert a != b
        assert len(generate_salt(32)) == 32
        with pytest.raises(DerivationError):
            generate_salt(8)

    def test_wipe_zeroes_buffer(self, fast_params):
        key = derive_key("pw", SALT, fast_params)
        wipe(key)
        assert key == bytearray(KEY_LENGTH)


class TestAead:
    """Tests for AES-256-GCM encryption."""

    KEY = bytes(range(32))

    def test_roundtrip_with_aad(self):
        nonce, ct = aead_encrypt(self.KEY, b"secret data", b"header")
        assert len(nonce) == NONCE_SIZE
        assert len(ct) == len(b"secret data") + TAG_SIZE
        assert aead_decrypt(self.KEY, nonce, ct, b"header") == b"secret data"

    def test_accepts_bytearray_key(self):
        key = bytearray(self.KEY)
        nonce, ct = aead_encrypt(key, b"data")
        assert aead_decrypt(key, nonce, ct) == b"data"

    def test_fresh_nonce_per_call(self):
        n1, c1 = aead_encrypt(self.KEY, b"same")
        n2, c2 = aead_encrypt(self.KEY, b"same")
        assert n1 != n2
        assert c1 != c2

    def test_uses_random_source_for_nonce(self, monkeypatch):
        calls = []

        def fake_urandom(n):
            calls.append(n)
            return b"\x07" * n

        monkeypatch.setattr(aead.os, "urandom", fake_urandom)
        nonce, _ = aead_encrypt(self.KEY, b"x")
        assert calls == [NONCE_SIZE]
        assert nonce == b"\x07" * NONCE_SIZE

    def test_wrong_key(self):
        nonce, ct = aead_encrypt(self.KEY, b"data")
        with pytest.raises(AuthenticationFailure):
            aead_decrypt(bytes(32), nonce, ct)

    def test_wrong_aad(self):
        nonce, ct = aead_encrypt(self.KEY, b"data", b"v1")
        with pytest.raises(AuthenticationFailure):
            aead_decrypt(self.KEY, nonce, ct, b"v2")

    def test_tampered_ciphertext(self):
        nonce, ct = aead_encrypt(self.KEY, b"data")
        tampered = bytes([ct[0] ^ 0x01]) + ct[1:]
        with pytest.raises(AuthenticationFailure):
            aead_decrypt(self.KEY, nonce, tampered)

    def test_failures_share_one_message(self):
        nonce, ct = aead_encrypt(self.KEY, b"data")
        messages = set()
        for args in ((bytes(32), nonce, ct), (self.KEY, nonce[:-1], ct), (self.KEY, nonce, ct[:4])):
            with pytest.raises(AuthenticationFailure) as exc:
                aead_decrypt(*args)
            messages.add(str(exc.value))
        assert len(messages) == 1

    def test_bad_key_length(self):
        with pytest.raises(ValueError):
            aead_encrypt(bytes(16), b"data")
