import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from typing import Tuple

from passvault.utils.errors import AuthenticationFailure

NONCE_SIZE = 12  # 96-bit
TAG_SIZE = 16
KEY_SIZE = 32

_AUTH_FAILED = "authentication failed"


def _cipher(key: bytes | bytearray) -> AESGCM:
    if len(key) != KEY_SIZE:
        raise ValueError(f"AES-256-GCM key must be {KEY_SIZE} bytes")
    return AESGCM(bytes(key))


def aead_encrypt(key: bytes | bytearray, plaintext: bytes, aad: bytes | None = None) -> Tuple[bytes, bytes]:
    # A fresh random nonce per call; callers cannot supply one.
    nonce = os.urandom(NONCE_SIZE)
    ct = _cipher(key).encrypt(nonce, plaintext, aad)
    return nonce, ct


def aead_decrypt(key: bytes | bytearray, nonce: bytes, ct: bytes, aad: bytes | None = None) -> bytes:
    aesgcm = _cipher(key)
    if len(nonce) != NONCE_SIZE or len(ct) < TAG_SIZE:
        raise AuthenticationFailure(_AUTH_FAILED)
    try:
        return aesgcm.decrypt(nonce, ct, aad)
    except InvalidTag:
        raise AuthenticationFailure(_AUTH_FAILED) from None
