from dataclasses import dataclass
import os

from argon2.exceptions import Argon2Error
from argon2.low_level import hash_secret_raw, Type as Argon2Type
from cryptography.hazmat.primitives import hashes

from passvault.utils.errors import DerivationError

KEY_LENGTH = 32  # AES-256
SALT_MIN_LEN = 16
SALT_MAX_LEN = 32
DEFAULT_SALT_LEN = 16


@dataclass(frozen=True)
class KdfParams:
    time_cost: int = 3
    memory_cost_kib: int = 65536  # 64 MiB
    parallelism: int = 4


DEFAULT_KDF_PARAMS = KdfParams()


def sha3_512_bytes(data: bytes) -> bytes:
    digest = hashes.Hash(hashes.SHA3_512())
    digest.update(data)
    return digest.finalize()


def generate_salt(size: int = DEFAULT_SALT_LEN) -> bytes:
    if not SALT_MIN_LEN <= size <= SALT_MAX_LEN:
        raise DerivationError(f"salt length must be {SALT_MIN_LEN}..{SALT_MAX_LEN} bytes, got {size}")
    return os.urandom(size)


def derive_key(passphrase: str, salt: bytes, params: KdfParams = DEFAULT_KDF_PARAMS) -> bytearray:
    """Key = Argon2id(SHA3-512(passphrase), salt) -> 32 bytes.

    Returned as a bytearray so the caller can wipe() it once done.
    """
    if not isinstance(salt, (bytes, bytearray)):
        raise DerivationError("salt must be bytes")
    if not SALT_MIN_LEN <= len(salt) <= SALT_MAX_LEN:
        raise DerivationError(f"salt length must be {SALT_MIN_LEN}..{SALT_MAX_LEN} bytes, got {len(salt)}")
    prehash = sha3_512_bytes(passphrase.encode("utf-8"))
    try:
        key = hash_secret_raw(
            secret=prehash,
            salt=bytes(salt),
            time_cost=params.time_cost,
            memory_cost=params.memory_cost_kib,
            parallelism=params.parallelism,
            hash_len=KEY_LENGTH,
            type=Argon2Type.ID,
        )
    except Argon2Error as e:
        raise DerivationError(f"invalid Argon2 parameters: {e}") from None
    return bytearray(key)


def wipe(buf: bytearray) -> None:
    """Overwrite a key buffer with zeros in place."""
    for i in range(len(buf)):
        buf[i] = 0
