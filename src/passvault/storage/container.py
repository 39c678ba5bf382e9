"""Binary vault container.

Layout (big-endian):
    version   : u32     -> 1
    salt_len  : u8      -> 16..32
    salt      : salt_len bytes
    nonce     : 12 bytes
    ciphertext: remaining bytes (AES-256-GCM, 16-byte tag appended)

The version/salt_len/salt prefix is authenticated as AEAD associated data.
"""
import struct

from passvault.crypto.aead import NONCE_SIZE, TAG_SIZE
from passvault.crypto.kdf import SALT_MAX_LEN, SALT_MIN_LEN
from passvault.utils.dataModels import VAULT_FORMAT_VERSION, VaultContainer
from passvault.utils.errors import MalformedData, UnsupportedVersion

_VERSION_FMT = ">I"
_VERSION_SIZE = struct.calcsize(_VERSION_FMT)
_PREFIX_FMT = ">IB"  # version, salt_len
_PREFIX_SIZE = struct.calcsize(_PREFIX_FMT)


def header_bytes(version: int, salt: bytes) -> bytes:
    return struct.pack(_PREFIX_FMT, version, len(salt)) + bytes(salt)


def pack(container: VaultContainer) -> bytes:
    if not SALT_MIN_LEN <= len(container.salt) <= SALT_MAX_LEN:
        raise MalformedData("salt length out of range")
    if len(container.nonce) != NONCE_SIZE:
        raise MalformedData("nonce must be 12 bytes")
    return header_bytes(container.format_version, container.salt) + container.nonce + container.ciphertext


def read_version(data: bytes) -> int:
    if len(data) < _VERSION_SIZE:
        raise MalformedData("vault file is too small or corrupt")
    (version,) = struct.unpack(_VERSION_FMT, data[:_VERSION_SIZE])
    return version


def unpack(data: bytes) -> VaultContainer:
    # Version is checked first: unknown formats are never parsed further.
    version = read_version(data)
    if version != VAULT_FORMAT_VERSION:
        raise UnsupportedVersion(version)
    if len(data) < _PREFIX_SIZE:
        raise MalformedData("vault file is too small or corrupt")
    _, salt_len = struct.unpack(_PREFIX_FMT, data[:_PREFIX_SIZE])
    if not SALT_MIN_LEN <= salt_len <= SALT_MAX_LEN:
        raise MalformedData("salt length out of range")
    salt_end = _PREFIX_SIZE + salt_len
    nonce_end = salt_end + NONCE_SIZE
    if len(data) < nonce_end + TAG_SIZE:
        raise MalformedData("vault file is too small or corrupt")
    return VaultContainer(
        format_version=version,
        salt=data[_PREFIX_SIZE:salt_end],
        nonce=data[salt_end:nonce_end],
        ciphertext=data[nonce_end:],
    )
