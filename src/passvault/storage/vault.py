"""VaultStore: open/save the encrypted credential container on disk.

Security Note:
    Never log passphrases, derived keys, secrets or ciphertext. Only paths,
    entry counts and the salt policy are logged.
"""
import enum
import logging
import os
import tempfile

from pathlib import Path

from passvault.crypto.aead import aead_decrypt, aead_encrypt
from passvault.crypto.kdf import DEFAULT_KDF_PARAMS, DEFAULT_SALT_LEN, KdfParams, derive_key, generate_salt, wipe
from passvault.storage.container import header_bytes, pack, unpack
from passvault.utils.dataModels import VAULT_FORMAT_VERSION, CredentialSet, VaultContainer, decode, encode
from passvault.utils.errors import (
    AuthenticationFailure,
    IoError,
    MalformedData,
    NotFound,
    OpenFailed,
    SessionStateError,
)

logger = logging.getLogger("passvault.vault")

_OPEN_FAILED = "unable to open vault: wrong passphrase or corrupted file"


def _fsync_dir(directory: Path) -> None:
    if not hasattr(os, "O_DIRECTORY"):
        return
    fd = os.open(directory, os.O_RDONLY | os.O_DIRECTORY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)


def atomic_write(path: Path, data: bytes) -> None:
    """Write data to a temp file beside path, fsync it, then rename over path.

    The previous file at path stays intact until the rename succeeds.
    """
    directory = path.parent
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=directory)
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
    try:
        _fsync_dir(directory)
    except OSError as e:
        # the rename already happened; only its durability is unconfirmed
        logger.warning("Could not fsync directory %s: %s", directory, e)


class VaultStore:
    """Stateless open/save operations against a vault file."""

    def __init__(self, kdf_params: KdfParams = DEFAULT_KDF_PARAMS):
        self.kdf_params = kdf_params

    @staticmethod
    def exists(path: str | os.PathLike) -> bool:
        return Path(path).is_file()

    @staticmethod
    def _read(path: Path) -> bytes:
        try:
            return path.read_bytes()
        except FileNotFoundError:
            raise NotFound(f"Vault not found: {path}") from None
        except OSError as e:
            raise IoError(f"Failed to read vault {path}: {e.strerror or e}") from e

    def open(self, path: str | os.PathLike, passphrase: str) -> CredentialSet:
        """Decrypt and decode the vault at path.

        Raises:
            NotFound: the file does not exist.
            UnsupportedVersion: the container was written by an unknown format.
            OpenFailed: wrong passphrase, tampering or corruption.
            IoError: the file could not be read.
        """
        path = Path(path)
        data = self._read(path)
        try:
            container = unpack(data)
        except MalformedData:
            # spend the same derivation time as a wrong passphrase would
            wipe(derive_key(passphrase, bytes(DEFAULT_SALT_LEN), self.kdf_params))
            raise OpenFailed(_OPEN_FAILED) from None

        key = derive_key(passphrase, container.salt, self.kdf_params)
        try:
            aad = header_bytes(container.format_version, container.salt)
            plaintext = aead_decrypt(key, container.nonce, container.ciphertext, aad)
            credentials = decode(plaintext)
        except (AuthenticationFailure, MalformedData):
            raise OpenFailed(_OPEN_FAILED) from None
        finally:
            wipe(key)

        logger.debug("Vault opened: path=%s entries=%d", path, len(credentials))
        return credentials

    def _existing_salt(self, path: Path) -> bytes | None:
        try:
            data = self._read(path)
        except NotFound:
            return None
        try:
            return unpack(data).salt
        except MalformedData:
            logger.warning("Existing vault %s has a malformed header; generating a new salt", path)
            return None

    def save(
        self,
        path: str | os.PathLike,
        passphrase: str,
        credentials: CredentialSet,
        rotate_salt: bool = False,
    ) -> None:
        """Encrypt credentials and atomically replace the vault at path.

        The stored salt is reused when a valid container exists; a fresh salt
        is generated on first save or when rotate_salt is set. Every save uses
        a fresh nonce.
        """
        path = Path(path)
        plaintext = encode(credentials)

        salt = None if rotate_salt else self._existing_salt(path)
        if salt is None:
            salt = generate_salt()
            logger.debug("Using fresh salt for %s", path)

        key = derive_key(passphrase, salt, self.kdf_params)
        try:
            aad = header_bytes(VAULT_FORMAT_VERSION, salt)
            nonce, ct = aead_encrypt(key, plaintext, aad)
        finally:
            wipe(key)

        data = pack(VaultContainer(format_version=VAULT_FORMAT_VERSION, salt=salt, nonce=nonce, ciphertext=ct))
        try:
            atomic_write(path, data)
        except OSError as e:
            raise IoError(f"Failed to write vault {path}: {e.strerror or e}") from e
        logger.info("Vault saved: path=%s entries=%d", path, len(credentials))

    def change_passphrase(self, path: str | os.PathLike, old_passphrase: str, new_passphrase: str) -> CredentialSet:
        """Re-encrypt the vault under a new passphrase and a fresh salt."""
        credentials = self.open(path, old_passphrase)
        self.save(path, new_passphrase, credentials, rotate_salt=True)
        logger.info("Master passphrase changed for %s", path)
        return credentials


class SessionState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    OPEN = "open"
    SAVED = "saved"
    DISCARDED = "discarded"


class VaultSession:
    """One process's ownership of a vault file and its decrypted credentials.

    UNINITIALIZED -> OPEN -> {SAVED | DISCARDED}. A failed open leaves the
    session UNINITIALIZED; opening again is a fresh attempt.
    """

    def __init__(self, path: str | os.PathLike, store: VaultStore | None = None):
        self.path = Path(path)
        self.store = store or VaultStore()
        self.state = SessionState.UNINITIALIZED
        self._credentials: CredentialSet | None = None

    @property
    def credentials(self) -> CredentialSet:
        if self._credentials is None:
            raise SessionStateError(f"No credentials available in state {self.state.value}")
        return self._credentials

    def _require(self, *states: SessionState) -> None:
        if self.state not in states:
            raise SessionStateError(f"Operation not allowed in state {self.state.value}")

    def open(self, passphrase: str) -> CredentialSet:
        self._require(SessionState.UNINITIALIZED)
        self._credentials = self.store.open(self.path, passphrase)
        self.state = SessionState.OPEN
        return self._credentials

    def create(self) -> CredentialSet:
        """Start an empty credential set (after NotFound, by the caller's choice)."""
        self._require(SessionState.UNINITIALIZED)
        self._credentials = CredentialSet()
        self.state = SessionState.OPEN
        return self._credentials

    def save(self, passphrase: str) -> None:
        self._require(SessionState.OPEN, SessionState.SAVED)
        self.store.save(self.path, passphrase, self.credentials)
        self.state = SessionState.SAVED

    def discard(self) -> None:
        self._require(SessionState.OPEN, SessionState.SAVED)
        self._credentials = None
        self.state = SessionState.DISCARDED
