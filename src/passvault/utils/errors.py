"""Error taxonomy for the credential vault.

Messages never carry the passphrase, key material or decrypted data.
"""


class VaultError(Exception):
    """Base exception for passvault."""


class NotFound(VaultError):
    """The vault file does not exist."""


class OpenFailed(VaultError):
    """Wrong passphrase or corrupted/tampered vault (deliberately not distinguished)."""


class UnsupportedVersion(VaultError):
    """The container carries a format version this build does not understand."""

    def __init__(self, version: int):
        super().__init__(f"Unsupported vault format version: {version}")
        self.version = version


class DerivationError(VaultError):
    """Key derivation rejected its inputs."""


class IoError(VaultError):
    """Filesystem failure while reading or writing the vault."""


class MalformedData(VaultError):
    """Structurally invalid container or credential document."""


class AuthenticationFailure(VaultError):
    """AEAD tag did not verify."""


class EntryNotFound(VaultError, KeyError):
    """No credentials stored under the given application name."""

    def __str__(self) -> str:
        return Exception.__str__(self)


class InvalidEntry(VaultError, ValueError):
    """Application name or account fields are invalid."""


class SessionStateError(VaultError):
    """Operation not allowed in the current session state."""


class ConfigError(VaultError):
    """Configuration file missing or invalid."""
