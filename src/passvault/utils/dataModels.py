import json

from dataclasses import dataclass
from typing import Dict, Iterator, List, Tuple

from passvault.utils.errors import EntryNotFound, InvalidEntry, MalformedData

VAULT_FORMAT_VERSION = 1
CODEC_VERSION = 1


@dataclass(frozen=True)
class AccountDetails:
    login: str
    secret: str

    def to_dict(self) -> Dict[str, str]:
        return {"login": self.login, "secret": self.secret}


@dataclass(frozen=True)
class VaultContainer:
    format_version: int
    salt: bytes
    nonce: bytes
    ciphertext: bytes


class CredentialSet:
    """Application name -> AccountDetails. Order is irrelevant; names are unique."""

    def __init__(self, accounts: Dict[str, AccountDetails] | None = None):
        self._accounts: Dict[str, AccountDetails] = {}
        for name, details in (accounts or {}).items():
            self.add(name, details.login, details.secret)

    @staticmethod
    def _check_name(name: str) -> None:
        if not isinstance(name, str) or not name:
            raise InvalidEntry("application name must be a non-empty string")

    def add(self, name: str, login: str, secret: str) -> bool:
        """Store credentials for name, replacing any existing entry.

        Returns True if an existing entry was overwritten.
        """
        self._check_name(name)
        if not isinstance(login, str) or not isinstance(secret, str):
            raise InvalidEntry("login and secret must be strings")
        replaced = name in self._accounts
        self._accounts[name] = AccountDetails(login=login, secret=secret)
        return replaced

    def remove(self, name: str) -> AccountDetails:
        try:
            return self._accounts.pop(name)
        except KeyError:
            raise EntryNotFound(f"No such application: {name}") from None

    def find(self, name: str) -> AccountDetails | None:
        return self._accounts.get(name)

    def list(self) -> List[Tuple[str, AccountDetails]]:
        return sorted(self._accounts.items())

    def names(self) -> List[str]:
        return sorted(self._accounts)

    def __len__(self) -> int:
        return len(self._accounts)

    def __contains__(self, name: object) -> bool:
        return name in self._accounts

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CredentialSet):
            return NotImplemented
        return self._accounts == other._accounts

    def __repr__(self) -> str:
        # secrets stay out of reprs and tracebacks
        return f"CredentialSet(names={self.names()!r})"

    def to_bytes(self) -> bytes:
        doc = {
            "version": CODEC_VERSION,
            "accounts": {name: d.to_dict() for name, d in self._accounts.items()},
        }
        return json.dumps(doc, ensure_ascii=False, separators=(",", ":"), sort_keys=True).encode("utf-8")

    @staticmethod
    def from_bytes(b: bytes) -> "CredentialSet":
        try:
            obj = json.loads(b.decode("utf-8"))
        except (UnicodeDecodeError, ValueError, RecursionError):
            raise MalformedData("credential document is not valid UTF-8 JSON") from None
        if not isinstance(obj, dict):
            raise MalformedData("credential document must be an object")
        version = obj.get("version")
        if type(version) is not int or version != CODEC_VERSION:
            raise MalformedData("unknown credential document version")
        accounts = obj.get("accounts")
        if not isinstance(accounts, dict):
            raise MalformedData("'accounts' must be an object")

        creds = CredentialSet()
        for name, rec in accounts.items():
            if not name:
                raise MalformedData("empty application name")
            if not isinstance(rec, dict) or set(rec) != {"login", "secret"}:
                raise MalformedData("invalid account record")
            if not isinstance(rec["login"], str) or not isinstance(rec["secret"], str):
                raise MalformedData("invalid account record")
            creds.add(name, rec["login"], rec["secret"])
        return creds


def encode(credentials: CredentialSet) -> bytes:
    return credentials.to_bytes()


def decode(data: bytes) -> CredentialSet:
    return CredentialSet.from_bytes(data)
