import pytest

from passvault.crypto.kdf import KdfParams
from passvault.storage.vault import VaultStore
from passvault.utils.dataModels import CredentialSet

# Argon2 minimum cost; keeps the suite fast. Production uses DEFAULT_KDF_PARAMS.
FAST_KDF = KdfParams(time_cost=1, memory_cost_kib=8, parallelism=1)


@pytest.fixture
def fast_params():
    return FAST_KDF


@pytest.fixture
def store():
    return VaultStore(FAST_KDF)


@pytest.fixture
def vault_path(tmp_path):
    return tmp_path / "vault.enc"


@pytest.fixture
def credentials():
    creds = CredentialSet()
    creds.add("github", "octocat", "hunter2")
    creds.add("mail", "alice@example.com", "correct horse battery staple")
    creds.add("bank 🏦", "ålice", 'p"a,s:s\n{}')
    return creds


@pytest.fixture
def fast_cli(monkeypatch):
    """Make every CLI command use the fast KDF store."""
    monkeypatch.setattr("passvault.utils.core.get_store", lambda: VaultStore(FAST_KDF))
    monkeypatch.setattr("passvault.utils.maintain.get_store", lambda: VaultStore(FAST_KDF))
