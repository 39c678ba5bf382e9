"""
Tests for the VaultSession state machine.
"""
import pytest

from passvault.storage.vault import SessionState, VaultSession
from passvault.utils.errors import NotFound, OpenFailed, SessionStateError


@pytest.fixture
def session(store, vault_path):
    return VaultSession(vault_path, store)


class TestSessionLifecycle:
    """Tests for UNINITIALIZED -> OPEN -> {SAVED | DISCARDED}."""

    def test_starts_uninitialized(self, session):
        assert session.state is SessionState.UNINITIALIZED
        with pytest.raises(SessionStateError):
            session.credentials

    def test_missing_vault_then_create_and_save(self, session, store, vault_path):
        with pytest.raises(NotFound):
            session.open("master")
        assert session.state is SessionState.UNINITIALIZED
        creds = session.create()
        assert session.state is SessionState.OPEN
        creds.add("github", "octocat", "hunter2")
        session.save("master")
        assert session.state is SessionState.SAVED
        assert store.open(vault_path, "master").find("github").secret == "hunter2"

    def test_open_existing(self, session, store, vault_path, credentials):
        store.save(vault_path, "master", credentials)
        assert session.open("master") == credentials
        assert session.state is SessionState.OPEN

    def test_failed_open_allows_fresh_attempt(self, session, store, vault_path, credentials):
        store.save(vault_path, "master", credentials)
        with pytest.raises(OpenFailed):
            session.open("wrong")
        assert session.state is SessionState.UNINITIALIZED
        assert session.open("master") == credentials

    def test_cannot_open_twice(self, session):
        session.create()
        with pytest.raises(SessionStateError):
            session.open("master")
        with pytest.raises(SessionStateError):
            session.create()

    def test_save_again_after_save(self, session, store, vault_path):
        session.create().add("a", "b", "c")
        session.save("master")
        session.credentials.add("d", "e", "f")
        session.save("master")
        assert store.open(vault_path, "master").names() == ["a", "d"]

    def test_discard_drops_credentials(self, session, vault_path):
        session.create().add("a", "b", "c")
        session.discard()
        assert session.state is SessionState.DISCARDED
        assert not vault_path.exists()
        with pytest.raises(SessionStateError):
            session.credentials
        with pytest.raises(SessionStateError):
            session.save("master")
        with pytest.raises(SessionStateError):
            session.open("master")

    def test_save_requires_open(self, session):
        with pytest.raises(SessionStateError):
            session.save("master")
        with pytest.raises(SessionStateError):
            session.discard()
