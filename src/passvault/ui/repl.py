"""Menu shell over a VaultSession.

``dispatch`` is a pure command interpreter over an explicit CredentialSet;
``run_shell`` is the interactive loop around it and takes its I/O functions
as arguments.
"""
from dataclasses import dataclass, field
from getpass import getpass
from typing import Callable, List, Tuple

from passvault.storage.vault import SessionState, VaultSession
from passvault.ui.constants import MASKED_SECRET
from passvault.utils.dataModels import AccountDetails, CredentialSet
from passvault.utils.errors import EntryNotFound, InvalidEntry, VaultError
from passvault.utils.helper import Reader, read_line

_ARITY = {"add": 3, "remove": 1, "find": 1, "list": 0}


@dataclass
class CommandResult:
    ok: bool
    message: str = ""
    entries: List[Tuple[str, AccountDetails]] = field(default_factory=list)
    changed: bool = False


def dispatch(credentials: CredentialSet, command: str, *args: str) -> CommandResult:
    expected = _ARITY.get(command)
    if expected is None:
        return CommandResult(False, f"Unknown command: {command}")
    if len(args) != expected:
        return CommandResult(False, f"{command} expects {expected} argument(s), got {len(args)}")

    if command == "add":
        name, login, secret = args
        try:
            replaced = credentials.add(name, login, secret)
        except InvalidEntry as e:
            return CommandResult(False, str(e))
        return CommandResult(True, f"Account {'updated' if replaced else 'added'}: {name}", changed=True)

    if command == "remove":
        try:
            credentials.remove(args[0])
        except EntryNotFound as e:
            return CommandResult(False, str(e))
        return CommandResult(True, f"Account removed: {args[0]}", changed=True)

    if command == "find":
        details = credentials.find(args[0])
        if details is None:
            return CommandResult(False, f"No such application: {args[0]}")
        return CommandResult(True, entries=[(args[0], details)])

    return CommandResult(True, entries=credentials.list())


def format_entries(entries: List[Tuple[str, AccountDetails]], show_secrets: bool = True) -> List[str]:
    lines = []
    for name, d in entries:
        secret = d.secret if show_secrets else MASKED_SECRET
        lines.append(f"- Application: {name}, Login: {d.login}, Password: {secret}")
    return lines


MENU = """
Options:
1. Add an account
2. Display accounts and passwords
3. Find an account
4. Remove an account
5. Save
6. Save and quit
7. Quit without saving"""


def run_shell(
    session: VaultSession,
    passphrase: str,
    input_fn: Reader | None = None,
    secret_fn: Reader | None = None,
    out: Callable[[str], None] | None = None,
) -> SessionState:
    """Run the menu loop until the user quits. Returns the final session state."""
    input_fn = input_fn or input
    secret_fn = secret_fn or getpass
    out = out or print
    dirty = False

    def save() -> bool:
        try:
            session.save(passphrase)
        except VaultError as e:
            out(f"[!] {e}")
            return False
        out("[+] Data saved.")
        return True

    def read_command(choice: str) -> CommandResult | None:
        if choice == "1":
            name = read_line("Enter application name: ", input_fn)
            login = read_line("Enter login: ", input_fn)
            secret = read_line("Enter password: ", secret_fn)
            return dispatch(session.credentials, "add", name, login, secret)
        if choice == "2":
            result = dispatch(session.credentials, "list")
            if result.ok and not result.entries:
                result.message = "No accounts registered."
            return result
        if choice == "3":
            return dispatch(session.credentials, "find", read_line("Enter application name: ", input_fn))
        if choice == "4":
            return dispatch(session.credentials, "remove", read_line("Enter application name: ", input_fn))
        return None

    while True:
        out(MENU)
        try:
            choice = read_line("Choose an option: ", input_fn).strip()
            result = read_command(choice)
        except EOFError:
            # end of input at any prompt quits without saving
            out("")
            choice, result = "7", None

        if result is None:
            if choice == "5":
                if save():
                    dirty = False
            elif choice == "6":
                if save():
                    out("Goodbye!")
                    return session.state
            elif choice == "7":
                if dirty:
                    out("Unsaved changes discarded.")
                session.discard()
                out("Goodbye!")
                return session.state
            else:
                out("Invalid choice, please try again.")
            continue

        dirty = dirty or result.changed
        if result.message:
            out(("[+] " if result.ok else "[!] ") + result.message)
        for line in format_entries(result.entries):
            out(line)
