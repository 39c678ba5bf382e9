from getpass import getpass
from typing import Callable

Reader = Callable[[str], str]


def read_line(prompt: str, input_fn: Reader | None = None) -> str:
    """One line of interactive input with the trailing newline removed."""
    return (input_fn or input)(prompt).rstrip("\r\n")


def prompt_passphrase(prompt: str = "Master passphrase: ", secret_fn: Reader | None = None) -> str:
    return read_line(prompt, secret_fn or getpass)


def confirmed_passphrase(first: str, second: str, min_length: int = 1) -> str | None:
    """The new passphrase if both entries agree and it is long enough, else None."""
    if first != second or len(first) < min_length:
        return None
    return first


def prompt_new_passphrase(min_length: int = 1, secret_fn: Reader | None = None) -> str | None:
    """Ask twice for a new passphrase. Returns None on mismatch or if too short."""
    first = prompt_passphrase("New master passphrase: ", secret_fn)
    second = prompt_passphrase("Confirm master passphrase: ", secret_fn)
    return confirmed_passphrase(first, second, min_length)
