"""
Tests for the interactive input helpers.
"""
import pytest

from passvault.utils.helper import confirmed_passphrase, prompt_new_passphrase, read_line


def answers(*values):
    it = iter(values)
    return lambda prompt: next(it)


def test_read_line_strips_newline():
    assert read_line("> ", answers("hello\r\n")) == "hello"


@pytest.mark.parametrize(
    "first, second, min_length, expected",
    [
        ("correct horse", "correct horse", 1, "correct horse"),
        ("correct horse", "correct house", 1, None),
        ("short", "short", 12, None),
        ("", "", 0, ""),
    ],
)
def test_confirmed_passphrase(first, second, min_length, expected):
    assert confirmed_passphrase(first, second, min_length) == expected


def test_prompt_new_passphrase_asks_twice():
    assert prompt_new_passphrase(4, answers("abcd", "abcd")) == "abcd"
    assert prompt_new_passphrase(4, answers("abcd", "abce")) is None
