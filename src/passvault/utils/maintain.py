import argparse

from passvault.utils.core import get_new_passphrase, get_passphrase, get_store, resolve_settings
from passvault.utils.helper import prompt_passphrase


def cmd_rm(args: argparse.Namespace) -> None:
    path, _ = resolve_settings(args)
    store = get_store()
    passphrase = get_passphrase(args)
    credentials = store.open(path, passphrase)
    credentials.remove(args.name)
    store.save(path, passphrase, credentials)
    print(f"[+] Removed {args.name}")


def cmd_passwd(args: argparse.Namespace) -> None:
    """Change the master passphrase.

    The vault is decrypted with the current passphrase, then re-encrypted under
    the new one with a freshly generated salt.
    """
    path, min_length = resolve_settings(args)
    old = args.passphrase if args.passphrase is not None else prompt_passphrase("Current master passphrase: ")
    new = get_new_passphrase(args, min_length, attr="new_passphrase")
    get_store().change_passphrase(path, old, new)
    print("[+] Master passphrase changed.")
