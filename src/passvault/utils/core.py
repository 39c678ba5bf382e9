import argparse
import logging
import sys

from pathlib import Path

from passvault.storage.vault import VaultSession, VaultStore
from passvault.ui.repl import format_entries, run_shell
from passvault.utils.config import DEFAULT_CONFIG_FILE, load_config
from passvault.utils.errors import EntryNotFound, NotFound
from passvault.utils.helper import prompt_new_passphrase, prompt_passphrase, read_line
from passvault.utils.dataModels import CredentialSet

logger = logging.getLogger("passvault.cli")


def get_store() -> VaultStore:
    return VaultStore()


def resolve_settings(args: argparse.Namespace) -> tuple[Path, int]:
    """Vault path and minimum new-passphrase length from --vault or the config file."""
    if getattr(args, "vault", None):
        return Path(args.vault), 1
    config = load_config(getattr(args, "config", None) or DEFAULT_CONFIG_FILE)
    if not getattr(args, "verbose", False):
        logging.getLogger("passvault").setLevel(config.log_level_value)
    logger.debug("Using vault %s from config", config.data_file)
    return config.data_file, config.min_passphrase_length


def get_passphrase(args: argparse.Namespace) -> str:
    if getattr(args, "passphrase", None) is not None:
        return args.passphrase
    return prompt_passphrase()


def get_new_passphrase(args: argparse.Namespace, min_length: int, attr: str = "passphrase") -> str:
    given = getattr(args, attr, None)
    if given is not None:
        if len(given) < min_length:
            print(f"[!] Passphrase must be at least {min_length} characters.")
            sys.exit(1)
        return given
    new = prompt_new_passphrase(min_length)
    if new is None:
        print(f"[!] Passphrases do not match or are shorter than {min_length} characters.")
        sys.exit(1)
    return new


def cmd_init(args: argparse.Namespace) -> None:
    path, min_length = resolve_settings(args)
    store = get_store()
    if store.exists(path) and not args.force:
        print(f"[!] {path} exists. Use --force to overwrite.")
        sys.exit(1)
    path.parent.mkdir(parents=True, exist_ok=True)
    passphrase = get_new_passphrase(args, min_length)
    store.save(path, passphrase, CredentialSet(), rotate_salt=True)
    print(f"[+] Initialized vault at {path}")


def cmd_add(args: argparse.Namespace) -> None:
    path, _ = resolve_settings(args)
    store = get_store()
    passphrase = get_passphrase(args)
    credentials = store.open(path, passphrase)
    secret = args.secret if args.secret is not None else prompt_passphrase(f"Password for {args.name}: ")
    replaced = credentials.add(args.name, args.login, secret)
    store.save(path, passphrase, credentials)
    print(f"[+] {'Updated' if replaced else 'Added'} {args.name}")


def cmd_ls(args: argparse.Namespace) -> None:
    path, _ = resolve_settings(args)
    credentials = get_store().open(path, get_passphrase(args))
    if not len(credentials):
        print("(empty)")
        return
    for line in format_entries(credentials.list(), show_secrets=args.show):
        print(line)


def cmd_get(args: argparse.Namespace) -> None:
    path, _ = resolve_settings(args)
    credentials = get_store().open(path, get_passphrase(args))
    details = credentials.find(args.name)
    if details is None:
        raise EntryNotFound(f"No such application: {args.name}")
    print(f"Login: {details.login}")
    print(f"Password: {details.secret}")


def cmd_shell(args: argparse.Namespace) -> None:
    path, min_length = resolve_settings(args)
    session = VaultSession(path, get_store())
    print("Welcome to the password manager!")
    try:
        passphrase = get_passphrase(args)
        session.open(passphrase)
    except NotFound:
        try:
            answer = read_line(f"No vault at {path}. Create a new one? [y/N] ").strip().lower()
        except EOFError:
            answer = ""
        if answer not in ("y", "yes"):
            print("[!] No vault opened.")
            sys.exit(1)
        passphrase = get_new_passphrase(args, min_length)
        path.parent.mkdir(parents=True, exist_ok=True)
        session.create()
    run_shell(session, passphrase)
