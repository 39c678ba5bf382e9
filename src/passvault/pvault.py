#!/usr/bin/env python3
"""
passvault - local encrypted credential store

Maps application names to {login, password}, protected by one master
passphrase.

Vault file (big-endian):
    version   : u32     -> 1
    salt_len  : u8
    salt      : 16..32 bytes
    nonce     : 12 bytes (fresh on every save)
    ciphertext: AES-256-GCM over the JSON credential document

Commands:
  init                 Create an empty vault
  add <name> <login>   Add or update an account
  rm <name>            Remove an account
  ls                   List accounts
  get <name>           Show one account
  passwd               Change the master passphrase (new salt)
  shell                Interactive menu
  gui                  PyQt6 window

Security choices:
  - AEAD: AES-256-GCM via cryptography.hazmat, header bound as associated data
  - Key = Argon2id(SHA3-512(passphrase), salt) via argon2-cffi
  - Writes go to a temp file, fsync, then os.replace
"""
from __future__ import annotations

import logging
import sys

from passvault.ui.cli import build_parser
from passvault.utils.errors import VaultError


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        args.func(args)
    except VaultError as e:
        print(f"[!] {e}")
        sys.exit(1)
    except EOFError:
        print()
        print("[!] Input closed.")
        sys.exit(1)
    except KeyboardInterrupt:
        print()
        sys.exit(130)


if __name__ == "__main__":
    main()
