import argparse

from passvault.ui.gui import cmd_gui
from passvault.utils.config import DEFAULT_CONFIG_FILE
from passvault.utils.core import cmd_add, cmd_get, cmd_init, cmd_ls, cmd_shell
from passvault.utils.maintain import cmd_passwd, cmd_rm


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-c", "--config", default=DEFAULT_CONFIG_FILE, help="Path to the configuration file")
    common.add_argument("--vault", help="Vault file path (overrides data_file from the config)")
    common.add_argument("--passphrase", help="Master passphrase (prompted for when omitted)")
    common.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    p = argparse.ArgumentParser(description="Encrypted credential store")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_init = sub.add_parser("init", parents=[common], help="Create an empty vault")
    p_init.add_argument("--force", action="store_true", help="Overwrite an existing vault")
    p_init.set_defaults(func=cmd_init)

    p_add = sub.add_parser("add", parents=[common], help="Add or update an account")
    p_add.add_argument("name", help="Application name")
    p_add.add_argument("login", help="Login / user name")
    p_add.add_argument("--secret", help="Password (prompted for when omitted)")
    p_add.set_defaults(func=cmd_add)

    p_rm = sub.add_parser("rm", parents=[common], help="Remove an account")
    p_rm.add_argument("name", help="Application name")
    p_rm.set_defaults(func=cmd_rm)

    p_ls = sub.add_parser("ls", parents=[common], help="List accounts")
    p_ls.add_argument("--show", action="store_true", help="Show passwords")
    p_ls.set_defaults(func=cmd_ls)

    p_get = sub.add_parser("get", parents=[common], help="Show one account")
    p_get.add_argument("name", help="Application name")
    p_get.set_defaults(func=cmd_get)

    p_pw = sub.add_parser("passwd", parents=[common], help="Change the master passphrase")
    p_pw.add_argument("--new-passphrase", help="New passphrase (prompted for when omitted)")
    p_pw.set_defaults(func=cmd_passwd)

    p_sh = sub.add_parser("shell", parents=[common], help="Interactive menu")
    p_sh.set_defaults(func=cmd_shell)

    p_gui = sub.add_parser("gui", parents=[common], help="Launch the PyQt6 window")
    p_gui.set_defaults(func=cmd_gui)

    return p
