import argparse
import sys

from passvault.storage.vault import SessionState, VaultSession
from passvault.ui.constants import MASKED_SECRET, WINDOW_TITLE
from passvault.utils.core import get_store, resolve_settings
from passvault.utils.errors import NotFound, VaultError
from passvault.utils.helper import confirmed_passphrase


def cmd_gui(args: argparse.Namespace) -> None:
    try:
        from PyQt6 import QtWidgets
    except ImportError:
        print("[!] PyQt6 not installed. pip install 'passvault[gui]'")
        sys.exit(1)

    path, min_length = resolve_settings(args)

    class VaultApp(QtWidgets.QMainWindow):
        def __init__(self):
            super().__init__()
            self.session = None
            self.passphrase = None
            self.setWindowTitle(f"{WINDOW_TITLE} - {path}")
            self.resize(800, 500)

            central = QtWidgets.QWidget(self)
            self.setCentralWidget(central)
            layout = QtWidgets.QVBoxLayout(central)

            # Passphrase prompt
            self.pass_edit = QtWidgets.QLineEdit()
            self.pass_edit.setEchoMode(QtWidgets.QLineEdit.EchoMode.Password)
            self.pass_edit.setPlaceholderText("Master passphrase…")
            self.pass_edit.returnPressed.connect(self.unlock)
            self.unlock_btn = QtWidgets.QPushButton("Unlock Vault")
            self.unlock_btn.clicked.connect(self.unlock)
            self.lock_btn = QtWidgets.QPushButton("Lock")
            self.lock_btn.clicked.connect(self.lock)
            self.lock_btn.setVisible(False)

            hl = QtWidgets.QHBoxLayout()
            hl.addWidget(self.pass_edit)
            hl.addWidget(self.unlock_btn)
            hl.addWidget(self.lock_btn)
            layout.addLayout(hl)

            self.table = QtWidgets.QTableWidget(0, 3)
            self.table.setHorizontalHeaderLabels(["Application", "Login", "Password"])
            self.table.horizontalHeader().setStretchLastSection(True)
            self.table.setEditTriggers(QtWidgets.QAbstractItemView.EditTrigger.NoEditTriggers)
            self.table.setSelectionBehavior(QtWidgets.QAbstractItemView.SelectionBehavior.SelectRows)
            self.table.setSelectionMode(QtWidgets.QAbstractItemView.SelectionMode.SingleSelection)
            layout.addWidget(self.table)

            self.show_check = QtWidgets.QCheckBox("Show passwords")
            self.show_check.toggled.connect(self.populate)
            layout.addWidget(self.show_check)

            btn_row = QtWidgets.QHBoxLayout()
            self.add_btn = QtWidgets.QPushButton("Add / Edit…")
            self.add_btn.clicked.connect(self.add_entry)
            btn_row.addWidget(self.add_btn)

            self.remove_btn = QtWidgets.QPushButton("Remove Selected")
            self.remove_btn.clicked.connect(self.remove_entry)
            btn_row.addWidget(self.remove_btn)

            self.save_btn = QtWidgets.QPushButton("Save")
            self.save_btn.clicked.connect(self.save)
            btn_row.addWidget(self.save_btn)

            self.rotate_btn = QtWidgets.QPushButton("Change Master Password…")
            self.rotate_btn.clicked.connect(self.change_master_password)
            btn_row.addWidget(self.rotate_btn)
            layout.addLayout(btn_row)

            self._set_unlocked(False)
            self.pass_edit.setFocus()

        def _set_unlocked(self, unlocked: bool) -> None:
            for btn in (self.add_btn, self.remove_btn, self.save_btn, self.rotate_btn, self.show_check):
                btn.setEnabled(unlocked)
            self.pass_edit.setVisible(not unlocked)
            self.unlock_btn.setVisible(not unlocked)
            self.lock_btn.setVisible(unlocked)

        def unlock(self):
            pw = self.pass_edit.text()
            session = VaultSession(path, get_store())
            try:
                session.open(pw)
            except NotFound:
                reply = QtWidgets.QMessageBox.question(
                    self, "No Vault", f"No vault at {path}. Create a new one with this passphrase?",
                )
                if reply != QtWidgets.QMessageBox.StandardButton.Yes:
                    return
                confirm, ok = QtWidgets.QInputDialog.getText(
                    self, "New Vault", "Confirm master passphrase:", QtWidgets.QLineEdit.EchoMode.Password,
                )
                if not ok:
                    return
                if confirmed_passphrase(pw, confirm, min_length) is None:
                    QtWidgets.QMessageBox.warning(
                        self, "Error", f"Passphrases do not match or are shorter than {min_length} characters",
                    )
                    return
                path.parent.mkdir(parents=True, exist_ok=True)
                session.create()
            except VaultError as e:
                QtWidgets.QMessageBox.critical(self, "Unlock failed", str(e))
                return
            self.session = session
            self.passphrase = pw
            self.pass_edit.clear()
            self._set_unlocked(True)
            self.populate()

        def lock(self):
            if self.session is not None and self.session.state != SessionState.DISCARDED:
                self.session.discard()
            self.session = None
            self.passphrase = None
            self.table.setRowCount(0)
            self.show_check.setChecked(False)
            self._set_unlocked(False)
            self.pass_edit.setFocus()

        def populate(self, *_):
            if self.session is None:
                return
            entries = self.session.credentials.list()
            self.table.setRowCount(len(entries))
            for row, (name, details) in enumerate(entries):
                secret = details.secret if self.show_check.isChecked() else MASKED_SECRET
                for col, text in enumerate((name, details.login, secret)):
                    self.table.setItem(row, col, QtWidgets.QTableWidgetItem(text))

        def selected_name(self):
            rows = self.table.selectionModel().selectedRows()
            if not rows:
                return None
            return self.table.item(rows[0].row(), 0).text()

        def add_entry(self):
            current = self.selected_name() or ""
            details = self.session.credentials.find(current) if current else None

            dlg = QtWidgets.QDialog(self)
            dlg.setWindowTitle("Account")
            form = QtWidgets.QFormLayout(dlg)
            name_edit = QtWidgets.QLineEdit(current)
            login_edit = QtWidgets.QLineEdit(details.login if details else "")
            secret_edit = QtWidgets.QLineEdit(details.secret if details else "")
            secret_edit.setEchoMode(QtWidgets.QLineEdit.EchoMode.Password)
            form.addRow("Application", name_edit)
            form.addRow("Login", login_edit)
            form.addRow("Password", secret_edit)
            btns = QtWidgets.QDialogButtonBox(
                QtWidgets.QDialogButtonBox.StandardButton.Ok | QtWidgets.QDialogButtonBox.StandardButton.Cancel
            )
            btns.accepted.connect(dlg.accept)
            btns.rejected.connect(dlg.reject)
            form.addRow(btns)
            if dlg.exec() != QtWidgets.QDialog.DialogCode.Accepted:
                return
            try:
                self.session.credentials.add(name_edit.text(), login_edit.text(), secret_edit.text())
            except VaultError as e:
                QtWidgets.QMessageBox.warning(self, "Invalid Entry", str(e))
                return
            self.populate()

        def remove_entry(self):
            name = self.selected_name()
            if name is None:
                QtWidgets.QMessageBox.information(self, "Remove", "Select an account first")
                return
            reply = QtWidgets.QMessageBox.question(self, "Remove", f"Remove {name}?")
            if reply != QtWidgets.QMessageBox.StandardButton.Yes:
                return
            self.session.credentials.remove(name)
            self.populate()

        def save(self):
            try:
                self.session.save(self.passphrase)
            except VaultError as e:
                QtWidgets.QMessageBox.critical(self, "Save failed", str(e))
                return
            QtWidgets.QMessageBox.information(self, "Saved", "Vault saved.")

        def change_master_password(self):
            new, ok = QtWidgets.QInputDialog.getText(
                self, "Change Master Password", "New master password:", QtWidgets.QLineEdit.EchoMode.Password,
            )
            if not ok:
                return
            confirm, ok = QtWidgets.QInputDialog.getText(
                self, "Change Master Password", "Confirm password:", QtWidgets.QLineEdit.EchoMode.Password,
            )
            if not ok or confirmed_passphrase(new, confirm, min_length) is None:
                QtWidgets.QMessageBox.warning(self, "Error", "Passwords do not match or are too short")
                return
            try:
                # persist pending edits under the old passphrase first
                self.session.save(self.passphrase)
                get_store().change_passphrase(path, self.passphrase, new)
            except VaultError as e:
                QtWidgets.QMessageBox.critical(self, "Error", f"Failed to change password: {e}")
                return
            self.passphrase = new
            QtWidgets.QMessageBox.information(self, "Success", "Master password changed.")

    app = QtWidgets.QApplication(sys.argv[:1])
    w = VaultApp()
    w.show()
    sys.exit(app.exec())
