import logging
import sqlite3
from types import SimpleNamespace

import pytest

pytest.importorskip("tkinter")

from calculator_ui import LoginCalculatorApp, attempt_auth  # noqa: E402
from credentials import AuthService, CredentialStore, PasswordHasher, UserNotFoundError  # noqa: E402


def test_attempt_auth_success():
    calls = []

    def login(username, password):
        calls.append((username, password))

    assert attempt_auth(login, "ana", "secreto") is None
    assert calls == [("ana", "secreto")]


def test_attempt_auth_returns_auth_error_message():
    def login(username, password):
        raise UserNotFoundError(f"Usuario desconocido: {username}")

    assert attempt_auth(login, "nadie", "x") == "Usuario desconocido: nadie"


def test_attempt_auth_database_error_is_logged_and_reported(caplog):
    def login(username, password):
        raise sqlite3.OperationalError("database is locked")

    with caplog.at_level(logging.ERROR, logger="calculator_ui"):
        msg = attempt_auth(login, "ana", "secreto")

    assert msg
    assert any(r.exc_info and r.exc_info[0] is sqlite3.OperationalError for r in caplog.records)


def test_attempt_auth_with_closed_store(tmp_path):
    store = CredentialStore(str(tmp_path / "users.db"))
    auth = AuthService(store, PasswordHasher(rounds=4))
    store.close()

    assert attempt_auth(auth.login, "ana", "secreto")
    assert attempt_auth(auth.register, "ana", "secreto")


def _keyboard_app(focused, form_entries):
    pressed = []
    app = SimpleNamespace(
        root=SimpleNamespace(focus_get=lambda: focused),
        _form_entries=form_entries,
        _on_key=pressed.append,
    )
    return app, pressed


def test_keyboard_ignored_while_typing_in_form():
    username, password = object(), object()
    app, pressed = _keyboard_app(password, (username, password))
    LoginCalculatorApp._on_keyboard(app, "5")
    assert pressed == []


def test_keyboard_reaches_calculator_when_display_has_focus():
    display = object()
    app, pressed = _keyboard_app(display, (object(), object()))
    LoginCalculatorApp._on_keyboard(app, "5")
    assert pressed == ["5"]
