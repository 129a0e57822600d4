"""Almacén de usuarios (sqlite3) y verificación de contraseñas (bcrypt)."""

import logging
import sqlite3
import threading

try:
    import bcrypt
except ImportError as exc:  # pragma: no cover
    raise ImportError(
        "bcrypt no está instalado. Instala con: pip install bcrypt"
    ) from exc


logger = logging.getLogger(__name__)

DEFAULT_ROUNDS = 14

_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER NOT NULL PRIMARY KEY AUTOINCREMENT,
    username TEXT NOT NULL UNIQUE,
    hashed_password TEXT NOT NULL
)
"""


# ── Errores ──────────────────────────────────────────────────────

class AuthError(Exception):
    """Error base de autenticación."""


class UserNotFoundError(AuthError):
    pass


class DuplicateUsernameError(AuthError):
    pass


class PasswordMismatchError(AuthError):
    pass


# ── Persistencia ─────────────────────────────────────────────────

class CredentialStore:
    """Tabla `users` con nombre único y hash de contraseña."""

    def __init__(self, path: str = "users.db"):
        self.path = path
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(path, check_same_thread=False)
        with self._conn:
            self._conn.execute(_SCHEMA)

    def lookup(self, username: str) -> str | None:
        with self._lock:
            row = self._conn.execute(
                "SELECT hashed_password FROM users WHERE username = ?",
                (username,),
            ).fetchone()
        return row[0] if row else None

    def insert(self, username: str, password_hash: str):
        try:
            with self._lock, self._conn:
                self._conn.execute(
                    "INSERT INTO users (username, hashed_password) VALUES (?, ?)",
                    (username, password_hash),
                )
        except sqlite3.IntegrityError as exc:
            raise DuplicateUsernameError(f"El usuario ya existe: {username}") from exc

    def close(self):
        self._conn.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class PasswordHasher:
    """Hash bcrypt con coste configurable."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=self.rounds))
        return hashed.decode("ascii")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("ascii"))
        except ValueError:
            # Hash corrupto o con formato desconocido
            return False


# ── Servicio ─────────────────────────────────────────────────────

class AuthService:
    """Inicio de sesión y registro sobre un almacén y un hasher."""

    def __init__(self, store: CredentialStore, hasher: PasswordHasher):
        self.store = store
        self.hasher = hasher

    def login(self, username: str, password: str):
        stored = self.store.lookup(username)
        if stored is None:
            logger.info("Invalid username: %s", username)
            raise UserNotFoundError(f"Usuario desconocido: {username}")
        if not self.hasher.verify(password, stored):
            logger.info("Invalid password for user: %s", username)
            raise PasswordMismatchError("Contraseña incorrecta")
        logger.info("Successfully logged in: %s", username)

    def register(self, username: str, password: str):
        if not username or not password:
            raise ValueError("Usuario y contraseña son obligatorios")
        password_hash = self.hasher.hash(password)
        self.store.insert(username, password_hash)
        logger.info("User registered successfully: %s", username)
