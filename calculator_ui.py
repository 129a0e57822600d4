"""
Interfaz gráfica: formulario de acceso y calculadora básica.

Usa tkinter. El hash de contraseñas (bcrypt) se ejecuta en un hilo
aparte para no bloquear la interfaz.
"""

import logging
import threading
import tkinter as tk
from tkinter import font as tkfont

from credentials import AuthError
from expression_buffer import BACKSPACE, CLEAR, ExpressionBuffer
from expression_engine import EvaluationError, ExpressionEngine


logger = logging.getLogger(__name__)


def attempt_auth(action, username: str, password: str) -> str | None:
    """Ejecuta login o registro; devuelve el mensaje de error o None."""
    try:
        action(username, password)
    except (AuthError, ValueError) as exc:
        logger.warning("%s failed for user %r: %s", action.__name__, username, exc)
        return str(exc) or type(exc).__name__
    except Exception:
        logger.exception("Unexpected error in %s for user %r", action.__name__, username)
        return "Error interno, consulta el registro"
    return None


# ═════════════════════════════════════════════════════════════════
#  Ventana de registro
# ═════════════════════════════════════════════════════════════════

class RegistrationWindow:
    """Formulario de alta de usuario en una ventana secundaria."""

    def __init__(self, app: "LoginCalculatorApp"):
        self.app = app
        self.window = tk.Toplevel(app.root)
        self.window.title("Register")
        self.window.geometry("300x200")
        self.window.configure(bg=app.C["bg"])

        tk.Label(self.window, text="Registration Form", font=app._f_title,
                 bg=app.C["bg"], fg=app.C["label_fg"]).pack(pady=(10, 6))
        self.username_var = tk.StringVar()
        self.password_var = tk.StringVar()
        app._make_entry(self.window, self.username_var).pack(fill="x", padx=12, pady=2)
        app._make_entry(self.window, self.password_var, show="*").pack(fill="x", padx=12, pady=2)

        self.status_var = tk.StringVar()
        tk.Label(self.window, textvariable=self.status_var, font=app._f_small,
                 bg=app.C["bg"], fg=app.C["error_fg"]).pack(pady=2)

        self.confirm_btn = app._make_button(self.window, "Register", self._on_confirm)
        self.confirm_btn.pack(pady=6)

    def _on_confirm(self):
        username = self.username_var.get()
        password = self.password_var.get()
        self.confirm_btn.config(state="disabled")

        def _run():
            msg = attempt_auth(self.app.auth.register, username, password)
            if msg is None:
                self.app.root.after(0, self._on_registered)
            else:
                self.app.root.after(0, lambda: self._show_error(msg))

        threading.Thread(target=_run, daemon=True).start()

    def _show_error(self, msg: str):
        self.status_var.set(msg)
        self.confirm_btn.config(state="normal")

    def _on_registered(self):
        self.app.status_var.set("Usuario registrado")
        self.window.destroy()


# ═════════════════════════════════════════════════════════════════
#  Aplicación principal
# ═════════════════════════════════════════════════════════════════

class LoginCalculatorApp:
    """Ventana principal: acceso de usuarios y calculadora."""

    # ── Paleta de colores ────────────────────────────────────────
    C = {
        "bg":         "#1E1E2E",
        "display_bg": "#181825",
        "num":        "#313244",
        "num_fg":     "#CDD6F4",
        "op":         "#F38BA8",
        "op_fg":      "#1E1E2E",
        "special":    "#585B70",
        "special_fg": "#CDD6F4",
        "equals":     "#89B4FA",
        "equals_fg":  "#1E1E2E",
        "label_fg":   "#BAC2DE",
        "result_fg":  "#A6E3A1",
        "error_fg":   "#F38BA8",
    }

    # ── Teclado ──────────────────────────────────────────────────
    #  Cada fila es una lista de (texto, tipo_color)

    KEYPAD = [
        [("7", "num"), ("8", "num"), ("9", "num"), ("/", "op")],
        [("4", "num"), ("5", "num"), ("6", "num"), ("*", "op")],
        [("1", "num"), ("2", "num"), ("3", "num"), ("-", "op")],
        [("0", "num"), (".", "num"), ("=", "equals"), ("+", "op")],
        [(CLEAR, "special"), (BACKSPACE, "special")],
    ]

    # ────────────────────────────────────────────────────────────

    def __init__(self, root: tk.Tk, auth, engine=None):
        self.root = root
        self.root.title("Login App")
        self.root.configure(bg=self.C["bg"])

        self.auth = auth
        self.buffer = ExpressionBuffer(
            engine if engine is not None else ExpressionEngine()
        )

        self._init_fonts()
        self._create_login_form()
        self._create_display()
        self._create_keypad()
        self._bind_keyboard()

    # ── Fuentes ──────────────────────────────────────────────────

    def _init_fonts(self):
        self._f_title  = tkfont.Font(family="Segoe UI", size=13, weight="bold")
        self._f_entry  = tkfont.Font(family="Consolas", size=13)
        self._f_result = tkfont.Font(family="Consolas", size=20, weight="bold")
        self._f_btn    = tkfont.Font(family="Segoe UI", size=14)
        self._f_small  = tkfont.Font(family="Segoe UI", size=10)

    def _make_entry(self, parent, var: tk.StringVar, **kw) -> tk.Entry:
        return tk.Entry(
            parent, textvariable=var, font=self._f_entry,
            bg=self.C["display_bg"], fg=self.C["num_fg"],
            insertbackground=self.C["num_fg"], relief="flat", **kw,
        )

    def _make_button(self, parent, text: str, command, kind: str = "special") -> tk.Button:
        return tk.Button(
            parent, text=text, font=self._f_small,
            bg=self.C[kind], fg=self.C[f"{kind}_fg"],
            activebackground=self.C["special"], relief="flat",
            cursor="hand2", command=command, padx=8,
        )

    # ── Formulario de acceso ─────────────────────────────────────

    def _create_login_form(self):
        frame = tk.Frame(self.root, bg=self.C["bg"], padx=12, pady=8)
        frame.pack(fill="x", padx=6, pady=(6, 2))

        tk.Label(frame, text="Login Form", font=self._f_title,
                 bg=self.C["bg"], fg=self.C["label_fg"]).pack(anchor="w")

        self.username_var = tk.StringVar()
        self.password_var = tk.StringVar()
        self._form_entries = (
            self._make_entry(frame, self.username_var),
            self._make_entry(frame, self.password_var, show="*"),
        )
        for entry in self._form_entries:
            entry.pack(fill="x", pady=2)

        row = tk.Frame(frame, bg=self.C["bg"])
        row.pack(fill="x", pady=(4, 0))
        self.login_btn = self._make_button(row, "Login", self._on_login)
        self.login_btn.pack(side="left", padx=(0, 4))
        self._make_button(row, "Register", self._open_registration).pack(side="left")

        self.status_var = tk.StringVar()
        tk.Label(frame, textvariable=self.status_var, font=self._f_small,
                 bg=self.C["bg"], fg=self.C["error_fg"]).pack(anchor="w", pady=(4, 0))

    def _on_login(self):
        username = self.username_var.get()
        password = self.password_var.get()
        self.login_btn.config(state="disabled")

        def _run():
            msg = attempt_auth(self.auth.login, username, password)
            if msg is None:
                msg = "Successfully Logged In!"
            self.root.after(0, lambda: self._finish_login(msg))

        threading.Thread(target=_run, daemon=True).start()

    def _finish_login(self, msg: str):
        self.status_var.set(msg)
        self.login_btn.config(state="normal")

    def _open_registration(self):
        RegistrationWindow(self)

    # ── Pantalla ─────────────────────────────────────────────────

    def _create_display(self):
        frame = tk.Frame(self.root, bg=self.C["display_bg"], padx=12, pady=8)
        frame.pack(fill="x", padx=6, pady=(6, 2))

        tk.Label(frame, text="Calculator", font=self._f_title,
                 bg=self.C["display_bg"], fg=self.C["label_fg"]).pack(anchor="w")

        self.display_var = tk.StringVar()
        tk.Entry(
            frame, textvariable=self.display_var, state="readonly",
            font=self._f_result, readonlybackground=self.C["display_bg"],
            fg=self.C["result_fg"], relief="flat", justify="right", bd=0,
        ).pack(fill="x", pady=(4, 0))

    # ── Teclado numérico / operadores ────────────────────────────

    def _create_keypad(self):
        frame = tk.Frame(self.root, bg=self.C["bg"])
        frame.pack(fill="both", expand=True, padx=6, pady=(2, 6))

        max_cols = max(len(row) for row in self.KEYPAD)
        for c in range(max_cols):
            frame.columnconfigure(c, weight=1, uniform="key")

        for r, row_def in enumerate(self.KEYPAD):
            spans = self._compute_spans(len(row_def), max_cols)
            col_pos = 0
            for idx, (text, kind) in enumerate(row_def):
                btn = tk.Button(
                    frame, text=text, font=self._f_btn,
                    bg=self.C[kind], fg=self.C[f"{kind}_fg"],
                    activebackground=self.C["special"], relief="flat",
                    command=lambda t=text: self._on_key(t),
                )
                btn.grid(row=r, column=col_pos, columnspan=spans[idx],
                         sticky="nsew", padx=2, pady=2, ipady=8)
                col_pos += spans[idx]

        for r in range(len(self.KEYPAD)):
            frame.rowconfigure(r, weight=1)

    @staticmethod
    def _compute_spans(cols_in_row: int, max_cols: int) -> list[int]:
        """Reparte max_cols entre cols_in_row botones."""
        base, extra = divmod(max_cols, cols_in_row)
        spans = [base] * cols_in_row
        spans[-1] += extra
        return spans

    # ── Atajos de teclado ────────────────────────────────────────

    def _bind_keyboard(self):
        for key in "0123456789.+-*/=":
            self.root.bind(key, lambda _e, k=key: self._on_keyboard(k))
        self.root.bind("<Return>", lambda _e: self._on_keyboard("="))
        self.root.bind("<KP_Enter>", lambda _e: self._on_keyboard("="))
        self.root.bind("<BackSpace>", lambda _e: self._on_keyboard(BACKSPACE))
        self.root.bind("<Escape>", lambda _e: self._on_keyboard(CLEAR))

    def _on_keyboard(self, label: str):
        # Las teclas también llegan mientras se escribe en el formulario
        if self.root.focus_get() in self._form_entries:
            return
        self._on_key(label)

    # ── Acciones ─────────────────────────────────────────────────

    def _on_key(self, label: str):
        try:
            text = self.buffer.press(label)
        except EvaluationError as exc:
            self.status_var.set(f"Error: {exc}")
            return
        self.status_var.set("")
        self.display_var.set(text)
