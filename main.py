"""Punto de entrada: formulario de acceso y calculadora."""

import argparse
import logging
import tkinter as tk

from calculator_ui import LoginCalculatorApp
from credentials import DEFAULT_ROUNDS, AuthService, CredentialStore, PasswordHasher
from expression_engine import ArbitraryPrecisionExpressionEngine, ExpressionEngine


DB_PATH = "users.db"
BCRYPT_ROUNDS = DEFAULT_ROUNDS
ALLOW_LEADING_SIGN = False
USE_ARBITRARY_PRECISION = False
AP_DIGITS = 50
LOG_LEVEL = "INFO"


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Login App con calculadora")
    parser.add_argument("--db", default=DB_PATH, help="Ruta de la base sqlite de usuarios")
    parser.add_argument("--bcrypt-rounds", type=int, default=BCRYPT_ROUNDS)
    parser.add_argument("--allow-leading-sign", action="store_true", default=ALLOW_LEADING_SIGN,
                        help="Acepta '+' o '-' al inicio de la expresión")
    parser.add_argument("--precise", action="store_true", default=USE_ARBITRARY_PRECISION,
                        help="Usa el motor de precisión arbitraria (mpmath)")
    parser.add_argument("--digits", type=int, default=AP_DIGITS)
    parser.add_argument("--log-level", default=LOG_LEVEL)
    return parser.parse_args(argv)


def build_engine(args: argparse.Namespace):
    if args.precise:
        return ArbitraryPrecisionExpressionEngine(
            digits=args.digits,
            allow_leading_sign=args.allow_leading_sign,
        )
    return ExpressionEngine(allow_leading_sign=args.allow_leading_sign)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    with CredentialStore(args.db) as store:
        auth = AuthService(store, PasswordHasher(rounds=args.bcrypt_rounds))
        root = tk.Tk()
        root.geometry("400x620")
        root.minsize(360, 560)
        LoginCalculatorApp(root, auth=auth, engine=build_engine(args))
        root.mainloop()


if __name__ == "__main__":
    main()
