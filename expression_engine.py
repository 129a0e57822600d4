"""
Motor de evaluación de expresiones para la calculadora básica.

Evalúa la cadena acumulada por el teclado (dígitos, punto decimal y
los operadores + - * /) de izquierda a derecha, sin precedencia de
operadores, igual que una calculadora de cuatro funciones: 2+3*4 = 20.

Contrato de interfaz:
    - evaluate(expression: str) -> número
    - tokenize(expression: str) -> list[Token]

El motor no guarda estado entre llamadas; cada evaluación depende solo
de la cadena recibida y de las opciones del constructor.
"""

from __future__ import annotations

import math
from typing import NamedTuple

try:
    from mpmath import mp
except ImportError as exc:  # pragma: no cover
    raise ImportError(
        "mpmath no está instalado. Instala con: pip install mpmath"
    ) from exc


DIGITS = "0123456789"
DECIMAL_POINT = "."
OPERATORS = "+-*/"
SIGNS = "+-"

NUMBER = "number"
OPERATOR = "operator"


# ── Errores ──────────────────────────────────────────────────────

class EvaluationError(ValueError):
    """Error base de evaluación."""


class InvalidExpressionError(EvaluationError):
    """Forma de tokens inválida o número imposible de interpretar."""


class DivisionByZeroError(EvaluationError, ZeroDivisionError):
    """El divisor de '/' es exactamente cero."""


class NumericOverflowError(EvaluationError, OverflowError):
    """Un operando o resultado intermedio no es finito."""


class Token(NamedTuple):
    kind: str
    value: object

    @property
    def is_number(self) -> bool:
        return self.kind == NUMBER


class ExpressionEngine:
    """Evalúa expresiones de calculadora con aritmética de punto flotante."""

    def __init__(self, allow_leading_sign: bool = False):
        self.allow_leading_sign = allow_leading_sign

    # ── Evaluación principal ─────────────────────────────────────

    def evaluate(self, expression: str):
        """Evalúa la expresión y devuelve el resultado numérico.

        La cadena vacía vale 0 (nada introducido todavía).

        Raises:
            InvalidExpressionError: expresión mal formada.
            DivisionByZeroError: división entre cero exacto.
            NumericOverflowError: resultado fuera del rango finito.
        """
        if expression == "":
            return self._zero()

        tokens = self.tokenize(expression)
        self._validate_shape(tokens)
        return self._fold(tokens)

    # ── Tokenización ─────────────────────────────────────────────

    def tokenize(self, expression: str) -> list[Token]:
        """Divide la expresión en operandos y operadores en una sola pasada."""
        tokens: list[Token] = []
        run = ""

        for index, char in enumerate(expression):
            if char in DIGITS or char == DECIMAL_POINT:
                run += char
            elif char in OPERATORS:
                if index == 0 and self.allow_leading_sign and char in SIGNS:
                    run = char
                    continue
                if run:
                    tokens.append(Token(NUMBER, self._parse_number(run)))
                    run = ""
                tokens.append(Token(OPERATOR, char))
            else:
                raise InvalidExpressionError(f"Carácter no permitido: {char!r}")

        if run:
            tokens.append(Token(NUMBER, self._parse_number(run)))
        return tokens

    def _parse_number(self, text: str):
        try:
            value = float(text)
        except ValueError as exc:
            raise InvalidExpressionError(f"Número inválido: {text}") from exc
        if not math.isfinite(value):
            raise NumericOverflowError(f"Número fuera de rango: {text}")
        return value

    @staticmethod
    def _validate_shape(tokens: list[Token]):
        if len(tokens) % 2 == 0:
            raise InvalidExpressionError("Expresión incompleta")
        for position, tok in enumerate(tokens):
            if tok.is_number != (position % 2 == 0):
                raise InvalidExpressionError("Operadores consecutivos")

    # ── Reducción de izquierda a derecha ─────────────────────────

    def _fold(self, tokens: list[Token]):
        result = tokens[0].value
        for i in range(1, len(tokens), 2):
            result = self._apply(tokens[i].value, result, tokens[i + 1].value)
            self._check_finite(result)
        return result

    def _apply(self, operator: str, left, right):
        if operator == "+":
            return left + right
        if operator == "-":
            return left - right
        if operator == "*":
            return left * right
        if operator == "/":
            if right == 0:
                raise DivisionByZeroError("División por cero")
            return left / right
        raise InvalidExpressionError(f"Operador desconocido: {operator}")

    @staticmethod
    def _zero():
        return 0.0

    @staticmethod
    def _check_finite(value):
        if not math.isfinite(value):
            raise NumericOverflowError("Resultado demasiado grande")


class ArbitraryPrecisionExpressionEngine(ExpressionEngine):
    """Misma gramática y reducción, con operandos mpmath de precisión fija.

    Los operandos se interpretan con `digits` dígitos significativos; el
    resultado es un `mpf`.
    """

    def __init__(self, digits: int = 50, allow_leading_sign: bool = False):
        super().__init__(allow_leading_sign=allow_leading_sign)
        self.digits = max(15, digits)

    def evaluate(self, expression: str):
        with mp.workdps(self.digits):
            return super().evaluate(expression)

    def tokenize(self, expression: str) -> list[Token]:
        with mp.workdps(self.digits):
            return super().tokenize(expression)

    def _parse_number(self, text: str):
        # mpf convierte "." y "-." en cero
        if not any(c in DIGITS for c in text):
            raise InvalidExpressionError(f"Número inválido: {text}")
        try:
            return mp.mpf(text)
        except ValueError as exc:
            raise InvalidExpressionError(f"Número inválido: {text}") from exc

    @staticmethod
    def _zero():
        return mp.mpf(0)

    @staticmethod
    def _check_finite(value):
        if not mp.isfinite(value):
            raise NumericOverflowError("Resultado demasiado grande")
