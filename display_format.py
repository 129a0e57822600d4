"""Formato de resultados para la pantalla de la calculadora."""

from __future__ import annotations

from decimal import Decimal

from mpmath import mp


def format_result(value, digits: int | None = None) -> str:
    """Devuelve el decimal más corto que representa el valor, sin exponente.

    Los floats usan los dígitos de repr() (ida y vuelta exacta); los mpf
    se redondean a `digits` dígitos significativos.
    """
    if isinstance(value, mp.mpf):
        if not mp.isfinite(value):
            return _format_non_finite(value > 0, mp.isnan(value))
        text = mp.nstr(value, n=digits or mp.dps, strip_zeros=True)
    else:
        value = float(value)
        if value != value or value in (float("inf"), float("-inf")):
            return _format_non_finite(value > 0, value != value)
        text = repr(value)

    return _plain_decimal(text)


def _plain_decimal(text: str) -> str:
    plain = format(Decimal(text), "f")
    if "." in plain:
        plain = plain.rstrip("0").rstrip(".")
    if plain in ("-0", ""):
        return "0"
    return plain


def _format_non_finite(positive: bool, nan: bool) -> str:
    if nan:
        return "NaN"
    return "∞" if positive else "-∞"
