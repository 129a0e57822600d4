import logging

import pytest

from expression_buffer import BACKSPACE, CLEAR, ExpressionBuffer
from expression_engine import (
    ArbitraryPrecisionExpressionEngine,
    DivisionByZeroError,
    ExpressionEngine,
    InvalidExpressionError,
)


@pytest.fixture
def buffer():
    return ExpressionBuffer(ExpressionEngine())


def press_all(buffer, keys):
    text = buffer.text
    for key in keys:
        text = buffer.press(key)
    return text


def test_digits_and_operators_are_appended(buffer):
    assert press_all(buffer, "12+3") == "12+3"


def test_equals_replaces_text_with_result(buffer):
    assert press_all(buffer, "2+3*4=") == "20"
    assert buffer.text == "20"
    assert buffer.last_error is None


def test_result_can_be_reused(buffer):
    press_all(buffer, "10/4=")
    assert buffer.text == "2.5"
    assert press_all(buffer, "*2=") == "5"


def test_equals_on_empty_buffer_shows_zero(buffer):
    assert buffer.press("=") == "0"


def test_point_ignored_on_empty_buffer(buffer):
    assert buffer.press(".") == ""


def test_point_not_repeated(buffer):
    assert press_all(buffer, "1..") == "1."


def test_failed_evaluation_keeps_text(buffer):
    press_all(buffer, "2+")
    with pytest.raises(InvalidExpressionError):
        buffer.press("=")
    assert buffer.text == "2+"
    assert isinstance(buffer.last_error, InvalidExpressionError)


def test_division_by_zero_keeps_text(buffer):
    press_all(buffer, "5/0")
    with pytest.raises(DivisionByZeroError):
        buffer.press("=")
    assert buffer.text == "5/0"


def test_failed_evaluation_is_logged(buffer, caplog):
    press_all(buffer, "2++3")
    with caplog.at_level(logging.WARNING, logger="expression_buffer"):
        with pytest.raises(InvalidExpressionError):
            buffer.press("=")
    assert "2++3" in caplog.text


def test_clear_and_backspace(buffer):
    press_all(buffer, "123")
    assert buffer.press(BACKSPACE) == "12"
    assert buffer.press(CLEAR) == ""
    assert buffer.press(BACKSPACE) == ""


def test_clear_resets_last_error(buffer):
    press_all(buffer, "2+")
    with pytest.raises(InvalidExpressionError):
        buffer.press("=")
    buffer.press(CLEAR)
    assert buffer.last_error is None


@pytest.mark.parametrize("label", ["x", "12", "", "(", " "])
def test_unknown_label(buffer, label):
    with pytest.raises(ValueError):
        buffer.press(label)
    assert buffer.text == ""


def test_negative_result_needs_leading_sign_to_continue():
    strict = ExpressionBuffer(ExpressionEngine())
    press_all(strict, "2-5=")
    assert strict.text == "-3"
    press_all(strict, "+1")
    with pytest.raises(InvalidExpressionError):
        strict.press("=")

    signed = ExpressionBuffer(ExpressionEngine(allow_leading_sign=True), text="-3")
    assert press_all(signed, "+1=") == "-2"


def test_precise_engine_formats_with_engine_digits():
    buffer = ExpressionBuffer(ArbitraryPrecisionExpressionEngine(digits=20))
    assert press_all(buffer, "1/3=") == "0." + "3" * 20


def test_precise_engine_rejects_point_after_operator():
    buffer = ExpressionBuffer(ArbitraryPrecisionExpressionEngine(digits=20))
    press_all(buffer, "3+.")
    with pytest.raises(InvalidExpressionError):
        buffer.press("=")
    assert buffer.text == "3+."
