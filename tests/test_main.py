import pytest

pytest.importorskip("tkinter")

import main  # noqa: E402
from expression_engine import ArbitraryPrecisionExpressionEngine, ExpressionEngine  # noqa: E402


def test_defaults():
    args = main.parse_args([])
    assert args.db == main.DB_PATH
    assert args.allow_leading_sign is False
    assert args.precise is False


def test_build_float_engine():
    engine = main.build_engine(main.parse_args(["--allow-leading-sign"]))
    assert type(engine) is ExpressionEngine
    assert engine.allow_leading_sign is True


def test_build_precise_engine():
    engine = main.build_engine(main.parse_args(["--precise", "--digits", "30"]))
    assert isinstance(engine, ArbitraryPrecisionExpressionEngine)
    assert engine.digits == 30
    assert engine.allow_leading_sign is False
