"""Tests for the contract data model and boundary parsers."""

from dataclasses import replace

import pytest

from carrypricer.core import (
    CALL, PUT, EQUITY, FUTURE, AMERICAN, EUROPEAN, MATBA_ROFEX_STYLE,
    OptionContract, Signal,
    parse_exercise, parse_kind, parse_settlement, parse_underlying,
)
from carrypricer.errors import (
    InvalidOptionKind, InvalidSettlementStyle, InvalidUnderlyingKind, PricingError,
)


class TestOptionContract:
    def test_defaults(self):
        opt = OptionContract(s=100, k=95, T=0.5, r=0.03, sigma=0.25)
        assert opt.kind == CALL
        assert opt.underlying == EQUITY
        assert opt.settlement is None
        assert opt.q == 0.0

    @pytest.mark.parametrize("field,value", [("s", 0.0), ("k", -1.0), ("sigma", 0.0)])
    def test_rejects_non_positive(self, field, value):
        kwargs = dict(s=100, k=100, T=1.0, r=0.05, sigma=0.2)
        kwargs[field] = value
        with pytest.raises(ValueError):
            OptionContract(**kwargs)

    def test_zero_expiry_allowed(self):
        assert OptionContract(s=100, k=100, T=0.0, r=0.05, sigma=0.2).T == 0.0

    def test_invalid_kind(self):
        with pytest.raises(InvalidOptionKind):
            OptionContract(s=100, k=100, T=1.0, r=0.05, sigma=0.2, kind="straddle")

    def test_invalid_underlying(self):
        with pytest.raises(InvalidUnderlyingKind):
            OptionContract(s=100, k=100, T=1.0, r=0.05, sigma=0.2, underlying="bond")

    def test_invalid_settlement(self):
        with pytest.raises(InvalidSettlementStyle):
            OptionContract(s=100, k=100, T=1.0, r=0.05, sigma=0.2,
                           underlying=FUTURE, settlement="weekly")

    def test_errors_are_value_errors(self):
        assert issubclass(InvalidOptionKind, PricingError)
        assert issubclass(PricingError, ValueError)

    def test_intrinsic_and_sign(self):
        call = OptionContract(s=110, k=100, T=1.0, r=0.05, sigma=0.2)
        put = replace(call, kind=PUT)
        assert (call.z, put.z) == (1, -1)
        assert call.intrinsic() == 10.0
        assert put.intrinsic() == 0.0

    def test_frozen(self):
        opt = OptionContract(s=100, k=100, T=1.0, r=0.05, sigma=0.2)
        with pytest.raises(AttributeError):
            opt.s = 101


class TestParsers:
    def test_kind(self):
        assert parse_kind("CALL") == CALL
        assert parse_kind(" Put ") == PUT
        with pytest.raises(InvalidOptionKind):
            parse_kind("futuro")

    def test_underlying_aliases(self):
        assert parse_underlying("Accion") == EQUITY
        assert parse_underlying("FUTURO") == FUTURE
        assert parse_underlying("future") == FUTURE
        with pytest.raises(InvalidUnderlyingKind):
            parse_underlying("bono")

    def test_settlement(self):
        assert parse_settlement("Matba_Rofex_Style") == MATBA_ROFEX_STYLE
        assert parse_settlement("") is None
        assert parse_settlement(None) is None
        with pytest.raises(InvalidSettlementStyle):
            parse_settlement("daily")

    def test_exercise(self):
        assert parse_exercise("Americana") == AMERICAN
        assert parse_exercise("europea") == EUROPEAN
        with pytest.raises(ValueError):
            parse_exercise("bermuda")


def test_signal_string_values():
    assert str(Signal.NON_CONVERGENCE) == "NA"
    assert str(Signal.INVALID_PARAMETER) == "Parámetro inválido"
