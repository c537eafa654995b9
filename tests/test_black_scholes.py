"""Tests for the generalized Black-Scholes engine."""

import math
from dataclasses import replace

import pytest
from scipy.stats import norm

from carrypricer.black_scholes import european_call, greeks, price
from carrypricer.core import (
    CALL, PUT, FUTURE, FUTURES_STYLE, EQUITY_STYLE, MATBA_ROFEX_STYLE,
    OptionContract, Signal,
)
from carrypricer.errors import InvalidSettlementStyle

OPT = OptionContract(s=100, k=100, T=1.0, r=0.05, sigma=0.2)


def _scipy_bs(S, K, T, r, q, sigma, kind):
    d1 = (math.log(S / K) + (r - q + 0.5 * sigma ** 2) * T) / (sigma * math.sqrt(T))
    d2 = d1 - sigma * math.sqrt(T)
    if kind == CALL:
        return S * math.exp(-q * T) * norm.cdf(d1) - K * math.exp(-r * T) * norm.cdf(d2)
    return K * math.exp(-r * T) * norm.cdf(-d2) - S * math.exp(-q * T) * norm.cdf(-d1)


class TestPremium:
    def test_known_values(self):
        assert price("prima", OPT) == pytest.approx(10.4506, abs=1e-3)
        assert price("prima", replace(OPT, kind=PUT)) == pytest.approx(5.5735, abs=1e-3)

    @pytest.mark.parametrize("kind", [CALL, PUT])
    def test_dividend_yield_matches_reference(self, kind):
        opt = OptionContract(s=100, k=110, T=0.5, r=0.03, sigma=0.25, q=0.02, kind=kind)
        expected = _scipy_bs(100, 110, 0.5, 0.03, 0.02, 0.25, kind)
        assert price("prima", opt) == pytest.approx(expected, abs=1e-4)

    def test_put_call_parity(self):
        opt = OptionContract(s=105, k=100, T=0.75, r=0.04, sigma=0.3, q=0.015)
        call = price("prima", opt)
        put = price("prima", replace(opt, kind=PUT))
        b = opt.r - opt.q
        parity = opt.s * math.exp((b - opt.r) * opt.T) - opt.k * math.exp(-opt.r * opt.T)
        assert call - put == pytest.approx(parity, abs=1e-9)

    def test_european_call_helper(self):
        assert european_call(100, 100, 1.0, 0.05, 0.05, 0.2) == pytest.approx(price("prima", OPT))

    def test_case_insensitive_selector(self):
        assert price("PRIMA", OPT) == price("prima", OPT)


class TestAnalyticGreeks:
    def test_known_values(self):
        g = greeks(OPT)
        assert g["delta"] == pytest.approx(0.636831, abs=1e-5)
        assert g["gamma"] == pytest.approx(0.0187620, abs=1e-6)
        assert g["gammap"] == pytest.approx(g["gamma"] * 100 / 100)
        assert g["vega"] == pytest.approx(0.375240, abs=1e-5)
        assert g["rho"] == pytest.approx(0.532325, abs=1e-4)
        assert g["theta"] == pytest.approx(-6.414, abs=1e-2)

    @pytest.mark.parametrize("kind", [CALL, PUT])
    def test_against_finite_differences(self, kind):
        opt = OptionContract(s=95, k=100, T=0.6, r=0.04, sigma=0.3, q=0.01, kind=kind)
        g = greeks(opt)

        def P(**changes):
            return price("prima", replace(opt, **changes))

        assert g["delta"] == pytest.approx((P(s=95.01) - P(s=94.99)) / 0.02, abs=1e-4)
        assert g["gamma"] == pytest.approx((P(s=96.0) - 2 * P() + P(s=94.0)), rel=1e-3)
        assert g["vega"] == pytest.approx((P(sigma=0.301) - P(sigma=0.299)) / 0.002 / 100, abs=1e-4)
        assert g["rho"] == pytest.approx((P(r=0.041) - P(r=0.039)) / 0.002 / 100, abs=1e-4)

    @pytest.mark.parametrize("kind,q", [(CALL, 0.0), (PUT, 0.01)])
    def test_theta_is_calendar_decay(self, kind, q):
        opt = OptionContract(s=95, k=100, T=0.6, r=0.04, sigma=0.3, q=q, kind=kind)
        decay = -(price("prima", replace(opt, T=0.601)) - price("prima", replace(opt, T=0.599))) / 0.002
        assert price("theta", opt) == pytest.approx(decay, abs=1e-3)

    def test_put_delta_negative(self):
        assert price("delta", replace(OPT, kind=PUT)) < 0

    def test_invalid_parameter(self):
        assert price("charm", OPT) is Signal.INVALID_PARAMETER


class TestFutures:
    def _future(self, style, kind=CALL):
        return OptionContract(s=100, k=100, T=1.0, r=0.05, sigma=0.2,
                              kind=kind, underlying=FUTURE, settlement=style)

    def test_futures_style_undiscounted(self):
        # Black-76 with no discounting: 100 * (2 N(0.1) - 1)
        assert price("prima", self._future(FUTURES_STYLE)) == pytest.approx(7.96557, abs=1e-4)
        assert price("rho", self._future(FUTURES_STYLE)) == 0.0

    def test_equity_style_discounted(self):
        opt = self._future(EQUITY_STYLE)
        prima = price("prima", opt)
        assert prima == pytest.approx(7.96557 * math.exp(-0.05), abs=1e-4)
        assert price("rho", opt) == pytest.approx(-opt.T * prima / 100)

    def test_equity_style_call_theta_carries_rate_term(self):
        # b = 0, r_eff = r: the (b - r) s df_b N(d1) term is live
        opt = self._future(EQUITY_STYLE)
        df = math.exp(-0.05)
        expected = (-100 * df * norm.pdf(0.1) * 0.2 / 2
                    - 0.05 * 100 * df * norm.cdf(0.1)
                    - 0.05 * 100 * df * norm.cdf(-0.1))
        assert price("theta", opt) == pytest.approx(expected, rel=1e-6)
        assert price("theta", opt) == pytest.approx(-8.5321, abs=1e-3)

    def test_equity_style_put_rho(self):
        opt = self._future(EQUITY_STYLE, kind=PUT)
        assert price("rho", opt) == pytest.approx(-opt.T * price("prima", opt) / 100)

    def test_matba_rofex_not_supported(self):
        with pytest.raises(InvalidSettlementStyle):
            price("prima", self._future(MATBA_ROFEX_STYLE))

    def test_missing_style(self):
        with pytest.raises(InvalidSettlementStyle):
            price("prima", self._future(None))


class TestExpiry:
    def test_call_in_the_money(self):
        opt = replace(OPT, s=110, T=0.0)
        assert price("prima", opt) == 10.0
        assert price("delta", opt) == 1.0

    def test_call_out_of_the_money(self):
        opt = replace(OPT, s=90, T=0.0)
        assert price("prima", opt) == 0.0
        assert price("delta", opt) == 0.0

    def test_put_and_other_greeks(self):
        opt = replace(OPT, s=90, T=0.0, kind=PUT)
        g = greeks(opt)
        assert g["prima"] == 10.0
        assert g["delta"] == -1.0
        for key in ("gamma", "gammap", "theta", "vega", "rho"):
            assert g[key] == 0.0
