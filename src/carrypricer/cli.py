import argparse
import logging
import sys

from .binomial import price as binomial_price
from .bjerksund_stensland import price as bs93_price
from .black_scholes import price as bs_price
from .config import EngineSettings
from .core import (
    CALL, EQUITY, AMERICAN, OptionContract,
    parse_exercise, parse_kind, parse_settlement, parse_underlying,
)
from .errors import PricingError
from .implied_vol import binomial_implied_vol, bs93_implied_vol, bs_implied_vol
from .logging_config import setup_logging

logger = logging.getLogger("carrypricer.cli")


def _arg_type(parse):
    """Wrap a boundary parser so argparse reports its message."""
    def convert(s: str):
        try:
            return parse(s)
        except ValueError as e:
            raise argparse.ArgumentTypeError(str(e)) from None
    convert.__name__ = parse.__name__.replace("parse_", "")
    return convert


def add_common(parser: argparse.ArgumentParser, *, with_sigma: bool = True):
    parser.add_argument("--S", type=float, required=True, help="spot / futures price")
    parser.add_argument("--K", type=float, required=True)
    parser.add_argument("--T", type=float, required=True, help="years")
    parser.add_argument("--r", type=float, required=True, help="cont. risk-free")
    parser.add_argument("--q", type=float, default=0.0, help="cont. dividend / carry yield")
    if with_sigma:
        parser.add_argument("--sigma", type=float, required=True)
    parser.add_argument("--kind", type=_arg_type(parse_kind), default=CALL, help="call|put")
    parser.add_argument("--underlying", type=_arg_type(parse_underlying), default=EQUITY,
                        help="accion|futuro (equity|future)")
    parser.add_argument("--settlement", type=_arg_type(parse_settlement), default=None,
                        help="futures_style|equity_style|matba_rofex_style (futures only)")
    parser.add_argument("--log-level", default="WARNING")
    parser.add_argument("--log-file", default=None)
    parser.add_argument("--log-color", dest="log_color", action="store_true",
                        help="color level names on the console")


def add_lattice(parser: argparse.ArgumentParser, settings: EngineSettings):
    parser.add_argument("--steps", type=int, default=settings.default_steps)
    parser.add_argument("--max-steps", dest="max_steps", type=int, default=settings.max_steps)
    parser.add_argument("--exercise", type=_arg_type(parse_exercise), default=None,
                        help="europea|americana")
    parser.add_argument("--american", action="store_true")


def _contract(args, sigma: float) -> OptionContract:
    return OptionContract(
        s=args.S, k=args.K, T=args.T, r=args.r, sigma=sigma, q=args.q,
        kind=args.kind, underlying=args.underlying, settlement=args.settlement,
    )


def _american(args) -> bool:
    return args.american or args.exercise == AMERICAN


def cmd_bs(args, settings):
    return bs_price(args.param, _contract(args, args.sigma))


def cmd_binomial(args, settings):
    return binomial_price(args.param, _contract(args, args.sigma), _american(args), args.steps,
                          max_steps=args.max_steps, bump=settings.bump)


def cmd_bs93(args, settings):
    return bs93_price(args.param, _contract(args, args.sigma), bump=settings.bump)


def cmd_iv(args, settings):
    # the solver replaces sigma at every trial
    opt = _contract(args, sigma=1.0)
    solver = {
        "epsilon": settings.bisection_epsilon,
        "max_iterations": settings.bisection_max_iterations,
    }
    if args.model == "bs":
        return bs_implied_vol(opt, args.premium, high=settings.bs_vol_upper, **solver)
    if args.model == "bs93":
        return bs93_implied_vol(opt, args.premium, high=settings.bs93_vol_upper, **solver)
    return binomial_implied_vol(opt, args.premium, _american(args), args.steps,
                                max_steps=args.max_steps, high=settings.lattice_vol_upper,
                                **solver)


def _format(value) -> str:
    if isinstance(value, float):
        return f"{value:.10f}"
    return str(value)


def build_parser(settings: EngineSettings) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="carrypricer",
                                description="Option premium, Greeks and implied vol")
    sub = p.add_subparsers(dest="cmd", required=True)

    # Generalized BS
    p_bs = sub.add_parser("bs", help="Generalized Black-Scholes (European)")
    p_bs.add_argument("--param", default="prima",
                      help="prima|delta|gamma|gammap|theta|vega|rho")
    add_common(p_bs)
    p_bs.set_defaults(func=cmd_bs)

    # Binomial
    p_bin = sub.add_parser("binomial", help="CRR binomial lattice")
    p_bin.add_argument("--param", default="prima", help="prima|delta|gamma|theta|vega|rho")
    add_common(p_bin)
    add_lattice(p_bin, settings)
    p_bin.set_defaults(func=cmd_binomial)

    # Bjerksund-Stensland
    p_bs93 = sub.add_parser("bs93", help="Bjerksund-Stensland 1993 (American)")
    p_bs93.add_argument("--param", default="prima", help="prima|delta|gamma|theta|vega|rho")
    add_common(p_bs93)
    p_bs93.set_defaults(func=cmd_bs93)

    # Implied vol
    p_iv = sub.add_parser("iv", help="Implied volatility by bisection")
    p_iv.add_argument("--model", choices=("bs", "binomial", "bs93"), default="bs")
    p_iv.add_argument("--premium", type=float, required=True)
    add_common(p_iv, with_sigma=False)
    add_lattice(p_iv, settings)
    p_iv.set_defaults(func=cmd_iv)

    return p


def main(argv=None) -> int:
    settings = EngineSettings.from_env()
    args = build_parser(settings).parse_args(argv)
    setup_logging(args.log_level, log_file=args.log_file, colored=args.log_color)
    try:
        value = args.func(args, settings)
    except (PricingError, ValueError) as e:
        logger.debug("rejected input", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 2
    print(_format(value))
    return 0


if __name__ == "__main__":
    sys.exit(main())
