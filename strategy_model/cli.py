"""
Command-line shell for the strategy allocation model.

Prints strategies, recommendations, expected returns, optimized allocations,
the demo wallet portfolio and its transaction history, and echoes settings.
"""

import argparse
import logging
import math
import os
import sys
from typing import Dict, List, Optional

import pandas as pd

from strategy_model.config import (
    DEMO_WALLET_ADDRESS, INVESTMENT_GOALS, TIME_HORIZONS, MARKET_CONDITIONS,
    NOTIFICATION_TYPES,
)
from strategy_model.engine import (
    MarketTrend, RebalancingFrequency, Strategy, get_strategy_by_id, get_recommended_strategy,
    calculate_expected_returns, optimize_portfolio, allocation_frame,
    expected_return_table, strategies_frame,
)
from strategy_model.portfolio import (
    portfolio_overview, transaction_history, rebalance_actions, short_address,
)

logger = logging.getLogger(__name__)

RULE = "─" * 50
WIDE_RULE = "─" * 70


def parse_trend(value: str):
    """Parse SYMBOL=SENTIMENT,MOMENTUM into (symbol, MarketTrend)."""
    try:
        symbol, numbers = value.split("=", 1)
        sentiment, momentum = (float(x) for x in numbers.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"invalid trend {value!r}, expected SYMBOL=SENTIMENT,MOMENTUM"
        )
    if not (math.isfinite(sentiment) and math.isfinite(momentum)):
        raise argparse.ArgumentTypeError(f"invalid trend {value!r}, values must be finite")
    symbol = symbol.strip().upper()
    if not symbol:
        raise argparse.ArgumentTypeError(f"invalid trend {value!r}, missing symbol")
    return symbol, MarketTrend(sentiment=sentiment, momentum=momentum)


def parse_risk(value: str) -> float:
    try:
        risk = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid risk {value!r}, expected a number")
    if not 0 <= risk <= 100:
        raise argparse.ArgumentTypeError(f"risk {value!r} must be between 0 and 100")
    return risk


def _lookup(strategy_id: str) -> Optional[Strategy]:
    strategy = get_strategy_by_id(strategy_id)
    if strategy is None:
        print(f"Strategy not found: {strategy_id}", file=sys.stderr)
    return strategy


def _print_table(df: pd.DataFrame, float_format: str = "{:,.2f}") -> None:
    print(df.to_string(index=False, float_format=float_format.format))


def _print_strategy(strategy: Strategy) -> None:
    print(f"\n{strategy.name} Strategy")
    print(RULE)
    print(strategy.description)
    print(RULE)
    print(f"Risk Level: {strategy.risk_level}/100")
    print(f"Expected Return: {strategy.expected_return.min}% - {strategy.expected_return.max}%")
    print(f"Rebalancing: {strategy.rebalancing_frequency.value}")
    print("\nAsset Allocation")
    print(RULE)
    _print_table(allocation_frame(strategy.allocation))


def cmd_strategies(args) -> int:
    _print_table(strategies_frame())
    return 0


def cmd_strategy(args) -> int:
    strategy = _lookup(args.strategy_id)
    if strategy is None:
        return 1
    _print_strategy(strategy)
    return 0


def cmd_recommend(args) -> int:
    strategy_id = get_recommended_strategy(args.risk, args.goal, args.horizon)
    logger.info(f"Risk {args.risk} ({args.goal}, {args.horizon}) -> {strategy_id}")
    print(f"Recommended strategy: {strategy_id}")
    _print_strategy(get_strategy_by_id(strategy_id))
    return 0


def cmd_returns(args) -> int:
    strategy = _lookup(args.strategy_id)
    if strategy is None:
        return 1
    if args.market:
        value = calculate_expected_returns(strategy, args.market)
        print(f"{strategy.name} expected return ({args.market}): {value:g}%")
    else:
        _print_table(expected_return_table(strategy))
    return 0


def cmd_optimize(args) -> int:
    strategy = _lookup(args.strategy_id)
    if strategy is None:
        return 1
    trends: Dict[str, MarketTrend] = dict(args.trend or [])
    optimized = optimize_portfolio(None, strategy, trends)

    base = allocation_frame(strategy.allocation)[["Symbol", "Asset", "Alloc_%"]]
    base = base.rename(columns={"Alloc_%": "Target_%"})
    base["Optimized_%"] = allocation_frame(optimized)["Alloc_%"]
    base["Change_%"] = base["Optimized_%"] - base["Target_%"]

    print(f"\nOptimization Results ({strategy.name})")
    print(RULE)
    _print_table(base)

    actions = rebalance_actions(strategy.allocation, optimized, threshold=args.threshold)
    print("\nRecommended Actions")
    print(RULE)
    if not actions:
        print("No action: optimized allocation matches the target.")
    for i, action in enumerate(actions, 1):
        print(f"{i}. {action}")
    return 0


def cmd_portfolio(args) -> int:
    df = portfolio_overview(secrets=os.environ, live_prices=args.live_prices)
    total = float(df["Value_$"].sum(skipna=True))
    print(f"\nPortfolio Overview ({short_address(DEMO_WALLET_ADDRESS)})")
    print(RULE)
    print(f"Total Value: ${total:,.2f}")
    print(RULE)
    _print_table(df[["Symbol", "Balance", "Price", "Value_$", "Alloc_%"]])
    return 0


def cmd_history(args) -> int:
    print("\nTransaction History")
    print(WIDE_RULE)
    _print_table(transaction_history())
    return 0


def cmd_settings(args) -> int:
    changed = False
    if args.risk is not None:
        changed = True
        print(f"Risk tolerance set to {args.risk:g}!")
        print(f"Recommended strategy: {get_recommended_strategy(args.risk)}")
    if args.auto_rebalance is not None:
        changed = True
        if args.auto_rebalance:
            print(f"Auto-rebalancing enabled with {args.frequency} frequency!")
        else:
            print("Auto-rebalancing disabled!")
    if args.notifications:
        changed = True
        print(f"Notification preferences updated: {', '.join(args.notifications)}")
    if not changed:
        print("Notification defaults")
        print(RULE)
        for name, enabled in NOTIFICATION_TYPES.items():
            print(f"{name}: {'on' if enabled else 'off'}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="apptronik-cli",
        description="Apptronik AI CLI - manage your crypto assets with AI strategies",
    )
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging verbosity (default: WARNING)")
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    p = sub.add_parser("strategies", help="List strategy presets")
    p.set_defaults(func=cmd_strategies)

    p = sub.add_parser("strategy", help="Show one strategy and its allocation")
    p.add_argument("strategy_id")
    p.set_defaults(func=cmd_strategy)

    p = sub.add_parser("recommend", help="Recommend a strategy for a risk tolerance")
    p.add_argument("--risk", type=float, required=True, help="Risk tolerance, 0-100")
    p.add_argument("--goal", choices=INVESTMENT_GOALS, default="growth")
    p.add_argument("--horizon", choices=TIME_HORIZONS, default="medium")
    p.set_defaults(func=cmd_recommend)

    p = sub.add_parser("returns", help="Expected return of a strategy by market condition")
    p.add_argument("strategy_id")
    p.add_argument("--market", choices=MARKET_CONDITIONS, default=None,
                   help="Market condition; all three are shown when omitted")
    p.set_defaults(func=cmd_returns)

    p = sub.add_parser("optimize", help="Nudge a strategy allocation with market trends")
    p.add_argument("strategy_id")
    p.add_argument("--trend", type=parse_trend, action="append", metavar="SYMBOL=SENT,MOM",
                   help="Per-asset sentiment and momentum, repeatable")
    p.add_argument("--threshold", type=float, default=0.5,
                   help="Ignore moves of this many percentage points or less")
    p.set_defaults(func=cmd_optimize)

    p = sub.add_parser("portfolio", help="Show the demo wallet portfolio")
    p.add_argument("--live-prices", action="store_true",
                   help="Price holdings via CoinGecko instead of example prices")
    p.set_defaults(func=cmd_portfolio)

    p = sub.add_parser("history", help="Show transaction history")
    p.set_defaults(func=cmd_history)

    p = sub.add_parser("settings", help="Configure risk, rebalancing and notification settings")
    p.add_argument("--risk", type=parse_risk, default=None, help="Risk tolerance, 0-100")
    group = p.add_mutually_exclusive_group()
    group.add_argument("--auto-rebalance", dest="auto_rebalance", action="store_true", default=None)
    group.add_argument("--no-auto-rebalance", dest="auto_rebalance", action="store_false")
    p.add_argument("--frequency", choices=[f.value for f in RebalancingFrequency], default="monthly")
    p.add_argument("--notifications", nargs="+", choices=list(NOTIFICATION_TYPES), metavar="TYPE")
    p.set_defaults(func=cmd_settings)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(levelname)s - %(message)s'
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
