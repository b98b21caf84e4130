import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd

from strategy_model.config import (
    STRATEGY_PRESETS, RISK_THRESHOLDS, TOP_RISK_STRATEGY, MARKET_CONDITIONS,
    MAX_TREND_ADJUSTMENT, STABLECOIN_DONOR_FLOOR,
)

logger = logging.getLogger(__name__)


class AssetClass(str, Enum):
    CRYPTO = "crypto"
    STABLECOIN = "stablecoin"
    DEFI = "defi"


class RebalancingFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"


@dataclass(frozen=True)
class AssetAllocation:
    symbol: str
    name: str
    percentage: float
    asset_class: AssetClass


@dataclass(frozen=True)
class ExpectedReturn:
    min: float
    max: float


@dataclass(frozen=True)
class Strategy:
    id: str
    name: str
    description: str
    risk_level: int
    expected_return: ExpectedReturn
    rebalancing_frequency: RebalancingFrequency
    allocation: Tuple[AssetAllocation, ...]


@dataclass(frozen=True)
class MarketTrend:
    sentiment: float
    momentum: float


TrendInput = Union[MarketTrend, Mapping[str, float]]


def _build_strategy(preset: Dict) -> Strategy:
    ret = preset["expected_return"]
    if ret["min"] > ret["max"]:
        raise ValueError(f"{preset['id']}: expected return min {ret['min']} exceeds max {ret['max']}")
    allocation = tuple(
        AssetAllocation(
            symbol=row["symbol"],
            name=row["name"],
            percentage=row["percentage"],
            asset_class=AssetClass(row["type"]),
        )
        for row in preset["allocation"]
    )
    symbols = [a.symbol for a in allocation]
    if len(set(symbols)) != len(symbols):
        raise ValueError(f"{preset['id']}: duplicate symbols in allocation")
    return Strategy(
        id=preset["id"],
        name=preset["name"],
        description=preset["description"],
        risk_level=int(preset["risk_level"]),
        expected_return=ExpectedReturn(min=ret["min"], max=ret["max"]),
        rebalancing_frequency=RebalancingFrequency(preset["rebalancing_frequency"]),
        allocation=allocation,
    )


def load_strategies(presets: Sequence[Dict] = STRATEGY_PRESETS) -> Dict[str, Strategy]:
    """Build the id -> Strategy registry from the preset table."""
    registry = {}
    for preset in presets:
        strategy = _build_strategy(preset)
        if strategy.id in registry:
            raise ValueError(f"duplicate strategy id: {strategy.id}")
        registry[strategy.id] = strategy
    return registry


STRATEGIES = load_strategies()


def list_strategies() -> List[Strategy]:
    return list(STRATEGIES.values())


def get_strategy_by_id(strategy_id: str) -> Optional[Strategy]:
    """Return the registered strategy, or None when the id is unknown."""
    strategy = STRATEGIES.get(strategy_id)
    if strategy is None:
        logger.debug(f"No strategy registered under id {strategy_id!r}")
    return strategy


def get_recommended_strategy(risk_tolerance: float, investment_goals: str = "growth",
                             time_horizon: str = "medium") -> str:
    """
    Map a risk tolerance score to a strategy id.

    Only the risk score drives the result. Goals and horizon are accepted for
    the caller's convenience and currently have no effect. Scores outside
    0-100 land in the lowest or highest bucket.
    """
    for upper, strategy_id in RISK_THRESHOLDS:
        if risk_tolerance < upper:
            return strategy_id
    return TOP_RISK_STRATEGY


def calculate_expected_returns(strategy: Strategy, market_condition: str) -> float:
    """bear -> min, bull -> max, anything else -> midpoint of the band."""
    low, high = strategy.expected_return.min, strategy.expected_return.max
    if market_condition == "bear":
        return low
    if market_condition == "bull":
        return high
    return (low + high) / 2


def _trend_factor(trend: TrendInput) -> float:
    if isinstance(trend, MarketTrend):
        sentiment, momentum = trend.sentiment, trend.momentum
    else:
        sentiment, momentum = trend["sentiment"], trend["momentum"]
    return (sentiment + momentum) / 2


def _first_stablecoin_donor(allocation: Sequence[AssetAllocation], percentages: List[float]) -> Optional[int]:
    for idx, asset in enumerate(allocation):
        if asset.asset_class == AssetClass.STABLECOIN and percentages[idx] > STABLECOIN_DONOR_FLOOR:
            return idx
    return None


def optimize_portfolio(current_allocation: Optional[Sequence[AssetAllocation]],
                       target_strategy: Strategy,
                       market_trends: Mapping[str, TrendInput]) -> List[AssetAllocation]:
    """
    Nudge a strategy's target allocation with per-asset market trends.

    Always starts from the target strategy's own table; current_allocation is
    accepted but not consulted. Each asset with a positive trend takes up to
    MAX_TREND_ADJUSTMENT * 100 points from the first stablecoin (list order)
    holding more than STABLECOIN_DONOR_FLOOR. Without such a donor the boost
    is dropped. Negative trends leave the asset alone. The result is then
    rescaled to sum to 100, except when the total is zero, in which case the
    copied allocation is returned as-is.

    Returns a new list; the strategy registry is never modified.
    """
    base = list(target_strategy.allocation)
    percentages = [float(asset.percentage) for asset in base]

    for idx, asset in enumerate(base):
        trend = market_trends.get(asset.symbol)
        if trend is None:
            continue
        adjustment = _trend_factor(trend) * MAX_TREND_ADJUSTMENT
        # NaN factors fall through here as well
        if not adjustment > 0:
            continue
        donor = _first_stablecoin_donor(base, percentages)
        if donor is None:
            logger.debug(f"{asset.symbol}: no stablecoin donor above {STABLECOIN_DONOR_FLOOR}%, boost dropped")
            continue
        shift = adjustment * 100
        percentages[donor] -= shift
        percentages[idx] += shift
        logger.debug(f"{asset.symbol}: +{shift:.2f} from {base[donor].symbol}")

    total = sum(percentages)
    if total == 0:
        logger.warning(f"{target_strategy.id}: allocation sums to zero, skipping renormalization")
        return [replace(asset, percentage=pct) for asset, pct in zip(base, percentages)]

    factor = 100 / total
    return [replace(asset, percentage=pct * factor) for asset, pct in zip(base, percentages)]


def allocation_total(allocation: Sequence[AssetAllocation]) -> float:
    return sum(asset.percentage for asset in allocation)


def allocation_frame(allocation: Sequence[AssetAllocation]) -> pd.DataFrame:
    """Tabular view of an allocation for printing and charting."""
    records = [
        {
            "Symbol": asset.symbol,
            "Asset": asset.name,
            "Class": asset.asset_class.value,
            "Alloc_%": float(asset.percentage),
        }
        for asset in allocation
    ]
    return pd.DataFrame(records, columns=["Symbol", "Asset", "Class", "Alloc_%"])


def expected_return_table(strategy: Strategy) -> pd.DataFrame:
    return pd.DataFrame(
        [{"Market": cond, "Expected_Return_%": calculate_expected_returns(strategy, cond)}
         for cond in MARKET_CONDITIONS]
    )


def strategies_frame(strategies: Optional[Sequence[Strategy]] = None) -> pd.DataFrame:
    if strategies is None:
        strategies = list_strategies()
    return pd.DataFrame([
        {
            "ID": s.id,
            "Name": s.name,
            "Risk": s.risk_level,
            "Return_Min_%": s.expected_return.min,
            "Return_Max_%": s.expected_return.max,
            "Rebalancing": s.rebalancing_frequency.value,
        }
        for s in strategies
    ])
