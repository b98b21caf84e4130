import logging
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd
import requests

from strategy_model.config import (
    COINGECKO_BASE, DEMO_HOLDINGS, EXAMPLE_PRICES, DEMO_TRANSACTIONS,
    DEMO_PORTFOLIO_VALUE, DEMO_PERCENT_CHANGE,
)
from strategy_model.engine import AssetAllocation, AssetClass

logger = logging.getLogger(__name__)


def short_address(address: str) -> str:
    if len(address) <= 10:
        return address
    return f"{address[:6]}...{address[-4:]}"


def _cg_base_and_headers(secrets):
    if secrets is None:
        secrets = {}
    key = secrets.get("COINGECKO_API_KEY", "")
    base = secrets.get("COINGECKO_BASE", COINGECKO_BASE)
    headers = {"x-cg-pro-api-key": key} if key else {}
    return base, headers


def fetch_simple_prices(ids, secrets) -> Dict[str, float]:
    """Current USD prices via /simple/price for a list of CoinGecko IDs.
    Returns {id: price} for ids that resolve, {} on a non-200 response.
    """
    ids = [cid for cid in ids if cid]
    if not ids:
        return {}
    base, headers = _cg_base_and_headers(secrets)
    ids_param = ",".join(sorted(set(ids)))
    url = f"{base}/simple/price?ids={ids_param}&vs_currencies=usd"
    r = requests.get(url, headers=headers, timeout=20)
    if r.status_code != 200:
        logger.warning(f"CoinGecko simple/price returned HTTP {r.status_code}")
        return {}
    data = r.json() or {}
    out = {}
    for cid, obj in data.items():
        try:
            price = (obj or {}).get("usd")
            if price is not None:
                out[cid] = float(price)
        except (TypeError, ValueError, AttributeError):
            logger.warning(f"Skipping malformed CoinGecko entry for {cid}: {obj!r}")
            continue
    return out


def resolve_prices(holdings: Sequence[Dict], secrets=None, live_prices: bool = False) -> Dict[str, float]:
    """Symbol -> USD price, live where possible, example prices otherwise."""
    prices = {row["symbol"]: EXAMPLE_PRICES.get(row["symbol"], np.nan) for row in holdings}
    if not live_prices:
        return prices
    try:
        live = fetch_simple_prices([row.get("coingecko") for row in holdings], secrets)
    except requests.RequestException as e:
        logger.warning(f"Live price fetch failed, using example prices: {e}")
        return prices
    for row in holdings:
        cid = row.get("coingecko")
        if cid in live:
            prices[row["symbol"]] = live[cid]
        else:
            logger.info(f"No live price for {row['symbol']}, keeping example price")
    return prices


def portfolio_overview(holdings: Sequence[Dict] = DEMO_HOLDINGS, secrets=None,
                       live_prices: bool = False) -> pd.DataFrame:
    prices = resolve_prices(holdings, secrets, live_prices)
    df = pd.DataFrame(list(holdings), columns=["symbol", "name", "type", "balance"])
    df = df.rename(columns={"symbol": "Symbol", "name": "Asset", "type": "Class", "balance": "Balance"})
    df["Class"] = df["Class"].fillna(AssetClass.CRYPTO.value)
    df["Price"] = df["Symbol"].map(prices).astype(float)
    df["Value_$"] = df["Balance"] * df["Price"]
    total = float(df["Value_$"].sum(skipna=True))
    if total > 0:
        df["Alloc_%"] = df["Value_$"] / total * 100.0
    else:
        df["Alloc_%"] = 0.0
    return df


def portfolio_summary(value: float = DEMO_PORTFOLIO_VALUE,
                      pct_change: float = DEMO_PERCENT_CHANGE) -> Dict[str, float]:
    return {
        "value": value,
        "pct_change": pct_change,
        "high_24h": value * 1.05,
        "low_24h": value * 0.97,
    }


def transaction_history(transactions: Optional[Sequence[Dict]] = None) -> pd.DataFrame:
    if transactions is None:
        transactions = DEMO_TRANSACTIONS
    df = pd.DataFrame(list(transactions), columns=["date", "type", "asset", "amount", "value"])
    df.columns = ["Date", "Type", "Asset", "Amount", "Value_$"]
    df["Status"] = "Completed"
    return df


def holdings_as_allocation(overview: pd.DataFrame) -> List[AssetAllocation]:
    """Current wallet weights in allocation form."""
    return [
        AssetAllocation(symbol=row["Symbol"], name=row["Asset"],
                        percentage=float(row["Alloc_%"]), asset_class=AssetClass(row["Class"]))
        for _, row in overview.iterrows()
    ]


def rebalance_actions(current: Sequence[AssetAllocation], target: Sequence[AssetAllocation],
                      threshold: float = 1.0) -> List[str]:
    """
    Human-readable moves that take `current` weights to `target` weights.

    Differences of `threshold` percentage points or less are ignored. Largest
    moves come first.
    """
    cur = {a.symbol: float(a.percentage) for a in current}
    tgt = {a.symbol: float(a.percentage) for a in target}
    moves = []
    for symbol in list(tgt.keys()) + [s for s in cur if s not in tgt]:
        before = cur.get(symbol, 0.0)
        after = tgt.get(symbol, 0.0)
        diff = after - before
        if abs(diff) <= threshold:
            continue
        if symbol not in cur:
            text = f"Add exposure to {symbol} ({after:.1f}%)"
        elif symbol not in tgt:
            text = f"Exit {symbol} ({before:.1f}%)"
        elif diff > 0:
            text = f"Increase {symbol} allocation by {diff:.1f}%"
        else:
            text = f"Decrease {symbol} allocation by {-diff:.1f}%"
        moves.append((abs(diff), text))
    moves.sort(key=lambda m: m[0], reverse=True)
    return [text for _, text in moves]
