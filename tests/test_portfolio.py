import pytest
import requests

import strategy_model.portfolio as portfolio
from strategy_model.config import DEMO_WALLET_ADDRESS
from strategy_model.engine import AssetAllocation, AssetClass, MarketTrend, get_strategy_by_id, optimize_portfolio
from strategy_model.portfolio import (
    fetch_simple_prices,
    holdings_as_allocation,
    portfolio_overview,
    portfolio_summary,
    rebalance_actions,
    short_address,
    transaction_history,
)


class FakeResponse:
    def __init__(self, status_code, payload=None):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        return self._payload


@pytest.fixture
def fake_get(monkeypatch):
    calls = []

    def install(response):
        def _get(url, headers=None, timeout=None):
            calls.append({"url": url, "headers": headers, "timeout": timeout})
            if isinstance(response, Exception):
                raise response
            return response

        monkeypatch.setattr(portfolio.requests, "get", _get)
        return calls

    return install


def test_short_address():
    assert short_address(DEMO_WALLET_ADDRESS) == "0x1a2b...9i0j"
    assert short_address("0x1234") == "0x1234"


def test_overview_with_example_prices():
    df = portfolio_overview()
    assert list(df["Symbol"]) == ["ETH", "USDC", "LINK"]
    assert df.loc[df["Symbol"] == "ETH", "Value_$"].item() == pytest.approx(37_500)
    assert df["Value_$"].sum() == pytest.approx(124_500)
    assert df["Alloc_%"].sum() == pytest.approx(100)


def test_overview_zero_balances():
    holdings = [{"symbol": "ETH", "name": "Ethereum", "type": "crypto", "balance": 0.0}]
    df = portfolio_overview(holdings)
    assert df["Alloc_%"].tolist() == [0.0]


def test_fetch_simple_prices_parses_and_sends_key(fake_get):
    calls = fake_get(FakeResponse(200, {"ethereum": {"usd": 2500}, "chainlink": {}}))
    prices = fetch_simple_prices(["ethereum", "chainlink", None], {"COINGECKO_API_KEY": "k"})
    assert prices == {"ethereum": 2500.0}
    assert calls[0]["headers"] == {"x-cg-pro-api-key": "k"}
    assert "ids=chainlink,ethereum" in calls[0]["url"]
    assert calls[0]["url"].startswith("https://api.coingecko.com/api/v3/simple/price")


def test_fetch_simple_prices_skips_malformed_entries(fake_get, caplog):
    fake_get(FakeResponse(200, {"ethereum": {"usd": "n/a"}, "usd-coin": {"usd": 1.0}, "chainlink": "bad"}))
    with caplog.at_level("WARNING"):
        prices = fetch_simple_prices(["ethereum", "usd-coin", "chainlink"], None)
    assert prices == {"usd-coin": 1.0}
    assert "Skipping malformed CoinGecko entry for ethereum" in caplog.text
    assert "Skipping malformed CoinGecko entry for chainlink" in caplog.text


def test_overview_live_prices_ignore_malformed_entries(fake_get):
    fake_get(FakeResponse(200, {"ethereum": {"usd": "n/a"}, "usd-coin": {"usd": 1.0}, "chainlink": "bad"}))
    df = portfolio_overview(live_prices=True)
    assert df["Price"].tolist() == [3000.0, 1.0, 10.0]


def test_fetch_simple_prices_non_200(fake_get):
    fake_get(FakeResponse(429))
    assert fetch_simple_prices(["ethereum"], None) == {}


def test_fetch_simple_prices_no_ids_skips_request(fake_get):
    calls = fake_get(FakeResponse(200, {}))
    assert fetch_simple_prices([], None) == {}
    assert calls == []


def test_overview_live_prices_fall_back_per_symbol(fake_get):
    fake_get(FakeResponse(200, {"ethereum": {"usd": 2000}}))
    df = portfolio_overview(secrets={"COINGECKO_BASE": "http://cg.local"}, live_prices=True)
    prices = dict(zip(df["Symbol"], df["Price"]))
    assert prices == {"ETH": 2000.0, "USDC": 1.0, "LINK": 10.0}


def test_overview_live_prices_network_error(fake_get, caplog):
    fake_get(requests.ConnectionError("down"))
    with caplog.at_level("WARNING"):
        df = portfolio_overview(live_prices=True)
    assert df["Price"].tolist() == [3000.0, 1.0, 10.0]
    assert "Live price fetch failed" in caplog.text


def test_summary_and_history():
    summary = portfolio_summary(100.0, -1.5)
    assert summary["high_24h"] == pytest.approx(105.0)
    assert summary["low_24h"] == pytest.approx(97.0)
    assert summary["pct_change"] == -1.5

    history = transaction_history()
    assert len(history) == 5
    assert list(history.columns) == ["Date", "Type", "Asset", "Amount", "Value_$", "Status"]
    assert set(history["Status"]) == {"Completed"}
    assert history.iloc[0]["Asset"] == "BTC"


def test_holdings_as_allocation_keeps_classes():
    allocation = holdings_as_allocation(portfolio_overview())
    classes = {a.symbol: a.asset_class for a in allocation}
    assert classes["USDC"] == AssetClass.STABLECOIN
    assert classes["ETH"] == AssetClass.CRYPTO
    assert sum(a.percentage for a in allocation) == pytest.approx(100)


def test_rebalance_actions_after_optimization():
    balanced = get_strategy_by_id("balanced")
    optimized = optimize_portfolio(None, balanced, {"BTC": MarketTrend(1, 1)})
    assert rebalance_actions(balanced.allocation, optimized) == [
        "Increase BTC allocation by 5.0%",
        "Decrease USDC allocation by 5.0%",
    ]
    assert rebalance_actions(balanced.allocation, balanced.allocation) == []


def test_rebalance_actions_add_exit_and_threshold():
    current = [
        AssetAllocation("ETH", "Ethereum", 60, AssetClass.CRYPTO),
        AssetAllocation("LINK", "Chainlink", 40, AssetClass.CRYPTO),
    ]
    target = [
        AssetAllocation("ETH", "Ethereum", 60.5, AssetClass.CRYPTO),
        AssetAllocation("SOL", "Solana", 39.5, AssetClass.CRYPTO),
    ]
    assert rebalance_actions(current, target) == [
        "Exit LINK (40.0%)",
        "Add exposure to SOL (39.5%)",
    ]
    assert rebalance_actions(current, target, threshold=0.1)[-1] == "Increase ETH allocation by 0.5%"
