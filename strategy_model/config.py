STRATEGY_PRESETS = [
    {
        "id": "conservative",
        "name": "Conservative",
        "description": "Focus on capital preservation with stable growth and lower volatility",
        "risk_level": 25,
        "expected_return": {"min": 5, "max": 15},
        "rebalancing_frequency": "monthly",
        "allocation": [
            {"symbol": "BTC",  "name": "Bitcoin",      "percentage": 20, "type": "crypto"},
            {"symbol": "ETH",  "name": "Ethereum",     "percentage": 20, "type": "crypto"},
            {"symbol": "USDC", "name": "USD Coin",     "percentage": 30, "type": "stablecoin"},
            {"symbol": "USDT", "name": "Tether",       "percentage": 20, "type": "stablecoin"},
            {"symbol": "BNB",  "name": "Binance Coin", "percentage": 10, "type": "crypto"},
        ],
    },
    {
        "id": "balanced",
        "name": "Balanced",
        "description": "Balance between growth and stability with moderate risk",
        "risk_level": 50,
        "expected_return": {"min": 10, "max": 25},
        "rebalancing_frequency": "weekly",
        "allocation": [
            {"symbol": "BTC",  "name": "Bitcoin",   "percentage": 25, "type": "crypto"},
            {"symbol": "ETH",  "name": "Ethereum",  "percentage": 25, "type": "crypto"},
            {"symbol": "SOL",  "name": "Solana",    "percentage": 10, "type": "crypto"},
            {"symbol": "USDC", "name": "USD Coin",  "percentage": 15, "type": "stablecoin"},
            {"symbol": "AAVE", "name": "Aave",      "percentage": 10, "type": "defi"},
            {"symbol": "UNI",  "name": "Uniswap",   "percentage": 10, "type": "defi"},
            {"symbol": "LINK", "name": "Chainlink", "percentage": 5,  "type": "crypto"},
        ],
    },
    {
        "id": "aggressive",
        "name": "Aggressive",
        "description": "Focus on high growth potential with higher volatility",
        "risk_level": 80,
        "expected_return": {"min": 20, "max": 50},
        "rebalancing_frequency": "weekly",
        "allocation": [
            {"symbol": "BTC",   "name": "Bitcoin",   "percentage": 20, "type": "crypto"},
            {"symbol": "ETH",   "name": "Ethereum",  "percentage": 20, "type": "crypto"},
            {"symbol": "SOL",   "name": "Solana",    "percentage": 15, "type": "crypto"},
            {"symbol": "AVAX",  "name": "Avalanche", "percentage": 10, "type": "crypto"},
            {"symbol": "DOT",   "name": "Polkadot",  "percentage": 10, "type": "crypto"},
            {"symbol": "MATIC", "name": "Polygon",   "percentage": 10, "type": "crypto"},
            {"symbol": "UNI",   "name": "Uniswap",   "percentage": 5,  "type": "defi"},
            {"symbol": "AAVE",  "name": "Aave",      "percentage": 5,  "type": "defi"},
            {"symbol": "COMP",  "name": "Compound",  "percentage": 5,  "type": "defi"},
        ],
    },
    {
        "id": "ai-optimized",
        "name": "AI Optimized",
        "description": "Dynamic allocation based on AI market analysis and predictions",
        "risk_level": 65,
        "expected_return": {"min": 15, "max": 40},
        "rebalancing_frequency": "daily",
        "allocation": [
            {"symbol": "BTC",  "name": "Bitcoin",   "percentage": 22, "type": "crypto"},
            {"symbol": "ETH",  "name": "Ethereum",  "percentage": 22, "type": "crypto"},
            {"symbol": "SOL",  "name": "Solana",    "percentage": 12, "type": "crypto"},
            {"symbol": "AVAX", "name": "Avalanche", "percentage": 8,  "type": "crypto"},
            {"symbol": "USDC", "name": "USD Coin",  "percentage": 10, "type": "stablecoin"},
            {"symbol": "AAVE", "name": "Aave",      "percentage": 8,  "type": "defi"},
            {"symbol": "UNI",  "name": "Uniswap",   "percentage": 8,  "type": "defi"},
            {"symbol": "LINK", "name": "Chainlink", "percentage": 5,  "type": "crypto"},
            {"symbol": "GRT",  "name": "The Graph", "percentage": 5,  "type": "crypto"},
        ],
    },
]

# Upper bounds (exclusive) on risk tolerance for each recommendation bucket
RISK_THRESHOLDS = [
    (30, "conservative"),
    (60, "balanced"),
    (85, "aggressive"),
]
TOP_RISK_STRATEGY = "ai-optimized"

INVESTMENT_GOALS = ["growth", "income", "preservation"]
TIME_HORIZONS = ["short", "medium", "long"]
MARKET_CONDITIONS = ["bear", "neutral", "bull"]

# Notification types and whether each is on by default
NOTIFICATION_TYPES = {
    "portfolio-updates": True,
    "market-alerts": True,
    "transaction-confirmations": True,
    "security-alerts": True,
    "newsletter": False,
}

# Trend nudge: a (sentiment + momentum) / 2 factor of 1 moves 5 points
MAX_TREND_ADJUSTMENT = 0.05
# Stablecoins at or below this percentage never donate weight
STABLECOIN_DONOR_FLOOR = 5

COINGECKO_BASE = "https://api.coingecko.com/api/v3"

DEMO_WALLET_ADDRESS = "0x1a2b3c4d5e6f7g8h9i0j"

DEMO_HOLDINGS = [
    {"symbol": "ETH",  "name": "Ethereum",  "type": "crypto",     "coingecko": "ethereum",  "address": "native",                                     "balance": 12.5},
    {"symbol": "USDC", "name": "USD Coin",  "type": "stablecoin", "coingecko": "usd-coin",  "address": "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48", "balance": 48000.0},
    {"symbol": "LINK", "name": "Chainlink", "type": "crypto",     "coingecko": "chainlink", "address": "0x514910771af9ca656af840dff83e8264ecf986ca", "balance": 3900.0},
]

# Used whenever live prices are disabled or a symbol fails to resolve
EXAMPLE_PRICES = {"ETH": 3000.0, "USDC": 1.0, "LINK": 10.0}

DEMO_PORTFOLIO_VALUE = 124_532.87
DEMO_PERCENT_CHANGE = 2.3

DEMO_TRANSACTIONS = [
    {"date": "2025-05-15", "type": "Buy",  "asset": "BTC",  "amount": "0.05",  "value": 3245.67},
    {"date": "2025-05-14", "type": "Swap", "asset": "ETH",  "amount": "+2.5",  "value": 5678.23},
    {"date": "2025-05-14", "type": "Swap", "asset": "USDC", "amount": "-5000", "value": 5000.00},
    {"date": "2025-05-12", "type": "Sell", "asset": "SOL",  "amount": "10.2",  "value": 1234.56},
    {"date": "2025-05-10", "type": "Buy",  "asset": "ETH",  "amount": "1.8",   "value": 4321.09},
]
