"""Seed data for the simulated exchange."""

# Starting last-trade prices (as of project creation)
SEED_PRICES: dict[str, float] = {
    "BTCUSD": 6950.00,
    "ETHBTC": 0.054463,
    "ETHUSD": 378.50,
    "LTCBTC": 0.00812,
    "LTCUSD": 56.40,
    "XRPBTC": 0.0000712,
    "BCHUSD": 520.00,
    "EOSETH": 0.0148,
}

# Decimal places used when formatting simulated prices
PRICE_DECIMALS: dict[str, int] = {
    "BTC": 8,
    "ETH": 8,
    "USD": 2,
    "USDT": 2,
    "EUR": 2,
}
DEFAULT_DECIMALS = 6

# Quote currencies recognised when splitting a symbol into base/quote.
# Longest first so "USDT" wins over "USD".
QUOTE_CURRENCIES: tuple[str, ...] = ("USDT", "BTC", "ETH", "USD", "EUR")

CURRENCY_NAMES: dict[str, str] = {
    "BTC": "Bitcoin",
    "ETH": "Ethereum",
    "LTC": "Litecoin",
    "XRP": "Ripple",
    "BCH": "Bitcoin Cash",
    "EOS": "EOS",
    "USD": "Dollar",
    "USDT": "Tether",
    "EUR": "Euro",
}

# sigma: annualized volatility; crypto moves a lot more than equities
DEFAULT_SIGMA = 0.80
TICKER_SIGMA: dict[str, float] = {
    "BTCUSD": 0.70,
    "ETHBTC": 0.55,
    "XRPBTC": 1.10,
}

# Relative bid/ask spread around the last price
DEFAULT_SPREAD = 0.0002
