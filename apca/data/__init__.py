"""Endpoints served by the market data host."""

DATA_BASE_URL = "https://data.alpaca.markets"
