"""Endpoints served by the trading API host."""
