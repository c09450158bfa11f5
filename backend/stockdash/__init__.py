"""
StockDash Backend

Caches daily stock prices from Yahoo Finance, serves them with derived
chart indicators (SMA, RSI) and asks an LLM for a next-day price guess.
"""

__version__ = "0.1.0"
