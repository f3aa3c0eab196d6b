"""Karera: deterministic horse race simulation and exacta payout engine."""

__version__ = "0.1.0"
