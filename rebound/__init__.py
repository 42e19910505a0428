"""Rebound - paddle and block arcade match simulator."""

__version__ = "0.1.0"
