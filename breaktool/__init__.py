"""Breaktool verdict service: tool verdicts, review analytics and trust scores."""

__version__ = "0.1.0"
