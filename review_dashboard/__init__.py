"""Application intake and review dashboard: score aggregation and ranking."""

__version__ = "1.0.0"
