"""Match-3 tile puzzle rules engine."""

__version__ = "0.1.0"
