"""Autoplay strategies."""

from tilematch.strategy.base import Strategy
from tilematch.strategy.simple import GreedyStrategy, HintStrategy

STRATEGIES: dict[str, type[Strategy]] = {
    "hint": HintStrategy,
    "greedy": GreedyStrategy,
}

__all__ = ["STRATEGIES", "Strategy", "GreedyStrategy", "HintStrategy"]
