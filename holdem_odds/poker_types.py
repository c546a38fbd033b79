"""
poker_types.py

Result types broken out to avoid circular imports
"""
from enum import Enum
from dataclasses import dataclass
from typing import Optional, Tuple

from holdem_odds.core_poker_mechanics import Card, HandCategory


class Outcome(Enum):
    CANCELLED = 'cancelled'


# Returned in place of a result when the caller abandoned the calculation
CANCELLED = Outcome.CANCELLED


class SimulationCancelled(Exception):
    """Raised inside a running simulation once its cancel event is set"""


@dataclass(frozen=True)
class PossibleHand:
    category: HandCategory
    required_cards: Tuple[str, ...]  # one entry per card still needed, e.g. ('Any Hearts', 'Any Hearts')
    probability: float


@dataclass(frozen=True)
class CombinedPossibleHand:
    category: HandCategory
    required_combinations: Tuple[Tuple[str, ...], ...]
    probabilities: Tuple[float, ...]
    total_probability: float


@dataclass(frozen=True)
class OpponentHandEstimate:
    category: HandCategory
    example_hole_cards: Tuple[Card, Card]
    occurrences: int  # simulations in which this category beat the hero
    probability: float


@dataclass(frozen=True)
class WinProbability:
    hero: float
    opponents: Tuple[float, ...] = ()


@dataclass(frozen=True)
class HandAnalysisResult:
    current_hand: Optional[HandCategory]
    has_minimum_cards: bool  # 2 hole cards and at least 3 board cards
    fingerprint: str
