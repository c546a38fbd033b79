"""
result_aggregation.py

Turns raw draw outcomes into per-category summaries and builds the state
fingerprint used by callers for memoization
"""
from typing import Dict, Iterable, List, Sequence

from holdem_odds.core_poker_mechanics import Card, HandCategory, EMPTY_CODE
from holdem_odds.poker_types import PossibleHand, CombinedPossibleHand

CARD_SEPARATOR = '-'
BOARD_PREFIX = '|board:'
OPPONENTS_PREFIX = '|opponents:'
HAND_SEPARATOR = ';'
HAND_CARD_SEPARATOR = ','


def split_possible_hands(category: HandCategory,
                         required_cards: Sequence[str],
                         probability: float,
                         copies: int = 1) -> List[PossibleHand]:
    """
    One PossibleHand per distinct required card, sharing `probability` evenly.
    Duplicates are collapsed while keeping first-seen order.
    """
    distinct = list(dict.fromkeys(required_cards))
    if not distinct:
        return []
    share = probability / len(distinct)
    return [
        PossibleHand(category=category, required_cards=(card,) * copies, probability=share)
        for card in distinct
    ]


def sort_key(category: HandCategory, probability: float):
    """Probability descending, then category strength descending"""
    return (-probability, -category.strength)


def combine_possible_hands(hands: Iterable[PossibleHand]) -> List[CombinedPossibleHand]:
    """Group PossibleHands by category and sort the groups"""
    grouped: Dict[HandCategory, List[PossibleHand]] = {}
    for hand in hands:
        grouped.setdefault(hand.category, []).append(hand)

    combined = []
    for category, hands_of_type in grouped.items():
        probabilities = tuple(h.probability for h in hands_of_type)
        combined.append(CombinedPossibleHand(
            category=category,
            required_combinations=tuple(h.required_cards for h in hands_of_type),
            probabilities=probabilities,
            total_probability=sum(probabilities),
        ))

    combined.sort(key=lambda c: sort_key(c.category, c.total_probability))
    return combined


def _card_code(card) -> str:
    if card is None:
        return EMPTY_CODE
    return card.code


def fingerprint(hero: Sequence[Card],
                board: Sequence[Card],
                opponents: Sequence[Sequence[Card]] = ()) -> str:
    """
    Deterministic key for a game state.

    Hero and board slots keep their positions (empty slots encode as '--'),
    opponent hands follow in index order.
    """
    key = CARD_SEPARATOR.join(_card_code(card) for card in hero)
    key += BOARD_PREFIX + CARD_SEPARATOR.join(_card_code(card) for card in board)
    if opponents:
        hands = [HAND_CARD_SEPARATOR.join(_card_code(card) for card in hand) for hand in opponents]
        key += OPPONENTS_PREFIX + HAND_SEPARATOR.join(hands)
    return key
