"""
core_poker_mechanics.py

Card domain and hand evaluation for Texas Hold'em analysis
"""
from dataclasses import dataclass
from collections import Counter
from enum import Enum, IntEnum
from typing import Iterable, List, Optional, Tuple

import numpy as np
from numba import njit


class Suit(Enum):
    SPADES = 's'
    HEARTS = 'h'
    CLUBS = 'c'
    DIAMONDS = 'd'

    @property
    def code(self) -> str:
        return self.value

    @property
    def symbol(self) -> str:
        return {Suit.SPADES: '♠', Suit.HEARTS: '♥', Suit.CLUBS: '♣', Suit.DIAMONDS: '♦'}[self]

    @property
    def display_name(self) -> str:
        return self.name.capitalize()


class Rank(IntEnum):
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    @property
    def display(self) -> str:
        return {11: 'J', 12: 'Q', 13: 'K', 14: 'A'}.get(self.value, str(self.value))

    @property
    def code(self) -> str:
        return {10: 'T', 11: 'J', 12: 'Q', 13: 'K', 14: 'A'}.get(self.value, str(self.value))


RANK_CODES = {rank.code: rank for rank in Rank}
SUIT_CODES = {suit.code: suit for suit in Suit}
EMPTY_CODE = '--'


@dataclass(frozen=True)
class Card:
    """A card, or an unselected slot when rank or suit is missing"""
    rank: Optional[Rank]  # 2-14 (2-10, J=11, Q=12, K=13, A=14)
    suit: Optional[Suit]

    def __post_init__(self):
        if self.rank is not None and not isinstance(self.rank, Rank):
            object.__setattr__(self, 'rank', Rank(self.rank))

    @classmethod
    def empty(cls) -> 'Card':
        return cls(None, None)

    @classmethod
    def from_str(cls, card_str: str) -> 'Card':
        """Parse 'As', 'Td' or '10d'. Raises ValueError for anything else."""
        s = card_str.strip()
        if len(s) == 3 and s.startswith('10'):
            s = 'T' + s[2]
        if len(s) != 2:
            raise ValueError(f"Invalid card string: '{card_str}'")
        rank = RANK_CODES.get(s[0].upper())
        suit = SUIT_CODES.get(s[1].lower())
        if rank is None or suit is None:
            raise ValueError(f"Invalid card string: '{card_str}'")
        return cls(rank, suit)

    @property
    def is_valid(self) -> bool:
        return self.rank is not None and self.suit is not None

    @property
    def code(self) -> str:
        if not self.is_valid:
            return EMPTY_CODE
        return f"{self.rank.code}{self.suit.code}"

    def __str__(self):
        if not self.is_valid:
            return ''
        return f"{self.rank.display}{self.suit.symbol}"


def parse_cards(card_strs: Iterable[str]) -> List[Card]:
    return [Card.from_str(s) for s in card_strs]


def valid_cards(cards: Iterable[Card]) -> List[Card]:
    """Drop empty slots, keeping order"""
    return [card for card in cards if card is not None and card.is_valid]


def standard_deck() -> List[Card]:
    """Ordered 52-card deck"""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


class HandCategory(Enum):
    HIGH_CARD = 1
    ONE_PAIR = 2
    TWO_PAIR = 3
    THREE_OF_A_KIND = 4
    STRAIGHT = 5
    FLUSH = 6
    FULL_HOUSE = 7
    FOUR_OF_A_KIND = 8
    STRAIGHT_FLUSH = 9
    ROYAL_FLUSH = 10

    @property
    def strength(self) -> int:
        return self.value

    @property
    def display_name(self) -> str:
        return {
            HandCategory.HIGH_CARD: 'High Card',
            HandCategory.ONE_PAIR: 'One Pair',
            HandCategory.TWO_PAIR: 'Two Pair',
            HandCategory.THREE_OF_A_KIND: 'Three of a Kind',
            HandCategory.STRAIGHT: 'Straight',
            HandCategory.FLUSH: 'Flush',
            HandCategory.FULL_HOUSE: 'Full House',
            HandCategory.FOUR_OF_A_KIND: 'Four of a Kind',
            HandCategory.STRAIGHT_FLUSH: 'Straight Flush',
            HandCategory.ROYAL_FLUSH: 'Royal Flush',
        }[self]


ROYAL_RANKS = frozenset({Rank.TEN, Rank.JACK, Rank.QUEEN, Rank.KING, Rank.ACE})


@njit
def _straight_high(present: np.ndarray) -> int:
    """
    Highest straight in a 15-slot presence array (index = rank value, index 1
    mirrors the ace). Returns 0 when there is no straight; the wheel returns 5.
    """
    for high in range(14, 4, -1):
        found = True
        for value in range(high - 4, high + 1):
            if present[value] == 0:
                found = False
                break
        if found:
            return high
    return 0


def straight_high_card(ranks: Iterable[int]) -> int:
    present = np.zeros(15, np.int8)
    for r in ranks:
        present[int(r)] = 1
    present[1] = present[14]
    return int(_straight_high(present))


class HandEvaluator:
    @staticmethod
    def classify(cards: Iterable[Card]) -> Optional[HandCategory]:
        """
        Classify 2-7 cards into a hand category.

        Empty slots are ignored; fewer than two real cards returns None.
        Flush and straight are checked over the pooled cards, so a flush and a
        straight together make a straight flush (royal when 10-A are present).
        """
        cards = valid_cards(cards)
        if len(cards) < 2:
            return None

        suit_counts = Counter(card.suit for card in cards)
        rank_counts = Counter(card.rank for card in cards)

        has_flush = any(count >= 5 for count in suit_counts.values())
        has_straight = len(rank_counts) >= 5 and straight_high_card(rank_counts) > 0

        if has_flush and has_straight:
            if ROYAL_RANKS.issubset(rank_counts):
                return HandCategory.ROYAL_FLUSH
            return HandCategory.STRAIGHT_FLUSH

        # Get counts in descending order
        count_values = sorted(rank_counts.values(), reverse=True)

        if count_values[0] == 4:
            return HandCategory.FOUR_OF_A_KIND
        if len(count_values) >= 2 and count_values[0] == 3 and count_values[1] >= 2:
            return HandCategory.FULL_HOUSE
        if has_flush:
            return HandCategory.FLUSH
        if has_straight:
            return HandCategory.STRAIGHT
        if count_values[0] == 3:
            return HandCategory.THREE_OF_A_KIND
        if len(count_values) >= 2 and count_values[0] == 2 and count_values[1] == 2:
            return HandCategory.TWO_PAIR
        if count_values[0] == 2:
            return HandCategory.ONE_PAIR
        return HandCategory.HIGH_CARD

    @staticmethod
    def tie_break_vector(category: HandCategory, cards: Iterable[Card]) -> List[int]:
        """
        Rank values ordering hands within one category: hand-making ranks
        first, then kickers. Compared lexicographically.
        """
        cards = valid_cards(cards)
        values = [int(card.rank) for card in cards]
        rank_counts = Counter(values)

        def top_kickers(excluded: List[int], limit: int) -> List[int]:
            return sorted((v for v in values if v not in excluded), reverse=True)[:limit]

        def ranks_with(predicate) -> List[int]:
            return sorted((r for r, c in rank_counts.items() if predicate(c)), reverse=True)

        if category == HandCategory.ROYAL_FLUSH:
            # All royal flushes tie
            return [14]

        if category in (HandCategory.STRAIGHT_FLUSH, HandCategory.STRAIGHT):
            return [straight_high_card(values)]

        if category == HandCategory.FOUR_OF_A_KIND:
            quads = ranks_with(lambda c: c >= 4)
            quad_rank = quads[0] if quads else -1
            return [quad_rank] + top_kickers([quad_rank], 1)

        if category == HandCategory.FULL_HOUSE:
            trips = ranks_with(lambda c: c >= 3)
            trips_rank = trips[0] if trips else -1
            # A second set of trips plays as the pair
            pairs = [r for r in ranks_with(lambda c: c >= 2) if r != trips_rank]
            pair_rank = pairs[0] if pairs else -1
            return [trips_rank, pair_rank]

        if category == HandCategory.FLUSH:
            suit_counts = Counter(card.suit for card in cards)
            flush_suits = [s for s, c in suit_counts.items() if c >= 5]
            if not flush_suits:
                return sorted(values, reverse=True)[:5]
            suited = sorted((int(card.rank) for card in cards if card.suit == flush_suits[0]), reverse=True)
            return suited[:5]

        if category == HandCategory.THREE_OF_A_KIND:
            trips = ranks_with(lambda c: c == 3)
            trips_rank = trips[0] if trips else -1
            return [trips_rank] + top_kickers([trips_rank], 2)

        if category == HandCategory.TWO_PAIR:
            pairs = ranks_with(lambda c: c == 2)
            high_pair = pairs[0] if pairs else -1
            low_pair = pairs[1] if len(pairs) > 1 else -1
            return [high_pair, low_pair] + top_kickers([high_pair, low_pair], 1)

        if category == HandCategory.ONE_PAIR:
            pairs = ranks_with(lambda c: c == 2)
            pair_rank = pairs[0] if pairs else -1
            return [pair_rank] + top_kickers([pair_rank], 3)

        # HIGH_CARD
        return sorted(values, reverse=True)[:5]

    @staticmethod
    def evaluate(cards: Iterable[Card]) -> Optional[Tuple[HandCategory, List[int]]]:
        """Category and tie-break vector, or None for fewer than two cards"""
        cards = valid_cards(cards)
        category = HandEvaluator.classify(cards)
        if category is None:
            return None
        return category, HandEvaluator.tie_break_vector(category, cards)

    @staticmethod
    def compare_vectors(vector_a: List[int], vector_b: List[int]) -> int:
        """Lexicographic comparison over the shorter length: 1, -1 or 0"""
        for a, b in zip(vector_a, vector_b):
            if a > b:
                return 1
            if a < b:
                return -1
        return 0

    @staticmethod
    def compare(category_a: Optional[HandCategory], vector_a: List[int],
                category_b: Optional[HandCategory], vector_b: List[int]) -> int:
        """
        Order two evaluated hands: 1 if a is stronger, -1 if b is, 0 on a tie.
        A missing category loses to any made hand.
        """
        if category_a is None or category_b is None:
            if category_a is None and category_b is None:
                return 0
            return -1 if category_a is None else 1
        if category_a.strength != category_b.strength:
            return 1 if category_a.strength > category_b.strength else -1
        return HandEvaluator.compare_vectors(vector_a, vector_b)

    @staticmethod
    def beats(candidate_category: HandCategory, candidate_cards: Iterable[Card],
              current_category: Optional[HandCategory], current_vector: List[int]) -> bool:
        """True when the candidate hand is strictly stronger than the current one"""
        if current_category is None:
            return True
        if candidate_category.strength != current_category.strength:
            return candidate_category.strength > current_category.strength
        candidate_vector = HandEvaluator.tie_break_vector(candidate_category, candidate_cards)
        return HandEvaluator.compare_vectors(candidate_vector, current_vector) > 0

    @staticmethod
    def describe(category: HandCategory, tiebreakers: List[int]) -> str:
        """Create human-readable hand description"""
        def rank_str(value: int) -> str:
            return Rank(value).display

        if category == HandCategory.ROYAL_FLUSH:
            return "Royal Flush"

        elif category == HandCategory.STRAIGHT_FLUSH:
            return f"Straight Flush, {rank_str(tiebreakers[0])} high"

        elif category == HandCategory.FOUR_OF_A_KIND:
            kicker = f", {rank_str(tiebreakers[1])} kicker" if len(tiebreakers) > 1 else ""
            return f"Four {rank_str(tiebreakers[0])}s{kicker}"

        elif category == HandCategory.FULL_HOUSE:
            return f"Full House, {rank_str(tiebreakers[0])}s full of {rank_str(tiebreakers[1])}s"

        elif category == HandCategory.FLUSH:
            cards_str = " ".join(rank_str(r) for r in tiebreakers)
            return f"Flush: {cards_str}"

        elif category == HandCategory.STRAIGHT:
            return f"Straight, {rank_str(tiebreakers[0])} high"

        elif category == HandCategory.THREE_OF_A_KIND:
            kickers = " ".join(rank_str(r) for r in tiebreakers[1:])
            if not kickers:
                return f"Three {rank_str(tiebreakers[0])}s"
            return f"Three {rank_str(tiebreakers[0])}s, {kickers} kickers"

        elif category == HandCategory.TWO_PAIR:
            kicker = f", {rank_str(tiebreakers[2])} kicker" if len(tiebreakers) > 2 else ""
            return f"Two Pair: {rank_str(tiebreakers[0])}s and {rank_str(tiebreakers[1])}s{kicker}"

        elif category == HandCategory.ONE_PAIR:
            kickers = " ".join(rank_str(r) for r in tiebreakers[1:])
            if not kickers:
                return f"Pair of {rank_str(tiebreakers[0])}s"
            return f"Pair of {rank_str(tiebreakers[0])}s, {kickers} kickers"

        else:  # HIGH_CARD
            cards_str = " ".join(rank_str(r) for r in tiebreakers)
            return f"High Card: {cards_str}"
