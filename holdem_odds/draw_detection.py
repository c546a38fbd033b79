"""
draw_detection.py

Finds the categories the hero can still improve to with the cards to come,
and estimates how often each improvement lands as that exact category while
beating the hand the hero holds now.
"""
from collections import Counter
from typing import Callable, Iterable, List, Optional, Sequence, Union

from holdem_odds.core_poker_mechanics import (
    Card, Rank, Suit, HandCategory, HandEvaluator, valid_cards
)
from holdem_odds.monte_carlo import MonteCarloEngine
from holdem_odds.poker_types import (
    CANCELLED, CombinedPossibleHand, Outcome, PossibleHand, SimulationCancelled
)
from holdem_odds.result_aggregation import combine_possible_hands, split_possible_hands
from holdem_odds.logging_config import get_logger

logger = get_logger(__name__)

HOLE_CARDS = 2
MAX_BOARD = 5
FULL_HAND = HOLE_CARDS + MAX_BOARD


def _rank_values(ranks: Iterable[int]) -> set:
    """Distinct rank values, with the ace also counted as 1 for the wheel"""
    values = {int(r) for r in ranks}
    if 14 in values:
        values.add(1)
    return values


def _windows():
    # low=1 is the wheel (A-2-3-4-5), low=10 is broadway
    for low in range(1, 11):
        yield set(range(low, low + 5)), low


def has_open_ended_straight_draw(ranks: Iterable[int]) -> bool:
    """Four consecutive rank values, or A-2-3-4"""
    values = sorted({int(r) for r in ranks})
    if len(values) < 4:
        return False
    for i in range(len(values) - 3):
        if values[i + 3] - values[i] == 3:
            return True
    return {14, 2, 3, 4}.issubset(values)


def has_gutshot_straight_draw(ranks: Iterable[int]) -> bool:
    """A five-value window with four values present and the gap inside it"""
    values = _rank_values(ranks)
    if len(values) < 4:
        return False
    for window, low in _windows():
        present = window & values
        if len(present) == 4:
            missing = next(iter(window - present))
            if missing not in (low, low + 4):
                return True
    return False


def straight_draw_kind(ranks: Iterable[int]) -> Optional[str]:
    ranks = list(ranks)
    if has_open_ended_straight_draw(ranks):
        return 'open_ended'
    if has_gutshot_straight_draw(ranks):
        return 'gutshot'
    return None


def straight_draw_cards(ranks: Iterable[int]) -> List[Rank]:
    """Every rank that completes some straight window missing exactly one value"""
    values = _rank_values(ranks)
    needed = set()
    for window, _ in _windows():
        missing = window - values
        if len(missing) == 1:
            value = missing.pop()
            needed.add(Rank(14 if value == 1 else value))
    return sorted(needed)


class DrawDetector:
    """
    One draw analysis for a hero hand and board.

    Every family is skipped once the current hand already reaches its target
    category; probabilities come from the Monte Carlo engine and are split
    evenly across the distinct cards that complete the family.
    """

    def __init__(self, hero: Sequence[Card], board: Sequence[Card], engine: MonteCarloEngine):
        self.hero = valid_cards(hero)
        self.board = valid_cards(board)
        self.engine = engine
        self.all_cards = self.hero + self.board
        self.cards_to_see = FULL_HAND - len(self.all_cards)

        self.current = HandEvaluator.classify(self.all_cards)
        self.current_vector = (
            HandEvaluator.tie_break_vector(self.current, self.all_cards) if self.current else []
        )
        self.suit_counts = Counter(card.suit for card in self.all_cards)
        self.rank_counts = Counter(card.rank for card in self.all_cards)
        self.hole_ranks = list(dict.fromkeys(card.rank for card in self.hero))

    def _below(self, target: HandCategory) -> bool:
        return self.current is None or self.current.strength < target.strength

    def _probability(self, category: HandCategory, condition: Callable[[List[Card]], bool]) -> float:
        """Chance the final hand is exactly `category`, satisfies `condition` and beats the current hand"""
        def predicate(completed_board: List[Card]) -> bool:
            full = self.hero + completed_board
            if not condition(full):
                return False
            if HandEvaluator.classify(full) != category:
                return False
            return HandEvaluator.beats(category, full, self.current, self.current_vector)

        p = self.engine.estimate(self.hero, self.board, predicate)
        if p is CANCELLED:
            raise SimulationCancelled()
        logger.debug(f"{category.display_name}: p={p:.4f}")
        return p

    @staticmethod
    def _count_rank(cards: List[Card], rank: Rank) -> int:
        return sum(1 for card in cards if card.rank == rank)

    def flush_draws(self) -> List[PossibleHand]:
        hands = []
        if not self._below(HandCategory.FLUSH):
            return hands
        for suit in Suit:
            count = self.suit_counts.get(suit, 0)
            if not ((count == 4 and self.cards_to_see >= 1) or (count == 3 and self.cards_to_see >= 2)):
                continue
            p = self._probability(
                HandCategory.FLUSH,
                lambda full: sum(1 for card in full if card.suit == suit) >= 5
            )
            if p > 0:
                hands += split_possible_hands(
                    HandCategory.FLUSH, [f"Any {suit.display_name}"], p, copies=5 - count
                )
        return hands

    def straight_draws(self) -> List[PossibleHand]:
        if not self._below(HandCategory.STRAIGHT):
            return []
        ranks = list(self.rank_counts)
        kind = straight_draw_kind(ranks)
        if kind is None:
            return []
        p = self._probability(HandCategory.STRAIGHT, lambda full: True)
        if p <= 0:
            return []
        logger.debug(f"Straight draw ({kind})")
        required = [rank.display for rank in straight_draw_cards(ranks)]
        return split_possible_hands(HandCategory.STRAIGHT, required, p)

    def set_and_quads_draws(self) -> List[PossibleHand]:
        hands = []
        for rank in Rank:
            count = self.rank_counts.get(rank, 0)
            if count == 2 and self._below(HandCategory.THREE_OF_A_KIND):
                p = self._probability(
                    HandCategory.THREE_OF_A_KIND,
                    lambda full: self._count_rank(full, rank) >= 3
                )
                if p > 0:
                    hands += split_possible_hands(HandCategory.THREE_OF_A_KIND, [rank.display], p)
            elif count == 3 and self._below(HandCategory.FOUR_OF_A_KIND):
                p = self._probability(
                    HandCategory.FOUR_OF_A_KIND,
                    lambda full: self._count_rank(full, rank) >= 4
                )
                if p > 0:
                    hands += split_possible_hands(HandCategory.FOUR_OF_A_KIND, [rank.display], p)
        return hands

    def full_house_draws(self) -> List[PossibleHand]:
        trip_ranks = sorted(r for r, c in self.rank_counts.items() if c == 3)
        pair_ranks = sorted(r for r, c in self.rank_counts.items() if c == 2)
        if not (trip_ranks or len(pair_ranks) >= 2):
            return []
        if not self._below(HandCategory.FULL_HOUSE):
            return []

        copies = 1
        if len(pair_ranks) >= 2:
            # One more card of either pair
            required = [r.display for r in pair_ranks]
        else:
            # Pair up any other rank already showing; one more card of it is enough
            trip_rank = trip_ranks[-1]
            required = [r.display for r in sorted(self.rank_counts) if r != trip_rank]
        if not required:
            required = ["Any pair"]
            copies = 2

        def condition(full: List[Card]) -> bool:
            counts = sorted(Counter(card.rank for card in full).values(), reverse=True)
            return len(counts) >= 2 and counts[0] >= 3 and counts[1] >= 2

        p = self._probability(HandCategory.FULL_HOUSE, condition)
        if p <= 0:
            return []
        return split_possible_hands(HandCategory.FULL_HOUSE, required, p, copies=copies)

    def two_pair_draws(self) -> List[PossibleHand]:
        existing_pairs = [r for r, c in self.rank_counts.items() if c >= 2]
        if len(existing_pairs) != 1 or not self._below(HandCategory.TWO_PAIR):
            return []
        pair_rank = existing_pairs[0]
        candidates = sorted(r for r in self.rank_counts if r != pair_rank)
        if not candidates:
            return []

        def condition(full: List[Card]) -> bool:
            counts = Counter(card.rank for card in full)
            if counts.get(pair_rank, 0) < 2:
                return False
            return any(counts.get(r, 0) >= 2 for r in candidates)

        p = self._probability(HandCategory.TWO_PAIR, condition)
        if p <= 0:
            return []
        return split_possible_hands(HandCategory.TWO_PAIR, [r.display for r in candidates], p)

    def one_pair_draws(self) -> List[PossibleHand]:
        targets = [r for r in self.hole_ranks if self.rank_counts.get(r, 0) < 2]
        if not targets or not self._below(HandCategory.ONE_PAIR):
            return []

        def condition(full: List[Card]) -> bool:
            counts = Counter(card.rank for card in full)
            return any(counts.get(r, 0) >= 2 for r in targets)

        p = self._probability(HandCategory.ONE_PAIR, condition)
        if p <= 0:
            return []
        return split_possible_hands(HandCategory.ONE_PAIR, [r.display for r in targets], p)

    def trips_from_hole_draws(self) -> List[PossibleHand]:
        """Two more cards of a hole rank that appears only once so far"""
        hands = []
        if self.cards_to_see < 2 or not self._below(HandCategory.THREE_OF_A_KIND):
            return hands
        for rank in self.hole_ranks:
            if self.rank_counts.get(rank, 0) != 1:
                continue
            p = self._probability(
                HandCategory.THREE_OF_A_KIND,
                lambda full: self._count_rank(full, rank) >= 3
            )
            if p > 0:
                hands += split_possible_hands(HandCategory.THREE_OF_A_KIND, [rank.display], p, copies=2)
        return hands

    def run(self) -> List[CombinedPossibleHand]:
        possible_hands = (
            self.flush_draws()
            + self.straight_draws()
            + self.set_and_quads_draws()
            + self.full_house_draws()
            + self.two_pair_draws()
            + self.one_pair_draws()
            + self.trips_from_hole_draws()
        )
        return combine_possible_hands(possible_hands)


def analyze_possible_draws(hero: Sequence[Card],
                           board: Sequence[Card],
                           engine: Optional[MonteCarloEngine] = None
                           ) -> Union[List[CombinedPossibleHand], Outcome]:
    """
    Improvement opportunities for the hero, grouped by category and sorted by
    total probability (then category strength), both descending.

    Returns [] unless the hero has exactly two cards and cards remain to be
    dealt, and CANCELLED if the engine's cancel event fires.
    """
    hero = valid_cards(hero)
    board = valid_cards(board)
    if len(hero) != HOLE_CARDS or len(board) > MAX_BOARD:
        return []
    if FULL_HAND - len(hero) - len(board) <= 0:
        return []

    engine = engine or MonteCarloEngine()
    detector = DrawDetector(hero, board, engine)
    try:
        combined = detector.run()
    except SimulationCancelled:
        logger.info("Draw analysis cancelled")
        return CANCELLED

    logger.info(
        f"Draw analysis: current={detector.current.display_name if detector.current else None}, "
        f"cards_to_see={detector.cards_to_see}, categories={[c.category.display_name for c in combined]}"
    )
    return combined
