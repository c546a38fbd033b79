"""
monte_carlo.py

Monte Carlo sampling over the unseen part of the deck.

engine = MonteCarloEngine(trials=10_000, seed=7)
engine.estimate(hero, board, lambda completed_board: ...)
"""
import threading
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from holdem_odds.config import config
from holdem_odds.core_poker_mechanics import Card, standard_deck, valid_cards
from holdem_odds.poker_types import CANCELLED, Outcome, SimulationCancelled
from holdem_odds.logging_config import get_logger

logger = get_logger(__name__)

BOARD_SIZE = 5

BoardPredicate = Callable[[List[Card]], bool]
OpponentPredicate = Callable[[List[Card], List[Card]], bool]


class MonteCarloEngine:
    """
    Samples board completions (and optionally one opponent's hole cards) from
    the remaining deck.

    Trials run in batches; the cancel event is checked before every batch.
    Each engine owns its random generator, so independent engines share no
    state. Pass `rng` (a numpy Generator) or `seed` for reproducible runs.
    """

    def __init__(self,
                 trials: Optional[int] = None,
                 rng: Optional[np.random.Generator] = None,
                 seed: Optional[int] = None,
                 batch_size: Optional[int] = None,
                 cancel_event: Optional[threading.Event] = None):
        sim_cfg = config.get('simulation', {})
        self.trials = sim_cfg.get('trials', 10_000) if trials is None else int(trials)
        self.batch_size = max(1, int(batch_size or sim_cfg.get('batch_size', 500)))
        if rng is None:
            rng = np.random.default_rng(seed if seed is not None else sim_cfg.get('seed'))
        self.rng = rng
        self.cancel_event = cancel_event

    @staticmethod
    def remaining_deck(*card_groups: Iterable[Card]) -> List[Card]:
        """Full deck minus every card in the given groups, in deck order"""
        used = set()
        for group in card_groups:
            used.update(valid_cards(group))
        return [card for card in standard_deck() if card not in used]

    @property
    def cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()

    def _check_cancelled(self):
        if self.cancelled:
            raise SimulationCancelled()

    def _draw_batches(self, deck_size: int, draw_count: int) -> Iterator[List[List[int]]]:
        """Yield batches of deck indices, each row the head of a random permutation"""
        remaining = self.trials
        base = np.arange(deck_size)
        while remaining > 0:
            self._check_cancelled()
            size = min(self.batch_size, remaining)
            orders = self.rng.permuted(np.tile(base, (size, 1)), axis=1)
            yield orders[:, :draw_count].tolist()
            remaining -= size

    def sample(self,
               hero: Sequence[Card],
               board: Sequence[Card],
               excluded: Sequence[Sequence[Card]] = (),
               deal_opponent: bool = False) -> Iterator[Tuple[List[Card], Optional[List[Card]]]]:
        """
        Yield (completed board, opponent hole cards or None) once per trial.

        The first cards of each shuffled deck complete the board, the next two
        go to the opponent. Yields nothing when the deck cannot supply them.
        Raises SimulationCancelled between batches once cancelled.
        """
        board = valid_cards(board)
        deck = self.remaining_deck(hero, board, *excluded)
        cards_needed = max(0, BOARD_SIZE - len(board))
        draw_count = cards_needed + (2 if deal_opponent else 0)
        if draw_count > len(deck):
            logger.debug(f"Deck of {len(deck)} cannot supply {draw_count} cards, skipping simulation")
            return

        for batch in self._draw_batches(len(deck), draw_count):
            for row in batch:
                drawn = [deck[i] for i in row]
                completed = board + drawn[:cards_needed]
                opponent = drawn[cards_needed:] if deal_opponent else None
                yield completed, opponent

    def estimate(self,
                 hero: Sequence[Card],
                 board: Sequence[Card],
                 predicate: BoardPredicate,
                 excluded: Sequence[Sequence[Card]] = ()) -> Union[float, Outcome]:
        """
        Fraction of board completions for which `predicate(completed_board)` holds.

        Returns 0.0 without sampling when the board is already complete or the
        deck is too small, and CANCELLED if the cancel event fires.
        """
        board = valid_cards(board)
        cards_needed = BOARD_SIZE - len(board)
        deck_size = len(self.remaining_deck(hero, board, *excluded))
        if cards_needed <= 0 or cards_needed > deck_size or self.trials <= 0:
            return 0.0

        successes = 0
        try:
            for completed, _ in self.sample(hero, board, excluded):
                if predicate(completed):
                    successes += 1
        except SimulationCancelled:
            logger.info("Simulation cancelled")
            return CANCELLED

        probability = successes / self.trials
        logger.debug(f"estimate: {successes}/{self.trials} = {probability:.4f}")
        return probability

    def estimate_against_opponent(self,
                                  hero: Sequence[Card],
                                  board: Sequence[Card],
                                  predicate: OpponentPredicate,
                                  excluded: Sequence[Sequence[Card]] = ()) -> Union[float, Outcome]:
        """
        Fraction of trials for which `predicate(opponent_cards, completed_board)`
        holds, dealing a random two-card hand to one opponent each trial.
        Samples even when the board is complete.
        """
        successes = 0
        realized = 0
        try:
            for completed, opponent in self.sample(hero, board, excluded, deal_opponent=True):
                realized += 1
                if predicate(opponent, completed):
                    successes += 1
        except SimulationCancelled:
            logger.info("Opponent simulation cancelled")
            return CANCELLED

        if realized == 0:
            return 0.0
        probability = successes / realized
        logger.debug(f"estimate_against_opponent: {successes}/{realized} = {probability:.4f}")
        return probability
