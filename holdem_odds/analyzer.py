"""
analyzer.py

Entry points for callers. Each heavy calculation can run synchronously or be
submitted to a worker thread, returning an AnalysisTask that can be cancelled.

analyzer = PokerHandAnalyzer()
task = analyzer.submit_win_probability(hero, board)
...
task.cancel()
task.result()  # CANCELLED
"""
import threading
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence, Union

from holdem_odds.config import config
from holdem_odds.core_poker_mechanics import Card, HandCategory, HandEvaluator, valid_cards
from holdem_odds.draw_detection import analyze_possible_draws
from holdem_odds.monte_carlo import MonteCarloEngine
from holdem_odds.opponent_inference import infer_opponent_hands
from holdem_odds.poker_types import (
    CANCELLED, CombinedPossibleHand, HandAnalysisResult, OpponentHandEstimate, Outcome, WinProbability
)
from holdem_odds.result_aggregation import fingerprint
from holdem_odds.win_probability import estimate_win_probability
from holdem_odds.logging_config import get_logger

logger = get_logger(__name__)


class AnalysisTask:
    """A background calculation that resolves to its result or CANCELLED"""

    def __init__(self, future: Future, cancel_event: threading.Event, key: str = ''):
        self._future = future
        self._cancel_event = cancel_event
        self.key = key

    def cancel(self):
        self._cancel_event.set()
        self._future.cancel()

    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def done(self) -> bool:
        return self._future.done()

    def result(self, timeout: Optional[float] = None):
        """
        Wait for the result. A cancelled task always returns CANCELLED, even
        if the work had already finished, so stale results are never used.
        """
        try:
            value = self._future.result(timeout)
        except CancelledError:
            return CANCELLED
        if self.cancelled():
            return CANCELLED
        return value

    def add_done_callback(self, fn: Callable[['AnalysisTask'], None]):
        self._future.add_done_callback(lambda _: fn(self))


class PokerHandAnalyzer:
    """
    Hand classification, draw detection, win estimation and opponent
    inference over hero cards, board cards and optional opponent hands.

    Every call builds its own MonteCarloEngine, so calls share no random
    state. With `seed` set each call is reproducible.
    """

    def __init__(self,
                 trials: Optional[int] = None,
                 seed: Optional[int] = None,
                 batch_size: Optional[int] = None,
                 max_workers: Optional[int] = None):
        sim_cfg = config.get('simulation', {})
        self.trials = sim_cfg.get('trials', 10_000) if trials is None else trials
        self.seed = sim_cfg.get('seed') if seed is None else seed
        self.batch_size = batch_size
        self.max_workers = max_workers or config.get('analyzer', {}).get('max_workers', 2)
        self._executor = None
        self._executor_lock = threading.Lock()

    def _engine(self, cancel_event: Optional[threading.Event] = None) -> MonteCarloEngine:
        return MonteCarloEngine(
            trials=self.trials,
            seed=self.seed,
            batch_size=self.batch_size,
            cancel_event=cancel_event,
        )

    # Synchronous entry points

    @staticmethod
    def classify(cards: Sequence[Card]) -> Optional[HandCategory]:
        return HandEvaluator.classify(cards)

    @staticmethod
    def fingerprint(hero: Sequence[Card],
                    board: Sequence[Card],
                    opponents: Sequence[Sequence[Card]] = ()) -> str:
        return fingerprint(hero, board, opponents)

    def analyze(self,
                hero: Sequence[Card],
                board: Sequence[Card],
                opponents: Sequence[Sequence[Card]] = ()) -> HandAnalysisResult:
        """Quick, simulation-free summary: current hand, minimum-card flag and fingerprint"""
        valid_hero = valid_cards(hero)
        valid_board = valid_cards(board)
        if len(valid_hero) != 2:
            return HandAnalysisResult(current_hand=None, has_minimum_cards=False, fingerprint='')
        return HandAnalysisResult(
            current_hand=HandEvaluator.classify(valid_hero + valid_board),
            has_minimum_cards=len(valid_board) >= 3,
            fingerprint=fingerprint(hero, board, opponents),
        )

    def analyze_possible_draws(self,
                               hero: Sequence[Card],
                               board: Sequence[Card],
                               cancel_event: Optional[threading.Event] = None
                               ) -> Union[List[CombinedPossibleHand], Outcome]:
        return analyze_possible_draws(hero, board, self._engine(cancel_event))

    def estimate_win_probability(self,
                                 hero: Sequence[Card],
                                 board: Sequence[Card],
                                 opponents: Sequence[Sequence[Card]] = (),
                                 cancel_event: Optional[threading.Event] = None
                                 ) -> Union[WinProbability, Outcome]:
        return estimate_win_probability(hero, board, opponents, self._engine(cancel_event))

    def infer_opponent_hands(self,
                             hero: Sequence[Card],
                             board: Sequence[Card],
                             current_category: Optional[HandCategory] = None,
                             cancel_event: Optional[threading.Event] = None
                             ) -> Union[List[OpponentHandEstimate], Outcome]:
        return infer_opponent_hands(hero, board, current_category, self._engine(cancel_event))

    # Background entry points

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.max_workers, thread_name_prefix="holdem-odds"
                )
            return self._executor

    def _submit(self, fn: Callable, key: str, *args) -> AnalysisTask:
        cancel_event = threading.Event()
        future = self._get_executor().submit(fn, *args, cancel_event=cancel_event)
        logger.debug(f"Submitted {fn.__name__} for {key}")
        return AnalysisTask(future, cancel_event, key)

    def submit_possible_draws(self, hero: Sequence[Card], board: Sequence[Card]) -> AnalysisTask:
        return self._submit(self.analyze_possible_draws, fingerprint(hero, board), hero, board)

    def submit_win_probability(self,
                               hero: Sequence[Card],
                               board: Sequence[Card],
                               opponents: Sequence[Sequence[Card]] = ()) -> AnalysisTask:
        return self._submit(self.estimate_win_probability, fingerprint(hero, board, opponents),
                            hero, board, opponents)

    def submit_opponent_hands(self,
                              hero: Sequence[Card],
                              board: Sequence[Card],
                              current_category: Optional[HandCategory] = None) -> AnalysisTask:
        return self._submit(self.infer_opponent_hands, fingerprint(hero, board),
                            hero, board, current_category)

    def shutdown(self, wait: bool = True):
        with self._executor_lock:
            if self._executor is not None:
                self._executor.shutdown(wait=wait)
                self._executor = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
