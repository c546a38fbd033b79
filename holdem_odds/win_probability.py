"""
win_probability.py

Hero win estimation against one random opponent or against known opponent hands
"""
from typing import List, Optional, Sequence, Tuple, Union

from holdem_odds.config import config
from holdem_odds.core_poker_mechanics import Card, HandCategory, HandEvaluator, valid_cards
from holdem_odds.monte_carlo import MonteCarloEngine, BOARD_SIZE
from holdem_odds.poker_types import CANCELLED, Outcome, SimulationCancelled, WinProbability
from holdem_odds.logging_config import get_logger

logger = get_logger(__name__)

MAX_OPPONENTS = config.get('simulation', {}).get('max_opponents', 6)

Evaluation = Tuple[Optional[HandCategory], List[int]]


def _evaluate(cards: List[Card]) -> Evaluation:
    result = HandEvaluator.evaluate(cards)
    if result is None:
        return None, []
    return result


def find_winner(results: Sequence[Evaluation]) -> Optional[int]:
    """
    Index of the strictly best hand, or None when no one holds a hand or the
    best hand is shared.
    """
    best_index = None
    tied = False
    for index, (category, vector) in enumerate(results):
        if category is None:
            continue
        if best_index is None:
            best_index, tied = index, False
            continue
        best_category, best_vector = results[best_index]
        order = HandEvaluator.compare(category, vector, best_category, best_vector)
        if order > 0:
            best_index, tied = index, False
        elif order == 0:
            tied = True
    return None if tied else best_index


def estimate_against_random_opponent(hero: Sequence[Card],
                                     board: Sequence[Card],
                                     engine: MonteCarloEngine) -> Union[float, Outcome]:
    """Share of trials the hero strictly beats one random hand; ties count as not winning"""
    hero = valid_cards(hero)

    def hero_wins(opponent: List[Card], completed_board: List[Card]) -> bool:
        hero_category, hero_vector = _evaluate(hero + completed_board)
        opp_category, opp_vector = _evaluate(opponent + completed_board)
        return HandEvaluator.compare(hero_category, hero_vector, opp_category, opp_vector) > 0

    return engine.estimate_against_opponent(hero, board, hero_wins)


def estimate_multi_player(hero: Sequence[Card],
                          board: Sequence[Card],
                          opponents: Sequence[Sequence[Card]],
                          engine: MonteCarloEngine) -> Union[WinProbability, Outcome]:
    """
    Win shares for the hero and each known opponent hand.

    Trials with a shared best hand have no winner and are left out of the
    denominator. A complete board is evaluated once instead of sampled.
    """
    hero = valid_cards(hero)
    board = valid_cards(board)
    players = [hero] + [list(hand) for hand in opponents]
    win_counts = [0] * len(players)
    decided = 0

    def play(completed_board: List[Card]):
        nonlocal decided
        winner = find_winner([_evaluate(cards + completed_board) for cards in players])
        if winner is not None:
            win_counts[winner] += 1
            decided += 1

    if len(board) >= BOARD_SIZE:
        play(board)
    else:
        try:
            for completed, _ in engine.sample(hero, board, excluded=opponents):
                play(completed)
        except SimulationCancelled:
            logger.info("Multi-player simulation cancelled")
            return CANCELLED

    if decided == 0:
        return WinProbability(hero=0.0, opponents=tuple(0.0 for _ in opponents))
    return WinProbability(
        hero=win_counts[0] / decided,
        opponents=tuple(count / decided for count in win_counts[1:]),
    )


def estimate_win_probability(hero: Sequence[Card],
                             board: Sequence[Card],
                             opponents: Sequence[Sequence[Card]] = (),
                             engine: Optional[MonteCarloEngine] = None) -> Union[WinProbability, Outcome]:
    """
    Hero win probability, plus one probability per opponent when opponent
    hole cards are known. Empty slots are ignored and empty hands dropped.
    """
    engine = engine or MonteCarloEngine()
    hands = [valid_cards(hand) for hand in opponents]
    hands = [hand for hand in hands if hand]
    if len(hands) > MAX_OPPONENTS:
        raise ValueError(f"At most {MAX_OPPONENTS} opponents supported, got {len(hands)}")

    if not hands:
        p = estimate_against_random_opponent(hero, board, engine)
        if p is CANCELLED:
            return CANCELLED
        logger.info(f"Win probability vs random opponent: {p:.4f}")
        return WinProbability(hero=p)

    result = estimate_multi_player(hero, board, hands, engine)
    if result is not CANCELLED:
        logger.info(f"Win probability vs {len(hands)} opponents: hero={result.hero:.4f}, "
                    f"opponents={[round(p, 4) for p in result.opponents]}")
    return result
