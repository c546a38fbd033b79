"""
opponent_inference.py

Which hands a random opponent beats the hero with, and how often
"""
from typing import Dict, List, Optional, Sequence, Tuple, Union

from holdem_odds.config import config
from holdem_odds.core_poker_mechanics import Card, HandCategory, HandEvaluator, valid_cards
from holdem_odds.monte_carlo import MonteCarloEngine
from holdem_odds.poker_types import CANCELLED, OpponentHandEstimate, Outcome, SimulationCancelled
from holdem_odds.result_aggregation import sort_key
from holdem_odds.logging_config import get_logger

logger = get_logger(__name__)

MAX_EXAMPLES = config.get('simulation', {}).get('max_opponent_examples', 10)

# hole pair plus the board it was dealt with
Example = Tuple[Tuple[Card, Card], List[Card]]


def opponent_beats_hero(hero_full: List[Card], opponent_full: List[Card]) -> bool:
    """Strictly stronger opponent hand; a hero without a hand always loses"""
    opponent = HandEvaluator.evaluate(opponent_full)
    if opponent is None:
        return False
    hero = HandEvaluator.evaluate(hero_full)
    if hero is None:
        return True
    return HandEvaluator.compare(opponent[0], opponent[1], hero[0], hero[1]) > 0


def select_best_example(examples: Sequence[Example]) -> Optional[Tuple[Card, Card]]:
    """The retained hole pair whose full seven-card hand is strongest"""
    best = None
    best_eval = None
    for hole, completed_board in examples:
        evaluation = HandEvaluator.evaluate(list(hole) + completed_board)
        if evaluation is None:
            continue
        if best_eval is None or HandEvaluator.compare(evaluation[0], evaluation[1],
                                                      best_eval[0], best_eval[1]) > 0:
            best, best_eval = hole, evaluation
    return best


def infer_opponent_hands(hero: Sequence[Card],
                         board: Sequence[Card],
                         current_category: Optional[HandCategory] = None,
                         engine: Optional[MonteCarloEngine] = None
                         ) -> Union[List[OpponentHandEstimate], Outcome]:
    """
    Categories a random opponent beats the hero with, sorted by probability
    then category strength, both descending. Probability is occurrences over
    the configured trial count.

    `current_category` is only a hint; the hero's hand is always re-classified
    from the cards so a stale value cannot suppress results.
    """
    hero = valid_cards(hero)
    board = valid_cards(board)
    actual_category = HandEvaluator.classify(hero + board)
    if current_category is not None and current_category != actual_category:
        logger.debug(f"Ignoring stale current category {current_category.display_name}")
    if actual_category == HandCategory.ROYAL_FLUSH:
        # Royal flushes only tie
        return []

    engine = engine or MonteCarloEngine()
    occurrences: Dict[HandCategory, int] = {}
    examples: Dict[HandCategory, List[Example]] = {}

    try:
        for completed, opponent in engine.sample(hero, board, deal_opponent=True):
            opponent_full = opponent + completed
            if not opponent_beats_hero(hero + completed, opponent_full):
                continue
            category = HandEvaluator.classify(opponent_full)
            occurrences[category] = occurrences.get(category, 0) + 1
            kept = examples.setdefault(category, [])
            if len(kept) < MAX_EXAMPLES:
                kept.append(((opponent[0], opponent[1]), completed))
    except SimulationCancelled:
        logger.info("Opponent inference cancelled")
        return CANCELLED

    if engine.trials <= 0:
        return []

    estimates = []
    for category, count in occurrences.items():
        example = select_best_example(examples.get(category, []))
        if example is None:
            continue
        estimates.append(OpponentHandEstimate(
            category=category,
            example_hole_cards=example,
            occurrences=count,
            probability=count / engine.trials,
        ))

    estimates.sort(key=lambda e: sort_key(e.category, e.probability))
    logger.info(f"Opponent inference: {[(e.category.display_name, round(e.probability, 4)) for e in estimates]}")
    return estimates
