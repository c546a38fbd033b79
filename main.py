# main.py
"""
Analyze one hand from the command line.

python main.py --hero As Kd --board Qh Jh Th --opponent 9c 9d --trials 5000
"""
import argparse

from holdem_odds.logging_config import logger
from holdem_odds.analyzer import PokerHandAnalyzer
from holdem_odds.core_poker_mechanics import HandEvaluator, parse_cards, valid_cards
from holdem_odds.poker_types import CANCELLED


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Texas Hold'em hand analysis")
    parser.add_argument('--hero', nargs=2, required=True, metavar='CARD', help="hole cards, e.g. As Kd")
    parser.add_argument('--board', nargs='*', default=[], metavar='CARD', help="0-5 community cards")
    parser.add_argument('--opponent', nargs=2, action='append', default=[], metavar='CARD',
                        help="known opponent hole cards, repeat per opponent")
    parser.add_argument('--trials', type=int, default=None, help="Monte Carlo trials per estimate")
    parser.add_argument('--seed', type=int, default=None)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    hero = parse_cards(args.hero)
    board = parse_cards(args.board)
    opponents = [parse_cards(hand) for hand in args.opponent]

    analyzer = PokerHandAnalyzer(trials=args.trials, seed=args.seed)
    summary = analyzer.analyze(hero, board, opponents)

    logger.info("=== HAND ===")
    logger.info(f"Hero: {' '.join(str(c) for c in hero)}  Board: {' '.join(str(c) for c in board) or 'Empty'}")
    evaluation = HandEvaluator.evaluate(valid_cards(hero + board))
    if evaluation is not None:
        logger.info(f"Current hand: {HandEvaluator.describe(*evaluation)}")

    win = analyzer.estimate_win_probability(hero, board, opponents)
    if win is not CANCELLED:
        logger.info(f"Win probability: {win.hero:.1%}")
        for i, p in enumerate(win.opponents):
            logger.info(f"  Opponent {i + 1}: {p:.1%}")

    logger.info("=== DRAWS ===")
    for draw in analyzer.analyze_possible_draws(hero, board):
        outs = ", ".join(" ".join(cards) for cards in draw.required_combinations)
        logger.info(f"{draw.category.display_name}: {draw.total_probability:.1%} ({outs})")

    logger.info("=== HANDS THAT BEAT YOU ===")
    for estimate in analyzer.infer_opponent_hands(hero, board, summary.current_hand):
        example = " ".join(str(c) for c in estimate.example_hole_cards)
        logger.info(f"{estimate.category.display_name}: {estimate.probability:.1%} (e.g. {example})")

    analyzer.shutdown()


if __name__ == "__main__":
    main()
