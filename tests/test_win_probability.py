"""
Unit tests for holdem_odds/win_probability.py
"""
import threading
import unittest

from holdem_odds.core_poker_mechanics import Card, HandCategory, parse_cards, standard_deck
from holdem_odds.monte_carlo import MonteCarloEngine
from holdem_odds.poker_types import CANCELLED, WinProbability
from holdem_odds.win_probability import estimate_win_probability, find_winner


class TestFindWinner(unittest.TestCase):
    def test_strict_winner(self):
        results = [(HandCategory.STRAIGHT, [9]), (HandCategory.FLUSH, [14, 9, 7, 5, 2])]
        self.assertEqual(find_winner(results), 1)

    def test_shared_best_hand(self):
        results = [(HandCategory.STRAIGHT, [9]), (HandCategory.STRAIGHT, [9]), (HandCategory.ONE_PAIR, [3])]
        self.assertIsNone(find_winner(results))

    def test_tie_below_best_does_not_matter(self):
        results = [(HandCategory.ONE_PAIR, [3]), (HandCategory.ONE_PAIR, [3]), (HandCategory.FLUSH, [9])]
        self.assertEqual(find_winner(results), 2)

    def test_no_hands(self):
        self.assertIsNone(find_winner([(None, []), (None, [])]))


class TestRandomOpponent(unittest.TestCase):
    def test_aces_preflop(self):
        engine = MonteCarloEngine(trials=5000, seed=1)
        result = estimate_win_probability(parse_cards(["As", "Ah"]), [], engine=engine)
        self.assertIsInstance(result, WinProbability)
        self.assertEqual(result.opponents, ())
        self.assertAlmostEqual(result.hero, 0.85, delta=0.05)

    def test_weak_hand_preflop(self):
        engine = MonteCarloEngine(trials=5000, seed=2)
        result = estimate_win_probability(parse_cards(["2s", "3s"]), [], engine=engine)
        self.assertLess(result.hero, 0.5)
        self.assertGreater(result.hero, 0.2)

    def test_complete_board_still_samples(self):
        engine = MonteCarloEngine(trials=1000, seed=3)
        board = parse_cards(["Qs", "Js", "Ts", "2c", "3d"])
        # the only possible royal flush cannot lose or tie
        result = estimate_win_probability(parse_cards(["As", "Ks"]), board, engine=engine)
        self.assertEqual(result.hero, 1.0)

    def test_empty_opponent_hands_are_dropped(self):
        engine = MonteCarloEngine(trials=200, seed=4)
        result = estimate_win_probability(parse_cards(["As", "Ah"]), [],
                                          [[Card.empty(), Card.empty()]], engine=engine)
        self.assertEqual(result.opponents, ())


class TestKnownOpponents(unittest.TestCase):
    def test_complete_board_is_deterministic(self):
        hero = parse_cards(["Ah", "As"])
        board = parse_cards(["2c", "7d", "9h", "Js", "3c"])
        result = estimate_win_probability(hero, board, [parse_cards(["Kd", "Kc"])],
                                          engine=MonteCarloEngine(trials=10, seed=1))
        self.assertEqual(result, WinProbability(hero=1.0, opponents=(0.0,)))

    def test_board_plays_for_everyone(self):
        hero = parse_cards(["2c", "3d"])
        board = parse_cards(["Ts", "Js", "Qs", "Ks", "As"])
        result = estimate_win_probability(hero, board, [parse_cards(["4h", "5h"])],
                                          engine=MonteCarloEngine(trials=10, seed=1))
        self.assertEqual(result, WinProbability(hero=0.0, opponents=(0.0,)))

    def test_aces_against_kings(self):
        engine = MonteCarloEngine(trials=5000, seed=5)
        result = estimate_win_probability(parse_cards(["As", "Ah"]), [],
                                          [parse_cards(["Kd", "Kc"])], engine=engine)
        self.assertAlmostEqual(result.hero, 0.82, delta=0.05)
        self.assertEqual(len(result.opponents), 1)
        self.assertAlmostEqual(result.hero + sum(result.opponents), 1.0)

    def test_several_opponents(self):
        engine = MonteCarloEngine(trials=2000, seed=6)
        opponents = [parse_cards(["Kd", "Kc"]), parse_cards(["7h", "8h"]), parse_cards(["2c", "2d"])]
        result = estimate_win_probability(parse_cards(["As", "Ah"]), parse_cards(["9h", "Th", "3s"]),
                                          opponents, engine=engine)
        self.assertEqual(len(result.opponents), 3)
        for p in (result.hero,) + result.opponents:
            self.assertGreaterEqual(p, 0.0)
            self.assertLessEqual(p, 1.0)
        self.assertAlmostEqual(result.hero + sum(result.opponents), 1.0)

    def test_too_many_opponents(self):
        deck = standard_deck()
        opponents = [deck[i:i + 2] for i in range(2, 16, 2)]
        self.assertEqual(len(opponents), 7)
        with self.assertRaises(ValueError):
            estimate_win_probability(deck[0:2], [], opponents, engine=MonteCarloEngine(trials=10))

    def test_cancelled(self):
        event = threading.Event()
        event.set()
        engine = MonteCarloEngine(trials=1000, seed=1, cancel_event=event)
        hero = parse_cards(["As", "Ah"])
        self.assertIs(estimate_win_probability(hero, [], engine=engine), CANCELLED)
        self.assertIs(estimate_win_probability(hero, [], [parse_cards(["Kd", "Kc"])], engine=engine), CANCELLED)


if __name__ == '__main__':
    unittest.main()
