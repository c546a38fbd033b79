"""
Unit tests for holdem_odds/draw_detection.py
"""
import threading
import unittest

from holdem_odds.core_poker_mechanics import Card, Rank, HandCategory, parse_cards
from holdem_odds.draw_detection import (
    analyze_possible_draws,
    has_open_ended_straight_draw,
    has_gutshot_straight_draw,
    straight_draw_kind,
    straight_draw_cards,
)
from holdem_odds.monte_carlo import MonteCarloEngine
from holdem_odds.poker_types import CANCELLED


def by_category(draws):
    return {draw.category: draw for draw in draws}


class TestStraightDrawHelpers(unittest.TestCase):
    def test_open_ended(self):
        self.assertTrue(has_open_ended_straight_draw([8, 9, 10, 11]))
        self.assertTrue(has_open_ended_straight_draw([14, 2, 3, 4]))
        self.assertFalse(has_open_ended_straight_draw([2, 3, 5, 6]))
        self.assertFalse(has_open_ended_straight_draw([9, 10, 11]))

    def test_gutshot(self):
        self.assertTrue(has_gutshot_straight_draw([5, 6, 8, 9]))
        self.assertTrue(has_gutshot_straight_draw([14, 2, 3, 5]))
        self.assertFalse(has_gutshot_straight_draw([5, 6, 7, 8]))

    def test_kind(self):
        self.assertEqual(straight_draw_kind([8, 9, 10, 11, 2]), 'open_ended')
        self.assertEqual(straight_draw_kind([5, 6, 8, 9]), 'gutshot')
        self.assertIsNone(straight_draw_kind([2, 7, 9, 13]))

    def test_completing_ranks(self):
        self.assertEqual(straight_draw_cards([8, 9, 10, 11, 2]), [Rank.SEVEN, Rank.QUEEN])
        self.assertEqual(straight_draw_cards([5, 6, 8, 9]), [Rank.SEVEN])
        self.assertEqual(straight_draw_cards([14, 2, 3, 4]), [Rank.FIVE])


class TestAnalyzePossibleDraws(unittest.TestCase):
    def engine(self, trials=5000, seed=7, **kwargs):
        return MonteCarloEngine(trials=trials, seed=seed, **kwargs)

    def assertWellFormed(self, draws):
        totals = [d.total_probability for d in draws]
        self.assertEqual(totals, sorted(totals, reverse=True))
        for draw in draws:
            self.assertAlmostEqual(draw.total_probability, sum(draw.probabilities))
            self.assertEqual(len(draw.probabilities), len(draw.required_combinations))
            self.assertGreaterEqual(draw.total_probability, 0.0)
            self.assertLessEqual(draw.total_probability, 1.0)

    def test_complete_board_has_no_draws(self):
        hero = parse_cards(["Ah", "Kh"])
        board = parse_cards(["2h", "7h", "9c", "Jd", "3s"])
        self.assertEqual(analyze_possible_draws(hero, board, self.engine(trials=100)), [])

    def test_requires_two_hole_cards(self):
        board = parse_cards(["2h", "7h", "9c"])
        self.assertEqual(analyze_possible_draws(parse_cards(["Ah"]), board, self.engine(trials=100)), [])
        hero = [Card.from_str("Ah"), Card.empty()]
        self.assertEqual(analyze_possible_draws(hero, board, self.engine(trials=100)), [])

    def test_flush_draw(self):
        hero = parse_cards(["Ah", "Kh"])
        board = parse_cards(["2h", "7h", "9c"])
        draws = analyze_possible_draws(hero, board, self.engine())
        self.assertWellFormed(draws)

        flush = by_category(draws)[HandCategory.FLUSH]
        self.assertEqual(flush.required_combinations, (('Any Hearts',),))
        # 1 - C(38,2)/C(47,2)
        self.assertAlmostEqual(flush.total_probability, 1 - (38 * 37) / (47 * 46), delta=0.04)
        self.assertNotIn(HandCategory.STRAIGHT, by_category(draws))

    def test_backdoor_flush_needs_two_copies(self):
        hero = parse_cards(["Ah", "Kh"])
        board = parse_cards(["2h", "7c", "9d"])
        draws = by_category(analyze_possible_draws(hero, board, self.engine()))
        self.assertEqual(draws[HandCategory.FLUSH].required_combinations, (('Any Hearts', 'Any Hearts'),))

    def test_open_ended_straight_draw(self):
        hero = parse_cards(["8c", "9d"])
        board = parse_cards(["Th", "Js", "2c"])
        draws = analyze_possible_draws(hero, board, self.engine())
        self.assertWellFormed(draws)

        straight = by_category(draws)[HandCategory.STRAIGHT]
        self.assertEqual(straight.required_combinations, (('7',), ('Q',)))
        self.assertAlmostEqual(straight.probabilities[0], straight.probabilities[1])
        # 1 - C(39,2)/C(47,2)
        self.assertAlmostEqual(straight.total_probability, 1 - (39 * 38) / (47 * 46), delta=0.04)
        self.assertIn(HandCategory.ONE_PAIR, by_category(draws))

    def test_pocket_pair_draws(self):
        hero = parse_cards(["7c", "7d"])
        board = parse_cards(["2h", "9s", "Kc"])
        draws = by_category(analyze_possible_draws(hero, board, self.engine()))

        trips = draws[HandCategory.THREE_OF_A_KIND]
        self.assertEqual(trips.required_combinations, (('7',),))
        self.assertGreater(trips.total_probability, 0.03)

        two_pair = draws[HandCategory.TWO_PAIR]
        self.assertEqual(two_pair.required_combinations, (('2',), ('9',), ('K',)))
        # already paired, so no one-pair family
        self.assertNotIn(HandCategory.ONE_PAIR, draws)

    def test_made_flush_skips_lower_families(self):
        hero = parse_cards(["Ah", "Kh"])
        board = parse_cards(["2h", "7h", "9h"])
        draws = by_category(analyze_possible_draws(hero, board, self.engine(trials=1000)))
        for category in (HandCategory.FLUSH, HandCategory.STRAIGHT,
                         HandCategory.TWO_PAIR, HandCategory.ONE_PAIR):
            self.assertNotIn(category, draws)

    def test_preflop(self):
        hero = parse_cards(["As", "Ks"])
        draws = analyze_possible_draws(hero, [], self.engine(trials=500))
        self.assertWellFormed(draws)
        self.assertIn(HandCategory.ONE_PAIR, by_category(draws))

    def test_set_draws_to_full_house_and_quads(self):
        hero = parse_cards(["7c", "7d"])
        board = parse_cards(["7h", "2s", "Kc"])
        draws = by_category(analyze_possible_draws(hero, board, self.engine(trials=4000, seed=1)))

        # a single card of a showing rank fills the house
        full_house = draws[HandCategory.FULL_HOUSE]
        self.assertEqual(full_house.required_combinations, (('2',), ('K',)))
        self.assertAlmostEqual(full_house.total_probability, 0.29, delta=0.05)

        quads = draws[HandCategory.FOUR_OF_A_KIND]
        self.assertEqual(quads.required_combinations, (('7',),))
        self.assertGreater(quads.total_probability, 0.0)
        self.assertNotIn(HandCategory.THREE_OF_A_KIND, draws)

    def test_two_pair_draws_to_full_house(self):
        hero = parse_cards(["7c", "2d"])
        board = parse_cards(["7h", "2s", "Kc"])
        draws = by_category(analyze_possible_draws(hero, board, self.engine(trials=4000, seed=1)))
        full_house = draws[HandCategory.FULL_HOUSE]
        self.assertEqual(full_house.required_combinations, (('2',), ('7',)))
        self.assertAlmostEqual(full_house.probabilities[0], full_house.probabilities[1])
        self.assertNotIn(HandCategory.TWO_PAIR, draws)

    def test_trips_with_no_side_card_needs_any_pair(self):
        hero = parse_cards(["7c", "7d"])
        board = parse_cards(["7h"])
        draws = by_category(analyze_possible_draws(hero, board, self.engine(trials=2000, seed=1)))
        self.assertEqual(draws[HandCategory.FULL_HOUSE].required_combinations, (('Any pair', 'Any pair'),))

    def test_trips_from_unpaired_hole_cards(self):
        hero = parse_cards(["Ac", "9d"])
        board = parse_cards(["4h", "2s", "Kc"])
        draws = by_category(analyze_possible_draws(hero, board, self.engine(trials=4000, seed=1)))
        trips = draws[HandCategory.THREE_OF_A_KIND]
        self.assertEqual(trips.required_combinations, (('A', 'A'), ('9', '9')))
        self.assertLess(trips.total_probability, 0.02)

    def test_cancelled(self):
        event = threading.Event()
        event.set()
        hero = parse_cards(["8c", "9d"])
        board = parse_cards(["Th", "Js", "2c"])
        result = analyze_possible_draws(hero, board, self.engine(cancel_event=event))
        self.assertIs(result, CANCELLED)


if __name__ == '__main__':
    unittest.main()
