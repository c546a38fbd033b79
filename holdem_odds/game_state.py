"""
game_state.py

Mutable card-slot state owned by a presentation layer. The engine never
holds one of these; it only receives the cards.
"""
from typing import List, Optional

from holdem_odds.core_poker_mechanics import Card, Rank, Suit, valid_cards
from holdem_odds.config import config
from holdem_odds.result_aggregation import fingerprint

HERO_SLOTS = 2
BOARD_SLOTS = 5
OPPONENT_SLOTS = 2
MAX_OPPONENTS = config.get('simulation', {}).get('max_opponents', 6)


class GameState:
    """
    Hero, community and opponent card slots with fixed bounds.

    Updates never grow the slot lists and refuse a card that is already
    selected elsewhere, so the engine's no-duplicate precondition holds.
    """

    def __init__(self):
        self.hero_cards: List[Card] = [Card.empty()] * HERO_SLOTS
        self.community_cards: List[Card] = [Card.empty()] * BOARD_SLOTS
        self.opponent_hands: List[List[Card]] = []

    def __str__(self):
        hero = " ".join(str(card) for card in valid_cards(self.hero_cards)) or "Empty"
        board = " ".join(str(card) for card in valid_cards(self.community_cards)) or "Empty"
        result = f"Hero: {hero}\nBoard: {board}\n"
        for i, hand in enumerate(self.opponent_hands):
            cards = " ".join(str(card) for card in valid_cards(hand)) or "[Hidden]"
            result += f"Opponent {i}: {cards}\n"
        return result

    @property
    def all_selected_cards(self) -> List[Card]:
        opponents = [card for hand in self.opponent_hands for card in valid_cards(hand)]
        return valid_cards(self.hero_cards) + valid_cards(self.community_cards) + opponents

    @property
    def fingerprint(self) -> str:
        return fingerprint(self.hero_cards, self.community_cards, self.opponent_hands)

    def is_card_taken(self, rank: Rank, suit: Suit, excluding: Optional[Card] = None) -> bool:
        """True if rank+suit is selected in any slot other than `excluding`"""
        candidate = Card(rank, suit)
        if excluding is not None and excluding == candidate:
            return False
        return candidate in self.all_selected_cards

    def is_suit_disabled(self, suit: Suit, current_rank: Optional[Rank], excluding: Optional[Card] = None) -> bool:
        if current_rank is None:
            return False
        return self.is_card_taken(current_rank, suit, excluding)

    def is_rank_disabled(self, rank: Rank, current_suit: Optional[Suit], excluding: Optional[Card] = None) -> bool:
        if current_suit is None:
            return False
        return self.is_card_taken(rank, current_suit, excluding)

    def _place(self, slots: List[Card], index: int, rank: Optional[Rank], suit: Optional[Suit]):
        if not 0 <= index < len(slots):
            raise IndexError(f"Card slot {index} out of range (0-{len(slots) - 1})")
        card = Card(rank, suit)
        if card.is_valid and self.is_card_taken(card.rank, card.suit, excluding=slots[index]):
            raise ValueError(f"{card} is already selected")
        slots[index] = card

    def update_hero_card(self, index: int, rank: Optional[Rank], suit: Optional[Suit]):
        self._place(self.hero_cards, index, rank, suit)

    def update_community_card(self, index: int, rank: Optional[Rank], suit: Optional[Suit]):
        self._place(self.community_cards, index, rank, suit)

    def set_opponent_count(self, count: int):
        if not 0 <= count <= MAX_OPPONENTS:
            raise ValueError(f"Opponent count must be between 0 and {MAX_OPPONENTS}")
        while len(self.opponent_hands) < count:
            self.opponent_hands.append([Card.empty()] * OPPONENT_SLOTS)
        del self.opponent_hands[count:]

    def update_opponent_card(self, hand_index: int, card_index: int, rank: Optional[Rank], suit: Optional[Suit]):
        if not 0 <= hand_index < len(self.opponent_hands):
            raise IndexError(f"Opponent {hand_index} out of range")
        self._place(self.opponent_hands[hand_index], card_index, rank, suit)

    def reset_hero_cards(self):
        self.hero_cards = [Card.empty()] * HERO_SLOTS

    def reset_community_cards(self):
        self.community_cards = [Card.empty()] * BOARD_SLOTS

    def reset_opponent_hands(self):
        self.opponent_hands = []

    def reset_all_cards(self):
        self.reset_hero_cards()
        self.reset_community_cards()
