# cards.py - card identities and the shuffled deck
import random
from typing import List, Optional

HEART = 0
SPADE = 1
DIAMOND = 2
CLUB = 3
SUITS = (HEART, SPADE, DIAMOND, CLUB)

ACE = 0
KING = 12
RANKS = range(ACE, KING + 1)

RED = "red"
BLACK = "black"

SUIT_GLYPHS = {HEART: "♥", SPADE: "♠", DIAMOND: "♦", CLUB: "♣"}
RANK_TO_TEXT = ("A", "2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K")


def is_red(suit):
    return suit in (HEART, DIAMOND)


class Card:
    """A playing card. Suit and rank are fixed; only the face can change."""

    __slots__ = ("_suit", "_rank", "face_up")

    def __init__(self, suit, rank, face_up=False):
        if suit not in SUITS:
            raise ValueError(f"Invalid suit: {suit!r}")
        if rank not in RANKS:
            raise ValueError(f"Invalid rank: {rank!r}")
        self._suit = suit
        self._rank = rank
        self.face_up = face_up

    @property
    def suit(self):
        return self._suit

    @property
    def rank(self):
        return self._rank

    def flip(self):
        self.face_up = not self.face_up

    def is_ace(self):
        return self._rank == ACE

    def is_king(self):
        return self._rank == KING

    def color(self):
        return RED if is_red(self._suit) else BLACK

    def __repr__(self):
        return f"{RANK_TO_TEXT[self._rank]}{SUIT_GLYPHS[self._suit]}{'↑' if self.face_up else '↓'}"


def make_deck(rng: Optional[random.Random] = None) -> List[Card]:
    """Return the 52 cards face-down in uniformly random order.

    ``rng`` lets callers reproduce a deal; ``random.shuffle`` is Fisher-Yates.
    """
    deck = [Card(suit, rank, False) for suit in SUITS for rank in RANKS]
    (rng or random).shuffle(deck)
    return deck
