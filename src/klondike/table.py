"""Game session for Klondike.

The :class:`Table` owns every pile, deals new games, routes pointer
selections to the pile under the pointer and tracks the status message the
front end shows. It never draws anything; renderers read pile state after
each call.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

from klondike.cards import make_deck
from klondike.piles import (
    FoundationPile,
    Move,
    Pile,
    PileSet,
    Point,
    StockPile,
    TableauPile,
    WastePile,
)

NUM_FOUNDATIONS = 4
NUM_TABLEAU = 7
NUM_PILES = 2 + NUM_FOUNDATIONS + NUM_TABLEAU

WELCOME_MESSAGE = "Welcome to Solitaire!"
WIN_MESSAGE = "Congratulations! You have won this game."
CLICK_MESSAGE = "Neat click!"


@dataclass(frozen=True)
class Layout:
    """Pile geometry in pixels. Defaults reproduce the classic 50x70 applet."""

    card_w: int = 50
    card_h: int = 70
    left_margin: int = 5
    top_margin: int = 40
    table_gap: int = 5
    suit_gap: int = 10
    fan_y: int = 25

    @classmethod
    def for_card_size(cls, card_w: int, card_h: int, top_offset: int = 0) -> "Layout":
        base = cls()
        k = card_w / base.card_w
        return cls(
            card_w=card_w,
            card_h=card_h,
            left_margin=round(base.left_margin * k),
            top_margin=round(base.top_margin * k) + top_offset,
            table_gap=round(base.table_gap * k),
            suit_gap=round(base.suit_gap * k),
            fan_y=round(base.fan_y * k),
        )

    def stock_pos(self) -> Tuple[int, int]:
        return self.left_margin + (NUM_TABLEAU - 1) * (self.card_w + self.table_gap), self.top_margin

    def waste_pos(self) -> Tuple[int, int]:
        sx, sy = self.stock_pos()
        return sx - self.card_w - self.suit_gap, sy

    def foundation_pos(self, i: int) -> Tuple[int, int]:
        return self.left_margin + (self.card_w + self.suit_gap) * i, self.top_margin

    def tableau_pos(self, i: int) -> Tuple[int, int]:
        return (
            self.left_margin + (self.card_w + self.table_gap) * i,
            self.top_margin + self.card_h + self.table_gap,
        )


class Table:
    def __init__(self, layout: Optional[Layout] = None, rng: Optional[random.Random] = None, deal: bool = True):
        self.layout = layout or Layout()
        self.rng = rng
        self.message = ""
        self.piles: PileSet = self._empty_piles()
        if deal:
            self.new_game()

    def _pile_kwargs(self, index: int, pos: Tuple[int, int]) -> dict:
        x, y = pos
        return {"x": x, "y": y, "width": self.layout.card_w, "height": self.layout.card_h, "index": index}

    def _empty_piles(self, deck=()) -> PileSet:
        lay = self.layout
        stock = StockPile(deck, **self._pile_kwargs(0, lay.stock_pos()))
        waste = WastePile(**self._pile_kwargs(1, lay.waste_pos()))
        foundations = tuple(
            FoundationPile(**self._pile_kwargs(2 + i, lay.foundation_pos(i))) for i in range(NUM_FOUNDATIONS)
        )
        tableau = tuple(
            TableauPile(fan_y=lay.fan_y, **self._pile_kwargs(2 + NUM_FOUNDATIONS + i, lay.tableau_pos(i)))
            for i in range(NUM_TABLEAU)
        )
        return PileSet(stock, waste, foundations, tableau)

    def new_game(self):
        """Discard the current state and deal a fresh shuffled game."""
        self.piles = self._empty_piles(make_deck(self.rng))
        for i, t in enumerate(self.piles.tableau):
            t.deal(self.piles.stock, i + 1)
        self.message = WELCOME_MESSAGE

    def apply_layout(self, layout: Layout):
        self.layout = layout
        lay = layout
        positions = [lay.stock_pos(), lay.waste_pos()]
        positions += [lay.foundation_pos(i) for i in range(NUM_FOUNDATIONS)]
        positions += [lay.tableau_pos(i) for i in range(NUM_TABLEAU)]
        for pile, (x, y) in zip(self.all_piles, positions):
            pile.x, pile.y = x, y
            pile.width, pile.height = lay.card_w, lay.card_h
        for t in self.piles.tableau:
            t.fan_y = lay.fan_y

    # ---------- Queries ----------
    @property
    def stock(self) -> StockPile:
        return self.piles.stock

    @property
    def waste(self) -> WastePile:
        return self.piles.waste

    @property
    def foundations(self) -> Tuple[FoundationPile, ...]:
        return self.piles.foundations

    @property
    def tableau(self) -> Tuple[TableauPile, ...]:
        return self.piles.tableau

    @property
    def all_piles(self) -> Tuple[Pile, ...]:
        return self.piles.all()

    def count(self) -> int:
        return sum(p.count() for p in self.all_piles)

    def is_won(self) -> bool:
        if not self.stock.empty() or not self.waste.empty():
            return False
        return all(t.empty() for t in self.tableau)

    def pile_at(self, point: Point) -> Optional[Pile]:
        for pile in self.all_piles:
            if pile.includes(point):
                return pile
        return None

    # ---------- Input ----------
    def dispatch(self, point: Point) -> Optional[Move]:
        """Select the first pile under ``point``. At most one pile reacts."""
        if self.is_won():
            self.message = WIN_MESSAGE
            return None
        self.message = CLICK_MESSAGE
        pile = self.pile_at(point)
        if pile is None:
            return None
        return self._run_select(pile, point)

    def select(self, index: int) -> Optional[Move]:
        if not 0 <= index < NUM_PILES:
            raise IndexError(f"No pile at index {index}")
        if self.is_won():
            self.message = WIN_MESSAGE
            return None
        self.message = CLICK_MESSAGE
        return self._run_select(self.all_piles[index], None)

    def _run_select(self, pile: Pile, point: Optional[Point]) -> Optional[Move]:
        move = pile.select(self.piles, point)
        if self.is_won():
            self.message = WIN_MESSAGE
        return move

    def snapshot(self) -> List[List[Tuple[int, int, bool]]]:
        """Per pile, bottom-to-top ``(suit, rank, face_up)`` tuples."""
        return [[(c.suit, c.rank, c.face_up) for c in p.cards] for p in self.all_piles]
