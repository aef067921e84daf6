# piles.py - stock, waste, foundation and tableau rules
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from klondike.cards import Card

Point = Tuple[int, int]


class MoveKind(Enum):
    DRAW = "draw"
    RECYCLE = "recycle"
    FLIP = "flip"
    MOVE = "move"


@dataclass(frozen=True)
class Move:
    """A completed change to the table, addressed by logical pile index."""

    kind: MoveKind
    source: int
    target: int
    count: int = 1


@dataclass(frozen=True)
class PileSet:
    """The piles a selection may look at, grouped by role."""

    stock: "StockPile"
    waste: "WastePile"
    foundations: Tuple["FoundationPile", ...]
    tableau: Tuple["TableauPile", ...]

    def all(self) -> Tuple["Pile", ...]:
        return (self.stock, self.waste) + self.foundations + self.tableau


class Pile:
    def __init__(self, x=0, y=0, width=50, height=70, index=-1):
        self.x, self.y = x, y
        self.width, self.height = width, height
        self.index = index
        self.cards: List[Card] = []

    # Shared stack operations; variants never override these.
    def empty(self) -> bool:
        return not self.cards

    def top(self) -> Optional[Card]:
        return self.cards[-1] if self.cards else None

    def pop(self) -> Optional[Card]:
        return self.cards.pop() if self.cards else None

    def count(self) -> int:
        return len(self.cards)

    def cards_bottom_to_top(self) -> List[Card]:
        return list(self.cards)

    def card_positions(self) -> Iterator[Tuple[Card, int, int]]:
        for c in self.cards:
            yield c, self.x, self.y

    # Capabilities overridden per variant.
    def add_card(self, card: Card):
        self.cards.append(card)

    def can_accept(self, card: Card) -> bool:
        return False

    def includes(self, point: Point) -> bool:
        px, py = point
        return self.x <= px <= self.x + self.width and self.y <= py <= self.y + self.height

    def select(self, piles: PileSet, point: Optional[Point] = None) -> Optional[Move]:
        return None

    def __repr__(self):
        return f"{type(self).__name__}({self.index}, {self.cards!r})"


def _first_acceptor(candidates: Iterable[Pile], card: Card, skip: Optional[Pile] = None) -> Optional[Pile]:
    for pile in candidates:
        if pile is not skip and pile.can_accept(card):
            return pile
    return None


class StockPile(Pile):
    def __init__(self, cards: Sequence[Card] = (), **kw):
        super().__init__(**kw)
        for c in cards:
            c.face_up = False
            self.cards.append(c)

    def select(self, piles, point=None):
        waste = piles.waste
        if self.empty():
            if waste.empty():
                return None
            # Waste order is kept as is: its top becomes the next card drawn.
            moved = waste.cards
            waste.cards = []
            for c in moved:
                c.face_up = False
            self.cards = moved
            return Move(MoveKind.RECYCLE, waste.index, self.index, len(moved))
        waste.add_card(self.pop())
        return Move(MoveKind.DRAW, self.index, waste.index)


class WastePile(Pile):
    def add_card(self, card):
        card.face_up = True
        super().add_card(card)

    def select(self, piles, point=None):
        if self.empty():
            return None
        top = self.top()
        dest = _first_acceptor(piles.foundations, top) or _first_acceptor(piles.tableau, top)
        if dest is None:
            return None
        dest.add_card(self.pop())
        return Move(MoveKind.MOVE, self.index, dest.index)


class FoundationPile(Pile):
    def can_accept(self, card):
        if self.empty():
            return card.is_ace()
        top = self.top()
        return card.suit == top.suit and card.rank == top.rank + 1

    def select(self, piles, point=None):
        if self.empty():
            return None
        dest = _first_acceptor(piles.tableau, self.top())
        if dest is None:
            return None
        dest.add_card(self.pop())
        return Move(MoveKind.MOVE, self.index, dest.index)


class TableauPile(Pile):
    def __init__(self, fan_y=25, **kw):
        super().__init__(**kw)
        self.fan_y = fan_y

    def deal(self, stock: StockPile, n: int):
        """Take ``n`` cards off the stock, leaving only the last one face-up."""
        for _ in range(n):
            self.add_card(stock.pop())
        self.top().flip()

    def card_positions(self):
        for i, c in enumerate(self.cards):
            yield c, self.x, self.y + i * self.fan_y

    def can_accept(self, card):
        if self.empty():
            return card.is_king()
        top = self.top()
        if not top.face_up:
            return False
        return card.color() != top.color() and card.rank == top.rank - 1

    def includes(self, point):
        if self.empty():
            return False
        px, py = point
        # Open-ended downwards so any card of the fan counts as a hit.
        return self.x <= px <= self.x + self.width and self.y <= py

    def _take_build(self) -> List[Card]:
        build = []
        while self.cards and self.cards[-1].face_up:
            build.append(self.cards.pop())
        build.reverse()
        return build

    def _restore(self, build: List[Card]):
        self.cards.extend(build)

    def select(self, piles, point=None):
        if self.empty():
            return None

        top = self.top()
        if not top.face_up:
            top.flip()
            return Move(MoveKind.FLIP, self.index, self.index)

        dest = _first_acceptor(piles.foundations, top)
        if dest is not None:
            dest.add_card(self.pop())
            return Move(MoveKind.MOVE, self.index, dest.index)

        build = self._take_build()
        base = build[0]

        # A king that already founds this pile has nowhere better to go.
        if base.is_king() and self.empty():
            self._restore(build)
            return None

        dest = _first_acceptor(piles.tableau, base, skip=self)
        if dest is None:
            self._restore(build)
            return None
        for c in build:
            dest.add_card(c)
        return Move(MoveKind.MOVE, self.index, dest.index, len(build))
