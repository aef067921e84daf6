import random
from typing import List, Tuple

import pytest

from klondike.cards import ACE, CLUB, DIAMOND, HEART, SPADE, Card
from klondike.piles import MoveKind
from klondike.table import (
    CLICK_MESSAGE,
    NUM_PILES,
    WELCOME_MESSAGE,
    WIN_MESSAGE,
    Layout,
    Table,
)


def identities(table: Table) -> List[Tuple[int, int]]:
    return [(c.suit, c.rank) for p in table.all_piles for c in p.cards]


def check_invariants(table: Table) -> None:
    ids = identities(table)
    assert table.count() == 52
    assert len(set(ids)) == 52
    for f in table.foundations:
        if f.cards:
            assert [c.rank for c in f.cards] == list(range(len(f.cards)))
            assert len({c.suit for c in f.cards}) == 1
            assert all(c.face_up for c in f.cards)
    for t in table.tableau:
        for parent, child in zip(t.cards, t.cards[1:]):
            if parent.face_up and child.face_up:
                assert child.color() != parent.color()
                assert child.rank == parent.rank - 1
    assert all(c.face_up for c in table.waste.cards)
    assert not any(c.face_up for c in table.stock.cards)


def fill_foundations(table: Table) -> None:
    for f, suit in zip(table.foundations, (HEART, SPADE, DIAMOND, CLUB)):
        for rank in range(13):
            f.add_card(Card(suit, rank, True))


# ---------- New game ----------
def test_new_game_deals_klondike_layout() -> None:
    table = Table(rng=random.Random(3))
    assert table.message == WELCOME_MESSAGE
    for i, t in enumerate(table.tableau):
        assert t.count() == i + 1
        assert t.top().face_up
        assert not any(c.face_up for c in t.cards[:-1])
    assert table.stock.count() == 24
    assert table.waste.empty()
    assert all(f.empty() for f in table.foundations)
    assert len(table.all_piles) == NUM_PILES
    check_invariants(table)


def test_logical_pile_indices_follow_priority_order() -> None:
    table = Table(deal=False)
    assert [p.index for p in table.all_piles] == list(range(NUM_PILES))
    assert table.all_piles[0] is table.stock
    assert table.all_piles[1] is table.waste
    assert table.all_piles[2:6] == table.foundations
    assert table.all_piles[6:] == table.tableau


def test_seeded_tables_deal_the_same() -> None:
    assert Table(rng=random.Random(11)).snapshot() == Table(rng=random.Random(11)).snapshot()


def test_new_game_replaces_everything() -> None:
    table = Table(rng=random.Random(5))
    old = table.all_piles
    table.select(0)
    table.new_game()
    assert all(a is not b for a, b in zip(old, table.all_piles))
    assert table.waste.empty()
    assert table.message == WELCOME_MESSAGE
    check_invariants(table)


# ---------- Geometry ----------
def test_default_layout_matches_classic_positions() -> None:
    table = Table(deal=False)
    assert (table.stock.x, table.stock.y) == (335, 40)
    assert (table.waste.x, table.waste.y) == (275, 40)
    assert [(f.x, f.y) for f in table.foundations] == [(5, 40), (65, 40), (125, 40), (185, 40)]
    assert [(t.x, t.y) for t in table.tableau] == [(5 + 55 * i, 115) for i in range(7)]


def test_scaled_layout() -> None:
    lay = Layout.for_card_size(100, 140, top_offset=60)
    assert lay.left_margin == 10
    assert lay.top_margin == 140
    assert lay.fan_y == 50
    assert lay.tableau_pos(1) == (120, 290)


def test_apply_layout_moves_piles_not_cards() -> None:
    table = Table(rng=random.Random(8))
    before = table.snapshot()
    table.apply_layout(Layout.for_card_size(150, 210))
    assert table.snapshot() == before
    assert table.stock.width == 150
    assert table.tableau[0].fan_y == 75
    assert (table.tableau[0].x, table.tableau[0].y) == (15, 120 + 210 + 15)


# ---------- Dispatch ----------
def test_flip_on_first_click() -> None:
    table = Table(rng=random.Random(1))
    t6 = table.tableau[6]
    t6.top().flip()
    hidden = t6.top()
    before = [p.count() for p in table.all_piles]
    move = table.dispatch((t6.x + 5, t6.y + 6 * 25 + 10))
    assert move.kind is MoveKind.FLIP
    assert hidden.face_up
    assert t6.top() is hidden
    assert [p.count() for p in table.all_piles] == before
    assert table.message == CLICK_MESSAGE


def test_click_on_stock_draws() -> None:
    table = Table(rng=random.Random(2))
    top = table.stock.top()
    move = table.dispatch((table.stock.x + 1, table.stock.y + 1))
    assert move.kind is MoveKind.DRAW
    assert table.waste.top() is top
    check_invariants(table)


def test_click_on_nothing() -> None:
    table = Table(rng=random.Random(2))
    before = table.snapshot()
    assert table.dispatch((1000, 5)) is None
    assert table.snapshot() == before
    assert table.message == CLICK_MESSAGE


def test_pile_at_uses_priority_order() -> None:
    table = Table(rng=random.Random(2))
    assert table.pile_at((table.stock.x, table.stock.y)) is table.stock
    assert table.pile_at((table.foundations[2].x + 3, 60)) is table.foundations[2]
    assert table.pile_at((table.tableau[0].x + 3, 600)) is table.tableau[0]


def test_select_by_index() -> None:
    table = Table(rng=random.Random(4))
    assert table.select(0).kind is MoveKind.DRAW
    assert table.waste.count() == 1


@pytest.mark.parametrize("index", [-1, NUM_PILES])
def test_select_unknown_index(index: int) -> None:
    with pytest.raises(IndexError):
        Table(rng=random.Random(4)).select(index)


def test_ace_to_foundation_scenario() -> None:
    table = Table(deal=False)
    t = table.tableau[2]
    t.add_card(Card(CLUB, 9, False))
    t.add_card(Card(HEART, ACE, True))
    move = table.select(t.index)
    assert move.target == table.foundations[0].index
    assert table.foundations[0].top().suit == HEART
    assert t.count() == 1


def test_build_rollback_scenario() -> None:
    table = Table(deal=False)
    hidden, eight, seven = Card(CLUB, 2, False), Card(HEART, 7, True), Card(SPADE, 6, True)
    for c in (hidden, eight, seven):
        table.tableau[0].add_card(c)
    placed = {(c.suit, c.rank) for c in (hidden, eight, seven)}
    for suit in (HEART, SPADE, DIAMOND, CLUB):
        for rank in range(13):
            if (suit, rank) not in placed:
                table.stock.add_card(Card(suit, rank, False))
    check_invariants(table)

    before = table.snapshot()
    assert table.select(table.tableau[0].index) is None
    assert table.snapshot() == before
    assert table.tableau[0].cards == [hidden, eight, seven]
    check_invariants(table)


# ---------- Winning ----------
def test_all_cards_on_foundations_is_won() -> None:
    table = Table(deal=False)
    assert not Table(rng=random.Random(1)).is_won()
    fill_foundations(table)
    assert table.count() == 52
    assert table.is_won()


def test_clicks_after_win_do_nothing() -> None:
    table = Table(deal=False)
    fill_foundations(table)
    before = table.snapshot()
    assert table.dispatch((table.foundations[0].x, table.foundations[0].y)) is None
    assert table.snapshot() == before
    assert table.message == WIN_MESSAGE


def test_last_move_announces_win() -> None:
    table = Table(deal=False)
    fill_foundations(table)
    king = table.foundations[1].pop()
    table.tableau[3].add_card(king)
    assert not table.is_won()
    move = table.select(table.tableau[3].index)
    assert move.target == table.foundations[1].index
    assert table.is_won()
    assert table.message == WIN_MESSAGE


def test_is_won_is_a_pure_query() -> None:
    table = Table(rng=random.Random(6))
    before = table.snapshot()
    table.is_won()
    assert table.snapshot() == before
    assert table.message == WELCOME_MESSAGE


# ---------- Random play ----------
@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_random_play_keeps_invariants(seed: int) -> None:
    rng = random.Random(seed)
    table = Table(rng=random.Random(seed))
    for _ in range(1500):
        table.select(rng.randrange(NUM_PILES))
        check_invariants(table)
