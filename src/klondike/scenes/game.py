# game.py - Klondike table scene: click a pile to play it, N deals again
import random
import pygame
from klondike import common as C
from klondike.table import Layout, Table


class KlondikeGameScene(C.Scene):
    def __init__(self, app, seed=None):
        super().__init__(app)
        if seed is None:
            seed = C.env_seed()
        self.rng = random.Random(seed) if seed is not None else None
        self.table = Table(self._layout(), rng=self.rng)
        self.last_move = None
        self.b_new = C.Button("New Game", 0, 10, w=170, h=40)
        self.compute_layout()

    def _layout(self):
        return Layout.for_card_size(C.CARD_W, C.CARD_H, top_offset=C.TOP_BAR_H)

    def compute_layout(self):
        self.b_new.rect.topright = (C.SCREEN_W - 20, 10)

    def new_game(self):
        self.table.new_game()
        self.last_move = None

    def cycle_card_size(self):
        size = C.next_card_size(C.CARD_SIZE)
        C.apply_card_settings(size_name=size)
        C.save_settings({"card_size": size})
        self.table.apply_layout(self._layout())

    # ---------- Event handling ----------
    def handle_event(self, e):
        if e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
            if self.b_new.hovered(e.pos):
                self.new_game(); return
            self.last_move = self.table.dispatch(e.pos)

        elif e.type == pygame.KEYDOWN:
            if e.key == pygame.K_n:
                self.new_game()
            elif e.key == pygame.K_c:
                self.cycle_card_size()
            elif e.key == pygame.K_ESCAPE:
                from klondike.scenes.title import TitleScene
                self.next_scene = TitleScene(self.app)

    # ---------- Drawing ----------
    def _draw_top_card(self, screen, pile):
        top = pile.top()
        if top is None:
            C.draw_empty_slot(screen, pile.x, pile.y)
        else:
            screen.blit(C.get_card_surface(top), (pile.x, pile.y))

    def draw(self, screen):
        screen.fill(C.TABLE_BG)
        self.draw_top_bar(screen, "Klondike")

        hints = "N: New  C: Card size  ESC: Title"
        h = C.FONT_SMALL.render(hints, True, C.WHITE)
        screen.blit(h, (self.b_new.rect.left - h.get_width() - 20, 20))
        self.b_new.draw(screen, hover=self.b_new.hovered(pygame.mouse.get_pos()))

        t = self.table
        for pile in (t.stock, t.waste) + t.foundations:
            self._draw_top_card(screen, pile)
        for pile in t.tableau:
            if pile.empty():
                C.draw_empty_slot(screen, pile.x, pile.y)
            for card, x, y in pile.card_positions():
                screen.blit(C.get_card_surface(card), (x, y))

        if t.message:
            msg = C.FONT_UI.render(t.message, True, (255, 255, 180))
            screen.blit(msg, (C.SCREEN_W//2 - msg.get_width()//2, C.SCREEN_H - 40))
