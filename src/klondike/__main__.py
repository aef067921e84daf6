# __main__.py - entry point
import os
import pygame
from klondike import common as C
from klondike.scenes.title import TitleScene

def _initial_window_size():
    info = pygame.display.Info()
    # Keep a safety margin so the window never hides under taskbar
    margin_w, margin_h = 120, 140
    w = min(C.SCREEN_W, max(640, info.current_w - margin_w))
    h = min(C.SCREEN_H, max(480, info.current_h - margin_h))
    return w, h

def _allowed_keys_set():
    keys = [
        "K_ESCAPE", "K_RETURN", "K_KP_ENTER", "K_SPACE",
        "K_n", "K_c", "K_q", "K_y",
    ]
    out = set()
    for n in keys:
        v = getattr(pygame, n, None)
        if isinstance(v, int):
            out.add(v)
    return out

def _confirm_modal_rects():
    mw, mh = 460, 180
    modal = pygame.Rect(0, 0, mw, mh)
    modal.center = (C.SCREEN_W // 2, C.SCREEN_H // 2)
    bw, bh = 120, 44
    gap = 30
    yes = pygame.Rect(0, 0, bw, bh)
    no  = pygame.Rect(0, 0, bw, bh)
    yes.centerx = modal.centerx - (bw // 2 + gap)
    no.centerx  = modal.centerx + (bw // 2 + gap)
    yes.bottom = modal.bottom - 20
    no.bottom  = modal.bottom - 20
    return modal, yes, no

def _draw_confirm_quit(screen):
    overlay = pygame.Surface((C.SCREEN_W, C.SCREEN_H), pygame.SRCALPHA)
    overlay.fill((0, 0, 0, 160))
    screen.blit(overlay, (0, 0))
    modal, yes_r, no_r = _confirm_modal_rects()
    pygame.draw.rect(screen, (240, 240, 240), modal, border_radius=16)
    pygame.draw.rect(screen, (80, 80, 80), modal, width=2, border_radius=16)
    title = C.FONT_TITLE.render("Quit Game?", True, (20, 20, 20))
    screen.blit(title, (modal.centerx - title.get_width() // 2, modal.y + 20))
    msg = C.FONT_UI.render("The current deal will be lost.", True, (30, 30, 30))
    screen.blit(msg, (modal.centerx - msg.get_width() // 2, modal.y + 20 + title.get_height() + 8))
    for rect, label in ((yes_r, "Yes"), (no_r, "No")):
        pygame.draw.rect(screen, (230, 230, 235), rect, border_radius=10)
        pygame.draw.rect(screen, (100, 100, 110), rect, 1, border_radius=10)
        t = C.FONT_UI.render(label, True, (20, 20, 25))
        screen.blit(t, (rect.centerx - t.get_width() // 2, rect.centery - t.get_height() // 2))

def main():
    os.environ.setdefault("SDL_VIDEO_CENTERED", "1")
    pygame.init()

    w, h = _initial_window_size()
    C.SCREEN_W, C.SCREEN_H = w, h
    screen = pygame.display.set_mode((w, h), pygame.RESIZABLE)
    pygame.display.set_caption("Klondike Solitaire")
    C.setup_fonts()
    clock = pygame.time.Clock()

    # Developer overrides via environment
    debug_scene = os.environ.get("KLONDIKE_DEBUG_SCENE", "").strip().lower()
    card_size = os.environ.get("KLONDIKE_CARD_SIZE", "").strip().capitalize()
    if card_size in C.CARD_SIZES:
        C.apply_card_settings(size_name=card_size)

    if debug_scene in ("game", "klondike", "k"):
        from klondike.scenes.game import KlondikeGameScene
        scene = KlondikeGameScene(app=None)
    else:
        scene = TitleScene(app=None)

    allowed_keys = _allowed_keys_set()
    running = True
    confirm_quit = False
    while running:
        dt = clock.tick(60) / 1000.0
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                confirm_quit = True
                continue
            elif e.type == pygame.VIDEORESIZE:
                C.SCREEN_W, C.SCREEN_H = e.size
                screen = pygame.display.set_mode((C.SCREEN_W, C.SCREEN_H), pygame.RESIZABLE)
                if hasattr(scene, "compute_layout"):
                    scene.compute_layout()
                continue
            if confirm_quit:
                # Only the confirm dialog takes input while it is open
                if e.type == pygame.KEYDOWN:
                    if e.key in (pygame.K_ESCAPE, pygame.K_n):
                        confirm_quit = False
                    elif e.key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_y):
                        running = False
                elif e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
                    _, yes_r, no_r = _confirm_modal_rects()
                    if yes_r.collidepoint(e.pos):
                        running = False
                    elif no_r.collidepoint(e.pos):
                        confirm_quit = False
                continue
            if e.type == pygame.KEYDOWN and getattr(e, "key", None) not in allowed_keys:
                continue
            scene.handle_event(e)
        if scene.next_scene is not None:
            scene = scene.next_scene
        scene.update(dt)
        scene.draw(screen)
        if confirm_quit:
            _draw_confirm_quit(screen)
        pygame.display.flip()
    pygame.quit()

if __name__ == "__main__":
    main()
