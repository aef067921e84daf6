# common.py - settings, drawing helpers and scene plumbing for the pygame front end
import os
import json
import pygame

from klondike.cards import CLUB, DIAMOND, HEART, RANK_TO_TEXT, SPADE, is_red

# --- Settings ---
USE_IMAGE_CARDS = True

CARD_SIZES = ("Small", "Medium", "Large")
BACK_COLORS = ("Blue", "Grey", "Red")

_DEFAULT_SETTINGS = {
    "card_size": "Medium",   # Small | Medium | Large
    "back_color": "Blue",    # Blue | Grey | Red
}

_CURRENT_SETTINGS = dict(_DEFAULT_SETTINGS)

def _settings_dir() -> str:
    # Prefer %APPDATA% on Windows, else ~/.klondike_solitaire
    base = os.environ.get("APPDATA")
    if base:
        return os.path.join(base, "KlondikeSolitaire")
    return os.path.join(os.path.expanduser("~"), ".klondike_solitaire")

def _settings_path() -> str:
    return os.path.join(_settings_dir(), "settings.json")

def get_current_settings():
    return dict(_CURRENT_SETTINGS)

def load_settings():
    try:
        with open(_settings_path(), "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return
    if not isinstance(data, dict):
        return
    size = str(data.get("card_size", _CURRENT_SETTINGS["card_size"])).capitalize()
    color = str(data.get("back_color", _CURRENT_SETTINGS["back_color"])).capitalize()
    if size in CARD_SIZES:
        _CURRENT_SETTINGS["card_size"] = size
    if color in BACK_COLORS:
        _CURRENT_SETTINGS["back_color"] = color

def save_settings(new_values: dict):
    _CURRENT_SETTINGS.update({
        k: new_values[k] for k in ("card_size", "back_color") if k in new_values
    })
    try:
        os.makedirs(_settings_dir(), exist_ok=True)
        with open(_settings_path(), "w", encoding="utf-8") as f:
            json.dump(_CURRENT_SETTINGS, f, indent=2)
    except OSError:
        pass

def _size_to_dims(size_name: str):
    size_name = (size_name or "Medium").capitalize()
    if size_name == "Small":
        return 75, 105
    if size_name == "Large":
        return 150, 210
    return 100, 140

def _size_to_dir(size_name: str):
    size_name = (size_name or "Medium").capitalize()
    return size_name if size_name in CARD_SIZES else "Medium"

def invalidate_card_caches():
    global _img_face_cache, _img_back_cache, _card_face_cache, _card_back_cache
    _img_face_cache = {}
    _img_back_cache = None
    _card_face_cache = {}
    _card_back_cache = None

def apply_card_settings(size_name: str = None, back_color: str = None):
    global IMAGE_CARDS_DIR, BACK_COLOR, CARD_SIZE, CARD_W, CARD_H
    if size_name is not None:
        CARD_SIZE = _size_to_dir(size_name)
        CARD_W, CARD_H = _size_to_dims(CARD_SIZE)
        IMAGE_CARDS_DIR = os.path.join(os.path.dirname(__file__), "assets", "cards", "PNG", CARD_SIZE)
    if back_color is not None:
        BACK_COLOR = back_color
    invalidate_card_caches()

def next_card_size(size_name: str) -> str:
    i = CARD_SIZES.index(_size_to_dir(size_name))
    return CARD_SIZES[(i + 1) % len(CARD_SIZES)]

def env_seed():
    """Integer deal seed from KLONDIKE_SEED, or None when unset or not a number."""
    raw = os.environ.get("KLONDIKE_SEED", "").strip()
    try:
        return int(raw) if raw else None
    except ValueError:
        return None

# Load any persisted settings and apply now
load_settings()
CARD_SIZE = _size_to_dir(_CURRENT_SETTINGS["card_size"])
IMAGE_CARDS_DIR = os.path.join(os.path.dirname(__file__), "assets", "cards", "PNG", CARD_SIZE)
BACK_COLOR = _CURRENT_SETTINGS["back_color"]


# ---------- Configuration ----------
SCREEN_W, SCREEN_H = 1280, 800
GREEN_TABLE = (2, 100, 40)
TABLE_BG = GREEN_TABLE

CARD_W, CARD_H = _size_to_dims(CARD_SIZE)
CARD_RADIUS = 10

# Fonts are initialized via setup_fonts() AFTER pygame.init() in __main__.py
FONT_NAME = None
FONT_SMALL = None
FONT_UI = None
FONT_TITLE = None
FONT_CORNER_RANK = None
FONT_CORNER_SUIT = None

def setup_fonts():
    global FONT_NAME, FONT_SMALL, FONT_UI, FONT_TITLE, FONT_CORNER_RANK, FONT_CORNER_SUIT
    FONT_NAME = pygame.font.get_default_font()
    FONT_SMALL = pygame.font.SysFont(FONT_NAME, 20, bold=True)
    FONT_UI = pygame.font.SysFont(FONT_NAME, 26, bold=True)
    FONT_TITLE = pygame.font.SysFont(FONT_NAME, 44, bold=True)
    FONT_CORNER_RANK = pygame.font.SysFont(FONT_NAME, 28, bold=True)

    # Suit glyphs require a Unicode-capable font.
    suit_font = None
    _font_path = os.path.join(os.path.dirname(__file__), "assets", "fonts", "DejaVuSans.ttf")
    if os.path.isfile(_font_path):
        suit_font = pygame.font.Font(_font_path, 26)
    if suit_font is None:
        suit_font = pygame.font.SysFont("Segoe UI Symbol", 26, bold=True)
    FONT_CORNER_SUIT = suit_font

# UI bar heights
TOP_BAR_H = 60

# Colors
BLACK = (20, 20, 20)
WHITE = (245, 245, 245)
RED = (200, 20, 20)
BLUE = (34, 96, 200)
GOLD = (230, 190, 80)
LIGHT = (220, 220, 220)

_BACK_FILL = {"Blue": BLUE, "Grey": (110, 110, 120), "Red": (170, 30, 40)}

SUIT_TEXT = {HEART: "♥", SPADE: "♠", DIAMOND: "♦", CLUB: "♣"}

_card_face_cache = {}
_card_back_cache = None

def draw_suit_shape(surface, center, suit, color, size=42):
    x, y = center
    if suit == DIAMOND:
        half = size//2
        points = [(x, y - half), (x + half, y), (x, y + half), (x - half, y)]
        pygame.draw.polygon(surface, color, points)
    elif suit == HEART:
        r = size//3
        pygame.draw.circle(surface, color, (x - r, y - r), r)
        pygame.draw.circle(surface, color, (x + r, y - r), r)
        tri = [(x - 2*r, y - r), (x + 2*r, y - r), (x, y + 2*r)]
        pygame.draw.polygon(surface, color, tri)
    elif suit == SPADE:
        r = size//3
        pygame.draw.circle(surface, color, (x - r, y), r)
        pygame.draw.circle(surface, color, (x + r, y), r)
        tri = [(x - 2*r, y), (x + 2*r, y), (x, y - 2*r)]
        pygame.draw.polygon(surface, color, tri)
        stem_w = max(6, size//6)
        pygame.draw.rect(surface, color, (x - stem_w//2, y + r, stem_w, size//2))
    else:
        r = size//3
        pygame.draw.circle(surface, color, (x, y - r), r)
        pygame.draw.circle(surface, color, (x - r, y + r//3), r)
        pygame.draw.circle(surface, color, (x + r, y + r//3), r)
        stem_w = max(6, size//6)
        pygame.draw.rect(surface, color, (x - stem_w//2, y + r, stem_w, size//2))

# Cache
_img_face_cache = {}   # (suit, rank) -> Surface
_img_back_cache = None

_SUIT_FILENAMES = {HEART: "Hearts", SPADE: "Spades", DIAMOND: "Diamonds", CLUB: "Clubs"}
_IMAGE_EXTS = (".png", ".jpg", ".jpeg", ".webp")

def _find_file_for_stem(stem):
    for ext in _IMAGE_EXTS:
        p = os.path.join(IMAGE_CARDS_DIR, stem + ext)
        if os.path.isfile(p):
            return p
    return None

def _load_scaled(path, size):
    try:
        surf = pygame.image.load(path)
    except pygame.error:
        return None
    surf = surf.convert_alpha() if surf.get_alpha() is not None else surf.convert()
    if surf.get_size() != size:
        surf = pygame.transform.smoothscale(surf, size)
    return surf

def _get_image_face_surface(card, size):
    key = (card.suit, card.rank)
    if key in _img_face_cache:
        return _img_face_cache[key]
    # Image files number ranks 1..13
    path = _find_file_for_stem(f"{_SUIT_FILENAMES[card.suit]} {card.rank + 1}")
    s = _load_scaled(path, size) if path else None
    if s:
        _img_face_cache[key] = s
    return s

def _get_image_back_surface(size):
    global _img_back_cache
    if _img_back_cache is not None:
        return _img_back_cache
    path = _find_file_for_stem(f"Back {BACK_COLOR} 1")
    s = _load_scaled(path, size) if path else None
    if s:
        _img_back_cache = s
    return s


def get_card_surface(card):
    if not card.face_up:
        return get_back_surface()
    if USE_IMAGE_CARDS:
        s = _get_image_face_surface(card, (CARD_W, CARD_H))
        if s is not None:
            return s

    key = (card.suit, card.rank)
    if key in _card_face_cache:
        return _card_face_cache[key]
    surf = pygame.Surface((CARD_W, CARD_H), pygame.SRCALPHA)
    pygame.draw.rect(surf, WHITE, (0,0,CARD_W,CARD_H), border_radius=CARD_RADIUS)
    pygame.draw.rect(surf, BLACK, (0,0,CARD_W,CARD_H), width=3, border_radius=CARD_RADIUS)
    color = RED if is_red(card.suit) else BLACK
    margin = 10
    rtxt = FONT_CORNER_RANK.render(RANK_TO_TEXT[card.rank], True, color)
    stxt = FONT_CORNER_SUIT.render(SUIT_TEXT[card.suit], True, color)
    surf.blit(rtxt, (margin, margin))
    surf.blit(stxt, (margin, margin + rtxt.get_height() - 2))
    draw_suit_shape(surf, (CARD_W//2, CARD_H//2), card.suit, color, size=CARD_W//2)
    _card_face_cache[key] = surf
    return surf

def get_back_surface():
    global _card_back_cache
    if USE_IMAGE_CARDS:
        s = _get_image_back_surface((CARD_W, CARD_H))
        if s is not None:
            return s

    if _card_back_cache is not None:
        return _card_back_cache
    surf = pygame.Surface((CARD_W, CARD_H), pygame.SRCALPHA)
    pygame.draw.rect(surf, WHITE, (0,0,CARD_W,CARD_H), border_radius=CARD_RADIUS)
    pygame.draw.rect(surf, BLACK, (0,0,CARD_W,CARD_H), width=3, border_radius=CARD_RADIUS)
    inset = 8
    inner_rect = pygame.Rect(inset, inset, CARD_W-2*inset, CARD_H-2*inset)
    pygame.draw.rect(surf, _BACK_FILL.get(BACK_COLOR, BLUE), inner_rect, border_radius=8)
    for i in range(-CARD_H, CARD_W, 12):
        pygame.draw.line(surf, LIGHT, (i, 8), (i+CARD_H, CARD_H-8), 1)
    _card_back_cache = surf
    return surf

def draw_empty_slot(screen, x, y):
    pygame.draw.rect(screen, (255, 255, 255, 40), (x, y, CARD_W, CARD_H), border_radius=CARD_RADIUS, width=2)

# ---------- UI ----------
class Button:
    def __init__(self, text, x, y, w=280, h=48, center=False):
        self.text = text
        self.rect = pygame.Rect(0, 0, w, h)
        if center:
            self.rect.center = (x, y)
        else:
            self.rect.topleft = (x, y)

    def draw(self, screen, hover=False):
        col = GOLD if hover else (200, 200, 200)
        pygame.draw.rect(screen, col, self.rect, border_radius=12)
        pygame.draw.rect(screen, BLACK, self.rect, 2, border_radius=12)
        t = FONT_UI.render(self.text, True, BLACK)
        screen.blit(t, (self.rect.centerx - t.get_width() // 2,
                        self.rect.centery - t.get_height() // 2))

    def hovered(self, mouse_pos):
        return self.rect.collidepoint(mouse_pos)

# ---------- Base Scene ----------
class Scene:
    def __init__(self, app):
        self.app = app
        self.next_scene = None
    def handle_event(self, e): pass
    def update(self, dt): pass
    def draw(self, screen): pass
    def draw_top_bar(self, screen, title, extra=""):
        pygame.draw.rect(screen, (0,0,0,70), (0,0,SCREEN_W,TOP_BAR_H))
        t = FONT_TITLE.render(title, True, WHITE)
        screen.blit(t, (20, 10))
        if extra:
            s = FONT_UI.render(extra, True, WHITE)
            screen.blit(s, (20, TOP_BAR_H - s.get_height() - 6))
