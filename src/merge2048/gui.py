import math
import sys
from typing import Dict, List, Optional, Tuple

import pygame

from merge2048.config import (GRID_SIZE, MERGE_POP_MS, SLIDE_MIN_MS, SLIDE_MS_PER_CELL,
                              SPAWN_MS, GameConfig)
from merge2048.controller import GameController, GameState
from merge2048.effects import TRANSITION, Effect
from merge2048.events import Presenter

# ------------------------
# Layout
# ------------------------
TILE_SIZE = 110
GAP = 12
BORDER = 18
HUD_HEIGHT = 90
FPS = 60


def window_size(n: int = GRID_SIZE) -> Tuple[int, int]:
    w = BORDER * 2 + n * TILE_SIZE + (n - 1) * GAP
    return w, HUD_HEIGHT + w

# Colors
BG_COLOR = (250, 248, 239)
BOARD_BG = (187, 173, 160)
EMPTY_TILE = (205, 193, 180)
TEXT_DARK = (119, 110, 101)
TEXT_LIGHT = (249, 246, 242)

VALUE_COLORS = {
    2: (238, 228, 218),
    4: (237, 224, 200),
    8: (242, 177, 121),
    16: (245, 149, 99),
    32: (246, 124, 95),
    64: (246, 94, 59),
    128: (237, 207, 114),
    256: (237, 204, 97),
    512: (237, 200, 80),
    1024: (237, 197, 63),
    2048: (237, 194, 46),
}

def color_for(v: int) -> Tuple[int, int, int]:
    if v in VALUE_COLORS:
        return VALUE_COLORS[v]
    t = min(1.0, math.log2(max(2048, v)) - 11)
    base = (60, 58, 50)
    return (int(237*(1-t) + base[0]*t), int(194*(1-t) + base[1]*t), int(46*(1-t) + base[2]*t))

# ------------------------
# Helpers
# ------------------------
def grid_to_px(r: int, c: int) -> Tuple[int, int]:
    x = BORDER + c * (TILE_SIZE + GAP)
    y = HUD_HEIGHT + BORDER + r * (TILE_SIZE + GAP)
    return x, y

def ease_out_cubic(t: float) -> float:
    return 1 - pow(1 - t, 3)

def ease_out_back(t: float, s: float = 1.70158) -> float:
    t -= 1
    return (t * t * ((s + 1) * t + s) + 1)

def clamp01(x: float) -> float:
    return max(0.0, min(1.0, x))

# ------------------------
# Sprite for a single tile id
# ------------------------
class TileSprite:
    def __init__(self, tid: int, value: int, row: int, col: int):
        self.id = tid
        self.value = value
        self.row = row
        self.col = col
        self.x, self.y = grid_to_px(row, col)
        self.scale = 1.0
        self.alpha = 255

        self._slide_active = False
        self._start_pos = (self.x, self.y)
        self._end_pos = (self.x, self.y)
        self._slide_start = 0
        self._slide_ms = 1

        self._pop_active = False
        self._pop_from = 1.0
        self._pop_fade = False
        self._pop_start = 0
        self._pop_ms = 1
        self._pop_back = False

        # effects acknowledged once every running animation has ended
        self._waiters: List[Effect] = []

    @property
    def busy(self) -> bool:
        return self._slide_active or self._pop_active

    def start_slide(self, end_row: int, end_col: int, duration_ms: int, now_ms: int):
        self.row, self.col = end_row, end_col
        self._slide_active = True
        self._start_pos = (self.x, self.y)
        self._end_pos = grid_to_px(end_row, end_col)
        self._slide_start = now_ms
        self._slide_ms = max(1, duration_ms)

    def start_pop(self, from_scale: float, duration_ms: int, now_ms: int,
                  fade_in: bool = False, overshoot: bool = False):
        self._pop_active = True
        self._pop_from = from_scale
        self._pop_fade = fade_in
        self._pop_back = overshoot
        self._pop_start = now_ms
        self._pop_ms = max(1, duration_ms)
        self.scale = from_scale
        if fade_in:
            self.alpha = 0

    def wait(self, effect: Effect):
        if self.busy:
            self._waiters.append(effect)
        else:
            effect.complete()

    def release(self):
        waiters, self._waiters = self._waiters, []
        for effect in waiters:
            effect.complete()

    def update(self, now_ms: int):
        if self._slide_active:
            t = clamp01((now_ms - self._slide_start) / self._slide_ms)
            e = ease_out_cubic(t)
            sx, sy = self._start_pos
            ex, ey = self._end_pos
            self.x = sx + (ex - sx) * e
            self.y = sy + (ey - sy) * e
            if t >= 1.0:
                self._slide_active = False
                self.x, self.y = ex, ey

        if self._pop_active:
            t = clamp01((now_ms - self._pop_start) / self._pop_ms)
            e = ease_out_back(t) if self._pop_back else ease_out_cubic(t)
            self.scale = self._pop_from + (1.0 - self._pop_from) * e
            if self._pop_fade:
                self.alpha = int(255 * t)
            if t >= 1.0:
                self._pop_active = False
                self.scale = 1.0
                self.alpha = 255

        if not self.busy and self._waiters:
            self.release()

# ------------------------
# Presenter
# ------------------------
class PygamePresenter(Presenter):
    """Turns core notifications into sprite animations and acknowledges effects when they end."""

    def __init__(self):
        self.sprites: Dict[int, TileSprite] = {}
        self.now_ms = 0
        self.lost = False

    def on_tile_changed(self, tile) -> None:
        if tile.position is None:
            return
        row, col = tile.y, tile.x
        spr = self.sprites.get(tile.id)
        if spr is None:
            spr = TileSprite(tile.id, tile.value, row, col)
            spr.start_pop(0.6, SPAWN_MS, self.now_ms, fade_in=True)
            self.sprites[tile.id] = spr
            return
        if spr.value != tile.value:
            spr.value = tile.value
            spr.start_pop(0.9, MERGE_POP_MS, self.now_ms, overshoot=True)
        if (spr.row, spr.col) != (row, col):
            dist_cells = abs(row - spr.row) + abs(col - spr.col)
            dur = max(SLIDE_MIN_MS, dist_cells * SLIDE_MS_PER_CELL)
            spr.start_slide(row, col, dur, self.now_ms)

    def on_tile_removed(self, tile) -> None:
        spr = self.sprites.pop(tile.id, None)
        if spr is not None:
            spr.release()

    def request_effect(self, tile, kind: str = TRANSITION) -> Effect:
        effect = Effect(tile, kind)
        spr = self.sprites.get(tile.id)
        if spr is None:
            effect.complete()
        else:
            spr.wait(effect)
        return effect

    def on_loss(self) -> None:
        self.lost = True

    def update(self, now_ms: int):
        self.now_ms = now_ms
        for spr in list(self.sprites.values()):
            spr.update(now_ms)

# ------------------------
# Rendering
# ------------------------
def draw_board(surface: pygame.Surface, n: int):
    w, h = surface.get_size()
    surface.fill(BG_COLOR)
    board_rect = pygame.Rect(BORDER, HUD_HEIGHT, w - 2 * BORDER, h - HUD_HEIGHT - BORDER)
    pygame.draw.rect(surface, BOARD_BG, board_rect, border_radius=12)
    for r in range(n):
        for c in range(n):
            x, y = grid_to_px(r, c)
            pygame.draw.rect(surface, EMPTY_TILE, pygame.Rect(x, y, TILE_SIZE, TILE_SIZE), border_radius=8)

def draw_hud(surface: pygame.Surface, game: GameController, font_title: pygame.font.Font, font_small: pygame.font.Font):
    title = font_title.render("2048", True, TEXT_DARK)
    surface.blit(title, (BORDER + 4, BORDER - 2))
    w, _ = surface.get_size()
    rect = pygame.Rect(w - BORDER - 140, BORDER + 8, 140, 56)
    pygame.draw.rect(surface, BOARD_BG, rect, border_radius=8)
    surface.blit(font_small.render("MOVES", True, TEXT_LIGHT), (rect.x + 12, rect.y + 8))
    surface.blit(font_small.render(str(game.move_count), True, TEXT_LIGHT), (rect.x + 12, rect.y + 28))

def draw_tiles(surface: pygame.Surface, sprites: Dict[int, TileSprite], font_big: pygame.font.Font, font_med: pygame.font.Font):
    # fading sprites first
    for tid, spr in sorted(sprites.items(), key=lambda kv: (kv[1].alpha, kv[0])):
        rect = pygame.Rect(0, 0, int(TILE_SIZE * spr.scale), int(TILE_SIZE * spr.scale))
        rect.center = (spr.x + TILE_SIZE // 2, spr.y + TILE_SIZE // 2)
        tile_surface = pygame.Surface(rect.size, pygame.SRCALPHA)
        pygame.draw.rect(tile_surface, color_for(spr.value) + (spr.alpha,),
                         pygame.Rect(0, 0, rect.width, rect.height), border_radius=8)
        font = font_big if spr.value < 1024 else font_med
        text_color = TEXT_DARK if spr.value <= 4 else TEXT_LIGHT
        text_surf = font.render(str(spr.value), True, text_color)
        tile_surface.blit(text_surf, text_surf.get_rect(center=(rect.width // 2, rect.height // 2)))
        surface.blit(tile_surface, rect.topleft)

# ------------------------
# Main loop
# ------------------------
def main(config: Optional[GameConfig] = None):
    config = config or GameConfig()
    pygame.init()
    pygame.display.set_caption("2048")
    win_w, win_h = window_size(config.size)
    screen = pygame.display.set_mode((win_w, win_h))
    clock = pygame.time.Clock()

    font_title = pygame.font.SysFont("arial", 56, bold=True)
    font_big = pygame.font.SysFont("arial", 40, bold=True)
    font_med = pygame.font.SysFont("arial", 32, bold=True)
    font_small = pygame.font.SysFont("arial", 20, bold=True)

    presenter = PygamePresenter()
    presenter.now_ms = pygame.time.get_ticks()
    game = GameController(presenter, config)
    game.start()

    running = True
    while running:
        presenter.update(pygame.time.get_ticks())
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                key = pygame.key.name(event.key)
                if key == "r" and game.state in (GameState.AWAITING_INPUT, GameState.TERMINAL):
                    presenter.lost = False
                    game.restart()
                else:
                    game.handle_input(key)

        draw_board(screen, config.size)
        draw_hud(screen, game, font_title, font_small)
        draw_tiles(screen, presenter.sprites, font_big, font_med)

        if presenter.lost:
            overlay = pygame.Surface((win_w, win_h), pygame.SRCALPHA)
            overlay.fill((255, 255, 255, 180))
            screen.blit(overlay, (0, 0))
            msg = font_title.render("You lose", True, TEXT_DARK)
            screen.blit(msg, msg.get_rect(center=(win_w // 2, win_h // 2)))

        pygame.display.flip()
        clock.tick(FPS)

    pygame.quit()
    sys.exit()

if __name__ == "__main__":
    main()
