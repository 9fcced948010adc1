"""HUD, menu, play zones and Game Over screen"""

from __future__ import annotations

import datetime

import pygame

from .constants import (
    HUD_PADDING, TEXT_COLOR, NEON_COLOR, ZONE_COLOR, ZONE_BORDER,
    NORMAL_COLOR, HAZARD_COLOR, P1_COLOR, P2_COLOR, TARGET_RADIUS,
    FONT_NAME, FONT_SIZE_SMALL, LEADERBOARD_SHOWN
)
from .models import Mode, RoundSnapshot, Target
from .scoreboard import ScoreEntry

SLOT_COLORS = {"p1": P1_COLOR, "p2": P2_COLOR}


def zone_rects(mode: Mode, width: int, height: int) -> dict[str, pygame.Rect]:
    """Tap area per active slot; versus splits the screen with a VS gap."""
    top = 110
    zone_h = height - top - HUD_PADDING * 2
    if mode is Mode.VERSUS:
        gap = 60
        zone_w = (width - HUD_PADDING * 2 - gap) // 2
        return {
            "p1": pygame.Rect(HUD_PADDING, top, zone_w, zone_h),
            "p2": pygame.Rect(HUD_PADDING + zone_w + gap, top, zone_w, zone_h),
        }
    return {"p1": pygame.Rect(HUD_PADDING, top, width - HUD_PADDING * 2, zone_h)}


def target_center(target: Target, zone: pygame.Rect) -> tuple[int, int]:
    return (zone.x + int(zone.width * target.x / 100.0),
            zone.y + int(zone.height * target.y / 100.0))


def target_hit(target: Target, zone: pygame.Rect, pos: tuple[int, int]) -> bool:
    """Circular hit test against the drawn target."""
    cx, cy = target_center(target, zone)
    dx, dy = pos[0] - cx, pos[1] - cy
    return dx * dx + dy * dy <= TARGET_RADIUS * TARGET_RADIUS


def button(surf: pygame.Surface, font: pygame.font.Font, label: str, rect: pygame.Rect,
           mouse_pos: tuple[int, int], active: bool = False) -> None:
    hovered = rect.collidepoint(mouse_pos)
    if active:
        color = (120, 40, 110)
    else:
        color = (70, 60, 110) if hovered else (45, 40, 75)
    pygame.draw.rect(surf, color, rect, border_radius=6)
    pygame.draw.rect(surf, NEON_COLOR if active else TEXT_COLOR, rect, 2, border_radius=6)
    text = font.render(label, True, TEXT_COLOR)
    surf.blit(text, text.get_rect(center=rect.center))


class MenuScreen:
    """Mode select, start button, high scores and instructions."""

    def __init__(self, font_big: pygame.font.Font, font_small: pygame.font.Font) -> None:
        self.font_big = font_big
        self.font_small = font_small
        self.tiny_font = pygame.font.Font(FONT_NAME, FONT_SIZE_SMALL)

    def layout(self, width: int, height: int) -> dict[str, pygame.Rect]:
        cx = width // 2
        return {
            "solo": pygame.Rect(cx - 210, 120, 200, 44),
            "versus": pygame.Rect(cx + 10, 120, 200, 44),
            "start": pygame.Rect(cx - 110, 185, 220, 50),
            "reset": pygame.Rect(cx + 120, 262, 80, 26),
        }

    def hit_test(self, pos: tuple[int, int], width: int, height: int) -> str | None:
        """Name of the button under ``pos``, if any."""
        for name, rect in self.layout(width, height).items():
            if rect.collidepoint(pos):
                return name
        return None

    def draw(self, surf: pygame.Surface, mode: Mode, leaderboard: list[ScoreEntry],
             mouse_pos: tuple[int, int]) -> None:
        width, height = surf.get_width(), surf.get_height()
        rects = self.layout(width, height)

        button(surf, self.font_small, "1 PLAYER", rects["solo"], mouse_pos, mode is Mode.SOLO)
        button(surf, self.font_small, "2 PLAYER VS", rects["versus"], mouse_pos, mode is Mode.VERSUS)
        button(surf, self.font_small, "START GAME", rects["start"], mouse_pos)

        y = rects["reset"].y
        if mode is Mode.SOLO and leaderboard:
            title = self.font_small.render("HIGH SCORES", True, (255, 255, 100))
            surf.blit(title, (width // 2 - 200, y + 4))
            button(surf, self.tiny_font, "RESET", rects["reset"], mouse_pos)
            y += 36
            for i, entry in enumerate(leaderboard[:LEADERBOARD_SHOWN]):
                line = f"#{i + 1}   {entry.score:>5}   {self.format_date(entry.date)}"
                text = self.font_small.render(line, True, TEXT_COLOR)
                surf.blit(text, (width // 2 - 200, y))
                y += text.get_height() + 6

        instructions = [
            "TAP GREEN TARGETS +10 POINTS",
            "AVOID RED BOMBS -50 POINTS",
            "TARGETS FADE QUICKLY",
            "[SPACE] start | [P] pause | [M] mute | [ESC] quit",
        ]
        y = max(y + 20, height - 30 - len(instructions) * 24)
        for line in instructions:
            text = self.tiny_font.render(line, True, (180, 180, 180))
            surf.blit(text, text.get_rect(center=(width // 2, y)))
            y += 24

    @staticmethod
    def format_date(iso: str) -> str:
        try:
            return datetime.datetime.fromisoformat(iso).strftime("%Y-%m-%d")
        except ValueError:
            return iso


class HUD:
    """Timer, per-slot scores and the live targets."""

    def __init__(self, font: pygame.font.Font) -> None:
        self.font = font
        self.small_font = pygame.font.Font(FONT_NAME, FONT_SIZE_SMALL)

    def draw_target(self, surf: pygame.Surface, target: Target, zone: pygame.Rect, now_ms: float) -> None:
        cx, cy = target_center(target, zone)
        color = HAZARD_COLOR if target.is_hazard else NORMAL_COLOR
        progress = target.progress(now_ms)

        # shrink slightly as the target runs out of life
        radius = max(6, int(TARGET_RADIUS * (0.6 + 0.4 * progress)))
        pygame.draw.circle(surf, color, (cx, cy), radius)
        pygame.draw.circle(surf, TEXT_COLOR, (cx, cy), radius, 2)
        if target.is_hazard:
            pygame.draw.line(surf, TEXT_COLOR, (cx - radius // 2, cy - radius // 2), (cx + radius // 2, cy + radius // 2), 3)
            pygame.draw.line(surf, TEXT_COLOR, (cx - radius // 2, cy + radius // 2), (cx + radius // 2, cy - radius // 2), 3)

        # Lifetime bar above the target
        bar_width = TARGET_RADIUS * 2
        bar_x = cx - bar_width // 2
        bar_y = cy - TARGET_RADIUS - 12
        pygame.draw.rect(surf, (50, 50, 50), (bar_x, bar_y, bar_width, 4))
        filled_width = int(bar_width * progress)
        if filled_width > 0:
            pygame.draw.rect(surf, color, (bar_x, bar_y, filled_width, 4))

    def draw(self, surf: pygame.Surface, snapshot: RoundSnapshot, now_ms: float,
             paused: bool = False, muted: bool = False) -> None:
        width, height = surf.get_width(), surf.get_height()

        timer_text = self.font.render(f"TIME: {snapshot.seconds_remaining}s", True, NEON_COLOR)
        surf.blit(timer_text, timer_text.get_rect(center=(width // 2, 70)))

        zones = zone_rects(snapshot.mode, width, height)
        for slot_id, zone in zones.items():
            pygame.draw.rect(surf, ZONE_COLOR, zone, border_radius=10)
            pygame.draw.rect(surf, ZONE_BORDER, zone, 2, border_radius=10)

            slot = snapshot.slot(slot_id)
            if slot is None:
                continue
            label = "SCORE" if snapshot.mode is Mode.SOLO else slot_id.upper()
            score_text = self.font.render(f"{label}: {slot.score}", True, SLOT_COLORS[slot_id])
            surf.blit(score_text, (zone.x + HUD_PADDING, zone.y + HUD_PADDING))

            hint = "TAP HERE!" if snapshot.mode is Mode.SOLO else f"{slot_id.upper()} ZONE"
            hint_text = self.small_font.render(hint, True, (110, 100, 150))
            surf.blit(hint_text, hint_text.get_rect(center=(zone.centerx, zone.bottom - 20)))

            if slot.target is not None:
                self.draw_target(surf, slot.target, zone, now_ms)

        if snapshot.mode is Mode.VERSUS:
            vs = self.font.render("VS", True, NEON_COLOR)
            surf.blit(vs, vs.get_rect(center=(width // 2, zones["p1"].centery)))

        if muted:
            muted_text = self.small_font.render("MUTED", True, (255, 150, 150))
            surf.blit(muted_text, (width - muted_text.get_width() - HUD_PADDING, HUD_PADDING))

        if paused:
            pause_text = self.font.render("PAUSED", True, (255, 255, 100))
            text_rect = pause_text.get_rect(center=(width // 2, height // 2))
            # Semi-transparent background
            bg_rect = text_rect.inflate(20, 10)
            bg_surf = pygame.Surface(bg_rect.size, pygame.SRCALPHA)
            bg_surf.fill((0, 0, 0, 128))
            surf.blit(bg_surf, bg_rect)
            surf.blit(pause_text, text_rect)


class GameOverScreen:
    """Game over screen with final scores and a return-to-menu button."""
    def __init__(self, font_big: pygame.font.Font, font_small: pygame.font.Font):
        self.font_big = font_big
        self.font_small = font_small

    def menu_button_rect(self, width: int, height: int) -> pygame.Rect:
        return pygame.Rect(width // 2 - 120, int(height * 0.7), 240, 50)

    def draw(self, surf: pygame.Surface, snapshot: RoundSnapshot, mouse_pos: tuple[int, int]) -> None:
        """
        Draw game over screen.
        """
        current_width = surf.get_width()
        current_height = surf.get_height()

        # Semi-transparent overlay
        overlay = pygame.Surface((current_width, current_height), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 180))
        surf.blit(overlay, (0, 0))

        game_over_text = self.font_big.render("GAME OVER", True, (255, 100, 100))
        title_y = max(80, int(current_height * 0.25))
        surf.blit(game_over_text, game_over_text.get_rect(center=(current_width // 2, title_y)))

        p1 = snapshot.slot("p1")
        p2 = snapshot.slot("p2")
        if snapshot.mode is Mode.SOLO:
            lines = [f"FINAL SCORE: {p1.score}"]
        else:
            verdict = {"P1": "PLAYER 1 WINS", "P2": "PLAYER 2 WINS"}.get(snapshot.winner, "TIE GAME")
            lines = [f"P1: {p1.score}", f"P2: {p2.score}", verdict]

        y_offset = max(title_y + 70, int(current_height * 0.4))
        for line in lines:
            text_surf = self.font_small.render(line, True, TEXT_COLOR)
            surf.blit(text_surf, text_surf.get_rect(center=(current_width // 2, y_offset)))
            y_offset += 30

        rect = self.menu_button_rect(current_width, current_height)
        button(surf, self.font_small, "RETURN TO MENU", rect, mouse_pos)
