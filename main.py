"""Game entry point"""

from __future__ import annotations

import pygame

from tapdash.audio import AudioCues
from tapdash.constants import (
    WIDTH, HEIGHT, FPS, BG_COLOR, NEON_COLOR, FONT_NAME, FONT_SIZE_MEDIUM, FONT_SIZE_LARGE, LOG_FILE
)
from tapdash.logger import GameLogger
from tapdash.models import Mode, Phase, RoundSnapshot
from tapdash.round import RoundController
from tapdash.scoreboard import JsonFileStore, ScoreBoard
from tapdash.ui import HUD, GameOverScreen, MenuScreen, target_hit, zone_rects


class Game:
    """
    Main game controller: initializes subsystems, runs the loop, routes clicks
    to the menu, the round, or the game over screen, and draws the frame.
    """

    def __init__(self) -> None:
        """Initialize subsystems and set initial game state."""
        pygame.init()
        pygame.display.set_caption("Tap Dash Showdown")

        self.screen = pygame.display.set_mode((WIDTH, HEIGHT))
        self.clock = pygame.time.Clock()
        self.font_small = pygame.font.Font(FONT_NAME, FONT_SIZE_MEDIUM)
        self.font_big = pygame.font.Font(FONT_NAME, FONT_SIZE_LARGE)

        self.logger = GameLogger(LOG_FILE)
        self.scoreboard = ScoreBoard(JsonFileStore())
        self.leaderboard = self.scoreboard.load()
        self.audio = AudioCues()

        self.mode = Mode.SOLO
        self.controller = RoundController(
            scoreboard=self.scoreboard,
            logger=self.logger,
            on_change=self.on_round_change,
            on_cue=self.audio.play,
        )
        self.snapshot: RoundSnapshot = self.controller.snapshot()

        # Pause-aware timing
        self.paused = False
        self.total_pause_time = 0       # Cumulative time spent paused (in ms)
        self.pause_start_time = None    # When current pause started (None if not paused)

        self.menu_screen = MenuScreen(self.font_big, self.font_small)
        self.hud = HUD(self.font_small)
        self.game_over_screen = GameOverScreen(self.font_big, self.font_small)

    def get_game_time(self) -> int:
        """
        Get the current game time in milliseconds, excluding time spent paused.

        Returns
        -------
        int
            Current game time in milliseconds (wall time minus total pause time)
        """
        wall_time = pygame.time.get_ticks()

        # The current pause session is added to total_pause_time on unpause
        if self.paused and self.pause_start_time is not None:
            current_pause_duration = wall_time - self.pause_start_time
            return wall_time - self.total_pause_time - current_pause_duration
        return wall_time - self.total_pause_time

    def on_round_change(self, snapshot: RoundSnapshot) -> None:
        """Render-boundary listener: keep the latest snapshot for drawing."""
        if snapshot.phase is Phase.ENDED and self.snapshot.phase is not Phase.ENDED:
            self.leaderboard = self.scoreboard.load()
        self.snapshot = snapshot

    # --------------------------------- Round ----------------------------------------

    def start_round(self) -> None:
        # Sync the round clock first so the first tick lands a full second out
        self.controller.update(self.get_game_time())
        self.controller.start(self.mode)

    def reset_leaderboard(self) -> None:
        if self.scoreboard.clear():
            self.logger.log_leaderboard_reset()
        self.leaderboard = self.scoreboard.load()

    # --------------------------------- Loop -----------------------------------------

    def run(self) -> None:
        """Main game loop: process events, update, render; exits on quit request."""
        running = True
        try:
            while running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        running = False
                    elif event.type == pygame.KEYDOWN:
                        running = self.handle_key(event.key)
                    elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                        self.handle_click(event.pos)

                if not self.paused:
                    self.controller.update(self.get_game_time())

                self.draw(self.get_game_time())
                self.clock.tick(FPS)
        finally:
            self.controller.teardown()
            pygame.quit()

    # --------------------------------- Input ----------------------------------------

    def handle_key(self, key: int) -> bool:
        """Handle a key press; returns False when the player asks to quit."""
        if key == pygame.K_ESCAPE:
            return False
        if key in (pygame.K_SPACE, pygame.K_RETURN) and self.snapshot.phase is not Phase.RUNNING:
            self.start_round()
        elif key == pygame.K_m:
            self.audio.toggleMute()
        elif key == pygame.K_p:
            self.toggle_pause()
        return True

    def handle_click(self, pos: tuple[int, int]) -> None:
        """
        Route a left-click to whichever screen is showing.

        Parameters
        ----------
        pos : Tuple[int, int]
            Mouse click position
        """
        width, height = self.screen.get_width(), self.screen.get_height()
        phase = self.snapshot.phase

        if phase is Phase.IDLE:
            clicked = self.menu_screen.hit_test(pos, width, height)
            if clicked == "solo":
                self.mode = Mode.SOLO
            elif clicked == "versus":
                self.mode = Mode.VERSUS
            elif clicked == "start":
                self.start_round()
            elif clicked == "reset" and self.mode is Mode.SOLO and self.leaderboard:
                self.reset_leaderboard()
            return

        if phase is Phase.ENDED:
            if self.game_over_screen.menu_button_rect(width, height).collidepoint(pos):
                self.controller.return_to_menu()
            return

        if self.paused:
            return
        # Only a click on a drawn target counts as a tap
        for slot_id, zone in zone_rects(self.snapshot.mode, width, height).items():
            slot = self.snapshot.slot(slot_id)
            if slot is not None and slot.target is not None and target_hit(slot.target, zone, pos):
                self.controller.tap(slot_id)
                return

    def toggle_pause(self) -> None:
        if self.snapshot.phase is not Phase.RUNNING:
            return
        if self.paused:
            # Unpausing: add elapsed pause time to total
            if self.pause_start_time is not None:
                current_pause_duration = pygame.time.get_ticks() - self.pause_start_time
                self.total_pause_time += current_pause_duration
                self.pause_start_time = None
            self.paused = False
        else:
            # Pausing: record when pause started
            self.pause_start_time = pygame.time.get_ticks()
            self.paused = True

    # --------------------------------- Rendering ------------------------------------

    def draw(self, now_ms: int) -> None:
        """
        Compose the frame: bg -> title -> menu or zones/targets -> game over.
        """
        self.screen.fill(BG_COLOR)
        mouse_pos = pygame.mouse.get_pos()

        title = self.font_big.render("TAP DASH SHOWDOWN", True, NEON_COLOR)
        self.screen.blit(title, title.get_rect(center=(self.screen.get_width() // 2, 32)))

        if self.snapshot.phase is Phase.IDLE:
            self.menu_screen.draw(self.screen, self.mode, self.leaderboard, mouse_pos)
        else:
            self.hud.draw(self.screen, self.snapshot, now_ms, self.paused, self.audio.muted)
            if self.snapshot.phase is Phase.ENDED:
                self.game_over_screen.draw(self.screen, self.snapshot, mouse_pos)

        pygame.display.flip()


def main() -> None:
    Game().run()


if __name__ == "__main__":
    main()
