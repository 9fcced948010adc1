"""Markdown logger for gameplay events (rounds, taps, expiries)."""

import datetime

from .models import Mode, TapOutcome, Target


class GameLogger:
    """Handles logging of game events to markdown file."""

    def __init__(self, log_file: str):
        """
        Initialize the game logger.

        Parameters
        ----------
        log_file : str
            Path to the log file
        """
        self.log_file = log_file
        self.setup_log()

    def setup_log(self) -> None:
        """Initialize the log file with headers."""
        try:
            with open(self.log_file, 'w', encoding='utf-8') as f:
                f.write("# Tap Dash Showdown Game Log\n\n")
                f.write(f"Log started at: {datetime.datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n\n")
                f.write("## Round Events\n\n")
                f.write("| Timestamp | Slot | Event | Details |\n")
                f.write("|-----------|------|-------|---------|\n")
        except Exception as e:
            print(f"Failed to initialize log file: {e}")

    def _row(self, slot: str, event: str, details: str) -> None:
        try:
            timestamp = datetime.datetime.now().strftime('%H:%M:%S.%f')[:-3]  # Include milliseconds
            with open(self.log_file, 'a', encoding='utf-8') as f:
                f.write(f"| {timestamp} | {slot} | {event} | {details} |\n")
        except Exception as e:
            print(f"Failed to log {event.lower()}: {e}")

    def log_round_start(self, mode: Mode) -> None:
        self._row("-", "ROUND START", f"mode={mode.value}")

    def log_tap(self, slot_id: str, outcome: TapOutcome, score: int) -> None:
        """
        Log a tap and its resolution.

        Parameters
        ----------
        slot_id : str
            Slot that was tapped
        outcome : TapOutcome
            HIT, HAZARD or MISS
        score : int
            Slot score after the tap
        """
        self._row(slot_id, outcome.value.upper(), f"score={score}")

    def log_expire(self, slot_id: str, target: Target) -> None:
        kind = "hazard" if target.is_hazard else "normal"
        self._row(slot_id, "EXPIRED", f"{kind} target #{target.id} after {target.lifetime_ms:.0f} ms")

    def log_round_end(self, mode: Mode, scores: dict[str, int], winner: str | None, recorded: bool) -> None:
        """
        Log end-of-round settlement.

        Parameters
        ----------
        mode : Mode
            Mode the round was played in
        scores : dict[str, int]
            Final score per active slot
        winner : str | None
            "P1", "P2" or "TIE" for versus rounds
        recorded : bool
            Whether the score was written to the leaderboard
        """
        details = ", ".join(f"{slot}={score}" for slot, score in scores.items())
        if winner:
            details += f", winner={winner}"
        details += ", recorded" if recorded else ", not recorded"
        self._row("-", "ROUND END", f"mode={mode.value}, {details}")

    def log_leaderboard_reset(self) -> None:
        self._row("-", "LEADERBOARD RESET", "all entries cleared")
