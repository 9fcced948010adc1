"""Tap Dash Showdown: round lifecycle, target spawning and the high-score board."""
