# Sound effects

import math
from array import array

import pygame

from .models import Cue

# (frequency Hz, waveform, duration s, gain) per cue
TONES = {
    Cue.ROUND_START: (880, "square", 0.18, 0.14),    # coin
    Cue.HIT: (1200, "square", 0.06, 0.08),
    Cue.HAZARD: (150, "sawtooth", 0.2, 0.18),        # bomb
    Cue.ROUND_END: (600, "sawtooth", 0.18, 0.12),    # explode
}


def _wave(kind, phase):
    if kind == "square":
        return 1.0 if math.sin(phase) >= 0 else -1.0
    if kind == "sawtooth":
        frac = (phase / (2 * math.pi)) % 1.0
        return 2.0 * frac - 1.0
    return math.sin(phase)


def synth_tone(freq, kind, duration, gain, sample_rate, channels):
    """Render a short tone with an exponential fade as signed 16-bit samples."""
    count = max(1, int(sample_rate * duration))
    samples = array("h")
    for i in range(count):
        t = i / sample_rate
        # fade to ~0.001 of the start level over the tone
        envelope = gain * math.exp(-6.9 * i / count)
        value = int(32767 * envelope * _wave(kind, 2 * math.pi * freq * t))
        samples.extend([value] * channels)
    return samples


class AudioCues:
    """
    Plays a synthesized tone per round cue.

    If the mixer can't be opened every cue is silently dropped, so the round
    never depends on audio.
    """

    def __init__(self, enabled=True):
        self.muted = False
        self.sfx_volume = 0.7
        self.sounds = {}
        if enabled:
            self.load_sounds()

    def load_sounds(self):
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init(frequency=22050, size=-16, channels=2, buffer=512)
            sample_rate, _, channels = pygame.mixer.get_init()
            for cue, (freq, kind, duration, gain) in TONES.items():
                samples = synth_tone(freq, kind, duration, gain, sample_rate, channels)
                sound = pygame.mixer.Sound(buffer=samples.tobytes())
                sound.set_volume(self.sfx_volume)
                self.sounds[cue] = sound
        except pygame.error as e:
            print(f"Audio unavailable: {e}")
            self.sounds = {}

    @property
    def available(self):
        return bool(self.sounds)

    def toggleMute(self):
        self.muted = not self.muted

    def set_sfx_volume(self, volume):
        """Set sound effects volume (0.0 to 1.0)"""
        self.sfx_volume = max(0.0, min(1.0, volume))  # Clamp between 0 and 1
        for sound in self.sounds.values():
            sound.set_volume(self.sfx_volume)

    def play(self, cue):
        if self.muted:
            return
        sound = self.sounds.get(cue)
        if sound is None:
            return
        try:
            sound.play()
        except pygame.error:
            pass
