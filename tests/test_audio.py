from __future__ import annotations

from tapdash import audio
from tapdash.models import Cue


def test_every_cue_has_a_tone() -> None:
    assert set(audio.TONES) == set(Cue)


def test_synth_tone_is_interleaved_and_fades() -> None:
    samples = audio.synth_tone(440, "square", 0.1, 0.5, sample_rate=1000, channels=2)

    assert len(samples) == 200
    assert samples[0] == samples[1]
    assert all(-32768 <= s <= 32767 for s in samples)
    assert abs(samples[-2]) < abs(samples[0])


def test_cues_are_no_ops_without_a_mixer() -> None:
    cues = audio.AudioCues(enabled=False)

    assert cues.available is False
    for cue in Cue:
        cues.play(cue)


def test_mute_silences_loaded_sounds() -> None:
    played: list[str] = []

    class FakeSound:
        def play(self) -> None:
            played.append("play")

    cues = audio.AudioCues(enabled=False)
    cues.sounds = {Cue.HIT: FakeSound()}
    cues.play(Cue.HIT)
    cues.toggleMute()
    cues.play(Cue.HIT)

    assert played == ["play"]
