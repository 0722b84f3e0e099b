"""
sounds.py: 8-bit sound effects synthesized at startup.

Tones are built as raw 16-bit PCM with struct and handed to pygame.mixer,
so no audio files ship with the game. Samples are built at whatever rate
the mixer actually opened with. If the mixer cannot start (no audio
device, CI) every cue is a silent no-op.
"""

import logging
import math
import struct
from typing import Dict, List

import pygame

logger = logging.getLogger(__name__)

SAMPLE_RATE = 22050             # Requested mixer rate
MAX_AMP = 32767

# Game over melody: B4 down to F4 in semitones
GAME_OVER_NOTES = (494, 466, 440, 415, 392, 370, 349)


def pre_init():
    """Requests the mixer format. Only has an effect before pygame.init()."""
    pygame.mixer.pre_init(SAMPLE_RATE, -16, 2, 512)


def _pack(samples: List[float], channels: int = 2) -> bytes:
    """Mono float samples in [-1, 1] to interleaved int16 frames."""
    fmt = "<" + "h" * channels
    frames = []
    for s in samples:
        v = int(max(-1.0, min(1.0, s)) * MAX_AMP)
        frames.append(struct.pack(fmt, *([v] * channels)))
    return b"".join(frames)


def _square(freq: float, duration: float, volume: float = 0.3,
            rate: int = SAMPLE_RATE) -> List[float]:
    n = int(rate * duration)
    period = rate / freq
    return [volume * (1.0 if (i % period) < (period / 2) else -1.0) for i in range(n)]


def _sweep(f_start: float, f_end: float, duration: float,
           volume: float = 0.3, wave: str = "sine", rate: int = SAMPLE_RATE) -> List[float]:
    """Exponential glide between two frequencies."""
    n = int(rate * duration)
    samples = []
    phase = 0.0
    for i in range(n):
        freq = f_start * (f_end / f_start) ** (i / n)
        phase += 2 * math.pi * freq / rate
        if wave == "square":
            samples.append(volume * (1.0 if math.sin(phase) >= 0 else -1.0))
        else:
            samples.append(volume * math.sin(phase))
    return samples


def _silence(duration: float, rate: int = SAMPLE_RATE) -> List[float]:
    return [0.0] * int(rate * duration)


def _decay(samples: List[float], floor: float = 0.01) -> List[float]:
    """Exponential fade from full volume down to `floor` over the whole sample."""
    n = len(samples)
    if n == 0:
        return samples
    return [s * floor ** (i / n) for i, s in enumerate(samples)]


def build_samples(rate: int = SAMPLE_RATE) -> Dict[str, List[float]]:
    """The float samples for every cue at `rate` Hz, keyed by cue name."""
    melody = []
    for freq in GAME_OVER_NOTES:
        melody.extend(_square(freq, 0.1, rate=rate))
    return {
        # G5 -> G6 chirp
        "flap": _decay(_sweep(784, 1568, 0.1, rate=rate) + _sweep(1568, 1568, 0.1, rate=rate)),
        # B5, E6 coin
        "score": _decay(_square(988, 0.1, rate=rate) + _square(1319, 0.1, rate=rate)),
        # G3 bump
        "hit": _decay(_square(196, 0.1, volume=0.5, rate=rate)),
        "boost": _decay(_sweep(220, 880, 0.2, wave="square", rate=rate)
                        + _square(880, 0.1, rate=rate)),
        # Starts half a second after the hit
        "game_over": _silence(0.5, rate) + melody + _decay(_square(349, 0.2, rate=rate)),
    }


class SoundBoard:
    """Audio cues for the event dispatcher."""

    def __init__(self):
        self.sounds: Dict[str, "pygame.mixer.Sound"] = {}
        self.available = False
        self.rate = SAMPLE_RATE

    def init(self):
        """Opens the mixer unless pygame already did, then builds the cues for its format."""
        try:
            if pygame.mixer.get_init() is None:
                pre_init()
                pygame.mixer.init()
            rate, _, channels = pygame.mixer.get_init()
        except (pygame.error, TypeError) as e:
            logger.warning("Audio disabled: %s", e)
            self.available = False
            return

        self.rate = rate
        self.sounds = {
            name: pygame.mixer.Sound(buffer=_pack(samples, channels))
            for name, samples in build_samples(rate).items()
        }
        self.available = True

    def play(self, name: str):
        if not self.available:
            return
        sound = self.sounds.get(name)
        if sound is not None:
            sound.play()

    def on_flap(self):
        self.play("flap")

    def on_boost(self):
        self.play("boost")

    def on_score(self):
        self.play("score")

    def on_collision(self):
        self.play("hit")

    def on_game_over(self):
        self.play("game_over")

    def quit(self):
        if self.available:
            pygame.mixer.quit()
            self.available = False
