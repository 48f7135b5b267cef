"""
Turns continuous pointer motion into quantized wheel steps.

Rotary drags on the click wheel and linear drags on the screen share one
accumulator rule: a step is emitted per full detent and the remainder is
carried to the next sample, so slow drags never lose rotation to rounding.
The accumulator lives only for one press/release session.
"""
from __future__ import annotations

import math
from typing import Optional

ROTARY_DETENT_DEG = 15.0
LINEAR_DETENT_PX = 20.0
PULSE_NOISE_FLOOR = 10.0
TAP_SLOP_PX = 5.0


def angle_deg(cx: float, cy: float, x: float, y: float) -> float:
    """Angle of (x, y) around the centre: 0 at 12 o'clock, clockwise, [0, 360)."""
    return (math.degrees(math.atan2(y - cy, x - cx)) + 90.0 + 360.0) % 360.0


def signed_delta(a: float, b: float) -> float:
    """Shortest signed rotation from a to b, in (-180, 180]."""
    d = (b - a) % 360.0
    if d > 180.0:
        d -= 360.0
    return d


def _finite(*values: float) -> bool:
    return all(isinstance(v, (int, float)) and math.isfinite(v) for v in values)


class StepAccumulator:
    def __init__(self, threshold: float):
        self.threshold = threshold
        self.value = 0.0

    def feed(self, delta: float) -> int:
        if not _finite(delta) or delta == 0:
            return 0
        self.value += delta
        steps = 0
        while self.value >= self.threshold:
            self.value -= self.threshold
            steps += 1
        while self.value <= -self.threshold:
            self.value += self.threshold
            steps -= 1
        return steps

    def reset(self) -> None:
        self.value = 0.0


class RotaryGesture:
    """Drag session on the wheel ring; samples are angles in degrees."""

    def __init__(self, threshold: float = ROTARY_DETENT_DEG):
        self._acc = StepAccumulator(threshold)
        self._last: Optional[float] = None
        self.active = False

    def begin(self, angle: float) -> bool:
        if self.active:
            return False
        self.active = True
        self._acc.reset()
        self._last = angle if _finite(angle) else None
        return True

    def move(self, angle: float) -> int:
        if not self.active or not _finite(angle):
            return 0
        if self._last is None:
            self._last = angle
            return 0
        delta = signed_delta(self._last, angle)
        self._last = angle
        return self._acc.feed(delta)

    def end(self) -> None:
        self.active = False
        self._last = None
        self._acc.reset()

    @property
    def remainder(self) -> float:
        return self._acc.value


class SurfaceGesture:
    """
    Drag session on the screen surface. Moving the finger up (towards smaller
    y) produces positive steps, like pushing the list upwards.
    """

    def __init__(self, threshold: float = LINEAR_DETENT_PX, tap_slop: float = TAP_SLOP_PX):
        self._acc = StepAccumulator(threshold)
        self._tap_slop = tap_slop
        self._x = 0.0
        self._y = 0.0
        self.active = False
        self.moved = False

    def begin(self, x: float, y: float) -> bool:
        if self.active or not _finite(x, y):
            return False
        self.active = True
        self.moved = False
        self._x, self._y = x, y
        self._acc.reset()
        return True

    def move(self, x: float, y: float, horizontal: bool = False) -> int:
        """
        horizontal: the active screen browses sideways (cover flow); a
        horizontally dominant sample then steps with the x delta.
        """
        if not self.active or not _finite(x, y):
            return 0
        dx = self._x - x
        dy = self._y - y
        self._x, self._y = x, y

        if abs(dx) > self._tap_slop or abs(dy) > self._tap_slop:
            self.moved = True

        delta = dx if (horizontal and abs(dx) > abs(dy)) else dy
        return self._acc.feed(delta)

    def end(self) -> bool:
        """Returns whether the session was a drag rather than a tap."""
        moved = self.moved
        self.active = False
        self.moved = False
        self._acc.reset()
        return moved


def pulse_steps(delta: float, noise_floor: float = PULSE_NOISE_FLOOR) -> int:
    """One step per scroll pulse above the noise floor, no accumulation."""
    if not _finite(delta) or abs(delta) <= noise_floor:
        return 0
    return 1 if delta > 0 else -1
