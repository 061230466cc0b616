"""Shared fakes for the test suite."""

import random

from robohand.gesture_utils import FINGER_PIPS, FINGERTIPS

OPEN = True
CLOSED = False


def make_hand(index=CLOSED, middle=CLOSED, ring=CLOSED, pinky=CLOSED):
    """21 (x, y, z) points with the four fingers open or curled as asked."""
    points = [[0.5, 0.5, 0.0] for _ in range(21)]
    points[0] = [0.5, 0.9, 0.0]
    for is_open, tip, pip in zip((index, middle, ring, pinky), FINGERTIPS, FINGER_PIPS):
        points[pip][1] = 0.6
        points[tip][1] = 0.3 if is_open else 0.7
    return [tuple(p) for p in points]


class FakeLandmark:
    def __init__(self, x, y, z):
        self.x = x
        self.y = y
        self.z = z


class FakeLandmarkList:
    """Quacks like a MediaPipe NormalizedLandmarkList."""

    def __init__(self, points):
        self.landmark = [FakeLandmark(*p) for p in points]


class FixedRandom(random.Random):
    """random() always returns ``value``; choice() still works from seed 0."""

    def __init__(self, value):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


class _Handle:
    def __init__(self, delay, callback, args):
        self.delay = delay
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.callback(*self.args)


class ManualScheduler:
    """Timers that only fire when the test says so."""

    def __init__(self):
        self.handles = []

    def call_later(self, delay, callback, *args):
        handle = _Handle(delay, callback, args)
        self.handles.append(handle)
        return handle

    @property
    def pending(self):
        return [h for h in self.handles if not h.cancelled]

    def fire_next(self):
        handle = self.pending[0]
        self.handles.remove(handle)
        handle.fire()
        return handle

    def run_all(self, limit=100):
        fired = 0
        while self.pending and fired < limit:
            self.fire_next()
            fired += 1
        return fired
