"""Time source and game id generation."""

import itertools
import time
import uuid
from typing import Protocol


class Clock(Protocol):
    """Source of the current time in seconds."""

    def now(self) -> float: ...


class SystemClock:
    """Wall-clock time."""

    def now(self) -> float:
        return time.time()


class GameIdGenerator:
    """Generates game ids that never repeat within the process.

    Ids combine the creation time in milliseconds, a process-wide counter and
    a random suffix, e.g. ``1718031234567-000042-9f2c1ab0``.
    """

    def __init__(self, clock: Clock = None):
        self._clock = clock or SystemClock()
        self._counter = itertools.count(1)

    def new_game_id(self) -> str:
        millis = int(self._clock.now() * 1000)
        return f"{millis}-{next(self._counter):06d}-{uuid.uuid4().hex[:8]}"
