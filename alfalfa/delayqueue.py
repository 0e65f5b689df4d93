"""Trace-driven link emulation queues.

A packet written to a queue first waits a fixed propagation delay, then
waits for delivery opportunities taken from a schedule of millisecond
timestamps. ``ServiceDelayQueue`` delivers one whole packet per
opportunity; ``ByteDelayQueue`` grants a byte budget per opportunity and
lets a packet accumulate budget across several opportunities.
"""

from __future__ import annotations

import logging
import re
import time
from collections import deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from os import PathLike

logger = logging.getLogger(__name__)

SERVICE_PACKET_SIZE = 1500
INT_MAX = (1 << 31) - 1
IDLE_WAIT_MS = 100

_UNSIGNED = re.compile(r"\+?[0-9]+")


def _timestamp() -> int:
    return int(time.monotonic() * 1000)


def load_schedule(path: str | PathLike[str], base_timestamp: int) -> list[int]:
    """Read a delivery schedule of millisecond offsets and shift it by ``base_timestamp``.

    Reading stops at the first token that is not an unsigned integer.
    Raises ValueError if the times are not in non-decreasing order.
    """
    schedule: list[int] = []
    with open(path, encoding="ascii", errors="replace") as handle:
        for token in handle.read().split():
            if not _UNSIGNED.fullmatch(token):
                break
            ms = int(token) + base_timestamp
            if schedule and ms < schedule[-1]:
                raise ValueError(f"schedule is not in order at {token}")
            schedule.append(ms)
    logger.info("Initialized %s queue with %d services.", path, len(schedule))
    return schedule


@dataclass
class DelayedPacket:
    """A packet with the time it entered the queue and the time its delay ends."""

    entry_time: int
    release_time: int
    contents: bytes


@dataclass
class _PartialPacket:
    bytes_earned: int
    packet: DelayedPacket


class _DelayQueue:
    def __init__(
        self,
        name: str,
        ms_delay: int,
        schedule: Iterable[int],
        clock: Callable[[], int] | None = None,
    ) -> None:
        self.name = name
        self.ms_delay = ms_delay
        self._clock = clock if clock is not None else _timestamp
        self._delay: deque[DelayedPacket] = deque()
        self._pdp: deque[DelayedPacket] = deque()
        self._schedule: deque[int] = deque(schedule)
        self._delivered: list[bytes] = []
        self._total = 0
        self._used = 0
        self._bin_sec = self._clock() // 1000

    def write(self, packet: bytes) -> None:
        """Put a packet into the queue; its delay starts now."""
        now = self._clock()
        self._delay.append(DelayedPacket(now, now + self.ms_delay, bytes(packet)))

    def read(self) -> list[bytes]:
        """Return the packets delivered since the last read, in order."""
        self._tick()
        delivered, self._delivered = self._delivered, []
        return delivered

    def _tick(self) -> None:
        raise NotImplementedError

    def _release_delayed(self, now: int) -> None:
        while self._delay and self._delay[0].release_time <= now:
            self._pdp.append(self._delay.popleft())

    def _log_delivery(self, packet: DelayedPacket, now: int) -> None:
        logger.info("%s %f delivery %d", self.name, now / 1000.0, now - packet.entry_time)
        self._delivered.append(packet.contents)

    def _roll_bins(self, now: int) -> None:
        while now // 1000 > self._bin_sec:
            share = 100.0 * self._used / self._total if self._total else 0.0
            logger.info(
                "%s %d %d / %d = %.1f %%",
                self.name, self._bin_sec, self._used, self._total, share,
            )
            self._total = 0
            self._used = 0
            self._bin_sec += 1


class ServiceDelayQueue(_DelayQueue):
    """Delivers at most one whole packet per scheduled opportunity."""

    def __init__(
        self,
        name: str,
        ms_delay: int,
        schedule: Iterable[int],
        clock: Callable[[], int] | None = None,
    ) -> None:
        super().__init__(name, ms_delay, schedule, clock)

    def write(self, packet: bytes) -> None:
        """Put a packet into the queue; its delay starts now."""
        super().write(packet)

    def read(self) -> list[bytes]:
        """Return the packets delivered since the last read, in order."""
        return super().read()

    def wait_time(self) -> int:
        """Milliseconds until the queue next needs attention."""
        delay_wait = IDLE_WAIT_MS
        pdp_wait = IDLE_WAIT_MS
        if self._delay:
            delay_wait = max(0, self._delay[0].release_time - self._clock())
        self._prune_schedule()
        if self._pdp and self._schedule:
            pdp_wait = self._schedule[0] - self._clock()
        return min(delay_wait, pdp_wait)

    def _prune_schedule(self) -> None:
        now = self._clock()
        while self._schedule and self._schedule[0] < now:
            self._schedule.popleft()
            self._total += 1

    def _tick(self) -> None:
        self._prune_schedule()
        now = self._clock()
        self._release_delayed(now)
        while self._pdp and self._schedule and self._schedule[0] <= now:
            packet = self._pdp.popleft()
            self._schedule.popleft()
            self._total += 1
            self._used += 1
            self._log_delivery(packet, now)
        self._roll_bins(now)


class ByteDelayQueue(_DelayQueue):
    """Grants a budget of bytes per scheduled opportunity."""

    def __init__(
        self,
        name: str,
        ms_delay: int,
        schedule: Iterable[int],
        clock: Callable[[], int] | None = None,
    ) -> None:
        super().__init__(name, ms_delay, schedule, clock)
        self._limbo: _PartialPacket | None = None

    def write(self, packet: bytes) -> None:
        """Put a packet into the queue; its delay starts now."""
        super().write(packet)

    def read(self) -> list[bytes]:
        """Return the packets delivered since the last read, in order."""
        return super().read()

    def wait_time(self) -> int:
        """Milliseconds until the queue next needs attention."""
        delay_wait = INT_MAX
        schedule_wait = INT_MAX
        now = self._clock()
        self._tick()
        if self._delay:
            delay_wait = max(0, self._delay[0].release_time - now)
        if self._schedule:
            schedule_wait = max(0, self._schedule[0] - now)
        return min(delay_wait, schedule_wait)

    def _deliver(self, packet: DelayedPacket, now: int) -> None:
        size = len(packet.contents)
        self._total += size
        self._used += size
        self._log_delivery(packet, now)

    def _tick(self) -> None:
        now = self._clock()
        self._release_delayed(now)

        while self._schedule and self._schedule[0] <= now:
            self._schedule.popleft()
            budget = SERVICE_PACKET_SIZE

            if self._limbo is not None:
                partial = self._limbo
                size = len(partial.packet.contents)
                if partial.bytes_earned + budget >= size:
                    self._deliver(partial.packet, now)
                    budget -= size - partial.bytes_earned
                    self._limbo = None
                else:
                    partial.bytes_earned += budget
                    budget = 0

            while budget > 0:
                if not self._pdp:
                    self._total += budget
                    budget = 0
                    continue
                packet = self._pdp.popleft()
                if budget >= len(packet.contents):
                    self._deliver(packet, now)
                    budget -= len(packet.contents)
                else:
                    self._limbo = _PartialPacket(budget, packet)
                    budget = 0

        self._roll_bins(now)