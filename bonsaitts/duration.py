"""Estimation of per-state durations.

A phoneme is split into a fixed number of states (typically 5); the number
of frames spent in each state is estimated here.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Sequence

logger = logging.getLogger(__name__)

_IVAR_HUGE = 1e19
_IVAR_TINY = 1e-19
_IVAR_MAX = 1e38


@dataclass(frozen=True)
class MeanVari:
    """A Gaussian parameter: mean and variance."""

    mean: float
    vari: float

    def with_ivar(self) -> MeanVari:
        """Return a copy whose second field is the inverse variance."""
        magnitude = abs(self.vari)
        if magnitude > _IVAR_HUGE:
            ivar = 0.0
        elif magnitude < _IVAR_TINY:
            ivar = _IVAR_MAX
        else:
            ivar = 1.0 / self.vari
        return MeanVari(self.mean, ivar)

    def with_zero(self) -> MeanVari:
        """Return a copy whose second field is zero."""
        return MeanVari(self.mean, 0.0)

    def __add__(self, other: MeanVari) -> MeanVari:
        if not isinstance(other, MeanVari):
            return NotImplemented
        return MeanVari(self.mean + other.mean, self.vari + other.vari)

    def __iter__(self):
        yield self.mean
        yield self.vari


def _round_half_away(value: float) -> float:
    return math.copysign(math.floor(abs(value) + 0.5), value)


def _to_frames(value: float) -> int:
    """Round to a frame count of at least one."""
    if math.isnan(value):
        return 1
    rounded = _round_half_away(value)
    if math.isinf(rounded):
        return 1 if rounded < 0 else 2**64 - 1
    return max(int(rounded), 1)


def estimate_duration(parameters: Iterable[MeanVari], rho: float) -> list[int]:
    """Estimate state durations as ``mean + rho * vari``, at least one frame each."""
    return [_to_frames(p.mean + rho * p.vari) for p in parameters]


def estimate_duration_with_frame_length(
    parameters: Sequence[MeanVari], frame_length: float
) -> list[int]:
    """Estimate state durations whose total equals ``frame_length`` frames."""
    size = len(parameters)
    target = _to_frames(frame_length)

    if target <= size:
        return [1] * size
    if not parameters:
        return []

    total = sum(parameters, MeanVari(0.0, 0.0))
    rho = (target - total.mean) / total.vari if total.vari else math.copysign(
        math.inf, target - total.mean
    )

    durations = estimate_duration(parameters, rho)

    def cost(frames: int, param: MeanVari) -> float:
        return abs(rho - (frames - param.mean) / param.vari)

    current = sum(durations)
    while current != target:
        if target > current:
            index = min(
                range(size),
                key=lambda k: cost(durations[k] + 1, parameters[k]),
            )
            durations[index] += 1
            current += 1
        else:
            candidates = [k for k, d in enumerate(durations) if d > 1]
            index = min(
                candidates,
                key=lambda k: cost(durations[k] - 1, parameters[k]),
            )
            durations[index] -= 1
            current -= 1

    return durations


class DurationEstimator:
    """Estimates the duration of each state of a label sequence."""

    def __init__(self, parameters: Sequence[MeanVari], nstate: int) -> None:
        self.parameters = list(parameters)
        self.nstate = nstate

    def create(self, speed: float) -> list[int]:
        """Estimate durations, scaled by ``speed``."""
        durations = estimate_duration(self.parameters, 0.0)
        if speed != 1.0:
            length = sum(durations)
            durations = estimate_duration_with_frame_length(
                self.parameters, length / speed
            )
        return durations

    def create_with_alignment(
        self, times: Sequence[tuple[float, float]]
    ) -> list[int]:
        """Estimate durations that meet the given (start, end) frame alignment."""
        durations: list[int] = []
        frame_count = 0
        next_state = 0
        state = 0
        last = len(times) - 1
        for i, (_start, end) in enumerate(times):
            upper = state + self.nstate
            if end >= 0.0:
                current = estimate_duration_with_frame_length(
                    self.parameters[next_state:upper], end - frame_count
                )
                frame_count += sum(current)
                next_state = upper
                durations.extend(current)
            elif i == last:
                logger.warning("The time of final label is not specified.")
            state = upper
        return durations