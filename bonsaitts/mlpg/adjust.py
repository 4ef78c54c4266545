"""Generation of smoothed stream parameters.

Unvoiced frames are found from the multi-space distribution weights, and the
remaining frames are smoothed by MLPG with optional global variance.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple, Optional, Sequence

from bonsaitts.constants import NODATA
from bonsaitts.duration import MeanVari
from bonsaitts.mlpg.mask import Mask, filter_by, repeat_by_duration
from bonsaitts.mlpg.matrix import MlpgMatrix, Window


@dataclass(frozen=True)
class StreamFrame:
    """Parameters of one state.

    ``values[vector_length * window_index + vector_index]`` holds the mean
    and variance of one vector element under one window; ``msd`` is the
    voiced weight of the state.
    """

    values: tuple[MeanVari, ...]
    msd: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))


class GlobalVariance(NamedTuple):
    """Global variance parameters per vector element and switches per state."""

    parameters: Sequence[MeanVari]
    switch: Sequence[bool]


@dataclass
class ModelStream:
    """A stream of state parameters with its windows and global variance."""

    vector_length: int
    stream: Sequence[StreamFrame]
    windows: Sequence[Window]
    gv: Optional[GlobalVariance] = field(default=None)


class MlpgAdjust:
    """Generates per-frame parameter vectors for one stream."""

    def __init__(
        self, gv_weight: float, msd_threshold: float, model_stream: ModelStream
    ) -> None:
        self.gv_weight = gv_weight
        self.msd_threshold = msd_threshold
        self.vector_length = model_stream.vector_length
        self.stream = list(model_stream.stream)
        self.gv = model_stream.gv
        self.windows = list(model_stream.windows)

    def create(self, durations: Sequence[int]) -> list[list[float]]:
        """Return one parameter vector per frame; unvoiced frames hold NODATA."""
        durations = list(durations)
        msd_flag = Mask.create(
            (frame.msd for frame in self.stream), self.msd_threshold, durations
        )
        boundaries = msd_flag.boundary_distances()
        pars = [[0.0] * self.vector_length for _ in range(len(msd_flag))]

        for vector_index in range(self.vector_length):
            parameters = [
                self._window_parameters(
                    window_index, window, vector_index, durations, boundaries, msd_flag
                )
                for window_index, window in enumerate(self.windows)
            ]
            mtx = MlpgMatrix.from_parameters(self.windows, parameters)
            solution = mtx.par(
                self.gv, vector_index, self.gv_weight, durations, msd_flag
            )
            for row, value in zip(pars, msd_flag.fill(solution, NODATA)):
                row[vector_index] = value

        return pars

    def _window_parameters(
        self,
        window_index: int,
        window: Window,
        vector_index: int,
        durations: Sequence[int],
        boundaries: Sequence[tuple[int, int]],
        msd_flag: Mask,
    ) -> list[MeanVari]:
        m = self.vector_length * window_index + vector_index
        per_frame = repeat_by_duration(
            (frame.values[m].with_ivar() for frame in self.stream), durations
        )

        def masked(mean_ivar: MeanVari, left: int, right: int) -> MeanVari:
            # Dynamic windows that reach unvoiced frames are ignored.
            near_boundary = left < window.left_width or right < window.right_width
            if near_boundary and window_index != 0:
                return mean_ivar.with_zero()
            return mean_ivar

        adjusted = (
            masked(mean_ivar, left, right)
            for mean_ivar, (left, right) in zip(per_frame, boundaries)
        )
        return list(filter_by(adjusted, msd_flag))