"""Maximum likelihood parameter generation (MLPG) with global variance.

The static feature sequence ``c`` is the solution of
``W^T U^-1 W c = W^T U^-1 mu``, where ``W`` holds the delta windows and
``(mu, U)`` are the per-frame means and variances of all windows.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence

from bonsaitts.duration import MeanVari
from bonsaitts.mlpg.mask import Mask, filter_by, repeat_by_duration

_W1 = 1.0
_W2 = 1.0

_GV_MAX_ITERATION = 5
_STEP_INIT = 0.1
_STEP_DEC = 0.5
_STEP_INC = 1.2


def _div(numerator: float, denominator: float) -> float:
    """Divide with IEEE semantics for a zero denominator."""
    if denominator != 0.0:
        return numerator / denominator
    if numerator == 0.0 or math.isnan(numerator) or math.isnan(denominator):
        return math.nan
    return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


def _sqrt(value: float) -> float:
    return math.sqrt(value) if value >= 0.0 else math.nan


@dataclass(frozen=True)
class Window:
    """A regression window.

    ``coefficients[i]`` weighs the static feature at offset
    ``i - left_width`` from the current frame.
    """

    coefficients: tuple[float, ...]
    left_width: int

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "coefficients", tuple(float(c) for c in self.coefficients)
        )
        if not 0 <= self.left_width < len(self.coefficients):
            raise ValueError("left_width must index one of the coefficients")

    @property
    def right_width(self) -> int:
        """Number of coefficients right of the centre."""
        return len(self.coefficients) - 1 - self.left_width

    def iter_rev(self, start: int = 0) -> Iterator[tuple[int, int, float]]:
        """Yield ``(index, position, coefficient)`` from ``index == start`` on.

        Frame ``t`` receives a contribution from the observation at frame
        ``t - position``.
        """
        for index, coefficient in enumerate(self.coefficients[start:], start):
            yield index, index - self.left_width, coefficient


def max_width(windows: Iterable[Window]) -> int:
    """Largest one-sided width among the windows."""
    return max((max(w.left_width, w.right_width) for w in windows), default=0)


@dataclass
class MlpgMatrix:
    """Band matrix ``W^T U^-1 W`` and vector ``W^T U^-1 mu``."""

    win_size: int
    length: int
    width: int
    wuw: list[list[float]]
    wum: list[float]

    @classmethod
    def from_parameters(
        cls,
        windows: Sequence[Window],
        parameters: Sequence[Sequence[MeanVari]],
    ) -> MlpgMatrix:
        """Build the matrices from per-window sequences of (mean, inverse variance)."""
        windows = list(windows)
        parameters = [list(p) for p in parameters]
        if not windows:
            raise ValueError("at least one window is required")
        if len(parameters) != len(windows):
            raise ValueError("one parameter sequence is required per window")

        length = len(parameters[0])
        width = max_width(windows) * 2 + 1
        wuw: list[list[float]] = []
        wum: list[float] = []

        for t in range(length):
            row = [0.0] * width
            acc = 0.0
            for window, params in zip(windows, parameters):
                for index, position, coef in window.iter_rev(0):
                    if coef == 0.0:
                        continue
                    source = t - position
                    if not 0 <= source < length:
                        continue
                    param = params[source]
                    wu = coef * param.vari
                    acc += wu * param.mean
                    for inner_index, _, inner_coef in window.iter_rev(index):
                        if inner_coef == 0.0:
                            continue
                        j = inner_index - index
                        if t + j >= length:
                            break
                        row[j] += wu * inner_coef
            wuw.append(row)
            wum.append(acc)

        return cls(
            win_size=len(windows), length=length, width=width, wuw=wuw, wum=wum
        )

    def solve(self) -> list[float]:
        """Solve ``W^T U^-1 W c = W^T U^-1 mu`` for ``c``."""
        factor = [row[:] for row in self.wuw]
        self._ldl_factorize(factor)
        return self._substitute(factor)

    def _ldl_factorize(self, factor: list[list[float]]) -> None:
        width = self.width
        for t, row in enumerate(factor):
            for i in range(1, min(width, t + 1)):
                prev = factor[t - i]
                row[0] -= prev[i] * prev[i] * prev[0]
            for i in range(1, width):
                for j in range(1, min(width - i, t + 1)):
                    prev = factor[t - j]
                    row[i] -= prev[j] * prev[i + j] * prev[0]
                row[i] = _div(row[i], row[0])

    def _substitute(self, factor: list[list[float]]) -> list[float]:
        width = self.width
        length = self.length

        forward: list[float] = []
        for t, value in enumerate(self.wum):
            for i in range(1, min(width, t + 1)):
                value -= factor[t - i][i] * forward[t - i]
            forward.append(value)

        par = [0.0] * length
        for t in reversed(range(length)):
            value = _div(forward[t], factor[t][0])
            for i in range(1, min(width, length - t)):
                value -= factor[t][i] * par[t + i]
            par[t] = value
        return par

    def par(
        self,
        gv,
        vector_index: int,
        gv_weight: float,
        durations: Sequence[int],
        msd_flag: Mask,
    ) -> list[float]:
        """Solve the system and, when ``gv`` is given, apply global variance.

        ``gv`` is ``None`` or a pair of per-element (mean, variance)
        parameters and per-state switches.
        """
        solution = self.solve()
        if gv is None:
            return solution
        gv_parameters, gv_switch = gv
        expanded = list(filter_by(repeat_by_duration(gv_switch, durations), msd_flag))
        gv_param = gv_parameters[vector_index]
        return MlpgGlobalVariance(self, solution, expanded).apply_gv(
            gv_param.mean * gv_weight, gv_param.vari
        )


class MlpgGlobalVariance:
    """Refines a parameter sequence towards a target global variance."""

    def __init__(
        self, mtx: MlpgMatrix, par: Iterable[float], gv_switch: Iterable[bool]
    ) -> None:
        self._mtx = mtx
        self._par = list(par)
        self._switch = [bool(s) for s in gv_switch]
        if len(self._par) != mtx.length or len(self._switch) != mtx.length:
            raise ValueError("par and gv_switch must match the matrix length")
        self._gv_length = sum(self._switch)

    def apply_gv(self, gv_mean: float, gv_vari: float) -> list[float]:
        """Apply global variance to the parameters and return them."""
        self._parmgen(gv_mean, gv_vari)
        return list(self._par)

    def _switched(self) -> list[float]:
        return [p for p, on in zip(self._par, self._switch) if on]

    def _calc_gv(self) -> tuple[float, float]:
        values = self._switched()
        mean = sum(values) / self._gv_length
        vari = sum((p - mean) * (p - mean) for p in values) / self._gv_length
        return mean, vari

    def _conv_gv(self, gv_mean: float) -> None:
        mean, vari = self._calc_gv()
        ratio = _sqrt(_div(gv_mean, vari))
        self._par = [
            ratio * (p - mean) + mean if on else p
            for p, on in zip(self._par, self._switch)
        ]

    def _hmmobj_derivative(self) -> tuple[float, list[float]]:
        mtx = self._mtx
        length, width, wuw = mtx.length, mtx.width, mtx.wuw
        par = self._par

        g: list[float] = []
        for t, p in enumerate(par):
            value = wuw[t][0] * p
            for i in range(1, width):
                if t + i < length:
                    value += wuw[t][i] * par[t + i]
                if t >= i:
                    value += wuw[t - i][i] * par[t - i]
            g.append(value)

        w = 1.0 / (mtx.win_size * length)
        hmmobj = 0.0
        for p, wum, gt in zip(par, mtx.wum, g):
            hmmobj += _W1 * w * p * (wum - 0.5 * gt)
        return hmmobj, g

    def _next_step(
        self,
        g: list[float],
        step: float,
        mean: float,
        vari: float,
        gv_mean: float,
        gv_vari: float,
    ) -> None:
        mtx = self._mtx
        length = mtx.length
        w = 1.0 / (mtx.win_size * length)
        dv = -2.0 * gv_vari * (vari - gv_mean) / length

        updated: list[float] = []
        for p, on, gt, row, wum in zip(self._par, self._switch, g, mtx.wuw, mtx.wum):
            h = -_W1 * w * row[0] - _W2 * 2.0 / (length * length) * (
                (length - 1) * gv_vari * (vari - gv_mean)
                + 2.0 * gv_vari * (p - mean) * (p - mean)
            )
            gradient = _W1 * w * (-gt + wum)
            if on:
                gradient += _W2 * dv * (p - mean)
            updated.append(p + step * (_div(1.0, h) * gradient))
        self._par = updated

    def _parmgen(self, gv_mean: float, gv_vari: float) -> None:
        if self._gv_length == 0:
            return

        step = _STEP_INIT
        prev = 0.0
        self._conv_gv(gv_mean)
        for iteration in range(1, _GV_MAX_ITERATION + 1):
            mean, vari = self._calc_gv()
            gvobj = -0.5 * _W2 * vari * gv_vari * (vari - 2.0 * gv_mean)
            hmmobj, g = self._hmmobj_derivative()
            obj = -(hmmobj + gvobj)

            if iteration > 1:
                if obj > prev:
                    step *= _STEP_DEC
                elif obj < prev:
                    step *= _STEP_INC

            self._next_step(g, step, mean, vari, gv_mean, gv_vari)
            prev = obj