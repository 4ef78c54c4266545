"""Sequences of full-context labels with optional time alignments."""

from __future__ import annotations

import re
from typing import Iterable, Sequence

_FLOAT = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf|infinity|nan)",
    re.IGNORECASE,
)


class LabelError(ValueError):
    """Raised when labels cannot be parsed."""


class MissingLabelError(LabelError):
    """A line held times but no full-context label."""

    def __init__(self, line: str) -> None:
        super().__init__(f"Expected a fullcontext-label in {line}")
        self.line = line


class LengthMismatchError(LabelError):
    """The number of times differs from the number of labels."""

    def __init__(self) -> None:
        super().__init__("The length of `times` and `labels` must be the same")


def _parse_float(text: str) -> float:
    if not _FLOAT.fullmatch(text):
        raise LabelError("Failed to parse as floating-point number")
    return float(text)


class Labels:
    """Labels (one per phoneme) with their (start, end) frame times.

    An unknown time is stored as -1.0.
    """

    def __init__(
        self,
        labels: Iterable[str],
        times: Iterable[tuple[float, float]] | None = None,
    ) -> None:
        self.labels: list[str] = list(labels)
        if times is None:
            self.times: list[tuple[float, float]] = [(-1.0, -1.0)] * len(self.labels)
            return

        spans = [[start, end] for start, end in times]
        if len(spans) != len(self.labels):
            raise LengthMismatchError()

        for current, following in zip(spans, spans[1:]):
            if current[1] < 0.0 <= following[0]:
                current[1] = following[0]
            elif following[0] < 0.0 <= current[1]:
                following[0] = current[1]

        self.times = [
            (start if start >= 0.0 else -1.0, end if end >= 0.0 else -1.0)
            for start, end in spans
        ]

    @classmethod
    def from_strings(
        cls, sampling_rate: int, fperiod: int, lines: Sequence[str]
    ) -> Labels:
        """Parse lines of ``label`` or ``start end label``.

        Times are in units of 100 ns and are converted to frames. Empty lines
        are skipped.
        """
        rate = sampling_rate / (fperiod * 1e7)
        labels: list[str] = []
        times: list[tuple[float, float]] = []

        for line in lines:
            parts = line.split(" ", 2)
            if len(parts) >= 2:
                if len(parts) < 3:
                    raise MissingLabelError(line)
                start = _parse_float(parts[0]) * rate
                end = _parse_float(parts[1]) * rate
                times.append((start, end))
                labels.append(parts[2])
            elif not parts[0]:
                continue
            else:
                times.append((-1.0, -1.0))
                labels.append(parts[0])

        return cls(labels, times)

    def __len__(self) -> int:
        return len(self.labels)