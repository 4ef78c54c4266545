"""Masks for unvoiced frames.

Frames are voiced when the multi-space distribution weight of their state
exceeds a threshold.
"""

from __future__ import annotations

from itertools import compress, repeat
from typing import Iterable, Iterator, TypeVar

T = TypeVar("T")


def repeat_by_duration(items: Iterable[T], durations: Iterable[int]) -> Iterator[T]:
    """Repeat each item as many times as its duration."""
    for item, duration in zip(items, durations):
        yield from repeat(item, duration)


def filter_by(items: Iterable[T], mask: Iterable[bool]) -> Iterator[T]:
    """Keep the items whose mask flag is true."""
    return compress(items, mask)


class Mask:
    """Per-frame flags; true marks a voiced frame."""

    def __init__(self, flags: Iterable[bool]) -> None:
        self.flags: tuple[bool, ...] = tuple(bool(flag) for flag in flags)

    @classmethod
    def create(
        cls, msd_values: Iterable[float], threshold: float, durations: Iterable[int]
    ) -> Mask:
        """Build a frame mask from per-state MSD weights and state durations."""
        return cls(
            repeat_by_duration((msd > threshold for msd in msd_values), durations)
        )

    def fill(self, masked: Iterable[T], default: T) -> Iterator[T]:
        """Spread ``masked`` over the true frames, ``default`` elsewhere.

        Raises ValueError when ``masked`` holds fewer values than true flags.
        """
        values = iter(masked)
        for flag in self.flags:
            if flag:
                try:
                    yield next(values)
                except StopIteration:
                    raise ValueError(
                        "masked must hold as many values as the mask has true flags"
                    ) from None
            else:
                yield default

    def boundary_distances(self) -> list[tuple[int, int]]:
        """Distances of each true frame from the edges of its run.

        False frames get (0, 0).
        """
        size = len(self.flags)
        lefts = [0] * size
        rights = [0] * size

        left = 0
        for frame, flag in enumerate(self.flags):
            if flag:
                lefts[frame] = frame - left
            else:
                left = frame + 1

        right = size - 1
        for frame in reversed(range(size)):
            if self.flags[frame]:
                rights[frame] = right - frame
            else:
                right = frame - 1

        return list(zip(lefts, rights))

    def __len__(self) -> int:
        return len(self.flags)

    def __iter__(self) -> Iterator[bool]:
        return iter(self.flags)