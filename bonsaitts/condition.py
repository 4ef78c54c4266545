"""Settings that control voice synthesis."""

from __future__ import annotations

import logging
import math
import re
from typing import Iterable, Sequence

from bonsaitts.constants import DB
from bonsaitts.label import Labels

logger = logging.getLogger(__name__)

_UNSIGNED = re.compile(r"\+?\d+")
_FLOAT = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf|infinity|nan)",
    re.IGNORECASE,
)

_MIN_SPEED = 1.0e-06


class OptionParseError(ValueError):
    """An option stored in a voice model could not be parsed."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Failed to parse option {key}")
        self.key = key


def _clamp_unit(value: float) -> float:
    return min(max(value, 0.0), 1.0)


class Condition:
    """Configuration of voice synthesis.

    Volume is exposed in dB and stored as a linear gain; the setters of
    bounded settings clamp their values into range.
    """

    def __init__(self) -> None:
        self._sampling_frequency = 0
        self._fperiod = 0
        self._volume_gain = 1.0
        self._msd_threshold: list[float] = []
        self._gv_weight: list[float] = []
        self.phoneme_alignment_flag = False
        self._speed = 1.0
        #: If stage is 0 then gamma is 0, otherwise gamma is -1/stage.
        self.stage = 0
        #: Log gain flag (for LSP).
        self.use_log_gain = False
        self._alpha = 0.0
        self._beta = 0.0
        self.additional_half_tone = 0.0

    def load_options(
        self,
        sampling_frequency: int,
        frame_period: int,
        num_streams: int,
        options: Iterable[str],
    ) -> None:
        """Load the defaults of a voice model.

        ``options`` are the ``KEY=VALUE`` options of the spectrum stream.
        """
        self._sampling_frequency = sampling_frequency
        self._fperiod = frame_period
        self._msd_threshold = [0.5] * num_streams
        self._gv_weight = [1.0] * num_streams

        for option in options:
            key, sep, value = option.partition("=")
            if not sep:
                logger.warning("Skipped unrecognized option %s.", option)
                continue
            if key == "GAMMA":
                if not _UNSIGNED.fullmatch(value):
                    raise OptionParseError(key)
                self.stage = int(value)
            elif key == "LN_GAIN":
                if value == "1":
                    self.use_log_gain = True
                elif value == "0":
                    self.use_log_gain = False
                else:
                    raise OptionParseError(key)
            elif key == "ALPHA":
                if not _FLOAT.fullmatch(value):
                    raise OptionParseError(key)
                self._alpha = float(value)
            else:
                logger.warning("Skipped unrecognized option %s.", option)

    @property
    def sampling_frequency(self) -> int:
        """Sampling frequency in Hz (at least 1 when set)."""
        return self._sampling_frequency

    @sampling_frequency.setter
    def sampling_frequency(self, value: int) -> None:
        self._sampling_frequency = max(value, 1)

    @property
    def fperiod(self) -> int:
        """Frame shift in points (at least 1 when set)."""
        return self._fperiod

    @fperiod.setter
    def fperiod(self, value: int) -> None:
        self._fperiod = max(value, 1)

    @property
    def volume(self) -> float:
        """Volume in dB; 0.0 by default."""
        return math.log(self._volume_gain) / DB

    @volume.setter
    def volume(self, value: float) -> None:
        self._volume_gain = math.exp(value * DB)

    @property
    def volume_gain(self) -> float:
        """Volume as a linear amplitude factor."""
        return self._volume_gain

    def msd_threshold(self, stream_index: int) -> float:
        """Threshold for the multi-space distribution of a stream."""
        return self._msd_threshold[stream_index]

    def set_msd_threshold(self, stream_index: int, value: float) -> None:
        """Set the MSD threshold of a stream, clamped to [0, 1]."""
        self._msd_threshold[stream_index] = _clamp_unit(value)

    def gv_weight(self, stream_index: int) -> float:
        """Global variance weight of a stream."""
        return self._gv_weight[stream_index]

    def set_gv_weight(self, stream_index: int, value: float) -> None:
        """Set the global variance weight of a stream, at least 0."""
        self._gv_weight[stream_index] = max(value, 0.0)

    @property
    def speed(self) -> float:
        """Speech speed; 1.0 by default.

        Near-zero values make synthesis extremely slow and memory hungry.
        """
        return self._speed

    @speed.setter
    def speed(self, value: float) -> None:
        self._speed = max(value, _MIN_SPEED)

    @property
    def alpha(self) -> float:
        """Frequency warping parameter."""
        return self._alpha

    @alpha.setter
    def alpha(self, value: float) -> None:
        self._alpha = _clamp_unit(value)

    @property
    def beta(self) -> float:
        """Postfiltering coefficient."""
        return self._beta

    @beta.setter
    def beta(self, value: float) -> None:
        self._beta = _clamp_unit(value)

    def labels_from_strings(self, lines: Sequence[str]) -> Labels:
        """Parse label lines using this condition's sampling rate and frame period."""
        return Labels.from_strings(self._sampling_frequency, self._fperiod, lines)