"""Numeric constants shared by the synthesis stages."""

import math

#: log(20000.0), the upper bound of log F0.
MAX_LF0: float = 9.903_487_552_536_127
#: log(20.0), the lower bound of log F0.
MIN_LF0: float = 2.995_732_273_553_991

#: log(2.0) / 12.0, one half tone on the log-frequency scale.
HALF_TONE: float = 0.057_762_265_046_662_11
#: log(10.0) / 20.0, converts decibels to natural-log amplitude.
DB: float = 0.115_129_254_649_702_28

#: Marker for frames that carry no parameter value.
NODATA: float = -1e10

__all__ = ["MAX_LF0", "MIN_LF0", "HALF_TONE", "DB", "NODATA", "math"]