# bonsaitts

Building blocks for HMM-based speech synthesis in pure Python. Given model
statistics that you already have in memory, the package estimates how many
frames each state lasts and turns per-state Gaussian parameters into smooth
per-frame parameter trajectories.

It has no dependencies outside the standard library and needs Python 3.10 or
later.

## Modules

- `bonsaitts.duration`: `MeanVari` (a mean and a variance, with `with_ivar()`,
  `with_zero()` and `+`), `DurationEstimator` with `create(speed)` and
  `create_with_alignment(times)`, and the functions `estimate_duration` and
  `estimate_duration_with_frame_length`.
- `bonsaitts.label`: `Labels`, a list of label strings with `(start, end)`
  frame times (`-1.0` where a time is unknown). `Labels.from_strings` reads
  lines of the form `label` or `start end label`, with times in units of
  100 ns, and skips empty lines. Errors are raised as `LabelError`,
  `MissingLabelError` and `LengthMismatchError`. Label strings are kept as
  given; their context fields are not parsed.
- `bonsaitts.condition`: `Condition`, the synthesis settings. It has the
  properties `sampling_frequency`, `fperiod`, `volume` (in dB) and
  `volume_gain`, `speed`, `alpha`, `beta`, plus `stage`, `use_log_gain`,
  `phoneme_alignment_flag` and `additional_half_tone`. Per-stream values are
  read with `msd_threshold(i)` and `gv_weight(i)` and set with
  `set_msd_threshold` and `set_gv_weight`. Bounded settings are clamped when
  set. `load_options` takes a model's sampling frequency, frame period, stream
  count and `KEY=VALUE` options (`GAMMA`, `LN_GAIN`, `ALPHA`) and raises
  `OptionParseError` for a bad value. `labels_from_strings` parses label lines
  with the condition's sampling frequency and frame period.
- `bonsaitts.constants`: `MAX_LF0`, `MIN_LF0`, `HALF_TONE`, `DB` and `NODATA`.
- `bonsaitts.mlpg.mask`: `Mask` of voiced frames (`create`, `fill`,
  `boundary_distances`), and the helpers `repeat_by_duration` and `filter_by`.
- `bonsaitts.mlpg.matrix`: `Window`, `max_width`, `MlpgMatrix`
  (`from_parameters`, `solve`, `par`) and `MlpgGlobalVariance` (`apply_gv`).
- `bonsaitts.mlpg.adjust`: `StreamFrame`, `GlobalVariance`, `ModelStream` and
  `MlpgAdjust`, whose `create(durations)` returns one parameter vector per
  frame, with `NODATA` in unvoiced frames.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Examples

Estimating state durations:

```python
from bonsaitts.duration import DurationEstimator, MeanVari

params = [MeanVari(3.2, 1.5), MeanVari(5.0, 2.0), MeanVari(2.1, 0.7)]
estimator = DurationEstimator(params, nstate=3)

estimator.create(1.0)   # durations at normal speed
estimator.create(1.5)   # faster speech, fewer frames in total
```

Reading labels with time alignments:

```python
from bonsaitts.label import Labels

labels = Labels.from_strings(48000, 240, [
    "0 14925000 xx^xx-sil+b=o/A:...",
    "14925000 16725000 xx^sil-b+o=N/A:...",
])
labels.times   # [(0.0, 298.5), (298.5, 334.5)]
```

Masking unvoiced frames:

```python
from bonsaitts.mlpg.mask import Mask

mask = Mask([False, False, True, True, False, True])
list(mask.fill([0, 1, 2], 5))   # [5, 5, 0, 1, 5, 2]
mask.boundary_distances()
```

Smoothing one stream with a static and a delta window:

```python
from bonsaitts.duration import MeanVari
from bonsaitts.mlpg.adjust import MlpgAdjust, ModelStream, StreamFrame
from bonsaitts.mlpg.matrix import Window

windows = [Window((1.0,), 0), Window((-0.5, 0.0, 0.5), 1)]
stream = [
    StreamFrame((MeanVari(1.0, 1.0), MeanVari(0.0, 1.0)), msd=1.0),
    StreamFrame((MeanVari(2.0, 1.0), MeanVari(0.0, 1.0)), msd=1.0),
]
adjust = MlpgAdjust(1.0, 0.5, ModelStream(1, stream, windows))
frames = adjust.create([3, 2])   # five frames, one value each
```

## What the package does not do

It does not read voice model files, does not look up model parameters for
full-context labels, and has no vocoder, so it produces parameter
trajectories, not audio samples. There is no command-line tool; the package is
used as a library.