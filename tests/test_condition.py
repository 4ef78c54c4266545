import math

import pytest

from bonsaitts.condition import Condition, OptionParseError
from bonsaitts.label import LabelError

LINES = [
    "0 14925000 xx^xx-sil+b=o/A:xx+xx+xx/B:xx-xx_xx/C:xx_xx+xx/D:xx+xx_xx/E:xx_xx!xx_xx-xx/F:xx_xx#xx_xx@xx_xx|xx_xx/G:4_4%0_xx_xx/H:xx_xx/I:xx-xx@xx+xx&xx-xx|xx+xx/J:1_4/K:1+1-4",
    "14925000 16725000 xx^sil-b+o=N/A:-3+1+4/B:xx-xx_xx/C:02_xx+xx/D:xx+xx_xx/E:xx_xx!xx_xx-xx/F:4_4#0_xx@1_1|1_4/G:xx_xx%xx_xx_xx/H:xx_xx/I:1-4@1+1&1-1|1+4/J:xx_xx/K:1+1-4",
]


def loaded(options=(), num_streams=3):
    condition = Condition()
    condition.load_options(48000, 240, num_streams, list(options))
    return condition


def test_defaults():
    condition = Condition()
    assert condition.volume_gain == 1.0
    assert condition.volume == 0.0
    assert condition.speed == 1.0
    assert condition.phoneme_alignment_flag is False
    assert condition.stage == 0
    assert condition.use_log_gain is False


def test_load_options_sets_globals():
    condition = loaded(num_streams=3)
    assert condition.sampling_frequency == 48000
    assert condition.fperiod == 240
    assert [condition.msd_threshold(i) for i in range(3)] == [0.5, 0.5, 0.5]
    assert [condition.gv_weight(i) for i in range(3)] == [1.0, 1.0, 1.0]


def test_load_options_parses_known_keys():
    condition = loaded(["GAMMA=2", "LN_GAIN=1", "ALPHA=0.55"])
    assert condition.stage == 2
    assert condition.use_log_gain is True
    assert condition.alpha == 0.55


def test_load_options_skips_unknown():
    condition = loaded(["SOMETHING=3", "noequals", "LN_GAIN=0"])
    assert condition.use_log_gain is False
    assert condition.stage == 0


@pytest.mark.parametrize(
    "option,key",
    [("GAMMA=-1", "GAMMA"), ("GAMMA=x", "GAMMA"), ("LN_GAIN=2", "LN_GAIN"), ("ALPHA=abc", "ALPHA")],
)
def test_load_options_errors(option, key):
    with pytest.raises(OptionParseError) as info:
        loaded([option])
    assert info.value.key == key


def test_volume_round_trip():
    condition = Condition()
    condition.volume = 6.0
    assert condition.volume == pytest.approx(6.0)
    assert condition.volume_gain > 1.0


def test_speed_has_lower_bound():
    condition = Condition()
    condition.speed = 0.0
    assert condition.speed == 1.0e-06
    condition.speed = 1.4
    assert condition.speed == 1.4


def test_alpha_beta_clamped():
    condition = Condition()
    condition.alpha = 2.0
    condition.beta = -1.0
    assert condition.alpha == 1.0
    assert condition.beta == 0.0


def test_sampling_and_fperiod_at_least_one():
    condition = Condition()
    condition.sampling_frequency = 0
    condition.fperiod = 0
    assert condition.sampling_frequency == 1
    assert condition.fperiod == 1


def test_msd_and_gv_setters_clamp():
    condition = loaded()
    condition.set_msd_threshold(1, 1.5)
    condition.set_gv_weight(2, -0.5)
    assert condition.msd_threshold(1) == 1.0
    assert condition.gv_weight(2) == 0.0
    condition.set_gv_weight(0, 0.7)
    assert condition.gv_weight(0) == 0.7


def test_msd_threshold_out_of_range_index():
    condition = loaded(num_streams=2)
    with pytest.raises(IndexError):
        condition.set_msd_threshold(5, 0.3)


def test_labels_from_strings():
    labels = loaded().labels_from_strings(LINES)
    assert len(labels) == 2
    assert labels.times[0] == pytest.approx((0.0, 298.5))
    assert labels.times[1] == pytest.approx((298.5, 334.5))


def test_labels_from_strings_bad_time():
    with pytest.raises(LabelError):
        loaded().labels_from_strings(["abc 10 label"])


def test_additional_half_tone_is_plain_value():
    condition = Condition()
    condition.additional_half_tone = -3.5
    assert math.isclose(condition.additional_half_tone, -3.5)