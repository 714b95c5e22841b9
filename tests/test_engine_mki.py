import pytest

from dexfm.engine_mki import (
    FeedbackBuffer,
    MkIEngine,
    OperatorParams,
    mki_sin,
    mki_sin_log,
)

QUARTER = 1024 << 12
HALF = 2048 << 12


def test_sin_log_peak_has_no_attenuation():
    assert mki_sin_log(1023) == 0


def test_sin_log_negative_half_carries_sign_bit():
    assert mki_sin_log(3071) == 0x8000


@pytest.mark.parametrize("k", [0, 1, 17, 300, 511, 900, 1023])
def test_sin_log_quarter_symmetry(k):
    assert mki_sin_log(k) == mki_sin_log(2047 - k)
    assert mki_sin_log(k + 2048) == mki_sin_log(k) | 0x8000
    assert mki_sin_log(4095 - k) == mki_sin_log(k) | 0x8000


def test_sin_log_rises_towards_quarter_wave():
    values = [mki_sin_log(k) for k in range(1024)]
    assert values == sorted(values, reverse=True)
    assert mki_sin_log(1024) == mki_sin_log(1023)


@pytest.mark.parametrize("phi", [0, 100, 512, 1500, 2000])
@pytest.mark.parametrize("env", [0, 300, 2048, 5000])
def test_sin_negative_half_mirrors_positive(phi, env):
    phase = phi << 12
    positive = mki_sin(phase, env)
    assert positive >= 0
    assert mki_sin(phase + HALF, env) == -positive - (1 << 13)


@pytest.mark.parametrize("env", [0, 100, 1000, 4000, 9000])
def test_sin_env_step_of_1024_halves_output(env):
    phase = 512 << 12
    louder = mki_sin(phase, env) >> 13
    quieter = mki_sin(phase, env + 1024) >> 13
    assert quieter == louder >> 1


def test_sin_magnitude_decreases_with_attenuation():
    phase = 512 << 12
    values = [mki_sin(phase, env) for env in range(0, 20000, 37)]
    assert values == sorted(values, reverse=True)
    assert values[-1] == 0


def test_sin_output_is_multiple_of_output_step():
    for phi in range(0, 4096, 97):
        assert mki_sin(phi << 12, 700) % (1 << 13) == 0


@pytest.mark.parametrize("size", [0, -4, 3, 48])
def test_engine_rejects_bad_block_size(size):
    with pytest.raises(ValueError):
        MkIEngine(size)


def test_compute_pure_length_and_add():
    engine = MkIEngine(16)
    base = engine.compute_pure(0, 1 << 18, 500, 600)
    offset = list(range(16))
    added = engine.compute_pure(0, 1 << 18, 500, 600, add_to=offset)
    assert len(base) == 16
    assert added == [a + b for a, b in zip(base, offset)]


def test_compute_pure_rejects_wrong_add_length():
    engine = MkIEngine(8)
    with pytest.raises(ValueError):
        engine.compute_pure(0, 1000, 0, 0, add_to=[0] * 7)


def test_compute_with_constant_modulator_shifts_phase():
    engine = MkIEngine(32)
    shift = 123 << 12
    modulated = engine.compute([shift] * 32, 5 << 12, 3 << 16, 200, 800)
    assert modulated == engine.compute_pure((5 << 12) + shift, 3 << 16, 200, 800)


def test_compute_with_zero_modulator_matches_pure():
    engine = MkIEngine(8)
    assert engine.compute([0] * 8, 77, 1 << 19, 0, 300) == engine.compute_pure(
        77, 1 << 19, 0, 300
    )


def test_compute_rejects_wrong_modulator_length():
    engine = MkIEngine(8)
    with pytest.raises(ValueError):
        engine.compute([0] * 9, 0, 0, 0, 0)


def test_compute_fb_updates_feedback_buffer():
    engine = MkIEngine(16)
    feedback = FeedbackBuffer()
    out = engine.compute_fb(0, 1 << 18, 100, 100, feedback, 4)
    assert feedback.latest == out[-1]
    assert feedback.previous == out[-2]


def test_compute_fb_add_only_affects_output():
    engine = MkIEngine(16)
    plain_buffer = FeedbackBuffer(10, 20)
    added_buffer = FeedbackBuffer(10, 20)
    plain = engine.compute_fb(0, 1 << 18, 100, 200, plain_buffer, 3)
    added = engine.compute_fb(0, 1 << 18, 100, 200, added_buffer, 3, add_to=[5] * 16)
    assert added == [p + 5 for p in plain]
    assert plain_buffer == added_buffer


def test_compute_fb2_sets_second_gain_and_keeps_phases():
    engine = MkIEngine(16)
    params = [
        OperatorParams(phase=100, freq=1 << 18, level_in=1 << 27),
        OperatorParams(phase=200, freq=1 << 17, level_in=1 << 26),
    ]
    feedback = FeedbackBuffer()
    out = engine.compute_fb2(params, 300, 300, feedback, 5)
    assert params[1].gain_out == 12288
    assert params[0].phase == 100 and params[1].phase == 200
    assert feedback.latest == out[-1]
    assert len(out) == 16


def test_compute_fb3_silent_last_operator_gives_floor_values():
    engine = MkIEngine(32)
    params = [
        OperatorParams(freq=1 << 18, level_in=1 << 27),
        OperatorParams(freq=1 << 17, level_in=1 << 27),
        OperatorParams(freq=3 << 16, level_in=0),
    ]
    out = engine.compute_fb3(params, 100, 100, FeedbackBuffer(), 4)
    assert set(out) <= {0, -(1 << 13)}
    assert params[2].gain_out == 1 << 14


def test_feedback_chains_are_deterministic():
    engine = MkIEngine(16)

    def make():
        return [OperatorParams(phase=i * 1000, freq=(i + 1) << 17, level_in=1 << 27) for i in range(3)]

    first = engine.compute_fb3(make(), 0, 400, FeedbackBuffer(), 2)
    second = engine.compute_fb3(make(), 0, 400, FeedbackBuffer(), 2)
    assert first == second


@pytest.mark.parametrize("count", [0, 1])
def test_compute_fb2_needs_two_operators(count):
    engine = MkIEngine(8)
    with pytest.raises(ValueError):
        engine.compute_fb2([OperatorParams()] * count, 0, 0, FeedbackBuffer(), 3)


def test_compute_fb3_needs_three_operators():
    engine = MkIEngine(8)
    with pytest.raises(ValueError):
        engine.compute_fb3([OperatorParams(), OperatorParams()], 0, 0, FeedbackBuffer(), 3)