# dexfm

Building blocks for a six-operator FM synthesizer and its editor, in plain
Python with no third-party dependencies. All engine arithmetic follows
32-bit signed integer semantics, so results are bit-exact and repeatable.

## Modules

- `dexfm.engine_opl` – an OPL-style operator engine built on a 256-entry
  log-sine table and a 256-entry exponent table.
  - `sin_log(phi)`: log-sine attenuation of a 10-bit phase, sign in bit 15.
  - `opl_sin(phase, env)`: signed sine output for a phase (0..1023) and an
    envelope attenuation (0..511).
  - `OplEngine(block_size=64)`: renders one block of samples per call with
    `compute` (phase-modulated by another block), `compute_pure`
    (unmodulated) and `compute_fb` (self-modulated). Each returns a new
    list; `add_to` is an optional block that the output is summed onto.
    The block size must be a positive power of two.
  - `FeedbackBuffer`: the last two outputs of a self-modulating operator,
    updated in place by `compute_fb`.
- `dexfm.engine_mki` – a higher-resolution engine with 1024-entry tables
  generated at import time.
  - `mki_sin_log(phi)`, `mki_sin(phase, env)`: the log-sine and sine
    functions for a 22-bit phase and a 14-bit attenuation (`ENV_MAX` is
    `1 << 14`).
  - `MkIEngine(block_size=64)`: `compute`, `compute_pure` and `compute_fb`
    as above, plus `compute_fb2` and `compute_fb3`, which render a two- or
    three-operator feedback loop (as used by algorithms 6 and 4). These
    set `gain_out` on the following operators and update the feedback
    buffer; advancing operator phases is left to the caller.
  - `OperatorParams`: per-operator `phase`, `freq`, `level_in` and
    `gain_out`.
- `dexfm.envelope` – envelope timing and display geometry.
  - `segment_duration(rate, level_from, level_to)`: seconds a segment
    takes, from rise/decay timing tables; rates and levels are 0..127.
  - `envelope_shape(rates, levels, width, height)`: an `EnvelopeShape`
    with the four segment durations, key-off point, release time, scale,
    breakpoint `points`, a closed `outline` and the highlighted `markers`
    for each envelope position 0..4.
- `dexfm.algo_layout` – diagrams of the 32 algorithms.
  - `algorithm_layout(algorithm)`: `OperatorPlacement`s (grid column, row,
    link style, feedback style) for operators 6 down to 1; an algorithm
    outside 0..31 gives an empty tuple.
  - `link_segments(x, y, link)`, `feedback_segments(x, y, fb)`: the
    `Segment` lines for a link or feedback style at a label corner.
  - `render_algorithm(algorithm, op_status)`: `DrawnOperator`s in pixels;
    `op_status` is a six-character string, operator 6 first, where `"1"`
    marks an active operator.
- `dexfm.theme` – editor colours and theme files.
  - `Colour` with `from_argb(value)` and `argb()`.
  - `Theme()`: the built-in palette (`fill_colour`, `light_background`,
    `background`, `round_background`, a `colours` map by colour id) and
    an `images` map of image names. `apply_xml(text)` and `load(path)`
    apply `<colour id=".." value="AARRGGBB"/>` and
    `<image id=".." path=".."/>` overrides, returning `False` when the
    document cannot be read or parsed.
  - `parse_colour_value(value)`: hex colour parsing; values shorter than
    eight characters give `None`.
- `dexfm.widgets` – small control behaviours.
  - `vu_meter_breakpoint(level)`: lit pixel width of a 46-block meter.
  - `step_program(index, forward)`: next or previous of 32 programs,
    wrapping around.
  - `WheelAccumulator(factor=0.2, reverse=True)`: turns mouse-wheel
    movement into program steps with `move(delta, index)` and `reset()`.

## Install

    pip install .

For the tests:

    pip install ".[test]"
    pytest

## Example

    from dexfm.engine_opl import OplEngine, opl_sin

    engine = OplEngine(64)
    block = engine.compute_pure(phase0=0, freq=1 << 20, gain1=0, gain2=0, add_to=None)
    print(len(block), opl_sin(256, 0))

    from dexfm.envelope import segment_duration
    print(segment_duration(50, 0, 99))

    from dexfm.widgets import step_program
    print(step_program(31, True))  # wraps around to 0

## What it does not do

- There is no voice or patch level: nothing routes six operators through an
  algorithm's buses, runs envelopes over time, or turns notes into sound.
  The engines render single operators and feedback loops block by block.
- It plays and records no audio and reads or writes no sound files or
  patch/cartridge files.
- It draws nothing. Envelope shapes, algorithm diagrams and meter widths
  are returned as numbers for a user interface to draw; theme images are
  names and paths only and are never opened.
- There is no command-line program.