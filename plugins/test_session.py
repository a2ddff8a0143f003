#!/usr/bin/env python3
"""
Tests for the trace session and the headless entry point.

Verifies:
1. Every step records exactly one frame
2. Blob selection, tracing and voxel assembly end to end
3. Seeded engines are reproducible
4. The CLI writes its outputs and reports bad input
"""

import io
import os
import tempfile
from contextlib import redirect_stdout

import numpy as np

from lattice_trace.__main__ import main
from lattice_trace.life import Life
from lattice_trace.presets import LatticeConfig, TraceSettings
from lattice_trace.session import TraceSession, build_engine
from lattice_trace.tracer import StopReason

GLIDER = [[0, 1, 0],
          [0, 0, 1],
          [1, 1, 1]]


def _glider_session(**settings):
    engine = Life(50, 50)
    engine.place(GLIDER, 20, 20)
    return TraceSession(engine, TraceSettings(**settings))


def test_step_records_history():
    session = _glider_session()
    assert len(session.history) == 1, "initial state is recorded"
    session.step(5)
    assert len(session.history) == 6
    assert session.history.tick_at(0) == session.engine.generation == 5
    assert np.array_equal(session.current_frame(), session.engine.cell_buffer())


def test_select_and_trace():
    print("Testing session trace...")
    session = _glider_session(max_frames=8)
    session.step(5)

    blob = session.select_largest()
    assert len(blob) == 5
    x, y = min(blob) % 50, min(blob) // 50
    assert session.select(x, y) == blob
    assert session.select(0, 0) == set(), "background selects nothing"

    trace = session.trace(blob)
    assert trace.blob == frozenset(blob)
    assert len(trace.backward) == 6
    assert trace.backward.stop_reason is StopReason.HISTORY_EXHAUSTED
    assert len(trace.forward) == 8
    assert session.engine.generation == 5, "tracing never advances the session"

    voxels = session.voxels(trace)
    assert len(voxels) == 6 * 5 + 8 * 5
    assert voxels.times.min() == -5
    assert voxels.times.max() == 8
    print("  ✓ session trace working correctly")


def test_voxel_cap_from_settings():
    session = _glider_session(max_frames=8, max_voxels=12)
    session.step(3)
    voxels = session.voxels(session.trace(session.select_largest()))
    assert len(voxels) == 12


def test_set_resolution_restarts_history():
    session = _glider_session()
    session.step(4)
    session.set_resolution(30, 20)
    assert (session.width, session.height) == (30, 20)
    assert len(session.history) == 1
    assert session.history.frame_at(0).size == 600
    assert session.history.total_ticks == 6, "tick numbers continue across the resize"

    session.step(2)
    session.engine.place(GLIDER, 5, 5)
    session.record()
    trace = session.trace(session.select_largest())
    assert min(trace.backward.frames) >= 6, "post-resize ticks never reuse earlier numbers"
    assert max(trace.backward.frames) == session.history.total_ticks - 1 == 8


def test_seeded_engines_reproduce():
    config = LatticeConfig(width=32, height=24, density=0.3, seed=7)
    a = TraceSession.from_config(config)
    b = TraceSession.from_config(config)
    a.step(10)
    b.step(10)
    assert np.array_equal(a.engine.cells, b.engine.cells)
    assert build_engine(config).cells.shape == (24, 32)


def test_cli_writes_outputs():
    print("Testing CLI...")
    with tempfile.TemporaryDirectory() as tmp:
        rc = main(["classic_life", "--size", "32", "--steps", "10", "--seed", "3", "--out", tmp])
        assert rc == 0
        assert os.path.exists(os.path.join(tmp, "spacetime_structure.gltf"))
        assert os.path.exists(os.path.join(tmp, "frame.png"))
    print("  ✓ CLI working correctly")


def test_engine_stats_in_summary():
    session = _glider_session()
    session.step(3)
    stats = session.engine.stats
    assert stats["generation"] == 3
    assert stats["alive"] == 5
    assert abs(stats["alive_pct"] - 5 / 2500 * 100) < 1e-9

    out = io.StringIO()
    with tempfile.TemporaryDirectory() as tmp, redirect_stdout(out):
        main(["--size", "24", "--steps", "4", "--seed", "1", "--out", tmp])
    assert "generation 4" in out.getvalue()
    assert " alive, " in out.getvalue(), "run summary reports the engine stats"


def test_cli_rejects_bad_input():
    assert main(["--list"]) == 0
    assert main(["--bogus"]) == 1
    assert main(["--size", "zero"]) == 1
    assert main(["--size", "0"]) == 1, "invalid config is reported, not raised"


if __name__ == "__main__":
    print("\n=== Testing Trace Session ===\n")

    test_step_records_history()
    test_select_and_trace()
    test_voxel_cap_from_settings()
    test_set_resolution_restarts_history()
    test_seeded_engines_reproduce()
    test_cli_writes_outputs()
    test_engine_stats_in_summary()
    test_cli_rejects_bad_input()

    print("\n✓ All tests passed!\n")
