#!/usr/bin/env python3
"""
Tests for the Gray-Scott Simulation.

Verifies:
1. The single-step numeric example (unclamped B = 1.383)
2. Dimension preservation, determinism and double buffering
3. Parameter snapshots and setters
4. Long-run stability and unmasked blow-up
5. Parameters changed during a step only apply to the next one
6. Readers always see a consistent (A, B) pair while another thread steps
"""

import threading

import numpy as np
import pytest

from reaction_diffusion.errors import InvalidConfigurationError, ReadOnlyGridError
from reaction_diffusion.grid import Grid
from reaction_diffusion.params import Parameters
from reaction_diffusion import simulation
from reaction_diffusion.simulation import FieldPair, Simulation, gray_scott_update
from reaction_diffusion.stencil import KERNEL


def _impulse_sim():
    a = Grid.create(5, 5, 1.0)
    b = Grid.create(5, 5, 0.0)
    b.set(2, 2, 1.0)
    params = Parameters(DA=1.0, DB=0.5, F=0.055, K=0.062, dt=1.0)
    return Simulation.from_fields(a, b, params)


def test_single_step_numeric_example():
    sim = _impulse_sim()
    pair = sim.step()
    # diffB = 0.5 * -1, reaction = 1, feed = 0, kill = -0.117
    assert pair.b.get(2, 2) == pytest.approx(1.383, abs=1e-12)
    assert pair.b.get(2, 2) > 1.0, "values are never clamped to [0, 1]"
    # A loses exactly the reaction term at the impulse
    assert pair.a.get(2, 2) == pytest.approx(0.0, abs=1e-12)
    # Neighbour of the impulse: only diffusion reaches it
    assert pair.b.get(2, 1) == pytest.approx(0.5 * 0.2)
    assert pair.b.get(1, 1) == pytest.approx(0.5 * 0.05)
    assert pair.a.get(2, 1) == pytest.approx(1.0, abs=1e-12)
    assert pair.generation == 1


def test_dimensions_preserved_on_non_square_grid():
    rng = np.random.default_rng(1)
    sim = Simulation.from_fields(rng.random((6, 9)), rng.random((6, 9)))
    for _ in range(5):
        pair = sim.step()
        assert pair.a.dimensions() == (6, 9)
        assert pair.b.dimensions() == (6, 9)
    assert sim.dimensions() == (6, 9)


def test_determinism():
    rng = np.random.default_rng(2)
    a = rng.random((40, 30))
    b = rng.random((40, 30)) * 0.3
    s1 = Simulation.from_fields(a, b, Parameters(F=0.03, K=0.06))
    s2 = Simulation.from_fields(a, b, Parameters(F=0.03, K=0.06))
    p1 = s1.step_n(50)
    p2 = s2.step_n(50)
    assert np.array_equal(p1.a.view(), p2.a.view())
    assert np.array_equal(p1.b.view(), p2.b.view())
    assert p1.generation == p2.generation == 50


def test_update_is_pure():
    sim = _impulse_sim()
    pair = sim.snapshot()
    p = sim.params_snapshot()
    first = gray_scott_update(pair.a, pair.b, p)
    second = gray_scott_update(pair.a, pair.b, p)
    assert np.array_equal(first[0], second[0])
    assert np.array_equal(first[1], second[1])


def test_step_replaces_fields_instead_of_mutating():
    sim = _impulse_sim()
    before = sim.snapshot()
    before_b = before.b.to_array()
    after = sim.step()
    assert after.a is not before.a and after.b is not before.b
    assert np.array_equal(before.b.to_array(), before_b), "old generation must be untouched"
    assert before.a.readonly and after.b.readonly
    with pytest.raises(ReadOnlyGridError):
        after.b.set(0, 0, 1.0)


def test_from_fields_copies_input():
    a = Grid.create(4, 4, 1.0)
    b = Grid.create(4, 4, 0.0)
    sim = Simulation.from_fields(a, b)
    a.set(0, 0, 5.0)
    assert sim.a.get(0, 0) == 1.0
    assert not a.readonly, "caller's grids stay writable"


def test_from_fields_shape_mismatch():
    with pytest.raises(InvalidConfigurationError):
        Simulation.from_fields(np.ones((4, 4)), np.zeros((4, 5)))


def test_construction_seeds_once():
    sim = Simulation(120, 110, rng=3)
    pair = sim.snapshot()
    assert pair.generation == 0
    assert sim.dimensions() == (120, 110)
    assert np.all(pair.a.view() == 1.0)
    assert set(np.unique(pair.b.view())) <= {0.0, 1.0}


def test_invalid_construction():
    with pytest.raises(InvalidConfigurationError):
        Simulation(0, 120)
    with pytest.raises(InvalidConfigurationError):
        Simulation(50, 50)


def test_parameter_setters_take_effect_next_step():
    sim = _impulse_sim()
    sim.set_feed(0.0)
    sim.set_kill(0.0)
    sim.set_db(0.0)
    sim.set_da(0.0)
    sim.set_dt(0.5)
    assert sim.get_params() == {"DA": 0.0, "DB": 0.0, "F": 0.0, "K": 0.0, "dt": 0.5}
    pair = sim.step()
    # Only the reaction is left: B' = 1 + 0.5 * 1
    assert pair.b.get(2, 2) == pytest.approx(1.5)
    with pytest.raises(InvalidConfigurationError):
        sim.set_dt(float("nan"))
    assert sim.get_params()["dt"] == 0.5


def test_params_changed_mid_step_apply_next_step():
    sim = _impulse_sim()
    calls = []
    original = simulation.convolve

    def convolve_then_retune(source, kernel=KERNEL):
        out = original(source, kernel)
        calls.append(source)
        if len(calls) == 1:
            sim.set_params(DB=0.0, F=0.0, K=0.0, dt=0.5)
        return out

    simulation.convolve = convolve_then_retune
    try:
        first = sim.step()
    finally:
        simulation.convolve = original
    assert len(calls) == 2
    # The step keeps the parameters it started with
    assert first.b.get(2, 2) == pytest.approx(1.383, abs=1e-12)
    assert sim.get_params()["dt"] == 0.5

    # The new values drive the following step
    reference = _impulse_sim()
    reference.step()
    reference.set_params(DB=0.0, F=0.0, K=0.0, dt=0.5)
    expected = reference.step()
    second = sim.step()
    assert np.array_equal(second.a.view(), expected.a.view())
    assert np.array_equal(second.b.view(), expected.b.view())

    untouched = _impulse_sim()
    untouched.step_n(2)
    assert not np.array_equal(second.b.view(), untouched.snapshot().b.view())


def test_long_run_stays_bounded():
    sim = Simulation(100, 100, rng=4)
    sim.step_n(2000)
    pair = sim.snapshot()
    assert sim.is_finite()
    for field in (pair.a, pair.b):
        assert -10.0 <= field.min() and field.max() <= 10.0, (
            f"integration blew up: [{field.min()}, {field.max()}]"
        )
    assert pair.generation == 2000


def test_blow_up_is_not_masked():
    rng = np.random.default_rng(6)
    sim = Simulation.from_fields(rng.random((12, 12)), rng.random((12, 12)),
                                 Parameters(dt=50.0))
    with np.errstate(all="ignore"):
        sim.step_n(300)
    assert not sim.is_finite(), "huge dt must be allowed to diverge"
    assert sim.stats["finite"] is False


def test_stats():
    sim = _impulse_sim()
    stats = sim.stats
    assert stats["generation"] == 0
    assert stats["mass"] == 1.0
    assert stats["max"] == 1.0
    assert stats["finite"] is True


def test_readers_see_consistent_pairs():
    """Snapshots taken while another thread steps must match a serial run."""
    rng = np.random.default_rng(8)
    a = rng.random((24, 24))
    b = rng.random((24, 24)) * 0.5
    params = Parameters(F=0.04, K=0.06)
    n_steps = 150

    reference = Simulation.from_fields(a, b, params)
    expected = {0: reference.snapshot()}
    for _ in range(n_steps):
        pair = reference.step()
        expected[pair.generation] = pair

    sim = Simulation.from_fields(a, b, params)
    seen = []
    done = threading.Event()

    def stepper():
        for _ in range(n_steps):
            sim.step()
        done.set()

    t = threading.Thread(target=stepper)
    t.start()
    while not done.is_set():
        pair = sim.snapshot()
        if not seen or seen[-1] is not pair:
            seen.append(pair)
    t.join()
    seen.append(sim.snapshot())

    generations = [p.generation for p in seen]
    assert generations == sorted(generations), "generations only move forward"
    assert generations[-1] == n_steps
    for pair in seen:
        assert isinstance(pair, FieldPair)
        ref = expected[pair.generation]
        assert np.array_equal(pair.a.view(), ref.a.view()), f"A mismatch at gen {pair.generation}"
        assert np.array_equal(pair.b.view(), ref.b.view()), f"B mismatch at gen {pair.generation}"


def test_concurrent_steps_are_serialized():
    rng = np.random.default_rng(9)
    a = rng.random((16, 16))
    b = rng.random((16, 16))
    sim = Simulation.from_fields(a, b)
    threads = [threading.Thread(target=sim.step_n, args=(25,)) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    serial = Simulation.from_fields(a, b).step_n(100)
    pair = sim.snapshot()
    assert pair.generation == 100
    assert np.array_equal(pair.b.view(), serial.b.view())


if __name__ == "__main__":
    print("\n=== Testing Simulation ===\n")
    test_single_step_numeric_example()
    test_dimensions_preserved_on_non_square_grid()
    test_determinism()
    test_update_is_pure()
    test_step_replaces_fields_instead_of_mutating()
    test_from_fields_copies_input()
    test_from_fields_shape_mismatch()
    test_construction_seeds_once()
    test_invalid_construction()
    test_parameter_setters_take_effect_next_step()
    test_params_changed_mid_step_apply_next_step()
    test_long_run_stays_bounded()
    test_blow_up_is_not_masked()
    test_stats()
    test_readers_see_consistent_pairs()
    test_concurrent_steps_are_serialized()
    print("\n✓ All tests passed!\n")
