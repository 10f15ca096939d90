import pytest

from conftest import run_for


def _masses_seen_at(sim, x, y):
    return sim.versions.causal_masses_at(x, y, sim.masses)


def test_change_is_not_felt_before_the_front_arrives(sim):
    sim.add_mass(96, 96)
    # Let the first front sweep the whole canvas
    run_for(sim, 4.0)
    assert sim.propagation.fronts == []
    far = (608, 96)  # 512 px away; the front moves 320 px per second
    assert [m.mass for m in _masses_seen_at(sim, *far)] == [1000]

    sim.add_mass(96, 96)
    assert [m.mass for m in _masses_seen_at(sim, 96, 96)] == [2000]
    run_for(sim, 1.5)
    assert [m.mass for m in _masses_seen_at(sim, *far)] == [1000]
    run_for(sim, 0.2)
    assert [m.mass for m in _masses_seen_at(sim, *far)] == [2000]


def test_front_radius_follows_simulation_time(sim):
    sim.add_mass(400, 400)
    front = sim.propagation.fronts[0]
    run_for(sim, 1.0)
    assert sim.propagation.radius_of(front, sim.sim_time) == pytest.approx(320.0)


def test_paused_simulation_freezes_fronts(sim):
    sim.add_mass(400, 400)
    sim.toggle_play()
    run_for(sim, 1.0)
    assert sim.sim_time == 0.0
    assert sim.versions.get_grid_version(14, 12) == 0
    sim.step_once(0.5)
    assert sim.sim_time == 0.5
    assert sim.playing is False
    assert sim.versions.get_grid_version(14, 12) == 1


def test_reset_clears_everything(sim):
    sim.add_mass(100, 100)
    sim.add_clock(300, 300)
    run_for(sim, 0.5)
    sim.reset()
    info = sim.debug_info()
    assert info["masses"] == 0
    assert info["fronts"] == 0
    assert info["version"] == 0
    assert info["clocks"] == 0
    assert sim.sim_time == 0.0
    assert sim.versions.grid.max() == 0
