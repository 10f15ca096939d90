import math

import pytest

from conftest import run_for
from gravitation.physics import (calculate_event_horizon, calculate_gravitational_redshift, normalize_vector,
                                 time_dilation_factor)
from gravitation.data_models import Mass


def test_event_horizon():
    assert calculate_event_horizon(100000, 1.0, 50.0) == pytest.approx(80.0)


def test_spacecraft_launch_speed_is_capped(sim):
    craft = sim.add_spacecraft(100, 100, 100, 0)
    assert (craft.x, craft.y) == (96, 96)
    assert craft.vx == pytest.approx(sim.config.max_speed)
    assert craft.vy == 0


def test_zero_direction_launches_nothing(sim):
    assert sim.add_spacecraft(100, 100, 0, 0) is None
    assert sim.add_laser(100, 100, 0, 0) is None


def test_spacecraft_is_captured_inside_horizon(sim):
    sim.add_black_hole(384, 384)
    run_for(sim, 0.5)
    sim.add_spacecraft(400, 384, 1, 0)
    sim.tick(0.1)
    assert sim.spacecraft_manager.spacecrafts == []
    assert sim.spacecraft_manager.captured == 1


def test_spacecraft_leaving_canvas_is_removed(sim):
    sim.add_spacecraft(790, 400, 20, 0)
    sim.tick(0.1)
    assert sim.spacecraft_manager.spacecrafts == []
    assert sim.spacecraft_manager.captured == 0


def test_spacecraft_is_pulled_towards_visible_mass(sim):
    sim.add_mass(400, 400)
    run_for(sim, 1.0)
    craft = sim.add_spacecraft(300, 416, 0, 1)
    sim.tick(0.1)
    assert craft.vx > 0
    assert len(craft.trail) == 1


def test_laser_keeps_speed_of_light(sim):
    sim.add_mass(400, 400)
    run_for(sim, 1.0)
    laser = sim.add_laser(200, 300, 1, 0)
    for _ in range(5):
        sim.tick(0.1)
    assert math.hypot(laser.vx, laser.vy) == pytest.approx(sim.config.c)
    assert laser.vy > 0  # bent towards the mass below its path


def test_normalize_vector():
    assert normalize_vector(3, 4, 50) == pytest.approx((30, 40))
    assert normalize_vector(0, 0) == (0.0, 0.0)


def test_redshift_is_clamped():
    masses = [Mass(0, 0, 1e9)]
    assert calculate_gravitational_redshift(1, 0, masses, 1.0, 50.0) == -2.0


def test_time_dilation_has_a_floor():
    assert time_dilation_factor(1, 0, [Mass(0, 0, 1e9)], 1.0, 50.0) == pytest.approx(0.1)
    assert time_dilation_factor(1, 0, [], 1.0, 50.0) == 1.0


def test_clock_near_mass_runs_slow(sim):
    sim.add_mass(192, 192)
    far = sim.add_clock(700, 700)
    near = sim.add_clock(224, 192)
    run_for(sim, 1.0)
    assert sim.clock_manager.reference_time == pytest.approx(1.0)
    assert near.local_time < far.local_time < sim.clock_manager.reference_time


def test_clock_selection(sim):
    clock = sim.add_clock(100, 100)
    manager = sim.clock_manager
    assert manager.clock_at(110, 100) is clock
    assert manager.clock_at(200, 200) is None
    manager.select(clock)
    assert clock.selected
    manager.remove(clock)
    assert manager.selected is None


def test_clear_objects_keeps_masses(sim):
    sim.add_mass(400, 400)
    craft = sim.add_spacecraft(100, 100, 1, 0)
    laser = sim.add_laser(100, 200, 1, 0)
    sim.add_clock(300, 300)
    sim.add_geodesic(416, 316)
    sim.spacecraft_manager.remove(craft)
    sim.laser_manager.remove(laser)
    assert sim.spacecraft_manager.spacecrafts == [] and sim.laser_manager.lasers == []
    sim.clear_objects()
    info = sim.debug_info()
    assert (info["clocks"], info["geodesics"], info["masses"]) == (0, 0, 1)
