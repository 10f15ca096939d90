import math

import pytest

from gravitation.config import GeodesicSettings, GravityConfig
from gravitation.data_models import Geodesic, Mass
from gravitation.geodesics import GeodesicManager


def test_no_geodesic_without_field(sim):
    assert sim.add_geodesic(400, 300) is None
    assert sim.geodesic_manager.geodesics == []


def test_geodesic_circles_a_single_mass(sim):
    sim.add_mass(400, 400)
    geodesic = sim.add_geodesic(416, 316)
    assert geodesic is not None
    assert geodesic.points[0] == (416, 316)
    assert len(geodesic.points) >= sim.geodesic_manager.settings.min_points
    # Level curve of a point mass: the tracer stays at roughly constant distance
    center = sim.masses[0]
    radii = [math.hypot(x - center.x, y - center.y) for x, y in geodesic.points]
    assert max(radii) < 2 * min(radii)


def test_geodesics_are_retraced_when_masses_change(sim):
    sim.add_mass(400, 400)
    geodesic = sim.add_geodesic(416, 316)
    before = list(geodesic.points)
    sim.add_mass(200, 200)
    assert geodesic.points != before


def test_settings_change_retraces(sim):
    sim.add_mass(400, 400)
    geodesic = sim.add_geodesic(416, 316)
    sim.apply_geodesic_settings(max_steps="5")
    assert sim.geodesic_manager.settings.max_steps == 5
    assert len(geodesic.points) <= 6


def test_geodesic_settings_update_is_lenient():
    settings = GeodesicSettings()
    settings.update(curve_step="12.5", max_steps="20.0", max_angle="lots", unknown=3)
    assert settings.curve_step == 12.5
    assert settings.max_steps == 20 and isinstance(settings.max_steps, int)
    assert settings.max_angle == 400.0
    assert GeodesicSettings.from_dict(settings.to_dict()) == settings


def test_gravity_config_geometry():
    cfg = GravityConfig()
    assert (cfg.grid_width, cfg.grid_height) == (25, 25)
    assert cfg.diagonal == math.hypot(800, 800)
    assert cfg.contains(800, 0)
    assert not cfg.contains(-1, 10)


def _tracer(**settings):
    """Tracer around a single 1000-unit mass at the canvas centre, fresh settings."""
    masses = [Mass(400, 400, 1000.0)]
    return GeodesicManager(masses, GravityConfig(), GeodesicSettings(**settings)), masses


def _trace(manager, x, y):
    geodesic = Geodesic(start_x=x, start_y=y, max_length=int(manager.settings.max_steps))
    manager.trace(geodesic)
    return geodesic.points


def test_trace_stops_where_the_field_is_too_weak():
    # Field at r = 100 is 1000 / 100^2 = 0.1
    manager, _ = _tracer(stop_gradient_threshold=0.5)
    assert _trace(manager, 400, 300) == [(400, 300)]
    manager.settings.stop_gradient_threshold = 0.05
    assert len(_trace(manager, 400, 300)) > 1


def test_trace_stops_at_max_angle():
    manager, _ = _tracer(max_angle=90.0)
    quarter = _trace(manager, 400, 300)
    # 10 px steps on a ~100 px circle turn about 5.7 degrees each
    assert 10 <= len(quarter) <= 25
    manager.settings.max_angle = 180.0
    half = _trace(manager, 400, 300)
    assert len(half) > len(quarter) + 10


def test_trace_stops_outside_the_bounding_region():
    masses = [Mass(200, 400, 1000.0)]
    manager = GeodesicManager(masses, GravityConfig(), GeodesicSettings(bounding_box_multiplier=0.625))
    points = _trace(manager, 200, 300)
    limit = 800 * 0.625 / 2
    distances = [math.hypot(x - 400, y - 400) for x, y in points]
    assert distances[-1] > limit
    assert all(d <= limit for d in distances[:-1])
    assert len(points) < 10


def test_trace_stops_after_max_steps():
    manager, _ = _tracer(max_steps=7)
    assert len(_trace(manager, 400, 300)) == 8


def test_close_points_are_dropped_without_ending_the_trace():
    manager, _ = _tracer(max_steps=20, curve_step=10.0, min_distance_between_points=15.0)
    points = _trace(manager, 400, 300)
    # Every other 10 px step is kept
    assert len(points) == 11
    gaps = [math.hypot(b[0] - a[0], b[1] - a[1]) for a, b in zip(points, points[1:])]
    assert min(gaps) >= 15.0


def test_line_widths_follow_field_strength():
    manager, _ = _tracer()
    inner = manager.add_geodesic(400, 300)
    outer = manager.add_geodesic(400, 200)
    inner_widths, outer_widths = manager.line_widths()
    assert len(inner_widths) == len(inner.points) - 1
    assert len(outer_widths) == len(outer.points) - 1
    assert max(inner_widths + outer_widths) == pytest.approx(10.0)
    assert all(2.0 <= w <= 12.0 for w in inner_widths + outer_widths)
    assert sum(inner_widths) / len(inner_widths) > sum(outer_widths) / len(outer_widths)

    manager.settings.thickness_amplification = 0.1
    assert {w for row in manager.line_widths() for w in row} == {2.0}
