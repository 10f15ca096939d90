import math

import pytest

from lightcone.data_models import ReferenceFrame, SpacetimePoint
from lightcone.errors import TrajectoryError
from lightcone.relativity import calculate_proper_acceleration, calculate_proper_time
from lightcone.trajectories import (
    calculate_coordinate_time_for_isochrone,
    calculate_cumulative_trajectory,
    calculate_hyperbolic_trajectory,
    calculate_isochrone_points,
    calculate_trajectory_curvature,
    find_trajectory_isochrone_intersections,
    generate_twin_paradox_demo,
)


def _proper_time(dx, dt):
    return calculate_proper_time(calculate_proper_acceleration(dx, dt), dt)


@pytest.mark.parametrize("origin_x,origin_t,target_x,tau", [
    (0, 0, 30, 40),
    (10, 5, -20, 25),
    (0, 0, 100, 80),
])
def test_isochrone_inversion_round_trip(origin_x, origin_t, target_x, tau):
    t = calculate_coordinate_time_for_isochrone(origin_x, origin_t, target_x, tau)
    dt = t - origin_t
    assert dt > abs(target_x - origin_x)
    assert _proper_time(target_x - origin_x, dt) == pytest.approx(tau, rel=1e-6)


def test_isochrone_inversion_without_displacement():
    assert calculate_coordinate_time_for_isochrone(5, 10, 5, 30) == 40


def test_isochrone_points_lie_on_the_hyperbola():
    origin = ReferenceFrame(0, 0)
    points = calculate_isochrone_points(100, origin, None, canvas_width=1100)
    assert len(points) > 400
    for p in points:
        assert p.t == pytest.approx(math.sqrt(100 ** 2 + p.x ** 2))
    assert min(p.t for p in points) == pytest.approx(100, abs=1)


def test_isochrone_is_calibrated_through_selected_cone():
    origin = ReferenceFrame(0, 0)
    cone = ReferenceFrame(30, 120)
    k = 120 / math.sqrt(100 ** 2 + 30 ** 2)
    for p in calculate_isochrone_points(100, origin, cone, canvas_width=1100):
        assert p.t == pytest.approx(k * math.sqrt(100 ** 2 + p.x ** 2))


def test_isochrone_below_minimum_proper_time_is_empty():
    assert calculate_isochrone_points(0.001, ReferenceFrame(0, 0)) == []


@pytest.mark.parametrize("end_x", [30.0, -30.0])
def test_hyperbolic_trajectory_ends_on_target(end_x):
    traj = calculate_hyperbolic_trajectory(0, 0, end_x, 50, points=100)
    assert len(traj.points) == 101
    assert traj.points[0] == SpacetimePoint(0, 0)
    assert traj.points[-1].x == pytest.approx(end_x)
    assert traj.points[-1].t == pytest.approx(50)
    assert math.copysign(1, traj.physics.final_velocity) == math.copysign(1, end_x)
    assert traj.physics.proper_time < traj.physics.coordinate_time


def test_hyperbolic_trajectory_rejects_impossible_requests():
    with pytest.raises(TrajectoryError):
        calculate_hyperbolic_trajectory(0, 10, 0, 10)
    with pytest.raises(TrajectoryError):
        calculate_hyperbolic_trajectory(0, 0, 80, 50)


def test_twin_paradox_demo():
    frames = generate_twin_paradox_demo(100, 300, 0.15)
    expected = [(0, 0), (10, 45), (90, 150), (100, 150), (90, 195), (10, 300), (0, 300)]
    assert len(frames) == 7
    for frame, (x, t) in zip(frames, expected):
        assert frame.x == pytest.approx(x)
        assert frame.t == pytest.approx(t)
    assert [f.source_index for f in frames] == [-1, 0, 1, 2, 3, 4, 5]

    total = calculate_cumulative_trajectory(frames).total_physics
    assert total.total_coordinate_time == pytest.approx(300)
    assert 0 < total.total_proper_time < 300
    assert total.time_dilation_percentage > 0
    assert total.time_dilation_factor > 1


def test_cumulative_trajectory_edge_cases():
    with pytest.raises(TrajectoryError):
        calculate_cumulative_trajectory([])
    single = calculate_cumulative_trajectory([ReferenceFrame(0, 0)])
    assert single.segments == []
    assert single.total_physics.total_proper_time == 0
    assert single.total_physics.time_dilation_percentage == 0
    assert single.total_physics.time_dilation_factor == 1.0


def test_cumulative_trajectory_records_each_segment():
    frames = [ReferenceFrame(0, 0), ReferenceFrame(30, 50), ReferenceFrame(0, 120)]
    result = calculate_cumulative_trajectory(frames)
    first, second = result.segments
    assert first.delta_x == 30 and second.delta_x == -30
    assert first.segment_velocity > 0 > second.segment_velocity
    assert second.initial_cumulative_velocity == first.final_cumulative_velocity
    assert second.cumulative_proper_time == pytest.approx(first.proper_time + second.proper_time)
    assert second.total_coordinate_time == 120


def test_curvature():
    line = [SpacetimePoint(i, 2 * i) for i in range(5)]
    assert calculate_trajectory_curvature(line, 2) == 0
    bend = [SpacetimePoint(0, 0), SpacetimePoint(1, 1), SpacetimePoint(2, 1)]
    assert calculate_trajectory_curvature(bend, 0) == 0
    assert calculate_trajectory_curvature(bend, 1) > 0


def test_intersections_are_closest_first_and_bounded():
    traj = [SpacetimePoint(0, t) for t in range(100)]
    iso = [SpacetimePoint(1, t + 0.5) for t in range(100)]
    hits = find_trajectory_isochrone_intersections(traj, iso, tolerance=5)
    assert len(hits) == 10
    distances = [h.distance for h in hits]
    assert distances == sorted(distances)
    assert find_trajectory_isochrone_intersections(traj, [SpacetimePoint(50, 0)]) == []
