import math

import pytest

from lightcone.errors import PhysicsValidationError, TrajectoryError
from lightcone.rapidity import (
    arcosh,
    arsinh,
    artanh,
    calculate_trajectory_point,
    generate_rendezvous_trajectory,
    generate_trajectory,
    rapidity_to_velocity,
    solve_rendezvous_problem,
    validate_rendezvous,
    validate_trajectory,
    velocity_to_rapidity,
)


def test_hyperbolic_functions():
    assert artanh(0.5) == pytest.approx(math.atanh(0.5))
    assert arsinh(2.0) == pytest.approx(math.asinh(2.0))
    assert arcosh(2.0) == pytest.approx(math.acosh(2.0))
    with pytest.raises(PhysicsValidationError):
        artanh(1.0)
    with pytest.raises(PhysicsValidationError):
        arcosh(0.5)


def test_rapidity_conversion():
    phi = velocity_to_rapidity(0.6)
    assert rapidity_to_velocity(phi) == pytest.approx(0.6)
    with pytest.raises(ValueError):
        velocity_to_rapidity(-1.0)


def test_rendezvous_at_rest():
    r = solve_rendezvous_problem(5, 0, 0, 5, 10)
    assert r.alpha == 0
    assert r.tau_f == 10
    assert r.v_f == 0 and r.energy_consumed == 0


@pytest.mark.parametrize("x1", [30.0, -30.0])
def test_rendezvous_from_rest_arrives_on_time(x1):
    r = solve_rendezvous_problem(0, 0, 0, x1, 50)
    assert math.copysign(1, r.alpha) == math.copysign(1, x1)
    assert 0 < r.tau_f < 50
    assert r.energy_consumed == abs(r.delta_phi)
    end = calculate_trajectory_point(0, 0, 0, r.alpha, r.tau_f)
    assert end.x == pytest.approx(x1)
    assert end.t == pytest.approx(50)


def test_rendezvous_already_on_course_is_inertial():
    r = solve_rendezvous_problem(0, 0, 0.5, 25, 50)
    assert r.alpha == pytest.approx(0, abs=1e-12)
    assert r.tau_f == pytest.approx(50 * math.sqrt(1 - 0.25))
    assert r.v_f == pytest.approx(0.5)


def test_rendezvous_rejects_impossible_requests():
    with pytest.raises(TrajectoryError):
        solve_rendezvous_problem(0, 10, 0, 1, 10)
    with pytest.raises(TrajectoryError):
        solve_rendezvous_problem(0, 0, 0, 60, 50)
    with pytest.raises(PhysicsValidationError):
        solve_rendezvous_problem(0, 0, 1.0, 10, 50)
    assert validate_rendezvous(10, 50)
    assert not validate_rendezvous(60, 50)


def test_generated_trajectory_is_physical():
    points, solution = generate_rendezvous_trajectory(0, 0, 0.2, 40, 60, samples=50)
    assert len(points) == 50
    assert points[0].tau == 0 and points[-1].tau == pytest.approx(solution.tau_f)
    valid, errors = validate_trajectory(points)
    assert valid, errors


def test_validate_trajectory_flags_problems():
    assert validate_trajectory([]) == (False, ["Trajectory too short"])
    frozen = generate_trajectory(0, 0, 0, 0.1, 0, samples=3)
    valid, errors = validate_trajectory(frozen)
    assert not valid
    assert "Coordinate time is not monotonic" in errors
    assert "Proper time is not monotonic" in errors
