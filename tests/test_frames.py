import math

import pytest

from lightcone.errors import PositionValidationError, SourceFrameValidationError
from lightcone.frames import FrameDiagram


def test_new_diagram_has_only_the_origin(diagram):
    assert len(diagram) == 1
    origin = diagram.frames[0]
    assert (origin.x, origin.t, origin.source_index) == (0, 0, -1)
    assert diagram.selected_index == 0


def test_add_frame_validates_source_and_position(diagram):
    assert diagram.add_frame(10, 50, 0) == 1
    with pytest.raises(SourceFrameValidationError):
        diagram.add_frame(100, 50, 0)
    with pytest.raises(SourceFrameValidationError):
        diagram.add_frame(0, 50, 7)
    with pytest.raises(PositionValidationError):
        diagram.add_frame(math.nan, 50, 0)
    with pytest.raises(ValueError):
        diagram.add_frame(0, math.inf, 0)


def test_added_frame_carries_cumulative_physics(diagram):
    index = diagram.add_frame(30, 50, 0)
    frame = diagram.frames[index]
    physics = diagram.physics_of(index)
    assert frame.cumulative_velocity == physics.cumulative_velocity > 0
    assert frame.cumulative_proper_time == physics.cumulative_proper_time
    assert frame.total_coordinate_time == 50


def test_create_frame_uses_newest_containing_cone(diagram):
    assert diagram.create_frame_at(10, 50) == 1
    assert diagram.frames[1].source_index == 0
    assert diagram.create_frame_at(10, 100) == 2
    assert diagram.frames[2].source_index == 1
    assert diagram.create_frame_at(500, 10) is None
    assert len(diagram) == 3


def test_move_frame_keeps_causality(diagram):
    parent = diagram.add_frame(0, 50, 0)
    child = diagram.add_frame(0, 100, parent)

    assert not diagram.move_frame(0, 5, 5)
    assert not diagram.move_frame(parent, 80, 50)
    # Would push the child outside the parent's future cone
    assert not diagram.move_frame(parent, 40, 90)
    assert (diagram.frames[parent].x, diagram.frames[parent].t) == (0, 50)

    assert diagram.move_frame(parent, 10, 60)
    assert (diagram.frames[parent].x, diagram.frames[parent].t) == (10, 60)
    assert diagram.frames[child].total_coordinate_time == 100


def test_delete_cascades_and_compacts(diagram):
    a = diagram.add_frame(0, 50, 0)        # 1
    diagram.add_frame(10, 100, a)          # 2, child of 1
    b = diagram.add_frame(-20, 60, 0)      # 3
    c = diagram.add_frame(-20, 100, b)     # 4, child of 3
    diagram.set_cartouche_offset(b, 5, 5)
    diagram.set_cartouche_offset(c, 7, 7)
    diagram.select(c)

    assert diagram.delete_frame(a) == [2, 1]
    assert len(diagram) == 3
    assert [(f.x, f.t, f.source_index) for f in diagram.frames] == [(0, 0, -1), (-20, 60, 0), (-20, 100, 1)]
    assert diagram.cartouche_offsets == {1: (5, 5), 2: (7, 7)}
    assert diagram.selected_index == 0


def test_origin_cannot_be_deleted(diagram):
    diagram.add_frame(0, 50, 0)
    assert diagram.delete_frame(0) == []
    assert len(diagram) == 2


def test_twin_paradox_scenario(diagram):
    diagram.load_twin_paradox()
    assert [(f.x, f.t, f.source_index) for f in diagram.frames] == [
        (0, 0, -1), (0, 300, 0), (120, 135, 0), (0, 300, 2)]
    home = diagram.physics_of(1).cumulative_proper_time
    traveller = diagram.physics_of(3).cumulative_proper_time
    assert home == pytest.approx(300)
    assert traveller < home


def test_chain_and_trajectory_queries(diagram):
    a = diagram.add_frame(20, 50, 0)
    b = diagram.add_frame(0, 100, a)
    assert diagram.chain_to(b) == [diagram.frames[0], diagram.frames[a], diagram.frames[b]]
    assert diagram.trajectory_of(0) == []
    path = diagram.trajectory_of(b)
    assert path[0].t == pytest.approx(50) and path[-1].x == pytest.approx(0)
    total = diagram.cumulative_trajectory_to(b).total_physics
    assert total.total_coordinate_time == pytest.approx(100)


def test_trajectory_departs_with_inherited_velocity(diagram):
    a = diagram.add_frame(20, 50, 0)
    b = diagram.add_frame(40, 100, a)
    v0 = diagram.frames[a].cumulative_velocity
    assert v0 > 0.5

    first = diagram.trajectory_of(a)
    assert (first[0].x, first[0].t) == (0, 0)
    assert (first[1].x - first[0].x) / (first[1].t - first[0].t) < 0.1

    path = diagram.trajectory_of(b)
    assert (path[0].x, path[0].t) == (20, 50)
    assert path[-1].x == pytest.approx(40) and path[-1].t == pytest.approx(100)
    assert (path[1].x - path[0].x) / (path[1].t - path[0].t) == pytest.approx(v0, abs=0.05)


def test_serialization_round_trip(diagram):
    a = diagram.add_frame(20, 50, 0)
    diagram.add_frame(0, 100, a)
    diagram.set_cartouche_offset(a, 12, -4)
    diagram.select(a)

    data = diagram.to_dict()
    assert set(data) == {"coneOrigins", "cartoucheOffsets", "selectedReferenceFrame"}
    restored = FrameDiagram.from_dict(data)
    assert restored.frames == diagram.frames
    assert restored.cartouche_offsets == {a: (12, -4)}
    assert restored.selected_index == a


def test_from_dict_rejects_dangling_sources():
    data = {"coneOrigins": [{"x": 0, "t": 0, "sourceIndex": -1}, {"x": 0, "t": 5, "sourceIndex": 4}]}
    with pytest.raises(SourceFrameValidationError):
        FrameDiagram.from_dict(data)


def test_velocity_ratio_at_uses_newest_containing_frame(diagram):
    diagram.add_frame(10, 50, 0)
    assert diagram.velocity_ratio_at(20, 70) == (1, pytest.approx(0.5))
    assert diagram.velocity_ratio_at(-30, 40) == (0, pytest.approx(0.75))
    assert diagram.velocity_ratio_at(-200, 10) is None
