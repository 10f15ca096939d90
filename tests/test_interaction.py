import pytest

from lightcone.interaction import (
    DRAGGING_CARTOUCHE,
    DRAGGING_EXISTING_CONE,
    DRAGGING_NEW_CONE,
    IDLE,
    DragController,
)


@pytest.fixture
def drag(diagram, view):
    return DragController(diagram, view)


def test_view_mapping(view):
    assert view.to_screen(0, 0) == (550, 750)
    assert view.to_screen(10, 50) == (570, 650)
    assert view.to_spacetime(570, 650) == (10, 50)
    view.set_viewport_size(800, 600)
    assert view.to_spacetime(400, 550) == (0, 0)


def test_frame_hit_test_skips_origin(diagram, view):
    diagram.add_frame(10, 50, 0)
    assert view.frame_at_screen(diagram.frames, 580, 650) == 1
    assert view.frame_at_screen(diagram.frames, 600, 650) is None
    assert view.frame_at_screen(diagram.frames, 550, 750) is None


def test_press_inside_cone_creates_and_drags_new_frame(drag, diagram):
    assert drag.press(550, 650) == "grabbing"
    assert drag.state == DRAGGING_NEW_CONE
    assert len(diagram) == 2 and diagram.selected_index == 1
    drag.move(570, 650)
    assert (diagram.frames[1].x, diagram.frames[1].t) == (10, 50)
    drag.release(570, 650)
    assert drag.state == IDLE


def test_press_outside_every_cone_is_refused(drag, diagram):
    assert drag.press(550, 790) == "not-allowed"
    assert drag.state == IDLE
    assert len(diagram) == 1


def test_drag_existing_frame_respects_threshold_and_causality(drag, diagram):
    diagram.add_frame(10, 50, 0)
    assert drag.press(571, 651) == "grabbing"
    assert drag.state == DRAGGING_EXISTING_CONE

    drag.move(572, 652)
    assert (diagram.frames[1].x, diagram.frames[1].t) == (10, 50)

    assert drag.move(590, 640) == "grabbing"
    assert (diagram.frames[1].x, diagram.frames[1].t) == (20, 55)

    assert drag.move(950, 650) == "not-allowed"
    assert (diagram.frames[1].x, diagram.frames[1].t) == (20, 55)

    assert drag.cancel() == "default"
    assert (diagram.frames[1].x, diagram.frames[1].t) == (10, 50)
    assert drag.state == IDLE


def test_cartouche_drag_and_cancel(drag, diagram):
    diagram.add_frame(10, 50, 0)
    drag.press(100, 100, cartouche_index=1)
    assert drag.state == DRAGGING_CARTOUCHE
    drag.move(120, 90)
    assert diagram.cartouche_offset(1) == (20, -10)
    drag.cancel()
    assert diagram.cartouche_offset(1) == (0, 0)


def test_hover_cursor(drag, diagram):
    diagram.add_frame(10, 50, 0)
    assert drag.move(570, 650) == "grab"
    assert drag.move(100, 100) == "default"


def test_delete_during_drag_leaves_other_frames_alone(drag, diagram, view):
    diagram.add_frame(10, 50, 0)
    diagram.add_frame(-20, 100, 0)
    drag.press(*view.to_screen(10, 50))
    drag.move(*view.to_screen(15, 60))
    assert diagram.frames[1].x == 15

    assert drag.delete_selected() == [1]
    assert drag.state == IDLE
    assert (diagram.frames[1].x, diagram.frames[1].t) == (-20, 100)

    drag.move(*view.to_screen(-10, 120))
    drag.release(*view.to_screen(-10, 120))
    assert (diagram.frames[1].x, diagram.frames[1].t) == (-20, 100)
    assert len(diagram) == 2


def test_delete_selected_refuses_the_origin(drag, diagram):
    assert drag.delete_selected() == []
    assert len(diagram) == 1
