"""Tests for the control-point drag controller."""

import pytest

from graphcad import DragStateError, Point
from graphcad.viz.drag import (
    DragController,
    Dragging,
    Idle,
    PointerDown,
    PointerMove,
    PointerUp,
    ScriptedEventSource,
)


class Recorder:
    """Collects commits for assertion."""

    def __init__(self):
        self.commits = []

    def __call__(self, edge_id, point):
        self.commits.append((edge_id, point))


@pytest.fixture
def recorder():
    return Recorder()


def make_controller(recorder, zoom=1.0, source=None):
    zoom_box = {"zoom": zoom}
    ctrl = DragController(get_zoom=lambda: zoom_box["zoom"], on_commit=recorder, event_source=source)
    return ctrl, zoom_box


class TestStateMachine:
    def test_starts_idle(self, recorder):
        ctrl, _ = make_controller(recorder)
        assert isinstance(ctrl.state, Idle)
        assert not ctrl.is_dragging
        assert ctrl.live_point is None

    def test_begin_enters_dragging_with_origin(self, recorder):
        ctrl, _ = make_controller(recorder)
        ctrl.begin("e1", screen=Point(200, 300), control=Point(50, 60))
        assert ctrl.state == Dragging("e1", Point(200, 300), Point(50, 60), live=Point(50, 60))

    def test_move_previews_without_committing(self, recorder):
        ctrl, _ = make_controller(recorder)
        ctrl.begin("e1", Point(0, 0), Point(50, 60))
        assert ctrl.move(Point(10, -20)) == Point(60, 40)
        assert recorder.commits == []

    def test_moves_are_relative_to_origin_not_cumulative(self, recorder):
        ctrl, _ = make_controller(recorder)
        ctrl.begin("e1", Point(100, 100), Point(0, 0))
        ctrl.move(Point(110, 100))
        ctrl.move(Point(120, 100))
        assert ctrl.live_point == Point(20, 0)

    def test_release_commits_and_returns_to_idle(self, recorder):
        ctrl, _ = make_controller(recorder)
        ctrl.begin("e1", Point(0, 0), Point(50, 60))
        ctrl.move(Point(5, 5))
        assert ctrl.release() == Point(55, 65)
        assert recorder.commits == [("e1", Point(55, 65))]
        assert isinstance(ctrl.state, Idle)

    def test_release_without_move_commits_origin(self, recorder):
        ctrl, _ = make_controller(recorder)
        ctrl.begin("e1", Point(0, 0), Point(7, 8))
        ctrl.release()
        assert recorder.commits == [("e1", Point(7, 8))]

    def test_idle_move_and_release_are_ignored(self, recorder):
        ctrl, _ = make_controller(recorder)
        assert ctrl.move(Point(1, 1)) is None
        assert ctrl.release() is None
        assert recorder.commits == []

    def test_second_drag_rejected(self, recorder):
        ctrl, _ = make_controller(recorder)
        ctrl.begin("e1", Point(0, 0), Point(0, 0))
        with pytest.raises(DragStateError, match="already being dragged"):
            ctrl.begin("e2", Point(0, 0), Point(0, 0))
        assert ctrl.state.edge_id == "e1"


class TestZoom:
    @pytest.mark.parametrize(("zoom", "expected"), [(1.0, Point(40, 20)), (2.0, Point(20, 10)), (0.5, Point(80, 40))])
    def test_screen_delta_divided_by_zoom(self, recorder, zoom, expected):
        ctrl, _ = make_controller(recorder, zoom=zoom)
        ctrl.begin("e1", Point(0, 0), Point(0, 0))
        assert ctrl.move(Point(40, 20)) == expected

    def test_zoom_read_on_every_move(self, recorder):
        ctrl, zoom_box = make_controller(recorder, zoom=1.0)
        ctrl.begin("e1", Point(0, 0), Point(0, 0))
        ctrl.move(Point(10, 0))
        zoom_box["zoom"] = 2.0
        assert ctrl.move(Point(10, 0)) == Point(5, 0)

    def test_non_positive_zoom_rejected(self, recorder):
        ctrl, _ = make_controller(recorder, zoom=0.0)
        ctrl.begin("e1", Point(0, 0), Point(0, 0))
        with pytest.raises(ValueError, match="positive"):
            ctrl.move(Point(1, 1))


class TestListenerScoping:
    def test_subscribed_only_while_dragging(self, recorder):
        source = ScriptedEventSource()
        ctrl, _ = make_controller(recorder, source=source)
        assert source.listener_count == 0
        ctrl.begin("e1", Point(0, 0), Point(0, 0))
        assert source.listener_count == 1
        source.push(PointerUp(Point(0, 0)))
        assert source.listener_count == 0

    def test_scripted_drag_end_to_end(self, recorder):
        source = ScriptedEventSource([PointerMove(Point(30, 0)), PointerMove(Point(60, 30)), PointerUp(Point(60, 30))])
        ctrl, _ = make_controller(recorder, zoom=3.0, source=source)
        ctrl.begin("e1", Point(0, 0), Point(100, 100))
        source.play()
        assert recorder.commits == [("e1", Point(120, 110))]
        assert not ctrl.is_dragging

    def test_events_after_release_are_not_delivered(self, recorder):
        source = ScriptedEventSource([PointerUp(Point(0, 0)), PointerMove(Point(500, 500))])
        ctrl, _ = make_controller(recorder, source=source)
        ctrl.begin("e1", Point(0, 0), Point(1, 1))
        source.play()
        assert recorder.commits == [("e1", Point(1, 1))]
        assert ctrl.live_point is None

    def test_cleanup_when_commit_fails(self):
        def failing_commit(edge_id, point):
            raise RuntimeError("store unavailable")

        source = ScriptedEventSource()
        ctrl = DragController(get_zoom=lambda: 1.0, on_commit=failing_commit, event_source=source)
        ctrl.begin("e1", Point(0, 0), Point(0, 0))
        with pytest.raises(RuntimeError):
            ctrl.release()
        assert isinstance(ctrl.state, Idle)
        assert source.listener_count == 0

    def test_pointer_down_during_drag_rejected(self, recorder):
        ctrl, _ = make_controller(recorder)
        ctrl.begin("e1", Point(0, 0), Point(0, 0))
        with pytest.raises(DragStateError):
            ctrl.handle(PointerDown("e2", Point(0, 0)))

    def test_pointer_down_while_idle_is_ignored(self, recorder):
        ctrl, _ = make_controller(recorder)
        ctrl.handle(PointerDown("e1", Point(0, 0)))
        assert not ctrl.is_dragging
