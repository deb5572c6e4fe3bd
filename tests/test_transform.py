import math


def test_zoom_is_clamped():
    from genelinker.mindmap.transform import IDENTITY, MAX_SCALE, MIN_SCALE, zoom_in, zoom_out
    t = IDENTITY
    for _ in range(20):
        t = zoom_in(t)
    assert t.scale == MAX_SCALE
    for _ in range(40):
        t = zoom_out(t)
    assert t.scale == MIN_SCALE
    assert math.isclose(zoom_in(IDENTITY).scale, 1.2)


def test_screen_and_canvas_are_inverse():
    from genelinker.mindmap.transform import ViewTransform
    t = ViewTransform(scale=2.0, offset_x=-400.0, offset_y=-300.0)
    assert t.to_screen(400, 300) == (400.0, 300.0)
    assert t.to_canvas(*t.to_screen(123.0, 45.0)) == (123.0, 45.0)


def test_non_positive_scale_rejected():
    import pytest
    from genelinker.mindmap.transform import ViewTransform
    with pytest.raises(ValueError):
        ViewTransform(scale=0)


def test_drag_pans_by_cursor_delta():
    from genelinker.mindmap.transform import Viewport
    vp = Viewport()
    seen = []
    vp.subscribe(seen.append)
    vp.press(10, 10)
    vp.move(15, 20)
    vp.move(15, 20)           # no movement, no notification
    vp.release()
    vp.move(100, 100)         # button up: ignored
    assert (vp.transform.offset_x, vp.transform.offset_y) == (5.0, 10.0)
    assert len(seen) == 1


def test_reset_restores_identity():
    from genelinker.mindmap.transform import IDENTITY, Viewport
    vp = Viewport()
    seen = []
    vp.subscribe(seen.append)
    vp.reset()
    assert seen == []
    vp.zoom_in()
    vp.pan_by(3, 4)
    assert vp.reset() == IDENTITY
    assert len(seen) == 3
