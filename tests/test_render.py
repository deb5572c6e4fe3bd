def _map(title="T"):
    from genelinker.mindmap.layout import layout_mindmap
    from genelinker.models import AnalysisResult
    return layout_mindmap(AnalysisResult(title=title, key_findings=["one"], methodology="m"))


def _bluish(px):
    r, g, b = px[:3]
    return b > 200 and b - r > 60


def test_wrap_label_greedy():
    from genelinker.mindmap.render import wrap_label
    assert wrap_label("alpha beta gamma", 11, len) == ["alpha beta", "gamma"]
    # the first word stays on line one however wide it is
    assert wrap_label("supercalifragilistic x", 5, len) == ["supercalifragilistic", "x"]
    assert wrap_label("", 10, len) == [""]


def test_multiword_labels_are_lifted():
    from genelinker.mindmap.layout import MindMapNode
    from genelinker.mindmap.render import label_lines
    n = MindMapNode("b", "Research Gaps Found", 100.0, 200.0, "branch", "#10b981", 30.0)
    lines = label_lines(n, lambda s: 1.0)
    assert lines[0][1] == 195.0
    leaf = MindMapNode("l", "a b c", 100.0, 200.0, "leaf", "#8b5cf6", 20.0)
    assert label_lines(leaf, lambda s: 1.0)[0][1] == 200.0


def test_render_background_and_central_node():
    from genelinker.mindmap.render import render_mindmap
    img = render_mindmap(_map())
    assert img.size == (800, 600)
    assert img.getpixel((5, 5))[:3] == (255, 255, 255)
    assert _bluish(img.getpixel((385, 318)))


def test_zoom_changes_what_is_drawn():
    from genelinker.mindmap.render import render_mindmap
    from genelinker.mindmap.transform import ViewTransform
    mm = _map()
    assert render_mindmap(mm).getpixel((460, 300))[:3] == (255, 255, 255)
    # twice the size, centre kept in place: the central disc now reaches x=460
    zoomed = render_mindmap(mm, ViewTransform(2.0, -400.0, -300.0))
    assert _bluish(zoomed.getpixel((460, 300)))


def test_view_rerenders_on_change_and_exports_png():
    from genelinker.mindmap.render import MindMapView
    v = MindMapView(_map("Gene Regulation: A Review"))
    assert v.renders == 1
    v.viewport.zoom_in()
    v.viewport.reset()
    v.viewport.reset()
    assert v.renders == 3
    name, data = v.export_png()
    assert name == "mindmap_gene_regulation__a_review.png"
    assert data[:8] == b"\x89PNG\r\n\x1a\n"
