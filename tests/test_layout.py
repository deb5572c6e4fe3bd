import math


def _analysis(**kw):
    from genelinker.models import AnalysisResult
    base = dict(
        title="CRISPR screens in T cells",
        summary="s",
        key_findings=["f1", "f2", "f3", "f4"],
        methodology="Pooled knockout screen",
        conclusions="Works",
        research_gaps=["g1"],
        future_directions=["d1", "d2"],
        confidence_score=0.9,
    )
    base.update(kw)
    return AnalysisResult(**base)


def test_node_counts_and_no_dangling_edges():
    from genelinker.mindmap.layout import layout_mindmap
    from genelinker.mindmap.verify import verify_mindmap
    mm = layout_mindmap(_analysis())
    assert len(mm.by_kind("central")) == 1
    assert [b.id for b in mm.by_kind("branch")] == ["findings", "methodology", "conclusions", "gaps", "future"]
    # 3 findings (capped) + 1 + 1 + 1 + 2
    assert len(mm.by_kind("leaf")) == 8
    stats = verify_mindmap(mm)
    assert stats["n_nodes"] == 14 and stats["n_edges"] == 13
    assert stats["n_components"] == 1 and stats["is_tree"]


def test_empty_branch_is_still_drawn():
    from genelinker.mindmap.layout import layout_mindmap
    mm = layout_mindmap(_analysis(methodology="   ", research_gaps=[]))
    assert mm.node("methodology").kind == "branch"
    assert mm.leaves_of("methodology") == []
    assert mm.leaves_of("gaps") == []
    assert ("central", "methodology") in mm.edges


def test_positions_are_fixed():
    from genelinker.mindmap.layout import layout_mindmap
    mm = layout_mindmap(_analysis())
    assert mm.node("central").position == (400.0, 300.0)
    f = mm.node("findings")
    assert math.isclose(f.x, 200.0) and math.isclose(f.y, 150.0)
    fut = mm.node("future")
    assert math.isclose(fut.x, 400.0) and math.isclose(fut.y, 550.0)
    leaf = mm.node("findings_sub_0")
    assert math.isclose(leaf.x, 200.0 + 120.0 * math.cos(-0.5))
    assert math.isclose(leaf.y, 150.0 + 120.0 * math.sin(-0.5))
    # middle leaf points straight out along the x axis
    assert math.isclose(mm.node("findings_sub_1").y, 150.0)


def test_layout_is_deterministic():
    from genelinker.mindmap.layout import layout_mindmap
    a = _analysis()
    assert layout_mindmap(a) == layout_mindmap(a)


def test_labels_are_truncated():
    from genelinker.mindmap.layout import layout_mindmap, truncate
    assert truncate("short", 25) == "short"
    assert truncate("x" * 40, 40) == "x" * 40
    t = truncate("y" * 41, 40)
    assert len(t) == 40 and t.endswith("…")
    mm = layout_mindmap(_analysis(title="A" * 60, key_findings=["word " * 20]))
    assert len(mm.node("central").label) == 40
    assert len(mm.node("findings_sub_0").label) <= 25
    # the map keeps the full title for filenames
    assert mm.title == "A" * 60


def test_analysis_lists_are_bounded():
    from genelinker.models import AnalysisResult
    a = AnalysisResult(title="t", key_findings=["a", "", None, "b", "c", "d", "e"], confidence_score=7)
    assert a.key_findings == ("a", "b", "c", "d")
    assert a.confidence_score == 1.0


def test_payload_shape():
    from genelinker.mindmap.adapter import mindmap_payload
    from genelinker.mindmap.layout import layout_mindmap
    p = mindmap_payload(layout_mindmap(_analysis()))
    ids = {n["id"] for n in p["nodes"]}
    assert all(e["source"] in ids and e["target"] in ids for e in p["edges"])
    central = next(n for n in p["nodes"] if n["kind"] == "central")
    assert central["color"] == "#3b82f6" and central["radius"] == 40.0
