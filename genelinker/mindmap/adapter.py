from genelinker.mindmap.layout import MindMap


def mindmap_payload(mm: MindMap) -> dict:
    nodes = []
    for n in mm.nodes:
        nodes.append({
            "id": n.id, "label": n.label, "kind": n.kind,
            "x": n.x, "y": n.y, "radius": n.radius, "color": n.color,
            "edges": sorted(n.edges),
        })
    edges = [{"source": s, "target": t} for s, t in mm.edges]
    return {"title": mm.title, "nodes": nodes, "edges": edges}
