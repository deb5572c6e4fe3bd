from typing import Set

import networkx as nx

from genelinker.mindmap.layout import MindMap


def verify_mindmap(mm: MindMap) -> dict:
    ids: Set[str] = set(n.id for n in mm.nodes)
    if len(ids) != len(mm.nodes):
        raise ValueError("duplicate node ids in layout")
    # endpoint validity, both for the edge list and the per-node adjacency
    for src, dst in mm.edges:
        if src not in ids or dst not in ids:
            raise ValueError(f"edge {src}->{dst} references unknown node")
    for n in mm.nodes:
        dangling = n.edges - ids
        if dangling:
            raise ValueError(f"node {n.id} links to unknown {sorted(dangling)}")

    G = nx.DiGraph()
    for n in mm.nodes: G.add_node(n.id, kind=n.kind)
    for src, dst in mm.edges: G.add_edge(src, dst)

    comps = list(nx.weakly_connected_components(G))
    return {
        "n_nodes": G.number_of_nodes(),
        "n_edges": G.number_of_edges(),
        "n_components": len(comps),
        "is_tree": nx.is_arborescence(G) if G.number_of_nodes() else False,
        "graph_ok": True,
    }
