# genelinker/mindmap/layout.py
# Deterministic placement of the mind map: one central node, five branches at
# fixed directions, up to three leaves fanned around each branch.
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import FrozenSet, List, Literal, Sequence, Tuple

from genelinker.models import AnalysisResult

NodeKind = Literal["central", "branch", "leaf"]

CANVAS_SIZE = (800, 600)
CENTER = (400.0, 300.0)

BRANCH_DISTANCE = 250.0
LEAF_DISTANCE = 120.0
LEAF_ANGLE_STEP = 0.5          # radians
MAX_LEAVES = 3

CENTRAL_LABEL_MAX = 40
LEAF_LABEL_MAX = 25

RADIUS = {"central": 40.0, "branch": 30.0, "leaf": 20.0}
COLOR = {"central": "#3b82f6", "branch": "#10b981", "leaf": "#8b5cf6"}

ELLIPSIS = "…"


@dataclass(frozen=True)
class MindMapNode:
    id: str
    label: str
    x: float
    y: float
    kind: NodeKind
    color: str
    radius: float
    edges: FrozenSet[str] = frozenset()

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class MindMap:
    title: str
    nodes: Tuple[MindMapNode, ...]
    edges: Tuple[Tuple[str, str], ...]

    def node(self, node_id: str) -> MindMapNode:
        for n in self.nodes:
            if n.id == node_id:
                return n
        raise KeyError(node_id)

    def by_kind(self, kind: NodeKind) -> List[MindMapNode]:
        return [n for n in self.nodes if n.kind == kind]

    def leaves_of(self, branch_id: str) -> List[MindMapNode]:
        targets = self.node(branch_id).edges
        return [n for n in self.nodes if n.id in targets and n.kind == "leaf"]


@dataclass(frozen=True)
class _Branch:
    id: str
    label: str
    dx: float       # unit direction from the centre
    dy: float


# order matters: it is the draw order and the edge order of the central node
BRANCHES: Tuple[_Branch, ...] = (
    _Branch("findings", "Key Findings", -0.8, -0.6),
    _Branch("methodology", "Methodology", 0.8, -0.6),
    _Branch("conclusions", "Conclusions", -0.8, 0.6),
    _Branch("gaps", "Research Gaps", 0.8, 0.6),
    _Branch("future", "Future Directions", 0.0, 1.0),
)


def truncate(text: str, max_len: int) -> str:
    """Cut to at most max_len characters, the last one being the ellipsis."""
    s = text or ""
    if max_len <= 0:
        return ""
    return (s[: max_len - 1] + ELLIPSIS) if len(s) > max_len else s


def _branch_items(analysis: AnalysisResult, branch_id: str) -> Sequence[str]:
    if branch_id == "findings":
        return analysis.key_findings
    if branch_id == "methodology":
        return [analysis.methodology] if analysis.methodology else []
    if branch_id == "conclusions":
        return [analysis.conclusions] if analysis.conclusions else []
    if branch_id == "gaps":
        return analysis.research_gaps
    if branch_id == "future":
        return analysis.future_directions
    return []


def leaf_angle(index: int, angle_step: float = LEAF_ANGLE_STEP,
               max_leaves: int = MAX_LEAVES) -> float:
    midpoint = (max_leaves - 1) / 2
    return (index - midpoint) * angle_step


def layout_mindmap(analysis: AnalysisResult,
                   center: Tuple[float, float] = CENTER,
                   branch_distance: float = BRANCH_DISTANCE,
                   leaf_distance: float = LEAF_DISTANCE,
                   angle_step: float = LEAF_ANGLE_STEP) -> MindMap:
    cx, cy = center
    nodes: List[MindMapNode] = []
    edges: List[Tuple[str, str]] = []

    central = MindMapNode(
        id="central",
        label=truncate(analysis.title, CENTRAL_LABEL_MAX),
        x=cx, y=cy,
        kind="central",
        color=COLOR["central"],
        radius=RADIUS["central"],
        edges=frozenset(b.id for b in BRANCHES),
    )
    nodes.append(central)

    for b in BRANCHES:
        bx = cx + b.dx * branch_distance
        by = cy + b.dy * branch_distance
        edges.append((central.id, b.id))

        leaves: List[MindMapNode] = []
        for i, item in enumerate(list(_branch_items(analysis, b.id))[:MAX_LEAVES]):
            a = leaf_angle(i, angle_step)
            leaves.append(MindMapNode(
                id=f"{b.id}_sub_{i}",
                label=truncate(item, LEAF_LABEL_MAX),
                x=bx + math.cos(a) * leaf_distance,
                y=by + math.sin(a) * leaf_distance,
                kind="leaf",
                color=COLOR["leaf"],
                radius=RADIUS["leaf"],
            ))

        # a branch with no items still gets drawn, with zero leaves
        nodes.append(MindMapNode(
            id=b.id,
            label=b.label,
            x=bx, y=by,
            kind="branch",
            color=COLOR["branch"],
            radius=RADIUS["branch"],
            edges=frozenset(leaf.id for leaf in leaves),
        ))
        for leaf in leaves:
            nodes.append(leaf)
            edges.append((b.id, leaf.id))

    return MindMap(title=analysis.title, nodes=tuple(nodes), edges=tuple(edges))
