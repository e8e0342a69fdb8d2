"""Influence graph over registered works.

Nodes are works, edges point from an influencing work to the work it
influenced. Edge strength is 0-100 and stronger edges are drawn shorter.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum

from ghost_protocol.analysis.models import DetectedInfluence
from ghost_protocol.chain.models import RegisteredAsset

MAX_EDGE_DISTANCE = 150
AI_MARKER = "AI"


class NodeKind(str, Enum):
    GHOST = "ghost"
    AI = "ai"
    LIVING = "living"


class Era(str, Enum):
    ALL = "all"
    CLASSIC = "classic"
    MODERN = "modern"
    CONTEMPORARY = "contemporary"

    def contains(self, year: int | None) -> bool:
        if self is Era.ALL:
            return True
        if year is None:
            return False
        if self is Era.CLASSIC:
            return year < 1900
        if self is Era.MODERN:
            return 1900 <= year < 2000
        return year >= 2000


@dataclass(frozen=True)
class GraphNode:
    id: str
    title: str
    creator: str
    year: int | None
    is_deceased: bool

    @property
    def kind(self) -> NodeKind:
        if self.is_deceased:
            return NodeKind.GHOST
        if AI_MARKER in self.creator:
            return NodeKind.AI
        return NodeKind.LIVING

    def matches(self, query: str) -> bool:
        needle = query.strip().lower()
        return not needle or needle in self.title.lower() or needle in self.creator.lower()

    def to_dict(self) -> dict:
        return {**asdict(self), "kind": self.kind.value}


@dataclass(frozen=True)
class GraphEdge:
    source: str
    target: str
    strength: int

    @property
    def distance(self) -> int:
        return MAX_EDGE_DISTANCE - self.strength

    def to_dict(self) -> dict:
        return {**asdict(self), "distance": self.distance}


@dataclass(frozen=True)
class InfluenceGraph:
    nodes: list[GraphNode] = field(default_factory=list)
    edges: list[GraphEdge] = field(default_factory=list)

    def filter(self, query: str = "", era: Era = Era.ALL) -> "InfluenceGraph":
        """Keep nodes matching both filters and the edges between them."""
        nodes = [n for n in self.nodes if n.matches(query) and era.contains(n.year)]
        kept = {n.id for n in nodes}
        edges = [e for e in self.edges if e.source in kept and e.target in kept]
        return InfluenceGraph(nodes=nodes, edges=edges)

    def to_dict(self) -> dict:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }


class InfluenceGraphBuilder:
    def __init__(self) -> None:
        self._nodes: dict[str, GraphNode] = {}
        self._edges: dict[tuple[str, str], GraphEdge] = {}

    def add_node(self, node: GraphNode) -> GraphNode:
        self._nodes[node.id] = node
        return node

    def add_asset(self, asset: RegisteredAsset) -> GraphNode:
        year = None
        if asset.registered_at:
            year = datetime.fromtimestamp(asset.registered_at, tz=timezone.utc).year
        node = GraphNode(
            id=str(asset.id),
            title=asset.title,
            creator=asset.creator_name,
            year=year,
            is_deceased=asset.is_deceased,
        )
        return self.add_node(node)

    def add_influences(self, target: str, influences: list[DetectedInfluence]) -> None:
        """Add an edge into ``target`` from each confidently detected influence.

        Influences are matched to existing nodes by title (and creator when
        given), so add every registered asset first.
        """
        for influence in influences:
            if not influence.include:
                continue
            source = self._find_or_add(influence.name, influence.creator, influence.year)
            self.add_edge(source.id, target, influence.confidence)

    def add_edge(self, source: str, target: str, strength: int) -> None:
        if source == target:
            return
        strength = max(0, min(100, int(strength)))
        self._edges[(source, target)] = GraphEdge(source=source, target=target, strength=strength)

    def build(self) -> InfluenceGraph:
        return InfluenceGraph(nodes=list(self._nodes.values()), edges=list(self._edges.values()))

    def _find_or_add(self, title: str, creator: str, year: int | None) -> GraphNode:
        for node in self._nodes.values():
            if node.title.lower() == title.lower() and (
                not creator or node.creator.lower() == creator.lower()
            ):
                return node
        # A creator of a work older than a century is taken to be deceased.
        node = GraphNode(
            id=f"influence-{len(self._nodes) + 1}",
            title=title,
            creator=creator,
            year=year,
            is_deceased=bool(year and year < datetime.now(timezone.utc).year - 100),
        )
        self.add_node(node)
        return node
