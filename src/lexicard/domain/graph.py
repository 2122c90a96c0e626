"""
Domain models for the vocabulary knowledge graph.

Cards are linked to the tags they carry; tag nodes are shared between cards.
"""

from dataclasses import dataclass, field
from enum import Enum


class NodeKind(str, Enum):
    CARD = "card"
    TAG = "tag"


@dataclass(frozen=True)
class GraphNode:
    """
    A node in the knowledge graph.

    Attributes:
        id: Card id, or "tag:<lowercased tag>" for tag nodes.
        label: Card term or "#tag".
        kind: Card or tag.
        mastery_level: 0=new, 1-2=learning, 3-4=learned, 5=mastered (cards only).
        reps: Review count, used for node size (cards only).
        ease_factor: Used for node colour (cards only).
        weight: Layout weight.
    """

    id: str
    label: str
    kind: NodeKind
    mastery_level: int | None = None
    reps: int | None = None
    ease_factor: float | None = None
    weight: float = 1.0


@dataclass(frozen=True)
class GraphEdge:
    source: str
    target: str
    weight: float = 0.5


@dataclass
class KnowledgeGraph:
    """Nodes, edges and summary counts."""

    nodes: list[GraphNode] = field(default_factory=list)
    edges: list[GraphEdge] = field(default_factory=list)
    total_cards: int = 0
    generated_at: int | None = None

    @property
    def total_connections(self) -> int:
        return len(self.edges)

    def get_node(self, node_id: str) -> GraphNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def get_tags(self, card_id: str) -> list[str]:
        """Tag node ids linked to a card."""
        return [edge.target for edge in self.edges if edge.source == card_id]
