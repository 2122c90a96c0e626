"""
Knowledge graph builder.

Links each live card to its tags so related vocabulary clusters together.
Node size follows review count; node colour follows ease factor.
"""

import logging

from lexicard.application.utils.clock import now_ms
from lexicard.domain.constants import DEFAULT_MAX_GRAPH_NODES
from lexicard.domain.graph import GraphEdge, GraphNode, KnowledgeGraph, NodeKind
from lexicard.domain.models import Card, CardIndex, SchedulingState

logger = logging.getLogger(__name__)

# (minimum interval in days, mastery level), checked top-down
MASTERY_THRESHOLDS = ((21, 5), (14, 4), (7, 3), (3, 2))


def mastery_level(state: SchedulingState | None) -> int:
    """Map a card's interval onto a 0-5 mastery scale."""
    if state is None or state.reps == 0:
        return 0
    for min_interval, level in MASTERY_THRESHOLDS:
        if state.interval_days >= min_interval:
            return level
    return 1


def tag_node_id(tag: str) -> str:
    return f"tag:{tag.lower()}"


def generate_knowledge_graph(
    index: CardIndex,
    max_nodes: int = DEFAULT_MAX_GRAPH_NODES,
    include_orphans: bool = False,
    filter_tag: str | None = None,
    now: int | None = None,
) -> KnowledgeGraph:
    """
    Build a card/tag graph from an index snapshot.

    Args:
        index: Index snapshot from build_index.
        max_nodes: Maximum card nodes (tag nodes are not counted).
        include_orphans: Keep cards that have no tags.
        filter_tag: Only include cards carrying this tag.
        now: Generation timestamp (epoch ms).

    Returns:
        KnowledgeGraph with the most-connected cards first.
    """
    cards: list[Card] = list(index.cards.values())
    if filter_tag:
        cards = [c for c in cards if filter_tag in c.tags]

    # Stable sort: equally connected cards keep index order
    cards.sort(key=lambda c: len(c.tags), reverse=True)

    if not include_orphans:
        cards = [c for c in cards if c.tags]

    cards = cards[:max_nodes]

    graph = KnowledgeGraph(generated_at=now if now is not None else now_ms())
    seen_tags: set[str] = set()

    for card in cards:
        state = index.states.get(card.id)
        graph.nodes.append(
            GraphNode(
                id=card.id,
                label=card.front.term,
                kind=NodeKind.CARD,
                mastery_level=mastery_level(state),
                reps=state.reps if state else 0,
                ease_factor=state.ease_factor if state else None,
                weight=1 + len(card.tags) * 0.2,
            )
        )

    for card in cards:
        for tag in card.tags:
            tag_id = tag_node_id(tag)
            if tag_id not in seen_tags:
                graph.nodes.append(
                    GraphNode(id=tag_id, label=f"#{tag}", kind=NodeKind.TAG, weight=0.8)
                )
                seen_tags.add(tag_id)
            graph.edges.append(GraphEdge(source=card.id, target=tag_id, weight=0.5))

    graph.total_cards = len(cards)
    logger.debug(
        f"Knowledge graph: {len(cards)} cards, {len(seen_tags)} tags, "
        f"{len(graph.edges)} edges"
    )
    return graph
