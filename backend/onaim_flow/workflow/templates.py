"""
Pre-built Flow Templates.

Factory functions that return ready-made, publishable
``FlowDefinition`` objects. ``seed_templates`` saves them to a
FlowStore on first startup so users can clone or study them.
"""

from __future__ import annotations

from logging import getLogger
from typing import Callable, List

from onaim_flow.workflow.errors import DuplicateNameError
from onaim_flow.workflow.workflow_model import (
    FilterCondition,
    FlowDefinition,
    FlowEdge,
    FlowNode,
    NodeData,
    OutputStep,
)
from onaim_flow.workflow.workflow_store import FlowStore

logger = getLogger(__name__)


def _builder():
    nodes: List[FlowNode] = []
    edges: List[FlowEdge] = []

    def _add(nid: str, x: float, y: float, **data) -> None:
        nodes.append(FlowNode(
            id=nid, position={"x": x, "y": y}, data=NodeData(**data),
        ))

    def _edge(src: str, tgt: str) -> None:
        edges.append(FlowEdge(id=f"e-{src}-{tgt}", source=src, target=tgt))

    return nodes, edges, _add, _edge


def create_bet_rewards_template() -> FlowDefinition:
    """Award points as a player's Hub bets accumulate.

    Topology::
        EVENT (Hub / Bet) → OUTPUT (3 steps)
    """
    nodes, edges, _add, _edge = _builder()

    _add("event", 0, 0, label="Hub Bet", node_type="event", icon="⚡",
         event_source="Hub", event_type="Bet")
    _add("output", 0, 160, label="Bet Rewards", node_type="output", icon="📤",
         output_steps=[
             OutputStep(id="s1", progress=25, point=5),
             OutputStep(id="s2", progress=50, point=10),
             OutputStep(id="s3", progress=100, point=25),
         ])

    _edge("event", "output")

    return FlowDefinition(
        name="Bet Rewards",
        description="Points for Hub bets at 25/50/100% progress.",
        nodes=nodes,
        edges=edges,
        node_count=len(nodes),
        edge_count=len(edges),
    )


def create_high_roller_template() -> FlowDefinition:
    """Reward large external deposits only.

    Topology::
        EVENT (External / Deposit) → FILTER (amount > 100)
          → SELECT (amount) → OUTPUT
    """
    nodes, edges, _add, _edge = _builder()

    _add("event", 0, 0, label="Deposit", node_type="event", icon="⚡",
         event_source="External", event_type="Deposit")
    _add("filter", 0, 160, label="Large Deposits", node_type="filter", icon="🔍",
         filter_conditions=[
             FilterCondition(id="c1", property_name="amount",
                             operator="greater than", value="100"),
         ])
    _add("select", 0, 320, label="Deposit Amount", node_type="select", icon="📊",
         select_property="amount")
    _add("output", 0, 480, label="High Roller Points", node_type="output", icon="📤",
         output_steps=[OutputStep(id="s1", progress=100, point=50)])

    _edge("event", "filter")
    _edge("filter", "select")
    _edge("select", "output")

    return FlowDefinition(
        name="High Roller",
        description="Points for external deposits above 100.",
        nodes=nodes,
        edges=edges,
        node_count=len(nodes),
        edge_count=len(edges),
    )


TEMPLATE_FACTORIES: List[Callable[[], FlowDefinition]] = [
    create_bet_rewards_template,
    create_high_roller_template,
]


def seed_templates(store: FlowStore) -> int:
    """Save every template whose name is not taken yet. Returns the count saved."""
    saved = 0
    for factory in TEMPLATE_FACTORIES:
        template = factory()
        try:
            flow = store.create_flow(template.name, template.description)
        except DuplicateNameError:
            continue
        store.save_graph(flow.id, template.nodes, template.edges)
        saved += 1
    if saved:
        logger.info(f"✅ Flow templates seeded: {saved}")
    return saved
