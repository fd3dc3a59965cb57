"""
Test configuration and fixtures for onaim_flow tests.
"""
import pytest

from onaim_flow.config import ValidationConfig
from onaim_flow.workflow.composite_store import CompositeStore
from onaim_flow.workflow.node_type_store import NodeTypeStore
from onaim_flow.workflow.nodes import ConfigurableField, DynamicNodeType
from onaim_flow.workflow.workflow_model import (
    FilterCondition,
    FlowEdge,
    FlowNode,
    NodeData,
    OutputStep,
)
from onaim_flow.workflow.workflow_store import FlowStore


# ---------------------------------------------------------------------------
# Node / edge builders
# ---------------------------------------------------------------------------


def event_node(node_id="event-1", label="Bet Event", source="Hub", event_type="Bet"):
    return FlowNode(id=node_id, data=NodeData(
        label=label, node_type="event", event_source=source, event_type=event_type,
    ))


def output_node(node_id="output-1", label="Rewards", steps=None):
    if steps is None:
        steps = [OutputStep(id="s1", progress=50, point=10)]
    return FlowNode(id=node_id, data=NodeData(
        label=label, node_type="output", output_steps=steps,
    ))


def filter_node(node_id="filter-1", label="Big Bets", conditions=None):
    if conditions is None:
        conditions = [FilterCondition(
            id="c1", property_name="amount", operator="greater than", value="10",
        )]
    return FlowNode(id=node_id, data=NodeData(
        label=label, node_type="filter", filter_conditions=conditions,
    ))


def select_node(node_id="select-1", label="Amount", prop="amount"):
    return FlowNode(id=node_id, data=NodeData(
        label=label, node_type="select", select_property=prop,
    ))


def dynamic_node(node_id="dyn-1", label="Bonus", type_id="bonus-type", values=None):
    return FlowNode(id=node_id, data=NodeData(
        label=label,
        node_type=type_id,
        dynamic_node_type_id=type_id,
        dynamic_field_values=values or {},
    ))


def edge(source, target, edge_id=None):
    return FlowEdge(id=edge_id or f"{source}->{target}", source=source, target=target)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def bonus_type():
    """Dynamic type with one required and one optional field."""
    return DynamicNodeType(
        id="bonus-type",
        name="Bonus",
        fields=[
            ConfigurableField(id="amount", name="amount", type="number", required=True),
            ConfigurableField(id="note", name="note", type="text"),
        ],
    )


@pytest.fixture
def minimal_flow():
    """Fully configured event → output."""
    nodes = [event_node(), output_node()]
    edges = [edge("event-1", "output-1")]
    return nodes, edges


@pytest.fixture
def validation_config():
    return ValidationConfig(report_dangling_edges=True)


@pytest.fixture
def flow_store(tmp_path, validation_config):
    return FlowStore(storage_dir=tmp_path / "flows", validation_config=validation_config)


@pytest.fixture
def node_type_store(tmp_path):
    return NodeTypeStore(storage_dir=tmp_path / "node_types")


@pytest.fixture
def composite_store(tmp_path, node_type_store, validation_config):
    return CompositeStore(
        storage_dir=tmp_path / "composites",
        node_type_store=node_type_store,
        validation_config=validation_config,
    )
