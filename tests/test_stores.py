"""
Tests for the flow, composite and node type stores.
"""
import pytest

from onaim_flow.config import ValidationConfig
from onaim_flow.workflow.errors import (
    CompositeNotFoundError,
    DuplicateNameError,
    FlowNotFoundError,
    NodeTypeNotFoundError,
)
from onaim_flow.workflow.templates import (
    TEMPLATE_FACTORIES,
    create_high_roller_template,
    seed_templates,
)
from onaim_flow.workflow.flow_validation import validate_flow
from onaim_flow.workflow.validation_result import ValidationCode
from onaim_flow.workflow.workflow_model import CompositeNode, ExposedPort
from onaim_flow.workflow.workflow_store import FlowStore

from conftest import dynamic_node, edge, event_node, output_node


class TestFlowStore:
    def test_create_and_load(self, flow_store):
        flow = flow_store.create_flow("Bets", "Bet rewards")
        loaded = flow_store.get_flow(flow.id)
        assert loaded.name == "Bets"
        assert loaded.description == "Bet rewards"
        assert loaded.published is False

    def test_duplicate_name_is_case_insensitive(self, flow_store):
        flow_store.create_flow("Bets")
        with pytest.raises(DuplicateNameError):
            flow_store.create_flow("BETS")

    def test_missing_flow(self, flow_store):
        assert flow_store.load("nope") is None
        with pytest.raises(FlowNotFoundError):
            flow_store.get_flow("nope")
        with pytest.raises(FlowNotFoundError):
            flow_store.publish_flow("nope")
        with pytest.raises(FlowNotFoundError):
            flow_store.validate_flow_for_publish("nope")

    def test_save_graph_updates_stats(self, flow_store, minimal_flow):
        nodes, edges = minimal_flow
        flow = flow_store.create_flow("Bets")
        flow_store.save_graph(flow.id, nodes, edges)
        loaded = flow_store.get_flow(flow.id)
        assert (loaded.node_count, loaded.edge_count) == (2, 1)
        assert loaded.nodes[0].data.event_source == "Hub"

    def test_file_uses_camel_case_keys(self, flow_store, minimal_flow):
        nodes, edges = minimal_flow
        flow = flow_store.create_flow("Bets")
        flow_store.save_graph(flow.id, nodes, edges)
        text = (flow_store.storage_dir / f"{flow.id}.json").read_text(encoding="utf-8")
        assert '"eventSource": "Hub"' in text
        assert '"outputSteps"' in text

    def test_rename(self, flow_store):
        flow = flow_store.create_flow("Bets")
        flow_store.create_flow("Wins")
        with pytest.raises(DuplicateNameError):
            flow_store.update_flow(flow.id, name="wins")
        renamed = flow_store.update_flow(flow.id, name="BETS v2")
        assert renamed.name == "BETS v2"

    def test_delete(self, flow_store):
        flow = flow_store.create_flow("Bets")
        assert flow_store.delete_flow(flow.id)
        assert not flow_store.exists(flow.id)
        assert not flow_store.delete_flow(flow.id)

    def test_malformed_files_are_skipped(self, flow_store):
        flow_store.create_flow("Bets")
        (flow_store.storage_dir / "broken.json").write_text("{not json", encoding="utf-8")
        assert [f.name for f in flow_store.list_all()] == ["Bets"]

    def test_undecodable_files_are_skipped(self, flow_store):
        bets = flow_store.create_flow("Bets")
        (flow_store.storage_dir / "broken.json").write_bytes(b"\xff\xfe{not json")
        assert [f.name for f in flow_store.list_all()] == ["Bets"]
        assert flow_store.load("broken") is None
        # Name checks still work with the bad file present.
        assert flow_store.create_flow("Wins").name == "Wins"
        with pytest.raises(DuplicateNameError):
            flow_store.update_flow(bets.id, name="wins")

    def test_publish_valid_flow(self, flow_store, minimal_flow):
        nodes, edges = minimal_flow
        flow = flow_store.create_flow("Bets")
        flow_store.save_graph(flow.id, nodes, edges)

        result = flow_store.publish_flow(flow.id)
        assert result.is_valid
        assert flow_store.get_flow(flow.id).published
        assert [f.id for f in flow_store.list_published()] == [flow.id]

    def test_publish_invalid_flow_is_refused(self, flow_store):
        flow = flow_store.create_flow("Empty")
        result = flow_store.publish_flow(flow.id)
        assert not result.is_valid
        assert result.errors == ["Flow must contain at least one node"]
        assert not flow_store.get_flow(flow.id).published

    def test_unpublish_is_never_validated(self, flow_store, minimal_flow):
        nodes, edges = minimal_flow
        flow = flow_store.create_flow("Bets")
        flow_store.save_graph(flow.id, nodes, edges)
        flow_store.publish_flow(flow.id)

        # Break the graph after publishing; unpublishing must still work.
        flow_store.save_graph(flow.id, [], [])
        flow_store.unpublish_flow(flow.id)
        assert not flow_store.get_flow(flow.id).published

    def test_toggle(self, flow_store, minimal_flow):
        nodes, edges = minimal_flow
        flow = flow_store.create_flow("Bets")
        flow_store.save_graph(flow.id, nodes, edges)

        assert flow_store.toggle_flow_published(flow.id).is_valid
        assert flow_store.get_flow(flow.id).published

        result = flow_store.toggle_flow_published(flow.id)
        assert result.is_valid and result.errors == [] and result.warnings == []
        assert not flow_store.get_flow(flow.id).published

    def test_publish_uses_dynamic_types(self, flow_store, bonus_type):
        flow = flow_store.create_flow("Bonus")
        flow_store.save_graph(
            flow.id,
            [event_node(), dynamic_node(values={"amount": 3}), output_node()],
            [edge("event-1", "dyn-1"), edge("dyn-1", "output-1")],
        )
        assert not flow_store.publish_flow(flow.id, []).is_valid
        assert flow_store.publish_flow(flow.id, [bonus_type]).is_valid

    def test_dangling_edge_setting(self, tmp_path, minimal_flow):
        nodes, edges = minimal_flow
        edges = edges + [edge("event-1", "ghost")]
        store = FlowStore(
            storage_dir=tmp_path / "quiet",
            validation_config=ValidationConfig(report_dangling_edges=False),
        )
        flow = store.create_flow("Bets")
        store.save_graph(flow.id, nodes, edges)
        assert store.validate_flow_for_publish(flow.id).warnings == []


class TestTemplates:
    @pytest.mark.parametrize("factory", TEMPLATE_FACTORIES)
    def test_templates_are_publishable(self, factory):
        template = factory()
        assert validate_flow(template.nodes, template.edges).is_valid

    def test_seed_is_idempotent(self, flow_store):
        assert seed_templates(flow_store) == len(TEMPLATE_FACTORIES)
        assert seed_templates(flow_store) == 0
        names = sorted(f.name for f in flow_store.list_all())
        assert names == sorted(f().name for f in TEMPLATE_FACTORIES)

    def test_seeded_flow_can_be_published(self, flow_store):
        seed_templates(flow_store)
        flow = next(
            f for f in flow_store.list_all()
            if f.name == create_high_roller_template().name
        )
        assert flow.node_count == 4
        assert flow_store.publish_flow(flow.id).is_valid


class TestNodeTypeStore:
    def test_create_and_list(self, node_type_store):
        created = node_type_store.create_node_type(
            name="Bonus",
            fields=[{"id": "amount", "name": "amount", "required": True}],
        )
        assert created.id.startswith("dynamic-")
        [loaded] = node_type_store.list_all()
        assert loaded.required_fields[0].id == "amount"

    def test_duplicate_name(self, node_type_store):
        node_type_store.create_node_type(name="Bonus")
        with pytest.raises(DuplicateNameError):
            node_type_store.create_node_type(name="bonus")

    def test_update(self, node_type_store):
        created = node_type_store.create_node_type(name="Bonus")
        updated = node_type_store.update_node_type(created.id, description="Extra points")
        assert updated.id == created.id
        assert node_type_store.get_node_type(created.id).description == "Extra points"

    def test_missing(self, node_type_store):
        with pytest.raises(NodeTypeNotFoundError):
            node_type_store.get_node_type("nope")

    def test_palette_lists_builtins_first(self, node_type_store):
        node_type_store.create_node_type(name="Bonus")
        entries = node_type_store.get_all_node_types()
        assert [e["id"] for e in entries[:4]] == ["event", "filter", "select", "output"]
        assert entries[4]["name"] == "Bonus"

    def test_palette_lists_builtin_ports(self, node_type_store):
        entries = {e["id"]: e for e in node_type_store.get_all_node_types()}
        assert entries["event"]["ports"] == [
            {"id": "event-output", "label": "Event", "direction": "output"}
        ]
        assert entries["output"]["ports"] == [
            {"id": "output-input", "label": "Input", "direction": "input"}
        ]
        assert entries["select"]["ports"] == []

    def test_deleted_type_fails_validation(self, node_type_store):
        created = node_type_store.create_node_type(
            name="Bonus",
            fields=[{"id": "amount", "name": "amount", "required": True}],
        )
        node = dynamic_node(type_id=created.id, values={"amount": 1})
        nodes = [event_node(), node, output_node()]
        edges = [edge("event-1", "dyn-1"), edge("dyn-1", "output-1")]
        assert validate_flow(nodes, edges, node_type_store.list_all()).is_valid

        node_type_store.delete_node_type(created.id)
        result = validate_flow(nodes, edges, node_type_store.list_all())
        assert result.has_code(ValidationCode.UNKNOWN_DYNAMIC_TYPE)


def _composite(**overrides):
    data = dict(
        name="Bet Rewards",
        description="Rewards for bets",
        internal_nodes=[event_node(), output_node()],
        internal_edges=[edge("event-1", "output-1")],
        exposed_inputs=[ExposedPort(id="in", name="In", internal_node_id="event-1")],
        exposed_outputs=[ExposedPort(
            id="out", name="Out", type="output", internal_node_id="output-1",
        )],
    )
    data.update(overrides)
    return CompositeNode(**data)


class TestCompositeStore:
    def test_create_assigns_fresh_id_and_draft_state(self, composite_store):
        template = _composite(id="composite-fixed", published=True)
        created = composite_store.create_composite(template)
        assert created.id != "composite-fixed"
        assert created.published is False
        assert composite_store.get_composite(created.id).name == "Bet Rewards"

    def test_missing(self, composite_store):
        with pytest.raises(CompositeNotFoundError):
            composite_store.publish_composite("nope")

    def test_publish_and_toggle(self, composite_store):
        created = composite_store.create_composite(_composite())
        assert composite_store.publish_composite(created.id).is_valid
        assert composite_store.get_composite(created.id).published

        assert composite_store.toggle_composite_published(created.id).is_valid
        assert not composite_store.get_composite(created.id).published

    def test_publish_refused(self, composite_store):
        created = composite_store.create_composite(_composite(internal_edges=[]))
        result = composite_store.publish_composite(created.id)
        assert not result.is_valid
        assert not composite_store.get_composite(created.id).published

    def test_publish_uses_node_type_store(self, composite_store, node_type_store):
        bonus = node_type_store.create_node_type(
            name="Bonus",
            fields=[{"id": "amount", "name": "amount", "required": True}],
        )
        created = composite_store.create_composite(_composite(
            internal_nodes=[
                event_node(),
                dynamic_node(type_id=bonus.id, values={}),
                output_node(),
            ],
            internal_edges=[edge("event-1", "dyn-1"), edge("dyn-1", "output-1")],
        ))
        result = composite_store.validate_composite_for_publish(created.id)
        assert "• Bonus: Required fields missing: amount" in result.errors

        composite_store.update_composite(created.id, internal_nodes=[
            event_node(),
            dynamic_node(type_id=bonus.id, values={"amount": "5"}),
            output_node(),
        ])
        assert composite_store.publish_composite(created.id).is_valid

    def test_update_cannot_flip_publish_flag(self, composite_store):
        created = composite_store.create_composite(_composite(internal_nodes=[]))
        updated = composite_store.update_composite(created.id, published=True, name="Renamed")
        assert updated.name == "Renamed"
        assert updated.published is False

    def test_delete(self, composite_store):
        created = composite_store.create_composite(_composite())
        assert composite_store.delete_composite(created.id)
        assert composite_store.list_all() == []
