"""Tests for Session wiring and session state strings."""

import pytest

from nviz.config import FilterDefinition, ViewConfig
from nviz.dsl.loader import build_topology
from nviz.filters.pattern import PatternFilter
from nviz.session import Session, SessionState
from nviz.types.base import FilterElement, FilterKind


class TestSessionState:
    def test_to_string(self):
        state = SessionState("metro", {"router_utilization": "0;5", "router_name": "br1"})
        assert state.to_string() == (
            "?current_layer=metro&router_utilization=0;5&router_name=br1"
        )

    def test_parse_round_trip(self):
        state = SessionState("pop", {"router_name": "^SEA.*br[12]$", "router_capacity": "1;2"})
        parsed = SessionState.parse(state.to_string())
        assert parsed == state
        assert list(parsed.filters) == ["router_name", "router_capacity"]

    def test_parse_keeps_blank_values(self):
        parsed = SessionState.parse("current_layer=router&router_name=")
        assert parsed.current_layer == "router"
        assert parsed.filters == {"router_name": ""}

    def test_parse_requires_layer(self):
        with pytest.raises(ValueError, match="current_layer"):
            SessionState.parse("?router_name=x")


class TestSession:
    def test_defaults(self, session):
        assert session.current_layer == "metro"
        assert sorted(n.name for n in session.visible_nodes()) == ["A", "B"]
        labels = [flt.label for _, flt in session.registry.filters()]
        assert labels == ["router_utilization", "router_capacity", "router_name"]
        assert session.save_state() == (
            "?current_layer=metro&router_utilization=0;10"
            "&router_capacity=0;10&router_name="
        )

    def test_router_utilization_filter(self, session, store):
        result = session.apply_filter("router_utilization", "0;5")
        assert result.filtered_out == 6
        assert store.links[6].filtered
        assert sorted(lk.index for lk in session.visible_links()) == [0, 1]
        assert "router_utilization=0;5" in session.save_state()

    def test_node_filter_updates_visibility(self, session):
        session.set_current_layer("router")
        session.apply_filter("router_name", "r1$")
        assert [n.name for n in session.visible_nodes()] == ["A_A1_r1"]

    def test_explode_by_name_and_index(self, session, store):
        created = session.explode("A")
        assert len(created) == 4
        assert sorted(n.name for n in session.visible_nodes()) == ["A_A1", "A_A2", "B"]
        assert session.explode(6)
        assert session.explode("A_A1_r1") == []

    def test_unknown_node(self, session):
        with pytest.raises(LookupError):
            session.explode("A_A9")
        with pytest.raises(LookupError):
            session.node_index(100)

    def test_resolve(self, session):
        assert session.resolve("B_B1").record.name == "B_B1"
        assert session.node_index("B_B1") == 7

    def test_layer_change_resets_explosions(self, session):
        session.explode("A")
        session.set_current_layer("metro")
        assert sorted(n.name for n in session.visible_nodes()) == ["A", "B"]

    def test_toggle_include_neighbors(self, session):
        session.toggle_include_neighbors("router_name", True)
        flt = session.registry.get_filter("router_name")
        assert isinstance(flt, PatternFilter) and flt.include_neighbors
        with pytest.raises(ValueError, match="not a pattern filter"):
            session.toggle_include_neighbors("router_utilization", True)

    def test_state_round_trip(self, session, store):
        session.set_current_layer("router")
        session.apply_filter("router_utilization", "0;5")
        session.apply_filter("router_name", "r[14]$")
        text = session.save_state()
        filtered = [(lk.filtered, lk.filtered_by) for lk in store.links]

        other = Session.from_topology(build_topology(_sample(store)))
        other.load_state(text)

        assert other.save_state() == text
        assert other.current_layer == "router"
        assert [(lk.filtered, lk.filtered_by) for lk in other.store.links] == filtered
        assert [n.name for n in other.visible_nodes()] == [
            n.name for n in session.visible_nodes()
        ]

    def test_apply_all_filters(self, session, store):
        results = session.apply_all_filters({"router_utilization": "0;1"})
        assert [r.label for r in results] == [
            "router_utilization",
            "router_capacity",
            "router_name",
        ]
        assert all(lk.filtered for lk in store.links)

        with pytest.raises(KeyError):
            session.apply_all_filters({"pop_region": "west"})

    def test_state_keeps_exact_bounds(self, session):
        session.apply_filter("router_capacity", "0;1234567")
        session.apply_filter("router_utilization", "0.125;99.99")
        text = session.save_state()
        assert "router_capacity=0;1234567" in text

        session.apply_filter("router_capacity", "0;1")
        session.load_state(text)
        capacity = session.registry.get_filter("router_capacity")
        utilization = session.registry.get_filter("router_utilization")
        assert (capacity.lower, capacity.upper) == (0.0, 1234567.0)
        assert (utilization.lower, utilization.upper) == (0.125, 99.99)
        assert session.save_state() == text

    def test_apply_all_filters_rejects_bad_input_before_running(self, session, store):
        session.set_current_layer("router")
        with pytest.raises(ValueError):
            session.apply_all_filters(
                {"router_utilization": "0;1", "router_name": "r1$", "router_capacity": "x"}
            )
        assert not any(lk.filtered for lk in store.links)
        assert not any(n.filtered for n in store.nodes)
        assert session.registry.get_filter("router_utilization").current_input() == "0;10"
        assert len(session.visible_nodes()) == 4

    def test_explode_keeps_filtered_children_hidden(self, session, store):
        session.apply_filter("router_name", "r1$")
        assert store.node_by_name("A_A2").filtered

        session.explode("A")
        assert sorted(n.name for n in session.visible_nodes()) == ["A_A1"]
        assert not store.node_by_name("A_A2").show

    def test_load_state_with_unknown_label(self, session):
        with pytest.raises(KeyError):
            session.load_state("?current_layer=metro&nope=1")

    def test_custom_config(self, store, hierarchy):
        config = ViewConfig(
            initial_layer="pop",
            filters=[
                FilterDefinition(FilterElement.NODE, FilterKind.PATTERN, "pop", "region")
            ],
        )
        session = Session(store, hierarchy, config)
        session.apply_filter("pop_region", "west")
        assert sorted(n.name for n in session.visible_nodes()) == ["A_A1", "B_B1"]

    def test_from_file(self, topology_file):
        session = Session.from_file(topology_file)
        assert session.store.num_nodes == 9
        assert session.resolve("A_A2_r3").index == 5


def _sample(store):
    return {
        "nodes": [
            {"name": n.name, "layer": n.layer, "attrs": dict(n.attrs)} for n in store.nodes
        ],
        "links": [
            {"source": lk.source, "target": lk.target, "attrs": dict(lk.attrs)}
            for lk in store.links
            if not lk.crosslink
        ],
        "bidirectional": False,
    }
