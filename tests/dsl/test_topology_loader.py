"""Tests for topology parsing, schema validation and store construction."""

import json
import textwrap

import jsonschema
import pytest

from nviz.dsl.loader import build_topology, load_topology, load_topology_yaml, topology_schema


def test_schema_is_packaged():
    schema = topology_schema()
    assert schema["type"] == "object"
    assert {"nodes", "links"} <= set(schema["properties"])


def test_load_yaml_document():
    data = load_topology_yaml(
        textwrap.dedent(
            """
            nodes:
              - {name: SEA, layer: metro}
              - {name: SEA_SEA1, layer: pop, attrs: {region: west}}
            links:
              - {source: SEA, target: SEA_SEA1, attrs: {utilization: 1.5}}
            """
        )
    )
    topology = build_topology(data)
    assert topology.store.num_nodes == 2
    assert topology.store.num_links == 2
    assert topology.store.links[0].type == "metro_pop"
    assert topology.store.links[1].attrs == {"utilization": 1.5}
    assert topology.tree is None


def test_yaml_boolean_attr_keys_are_strings():
    data = load_topology_yaml(
        textwrap.dedent(
            """
            nodes:
              - name: SEA
                layer: metro
                attrs:
                  true: enabled
                  1: one
            """
        )
    )
    assert data["nodes"][0]["attrs"] == {"True": "enabled", "1": "one"}


def test_nodes_section_is_required():
    with pytest.raises(jsonschema.ValidationError, match="nodes"):
        load_topology_yaml("")
    topology = build_topology(load_topology_yaml("nodes: []\n"))
    assert topology.store.num_nodes == 0


def test_non_mapping_document():
    with pytest.raises(ValueError, match="dictionary"):
        load_topology_yaml("- a\n- b\n")


@pytest.mark.parametrize(
    "document",
    [
        "nodes:\n  - {name: SEA, layer: core}\n",
        "nodes:\n  - {name: SEA}\n",
        "links:\n  - {source: A}\n",
        "links:\n  - {source: -1, target: 0}\n",
        "nodes: []\nextra: 1\n",
        "nodes:\n  - {name: SEA, layer: metro, colour: red}\n",
    ],
)
def test_schema_violations(document):
    with pytest.raises(jsonschema.ValidationError):
        load_topology_yaml(document)


def test_links_by_index_and_unidirectional(topology_data):
    topology_data["links"] = [{"source": 0, "target": 6}]
    topology_data["bidirectional"] = False
    store = build_topology(topology_data).store
    assert store.num_links == 1
    assert store.nodes[0].neighbors == {6: 0}


def test_unknown_endpoints(topology_data):
    topology_data["links"] = [{"source": "A", "target": "C"}]
    with pytest.raises(ValueError, match="'C' is not a defined node"):
        build_topology(topology_data)

    topology_data["links"] = [{"source": 0, "target": 99}]
    with pytest.raises(ValueError, match="out of range"):
        build_topology(topology_data)


def test_self_link(topology_data):
    topology_data["links"] = [{"source": "A", "target": 0}]
    with pytest.raises(ValueError, match="itself"):
        build_topology(topology_data)


def test_duplicate_node(topology_data):
    topology_data["nodes"].append({"name": "A", "layer": "metro"})
    with pytest.raises(ValueError, match="already exists"):
        build_topology(topology_data)


def test_tree_is_validated_and_kept(topology_data):
    topology_data["tree"] = {
        "children": [{"name": "A", "index": 0, "children": [{"name": "A_A1", "index": 1}]}]
    }
    data = load_topology_yaml(json.dumps(topology_data))
    assert build_topology(data).tree == topology_data["tree"]

    topology_data["tree"] = {"children": [{"name": "A"}]}
    with pytest.raises(jsonschema.ValidationError):
        load_topology_yaml(json.dumps(topology_data))


def test_load_topology_from_files(tmp_path, topology_file, topology_data, caplog):
    caplog.set_level("INFO", logger="nviz.dsl.loader")
    topology = load_topology(topology_file)
    assert topology.store.num_nodes == 9
    assert topology.store.num_links == 12
    assert any("Loaded topology" in r.getMessage() for r in caplog.records)

    json_path = tmp_path / "topology.json"
    json_path.write_text(json.dumps(topology_data))
    assert load_topology(str(json_path)).store.num_links == 12

    with pytest.raises(FileNotFoundError):
        load_topology(tmp_path / "missing.yaml")
