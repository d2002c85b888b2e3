import pytest

from nviz.explode import LayerExplosionEngine
from nviz.view import LayerView


def _visible_names(view):
    return sorted(n.name for n in view.visible_nodes())


def test_current_layer_selects_nodes(store):
    view = LayerView(store, "pop")
    view.set_current_layer("pop")
    assert _visible_names(view) == ["A_A1", "A_A2", "B_B1"]

    view.set_current_layer("router")
    assert _visible_names(view) == ["A_A1_r1", "A_A1_r2", "A_A2_r3", "B_B1_r4"]


def test_visible_links_need_both_endpoints(store):
    view = LayerView(store, "metro")
    view.set_current_layer("metro")
    assert sorted(lk.index for lk in view.visible_links()) == [0, 1]

    view.set_current_layer("pop")
    assert sorted(lk.index for lk in view.visible_links()) == [2, 3, 8, 9]


def test_filtered_nodes_and_links_are_hidden(store):
    view = LayerView(store, "router")
    view.set_current_layer("router")
    store.links[4].filtered = True
    store.node_by_name("A_A1_r2").filtered = True
    view.refresh_nodes()

    assert "A_A1_r2" not in _visible_names(view)
    assert sorted(lk.index for lk in view.visible_links()) == [5, 10, 11]


def test_layer_change_collapses_explosions(store, hierarchy):
    view = LayerView(store, "metro")
    view.set_current_layer("metro")
    LayerExplosionEngine(store, hierarchy).explode(0)
    assert _visible_names(view) == ["A_A1", "A_A2", "B"]

    view.refresh_nodes()
    assert _visible_names(view) == ["A_A1", "A_A2", "B"]

    view.set_current_layer("metro")
    assert _visible_names(view) == ["A", "B"]
    assert not any(n.exploded for n in store.nodes)


def test_unknown_layer(store):
    with pytest.raises(ValueError):
        LayerView(store, "core")
    view = LayerView(store, "metro")
    with pytest.raises(ValueError):
        view.set_current_layer("router_pop")
