"""Layer vocabulary and ordering for the three-level network hierarchy.

Nodes live on one of three layers, from finest to coarsest: ``router``,
``pop`` and ``metro``. Links carry a type tag derived from the layers of
their endpoints. Same-layer links use the layer name; crosslinks use
``"<source layer>_<target layer>"``. Every tag has a position in a single
total order, used to sort nodes and links from finest to coarsest.
"""

from __future__ import annotations

from typing import Dict, Tuple

ROUTER = "router"
POP = "pop"
METRO = "metro"

#: Node layers from finest to coarsest.
LAYERS: Tuple[str, ...] = (ROUTER, POP, METRO)

#: Sort position for every node layer and link type tag.
LAYER_ORDER: Dict[str, int] = {
    "router": 0,
    "router_pop": 1,
    "pop_router": 1,
    "pop": 2,
    "router_metro": 2,
    "metro_router": 2,
    "pop_metro": 3,
    "metro_pop": 3,
    "metro": 4,
}

__all__ = [
    "ROUTER",
    "POP",
    "METRO",
    "LAYERS",
    "LAYER_ORDER",
    "layer_order",
    "link_type",
    "validate_layer",
]


def layer_order(type_tag: str) -> int:
    """Return the sort position of a layer name or link type tag.

    Raises:
        ValueError: If the tag is unknown.
    """
    try:
        return LAYER_ORDER[type_tag]
    except KeyError:
        raise ValueError(
            f"Unknown layer or link type '{type_tag}'. "
            f"Known tags: {sorted(LAYER_ORDER, key=LAYER_ORDER.__getitem__)}"
        ) from None


def validate_layer(layer: str) -> str:
    """Return ``layer`` unchanged if it names a node layer.

    Raises:
        ValueError: If ``layer`` is not one of router, pop or metro.
    """
    if layer not in LAYERS:
        raise ValueError(f"Unknown layer '{layer}'. Valid layers: {list(LAYERS)}")
    return layer


def link_type(source_layer: str, target_layer: str) -> str:
    """Derive the type tag of a link from its endpoint layers."""
    if source_layer == target_layer:
        return source_layer
    return f"{source_layer}_{target_layer}"
