"""Tree over aggregated network nodes and recursive filter propagation.

Node names are segmented: "SEA" (metro), "SEA_SEA1" (PoP) and
"SEA_SEA1_br1.SEA1" (router). The hierarchy stores each record under its
parent, keyed by the last segment, below a synthetic root with no record.

Filter state lives on the ``NetworkNode`` records; tree ``Node`` objects read
and write it through, so the store and the hierarchy can never disagree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional

from nviz.config import VIEW_CONFIG, ViewConfig
from nviz.logging import get_logger
from nviz.model.network import GraphStore, NetworkLink, NetworkNode

logger = get_logger(__name__)

__all__ = ["HierarchyLookupError", "Node", "NodeHierarchy"]


class HierarchyLookupError(LookupError):
    """Raised when a name or index does not resolve to a hierarchy node."""


@dataclass(eq=False)
class Node:
    """One entry in the hierarchy, wrapping a NetworkNode record.

    The root is the only Node without a record; it is never filtered.

    Attributes:
        segment: Last name segment, the key under the parent.
        record: Underlying node record (None for the root).
        parent: Parent tree node (None for the root).
        children: Child segment -> child Node.
    """

    segment: str
    record: Optional[NetworkNode] = None
    parent: Optional[Node] = None
    children: Dict[str, Node] = field(default_factory=dict)

    def __hash__(self) -> int:
        return id(self)

    @property
    def index(self) -> Optional[int]:
        return self.record.index if self.record is not None else None

    @property
    def filtered(self) -> bool:
        return self.record.filtered if self.record is not None else False

    @property
    def filtered_by(self) -> Optional[str]:
        return self.record.filtered_by if self.record is not None else None

    @property
    def num_children(self) -> int:
        return len(self.children)

    def has_children(self) -> bool:
        return bool(self.children)

    def add_child(self, segment: str, record: NetworkNode) -> Node:
        """Attach a new child for ``record`` under ``segment`` and return it.

        Raises:
            ValueError: If a child with the same segment already exists.
        """
        if segment in self.children:
            raise ValueError(
                f"Duplicate hierarchy segment '{segment}' for node '{record.name}'."
            )
        child = Node(segment=segment, record=record, parent=self)
        self.children[segment] = child
        return child

    def mark_filtered(self, label: str) -> None:
        """Record ``label`` as the owner of this node's filtered state."""
        self.record.filtered_by = label

    def unmark(self) -> None:
        """Release ownership so any filter may act on the node."""
        self.record.filtered_by = None

    def filter_out(self) -> None:
        if not self.record.filtered:
            self.record.filtered = True

    def filter_in(self) -> None:
        if self.record.filtered:
            self.record.filtered = False

    def children_all_filtered(self) -> bool:
        """True if every child is filtered out (vacuously true for a leaf)."""
        return all(child.filtered for child in self.children.values())


class NodeHierarchy:
    """Owns the root Node and resolves names and indices to tree nodes."""

    def __init__(
        self,
        store: GraphStore,
        root: Optional[Node] = None,
        config: ViewConfig = VIEW_CONFIG,
    ) -> None:
        self.store = store
        self.config = config
        self.root: Node = root if root is not None else Node(segment="root")
        self._by_index: Dict[int, Node] = {}

    @classmethod
    def from_store(
        cls, store: GraphStore, config: ViewConfig = VIEW_CONFIG
    ) -> NodeHierarchy:
        """Build the tree by splitting each record's name into segments.

        Records are inserted shortest name first, so every parent exists
        before its children.

        Raises:
            ValueError: If a name has too many segments or its parent record
                is missing.
        """
        hierarchy = cls(store, config=config)
        records = sorted(store.nodes, key=lambda n: len(config.split_name(n.name)))
        for record in records:
            segments = config.split_name(record.name)
            if len(segments) > config.max_depth:
                raise ValueError(
                    f"Node name '{record.name}' has {len(segments)} segments; "
                    f"at most {config.max_depth} are supported."
                )
            parent = hierarchy.root
            for depth, seg in enumerate(segments[:-1]):
                try:
                    parent = parent.children[seg]
                except KeyError:
                    missing = config.join_name(segments[: depth + 1])
                    raise ValueError(
                        f"Parent '{missing}' of node '{record.name}' is not defined."
                    ) from None
            hierarchy._attach(parent, segments[-1], record)
        logger.debug("Built hierarchy from %d node names", len(records))
        return hierarchy

    @classmethod
    def from_tree(
        cls,
        tree: Mapping[str, Any],
        store: GraphStore,
        config: ViewConfig = VIEW_CONFIG,
    ) -> NodeHierarchy:
        """Build the tree from a nested description.

        Each entry is a mapping with ``name`` (full node name), ``index``
        (record index in ``store``) and optional ``children``. The top-level
        mapping is the root and only its ``children`` are read.

        Raises:
            ValueError: If an entry disagrees with the store, sits under a
                parent its name does not extend, is too deep, or some record
                is not placed in the tree.
        """
        hierarchy = cls(store, config=config)

        def _build(parent: Node, entries: List[Mapping[str, Any]]) -> None:
            parent_segments = (
                config.split_name(hierarchy.full_name(parent))
                if parent is not hierarchy.root
                else []
            )
            for entry in entries:
                record = store.node(int(entry["index"]))
                if record.name != entry["name"]:
                    raise ValueError(
                        f"Tree entry '{entry['name']}' points at index "
                        f"{entry['index']} which holds '{record.name}'."
                    )
                segments = config.split_name(record.name)
                if len(segments) > config.max_depth:
                    raise ValueError(
                        f"Node name '{record.name}' has {len(segments)} segments; "
                        f"at most {config.max_depth} are supported."
                    )
                if segments[:-1] != parent_segments:
                    raise ValueError(
                        f"Tree entry '{record.name}' is placed under "
                        f"'{config.join_name(parent_segments) or 'root'}'."
                    )
                child = hierarchy._attach(parent, segments[-1], record)
                _build(child, entry.get("children") or [])

        _build(hierarchy.root, tree.get("children") or [])

        if len(hierarchy._by_index) != store.num_nodes:
            missing = [
                n.name for n in store.nodes if n.index not in hierarchy._by_index
            ]
            raise ValueError(f"Nodes missing from tree description: {missing}")
        return hierarchy

    def _attach(self, parent: Node, segment: str, record: NetworkNode) -> Node:
        if record.index in self._by_index:
            raise ValueError(f"Node '{record.name}' appears twice in the hierarchy.")
        child = parent.add_child(segment, record)
        self._by_index[record.index] = child
        return child

    def resolve(self, name: str) -> Node:
        """Walk the tree along the segments of ``name``.

        Raises:
            HierarchyLookupError: If the name is empty, has more segments than
                the hierarchy depth, or any segment is unknown.
        """
        segments = self.config.split_name(name) if name else []
        if not segments or len(segments) > self.config.max_depth:
            raise HierarchyLookupError(f"Incorrect node name '{name}'")
        current = self.root
        for seg in segments:
            try:
                current = current.children[seg]
            except KeyError:
                raise HierarchyLookupError(
                    f"Node name '{name}' does not resolve: unknown segment '{seg}'"
                ) from None
        return current

    def by_index(self, index: int) -> Node:
        """Return the tree node wrapping the record at ``index``.

        Raises:
            HierarchyLookupError: If no record with that index is in the tree.
        """
        try:
            return self._by_index[index]
        except KeyError:
            raise HierarchyLookupError(f"No hierarchy node for index {index}") from None

    def full_name(self, node: Node) -> str:
        """Reconstruct a node's full name from the segments above it."""
        parts = []
        current: Optional[Node] = node
        while current is not None and current is not self.root:
            parts.append(current.segment)
            current = current.parent
        return self.config.join_name(list(reversed(parts)))

    def walk(self, node: Optional[Node] = None) -> Iterator[Node]:
        """Yield every node below ``node`` (default: root) depth-first."""
        start = node if node is not None else self.root
        for child in start.children.values():
            yield child
            yield from self.walk(child)

    def propagate_filter_out(self, node: Node, label: str) -> None:
        """Filter out every unowned descendant of ``node`` and mark it with ``label``.

        Descendants owned by another filter, and their subtrees, are left alone.
        """
        for child in node.children.values():
            if child.filtered_by is None:
                child.filter_out()
                child.mark_filtered(label)
                self.propagate_filter_out(child, label)

    def propagate_filter_in(self, node: Node, label: str) -> None:
        """Filter in every descendant of ``node`` owned by ``label`` and release it."""
        for child in node.children.values():
            if child.filtered_by == label:
                child.filter_in()
                child.unmark()
                self.propagate_filter_in(child, label)

    def link_children(self, link: NetworkLink) -> List[NetworkLink]:
        """Return the finer-grained links that an aggregate link represents.

        These are the links from the source or any child of the source to
        the target or any child of the target, excluding links of the same
        type as ``link`` itself.
        """
        source_node = self.by_index(link.source)
        target_node = self.by_index(link.target)

        target_indices = {link.target}
        target_indices.update(c.index for c in target_node.children.values())

        source_indices = [link.source]
        source_indices.extend(c.index for c in source_node.children.values())

        children = []
        for source in source_indices:
            for neighbor, child_link in self.store.neighbor_links(source):
                if neighbor in target_indices and child_link.type != link.type:
                    children.append(child_link)
        return children

    def link_children_all_filtered(self, link: NetworkLink) -> bool:
        """True if every child link is filtered out (vacuously true if none)."""
        return all(child.filtered for child in self.link_children(link))
