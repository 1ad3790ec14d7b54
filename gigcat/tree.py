from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Hashable, Iterable, Mapping

from gigcat.models import CategoryNode, LeafCategory

logger = logging.getLogger(__name__)

PATH_SEPARATOR = " → "


@dataclass
class CategoryIndex:
    nodes_by_id: dict[Hashable, CategoryNode]
    children_of: dict[Hashable, set[Hashable]]
    path_of: dict[Hashable, str] = field(default_factory=dict)
    leaves: list[LeafCategory] = field(default_factory=list)


def _resolve_path(
    category_id: Hashable,
    nodes_by_id: Mapping[Hashable, CategoryNode],
    memo: dict[Hashable, str],
) -> str:
    """Walk up the parent chain of ``category_id`` and join names root-first.

    Paths already in ``memo`` short-circuit the ascent. A parent id missing from
    the snapshot ends the chain as if the node were a root; a parent id seen twice
    (a cycle) also ends it, so the walk always terminates.
    """
    chain: list[Hashable] = []
    seen: set[Hashable] = set()
    prefix = ""
    current: Hashable | None = category_id

    while current is not None:
        if current in memo:
            prefix = memo[current]
            break
        if current in seen:
            logger.warning("Cyclic parent chain detected at category %r; truncating path", current)
            break
        node = nodes_by_id.get(current)
        if node is None:
            # Only reachable via a parent pointer: the child becomes a root.
            logger.warning("Category parent %r is not in the snapshot; treating child as root", current)
            break
        seen.add(current)
        chain.append(current)
        current = node.parent_id

    for node_id in reversed(chain):
        name = nodes_by_id[node_id].name
        prefix = f"{prefix}{PATH_SEPARATOR}{name}" if prefix else name
        memo[node_id] = prefix

    return memo.get(category_id, prefix)


def index_categories(categories: Iterable[Mapping[str, Any] | CategoryNode]) -> CategoryIndex:
    """Derive the children map, the path of every node and the leaf set from a flat list.

    Leaves keep the relative order of the input. The first node seen for an id
    wins; later duplicates are ignored.
    """
    nodes: list[CategoryNode] = []
    nodes_by_id: dict[Hashable, CategoryNode] = {}
    for payload in categories:
        node = CategoryNode.from_payload(payload)
        if node.id in nodes_by_id:
            logger.warning("Duplicate category id %r ignored", node.id)
            continue
        nodes_by_id[node.id] = node
        nodes.append(node)

    children_of: dict[Hashable, set[Hashable]] = {}
    for node in nodes:
        if node.parent_id is not None:
            children_of.setdefault(node.parent_id, set()).add(node.id)

    index = CategoryIndex(nodes_by_id=nodes_by_id, children_of=children_of)
    for node in nodes:
        index.path_of[node.id] = _resolve_path(node.id, nodes_by_id, index.path_of)

    index.leaves = [
        LeafCategory(id=node.id, name=node.name, path=index.path_of[node.id] or node.name)
        for node in nodes
        if node.id not in children_of
    ]
    logger.debug("Indexed %s categories into %s leaves", len(nodes), len(index.leaves))
    return index


def leaf_categories(categories: Iterable[Mapping[str, Any] | CategoryNode]) -> list[LeafCategory]:
    return index_categories(categories).leaves
