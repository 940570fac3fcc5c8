"""
Component Traversal.

Form components nest. Layout components (panels, columns, fieldsets) group
children without contributing a data path segment; ``tree`` components
(containers, data grids) own a key and nest their children's values under it.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Tuple

Component = Dict[str, Any]


def iter_components(
    components: List[Component],
    prefix: str = "",
) -> Iterator[Tuple[Component, str]]:
    """
    Yield ``(component, data_path)`` pairs in display order.

    Args:
        components: Component definitions
        prefix: Dotted data path of the enclosing tree component

    Yields:
        Every component that has a key, with its dotted path under ``data``
    """
    for component in components:
        key = component.get("key")
        is_tree = bool(component.get("tree"))
        path = f"{prefix}.{key}" if prefix and key else (key or prefix)

        if key and (is_input(component) or is_tree):
            yield component, path

        child_prefix = path if is_tree else prefix
        for children in _child_lists(component):
            yield from iter_components(children, child_prefix)


def is_input(component: Component) -> bool:
    """Whether a component stores a value of its own."""
    if "input" in component:
        return bool(component["input"])
    return not _child_lists(component)


def input_fields(components: List[Component]) -> List[Tuple[Component, str]]:
    """Data-bearing, non-tree components with their paths."""
    return [
        (component, path)
        for component, path in iter_components(components)
        if is_input(component) and not component.get("tree")
    ]


def _child_lists(component: Component) -> List[List[Component]]:
    lists: List[List[Component]] = []
    if isinstance(component.get("components"), list):
        lists.append(component["components"])
    for column in component.get("columns") or []:
        if isinstance(column, dict) and isinstance(column.get("components"), list):
            lists.append(column["components"])
    return lists
