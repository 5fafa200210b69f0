"""
Ordering helpers for the course → module → lesson hierarchy.

Dependencies: None (pure domain layer)
System role: Keeps ``order_index`` dense and deterministic
"""

from typing import Any


def resolve_order(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Assign a dense 0..n-1 ``order_index`` to payload items.

    Items without ``order_index`` take their list position. The stable sort
    keeps payload order for ties, then indexes are renumbered densely.

    Args:
        items: Module or lesson payload dicts

    Returns:
        list[dict]: Copies of the items, sorted, with dense order_index
    """
    keyed = []
    for position, item in enumerate(items):
        order = item.get("order_index")
        keyed.append((position if order is None else order, position, dict(item)))
    keyed.sort(key=lambda entry: (entry[0], entry[1]))

    ordered = []
    for index, (_, _, item) in enumerate(keyed):
        item["order_index"] = index
        ordered.append(item)
    return ordered
