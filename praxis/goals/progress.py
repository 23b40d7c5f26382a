"""
Weighted progress roll-up for goal trees.

A goal with sub-goals has no progress of its own: it is the weighted mean of
its children's progress, where sibling weights act as relative ratios. Leaves
keep whatever progress was last written to them.

The functions work on any node object exposing ``weight``, ``progress``,
``children`` and ``parent``; the ORM ``GoalNode`` is the usual one.
"""
from typing import Iterable, List


def weighted_progress(children: Iterable) -> float:
    """
    Weighted mean of the children's progress.

    Args:
        children: Nodes with positive ``weight`` and ``progress`` in [0, 1].

    Returns:
        float: sum(weight * progress) / sum(weight).

    Raises:
        ValueError: If there are no children or the weights do not sum to a
            positive number.
    """
    total_weight = 0.0
    weighted_sum = 0.0
    for child in children:
        total_weight += child.weight
        weighted_sum += child.weight * child.progress
    if total_weight <= 0:
        raise ValueError("Cannot aggregate progress over children with no positive weight")
    return weighted_sum / total_weight


def refresh_chain(node) -> List:
    """
    Recomputes derived progress from ``node`` up to its root.

    Only nodes that currently have children are rewritten; a leaf keeps its
    stored value. Returns the nodes whose progress was recomputed, bottom-up.
    """
    touched = []
    current = node
    while current is not None:
        if current.children:
            current.progress = weighted_progress(current.children)
            touched.append(current)
        current = current.parent
    return touched


def recompute_forest(roots: Iterable) -> None:
    """Post-order recompute of whole trees; the slow path when chains are not enough."""
    for root in roots:
        _recompute_subtree(root)


def _recompute_subtree(node) -> float:
    if node.children:
        for child in node.children:
            _recompute_subtree(child)
        node.progress = weighted_progress(node.children)
    return node.progress


def is_descendant(candidate, ancestor) -> bool:
    """True when ``candidate`` lies in the subtree rooted at ``ancestor`` (itself included)."""
    current = candidate
    while current is not None:
        if current is ancestor:
            return True
        current = current.parent
    return False


def collect_subtree(node) -> List:
    """The node followed by all of its descendants, depth first."""
    nodes = [node]
    for child in node.children:
        nodes.extend(collect_subtree(child))
    return nodes
