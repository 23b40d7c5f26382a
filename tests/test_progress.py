# tests/test_progress.py
"""Unit tests for the weighted progress roll-up."""

import pytest

from praxis.goals.progress import (
    collect_subtree,
    is_descendant,
    recompute_forest,
    refresh_chain,
    weighted_progress,
)


class Node:
    """Minimal stand-in for a goal node."""

    def __init__(self, weight=1.0, progress=0.0, parent=None):
        self.weight = weight
        self.progress = progress
        self.parent = parent
        self.children = []
        if parent is not None:
            parent.children.append(self)


class TestWeightedProgress:
    def test_weighted_mean(self):
        """Children (2, 0.5) and (1, 0.8) roll up to 0.6."""
        parent = Node()
        Node(weight=2.0, progress=0.5, parent=parent)
        Node(weight=1.0, progress=0.8, parent=parent)

        assert weighted_progress(parent.children) == pytest.approx(0.6, abs=1e-9)

    def test_equal_weights_is_plain_mean(self):
        parent = Node()
        for p in (0.2, 0.4, 0.9):
            Node(weight=3.0, progress=p, parent=parent)

        assert weighted_progress(parent.children) == pytest.approx(0.5, abs=1e-9)

    def test_weights_are_relative_ratios(self):
        """Scaling all sibling weights leaves the result unchanged."""
        a, b = Node(), Node()
        Node(weight=1.0, progress=0.1, parent=a)
        Node(weight=4.0, progress=0.6, parent=a)
        Node(weight=10.0, progress=0.1, parent=b)
        Node(weight=40.0, progress=0.6, parent=b)

        assert weighted_progress(a.children) == pytest.approx(weighted_progress(b.children), abs=1e-12)

    def test_no_children_is_an_error(self):
        with pytest.raises(ValueError):
            weighted_progress([])


class TestRefreshChain:
    def test_recomputes_every_ancestor(self):
        root = Node()
        mid = Node(weight=1.0, parent=root)
        sibling = Node(weight=1.0, progress=1.0, parent=root)
        leaf_a = Node(weight=3.0, progress=0.0, parent=mid)
        Node(weight=1.0, progress=1.0, parent=mid)

        leaf_a.progress = 1.0
        touched = refresh_chain(leaf_a.parent)

        assert touched == [mid, root]
        assert mid.progress == pytest.approx(1.0)
        assert root.progress == pytest.approx(1.0)
        assert sibling.progress == 1.0

    def test_leaf_keeps_stored_value(self):
        leaf = Node(progress=0.37)

        assert refresh_chain(leaf) == []
        assert leaf.progress == 0.37

    def test_parent_reflects_weight_change(self):
        root = Node()
        done = Node(weight=1.0, progress=1.0, parent=root)
        Node(weight=1.0, progress=0.0, parent=root)
        refresh_chain(root)
        assert root.progress == pytest.approx(0.5)

        done.weight = 3.0
        refresh_chain(done.parent)

        assert root.progress == pytest.approx(0.75)


class TestRecomputeForest:
    def test_full_recompute_matches_chain_recompute(self):
        root = Node()
        a = Node(weight=2.0, parent=root)
        b = Node(weight=1.0, progress=0.3, parent=root)
        Node(weight=1.0, progress=0.5, parent=a)
        Node(weight=1.0, progress=1.0, parent=a)

        recompute_forest([root])

        assert a.progress == pytest.approx(0.75)
        assert root.progress == pytest.approx((2 * 0.75 + 1 * 0.3) / 3)
        assert b.progress == 0.3

    def test_empty_forest(self):
        recompute_forest([])


class TestTreeHelpers:
    def test_is_descendant(self):
        a = Node()
        b = Node(parent=a)
        c = Node(parent=b)
        other = Node()

        assert is_descendant(c, a)
        assert is_descendant(a, a)
        assert not is_descendant(a, c)
        assert not is_descendant(other, a)

    def test_collect_subtree(self):
        a = Node()
        b = Node(parent=a)
        c = Node(parent=a)
        d = Node(parent=b)

        assert collect_subtree(a) == [a, b, d, c]
        assert collect_subtree(c) == [c]
