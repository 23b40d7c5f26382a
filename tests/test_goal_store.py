# tests/test_goal_store.py
"""Tests for the goal store: invariants, cascades and progress recompute."""

import uuid

import pytest

from praxis.core.exceptions import (
    DerivedFieldConflictError,
    InvalidParentError,
    InvalidProgressError,
    InvalidWeightError,
    NotFoundError,
)
from praxis.goals.models import Domain, GoalNode
from praxis.goals.schemas import GoalNodeCreate, GoalNodeUpdate
from praxis.goals.service import (
    create_node,
    delete_all_nodes,
    delete_node,
    get_node,
    get_tree,
    recompute_user_tree,
    update_node,
)
from praxis.users.service import delete_user


def set_progress(db, node, value, user_id):
    return update_node(db, node.id, GoalNodeUpdate(progress=value), user_id)


class TestCreateNode:
    def test_root_starts_at_zero(self, db, make_user, make_goal):
        user = make_user()

        node = make_goal(user, name="Get promoted", weight=2.5)

        assert node.parent_id is None
        assert node.progress == 0.0
        assert node.weight == 2.5
        assert node.domain == Domain.CAREER

    def test_unknown_user(self, db):
        with pytest.raises(NotFoundError):
            create_node(db, GoalNodeCreate(name="x", domain=Domain.FITNESS), uuid.uuid4())

    def test_missing_parent(self, db, make_user):
        user = make_user()

        with pytest.raises(InvalidParentError):
            create_node(db, GoalNodeCreate(name="x", domain=Domain.FITNESS, parent_id=uuid.uuid4()), user)

    def test_foreign_parent(self, db, make_user, make_goal):
        alice, bob = make_user("Alice"), make_user("Bob")
        bobs_goal = make_goal(bob)

        with pytest.raises(InvalidParentError):
            make_goal(alice, parent=bobs_goal)

    @pytest.mark.parametrize("weight", [0.0, -1.0, float("nan"), float("inf")])
    def test_non_positive_or_non_finite_weight(self, db, make_user, make_goal, weight):
        user = make_user()

        with pytest.raises(InvalidWeightError):
            make_goal(user, weight=weight)

    def test_new_child_dilutes_parent_progress(self, db, make_user, make_goal):
        user = make_user()
        root = make_goal(user)
        first = make_goal(user, parent=root)
        set_progress(db, first, 1.0, user)
        assert get_node(db, root.id, user).progress == pytest.approx(1.0)

        make_goal(user, parent=root)

        assert get_node(db, root.id, user).progress == pytest.approx(0.5)


class TestProgress:
    def test_parent_is_weighted_mean_of_children(self, db, make_user, make_goal):
        user = make_user()
        root = make_goal(user)
        heavy = make_goal(user, parent=root, weight=2.0)
        light = make_goal(user, parent=root, weight=1.0)

        set_progress(db, heavy, 0.5, user)
        set_progress(db, light, 0.8, user)

        assert get_node(db, root.id, user).progress == pytest.approx(0.6, abs=1e-9)

    def test_leaf_keeps_last_written_value(self, db, make_user, make_goal):
        user = make_user()
        leaf = make_goal(user)

        set_progress(db, leaf, 0.3, user)
        updated = set_progress(db, leaf, 0.123456789, user)

        assert updated.progress == 0.123456789

    def test_recompute_reaches_the_root(self, db, make_user, make_goal):
        user = make_user()
        root = make_goal(user)
        mid = make_goal(user, parent=root, weight=1.0)
        other = make_goal(user, parent=root, weight=3.0)
        leaf = make_goal(user, parent=mid)

        set_progress(db, other, 1.0, user)
        set_progress(db, leaf, 0.4, user)

        assert get_node(db, mid.id, user).progress == pytest.approx(0.4)
        assert get_node(db, root.id, user).progress == pytest.approx((0.4 + 3.0) / 4.0)

    def test_weight_change_updates_parent(self, db, make_user, make_goal):
        user = make_user()
        root = make_goal(user)
        done = make_goal(user, parent=root)
        make_goal(user, parent=root)
        set_progress(db, done, 1.0, user)

        update_node(db, done.id, GoalNodeUpdate(weight=3.0), user)

        assert get_node(db, root.id, user).progress == pytest.approx(0.75)

    def test_progress_write_on_parent_conflicts(self, db, make_user, make_goal):
        user = make_user()
        root = make_goal(user)
        make_goal(user, parent=root)

        with pytest.raises(DerivedFieldConflictError) as exc_info:
            set_progress(db, root, 0.9, user)

        assert exc_info.value.node_id == root.id
        assert exc_info.value.field == "progress"

    @pytest.mark.parametrize("value", [-0.01, 1.5, float("nan"), float("inf")])
    def test_progress_out_of_range(self, db, make_user, make_goal, value):
        user = make_user()
        leaf = make_goal(user)

        with pytest.raises(InvalidProgressError):
            set_progress(db, leaf, value, user)

    @pytest.mark.parametrize("weight", [0, float("nan"), float("inf")])
    def test_invalid_weight_update(self, db, make_user, make_goal, weight):
        user = make_user()
        root = make_goal(user)
        node = make_goal(user, parent=root)

        with pytest.raises(InvalidWeightError):
            update_node(db, node.id, GoalNodeUpdate(weight=weight), user)

        assert get_node(db, node.id, user).weight == 1.0
        assert get_node(db, root.id, user).progress == 0.0

    def test_metadata_updates_are_free(self, db, make_user, make_goal):
        user = make_user()
        root = make_goal(user)
        make_goal(user, parent=root)

        updated = update_node(
            db, root.id,
            GoalNodeUpdate(name="Become a staff engineer", category="Promotion", custom_details="By 2027"),
            user,
        )

        assert updated.name == "Become a staff engineer"
        assert updated.category == "Promotion"


class TestReparent:
    def test_cycle_is_rejected(self, db, make_user, make_goal):
        """A is the parent of B; making B the parent of A must fail."""
        user = make_user()
        a = make_goal(user, name="A")
        b = make_goal(user, name="B", parent=a)

        with pytest.raises(InvalidParentError):
            update_node(db, a.id, GoalNodeUpdate(parent_id=b.id), user)

        assert get_node(db, a.id, user).parent_id is None

    def test_self_parent_is_rejected(self, db, make_user, make_goal):
        user = make_user()
        a = make_goal(user)

        with pytest.raises(InvalidParentError):
            update_node(db, a.id, GoalNodeUpdate(parent_id=a.id), user)

    def test_foreign_parent_is_rejected(self, db, make_user, make_goal):
        alice, bob = make_user("Alice"), make_user("Bob")
        node = make_goal(alice)
        foreign = make_goal(bob)

        with pytest.raises(InvalidParentError):
            update_node(db, node.id, GoalNodeUpdate(parent_id=foreign.id), alice)

    def test_move_recomputes_both_parents(self, db, make_user, make_goal):
        user = make_user()
        old_root = make_goal(user, name="Old")
        new_root = make_goal(user, name="New")
        moving = make_goal(user, parent=old_root)
        staying = make_goal(user, parent=old_root)
        existing = make_goal(user, parent=new_root)
        set_progress(db, moving, 1.0, user)
        set_progress(db, staying, 0.2, user)

        update_node(db, moving.id, GoalNodeUpdate(parent_id=new_root.id), user)

        assert get_node(db, moving.id, user).parent_id == new_root.id
        assert get_node(db, old_root.id, user).progress == pytest.approx(0.2)
        assert get_node(db, new_root.id, user).progress == pytest.approx(0.5)
        assert get_node(db, existing.id, user).progress == 0.0

    def test_move_to_root(self, db, make_user, make_goal):
        user = make_user()
        root = make_goal(user)
        child = make_goal(user, parent=root)

        update_node(db, child.id, GoalNodeUpdate(parent_id=None), user)

        tree = get_tree(db, user)
        assert {n.id for n in tree.root_nodes} == {root.id, child.id}


class TestDelete:
    def test_cascade_removes_exactly_the_subtree(self, db, make_user, make_goal):
        user = make_user()
        root = make_goal(user)
        doomed = make_goal(user, parent=root)
        first = make_goal(user, parent=doomed)
        second = make_goal(user, parent=doomed)
        sibling = make_goal(user, parent=root)
        nephew = make_goal(user, parent=sibling)
        set_progress(db, first, 1.0, user)
        set_progress(db, nephew, 0.4, user)

        deleted = delete_node(db, doomed.id, user)

        assert deleted[0] == doomed.id
        assert set(deleted) == {doomed.id, first.id, second.id}
        remaining = {n.id for n in get_tree(db, user).nodes}
        assert remaining == {root.id, sibling.id, nephew.id}
        assert get_node(db, root.id, user).progress == pytest.approx(0.4)

    def test_missing_node(self, db, make_user):
        user = make_user()

        with pytest.raises(NotFoundError):
            delete_node(db, uuid.uuid4(), user)

    def test_cannot_delete_other_users_node(self, db, make_user, make_goal):
        alice, bob = make_user("Alice"), make_user("Bob")
        node = make_goal(bob)

        with pytest.raises(NotFoundError):
            delete_node(db, node.id, alice)

    def test_delete_all(self, db, make_user, make_goal):
        user = make_user()
        root = make_goal(user)
        make_goal(user, parent=root)

        assert delete_all_nodes(db, user) == 2
        assert get_tree(db, user).nodes == []

    def test_user_deletion_removes_forest(self, db, make_user, make_goal):
        alice, bob = make_user("Alice"), make_user("Bob")
        root = make_goal(alice)
        make_goal(alice, parent=root)
        kept = make_goal(bob)

        delete_user(db, alice)

        assert db.query(GoalNode).filter(GoalNode.user_id == alice).count() == 0
        assert get_node(db, kept.id, bob) is not None


class TestTree:
    def test_empty_tree(self, db, make_user):
        tree = get_tree(db, make_user())

        assert tree.nodes == []
        assert tree.root_nodes == []

    def test_roots_are_nodes_without_parent(self, db, make_user, make_goal):
        user = make_user()
        career = make_goal(user, domain=Domain.CAREER)
        fitness = make_goal(user, domain=Domain.FITNESS)
        make_goal(user, parent=career)

        tree = get_tree(db, user)

        assert len(tree.nodes) == 3
        assert {n.id for n in tree.root_nodes} == {career.id, fitness.id}

    def test_full_recompute_repairs_stale_progress(self, db, make_user, make_goal):
        user = make_user()
        root = make_goal(user)
        leaf = make_goal(user, parent=root)
        set_progress(db, leaf, 0.8, user)
        # Simulate a stale row written outside the store
        stale = get_node(db, root.id, user)
        stale.progress = 0.0
        db.commit()

        tree = recompute_user_tree(db, user)

        assert next(n for n in tree.nodes if n.id == root.id).progress == pytest.approx(0.8)
