import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional
from uuid import UUID, uuid4

from sqlalchemy.orm import Session

from praxis.core.exceptions import (
    DerivedFieldConflictError,
    InvalidParentError,
    InvalidProgressError,
    InvalidWeightError,
    NotFoundError,
)
from praxis.goals.models import GoalNode
from praxis.goals.progress import collect_subtree, is_descendant, recompute_forest, refresh_chain
from praxis.goals.schemas import GoalNodeCreate, GoalNodeUpdate
from praxis.users.service import require_user

logger = logging.getLogger(__name__)


@dataclass
class GoalTree:
    user_id: UUID
    nodes: List[GoalNode] = field(default_factory=list)
    root_nodes: List[GoalNode] = field(default_factory=list)


# Validation

def check_weight(weight, node_id: Optional[UUID] = None) -> float:
    if weight is None or isinstance(weight, bool) or not math.isfinite(weight) or weight <= 0:
        raise InvalidWeightError(weight, node_id)
    return float(weight)


def check_progress(progress, node_id: Optional[UUID] = None) -> float:
    # NaN fails every comparison, so the range check also rejects it
    if progress is None or isinstance(progress, bool) or not 0.0 <= progress <= 1.0:
        raise InvalidProgressError(progress, node_id)
    return float(progress)


# Locking and recompute helpers

def _root_of(node: GoalNode) -> GoalNode:
    while node.parent is not None:
        node = node.parent
    return node


def lock_roots(db: Session, *nodes: Optional[GoalNode]) -> None:
    """
    Row-locks the roots of the trees holding ``nodes``.

    Ancestor-chain recomputes under one root are serialized on that row.
    Roots are locked in id order so two writers never wait on each other.
    """
    root_ids = {_root_of(n).id for n in nodes if n is not None}
    for root_id in sorted(root_ids, key=str):
        db.query(GoalNode).filter(GoalNode.id == root_id).with_for_update().first()


def _sync_structure(db: Session, *nodes: Optional[GoalNode]) -> None:
    # Flush pending parent_id changes, then reload the affected relationships
    db.flush()
    for node in nodes:
        if node is not None:
            db.expire(node, ["children", "parent"])


def refresh_ancestors(db: Session, node: GoalNode) -> None:
    """Recomputes the parents of ``node`` after its weight or progress changed. Does not commit."""
    lock_roots(db, node)
    db.flush()
    if node.parent is not None:
        refresh_chain(node.parent)


def set_leaf_progress(db: Session, node: GoalNode, progress: float) -> GoalNode:
    """Writes a leaf's progress and rolls it up the chain. Does not commit."""
    if node.children:
        raise DerivedFieldConflictError(node.id)
    node.progress = check_progress(progress, node.id)
    refresh_ancestors(db, node)
    return node


# Queries

def get_node(db: Session, node_id: UUID, user_id: UUID) -> Optional[GoalNode]:
    return db.query(GoalNode).filter(
        GoalNode.id == node_id,
        GoalNode.user_id == user_id
    ).first()


def get_node_any_owner(db: Session, node_id: UUID) -> Optional[GoalNode]:
    return db.query(GoalNode).filter(GoalNode.id == node_id).first()


def require_node(db: Session, node_id: UUID, user_id: UUID) -> GoalNode:
    node = get_node(db, node_id, user_id)
    if node is None:
        raise NotFoundError("Goal", node_id)
    return node


def get_user_nodes(db: Session, user_id: UUID, skip: int = 0, limit: int = 100) -> List[GoalNode]:
    return (
        db.query(GoalNode)
        .filter(GoalNode.user_id == user_id)
        .order_by(GoalNode.created_at)
        .offset(skip)
        .limit(limit)
        .all()
    )


def get_tree(db: Session, user_id: UUID) -> GoalTree:
    nodes = db.query(GoalNode).filter(GoalNode.user_id == user_id).order_by(GoalNode.created_at).all()
    return GoalTree(
        user_id=user_id,
        nodes=nodes,
        root_nodes=[n for n in nodes if n.parent_id is None],
    )


# Mutations

def create_node(db: Session, node_in: GoalNodeCreate, user_id: UUID) -> GoalNode:
    require_user(db, user_id)
    weight = check_weight(node_in.weight)

    parent = None
    if node_in.parent_id is not None:
        parent = get_node(db, node_in.parent_id, user_id)
        if parent is None:
            raise InvalidParentError("Parent goal does not exist for this user", node_id=node_in.parent_id)

    try:
        lock_roots(db, parent)
        node = GoalNode(
            id=uuid4(),
            user_id=user_id,
            parent_id=parent.id if parent else None,
            name=node_in.name,
            domain=node_in.domain,
            weight=weight,
            progress=0.0,
            category=node_in.category,
            custom_details=node_in.custom_details,
        )
        db.add(node)
        _sync_structure(db, parent)
        if parent is not None:
            refresh_chain(parent)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(node)
    logger.info("Created goal %s for user %s (parent=%s)", node.id, user_id, node.parent_id)
    return node


def update_node(db: Session, node_id: UUID, node_in: GoalNodeUpdate, user_id: UUID) -> GoalNode:
    """
    Partial update of a goal.

    A ``parent_id`` in the payload moves the goal (``None`` makes it a root).
    ``progress`` may only be written on leaves. Every chain whose weighted
    mean depends on the change is recomputed before the commit.
    """
    node = require_node(db, node_id, user_id)
    update_data = node_in.model_dump(exclude_unset=True)

    if "progress" in update_data:
        if node.children:
            raise DerivedFieldConflictError(node.id)
        update_data["progress"] = check_progress(update_data["progress"], node.id)
    if "weight" in update_data:
        update_data["weight"] = check_weight(update_data["weight"], node.id)
    # Non-nullable columns: an explicit null means "leave unchanged"
    for required in ("name", "domain"):
        if required in update_data and update_data[required] is None:
            del update_data[required]

    old_parent = node.parent
    new_parent = None
    reparent = "parent_id" in update_data and update_data["parent_id"] != node.parent_id
    new_parent_id = update_data.pop("parent_id", None)
    if reparent and new_parent_id is not None:
        new_parent = get_node(db, new_parent_id, user_id)
        if new_parent is None:
            raise InvalidParentError("Parent goal does not exist for this user", node_id=new_parent_id)
        if is_descendant(new_parent, node):
            raise InvalidParentError("A goal cannot be moved under itself or one of its sub-goals", node_id=node.id)

    try:
        lock_roots(db, node, new_parent)
        for field_name, value in update_data.items():
            setattr(node, field_name, value)

        if reparent:
            node.parent_id = new_parent.id if new_parent else None
            _sync_structure(db, node, old_parent, new_parent)
            for parent in (old_parent, new_parent):
                if parent is not None:
                    refresh_chain(parent)
        elif "weight" in update_data or "progress" in update_data:
            db.flush()
            if node.parent is not None:
                refresh_chain(node.parent)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(node)
    logger.info("Updated goal %s for user %s: %s", node.id, user_id, sorted(node_in.model_fields_set))
    return node


def delete_node(db: Session, node_id: UUID, user_id: UUID) -> List[UUID]:
    """
    Deletes a goal with all of its sub-goals in one transaction.

    Returns:
        List[UUID]: Ids of every removed node, the goal itself first.
    """
    node = require_node(db, node_id, user_id)
    parent = node.parent
    deleted_ids = [n.id for n in collect_subtree(node)]

    try:
        lock_roots(db, node)
        db.delete(node)
        _sync_structure(db, parent)
        if parent is not None:
            refresh_chain(parent)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Deleted goal %s and %d sub-goals for user %s", node_id, len(deleted_ids) - 1, user_id)
    return deleted_ids


def delete_all_nodes(db: Session, user_id: UUID) -> int:
    query = db.query(GoalNode).filter(GoalNode.user_id == user_id)
    # Counted up front: rows removed by the parent_id cascade are not in the delete's rowcount
    count = query.count()
    query.delete()
    db.commit()
    logger.info("Deleted all %d goals for user %s", count, user_id)
    return count


def recompute_user_tree(db: Session, user_id: UUID) -> GoalTree:
    tree = get_tree(db, user_id)
    try:
        lock_roots(db, *tree.root_nodes)
        recompute_forest(tree.root_nodes)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Recomputed %d goal trees for user %s", len(tree.root_nodes), user_id)
    return get_tree(db, user_id)
