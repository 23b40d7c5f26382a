import logging
from collections import defaultdict
from typing import List
from uuid import UUID

from sqlalchemy.orm import Session

from praxis.goals.models import GoalNode
from praxis.goals.service import GoalTree, get_tree
from praxis.matching.schemas import CompatibilityResponse, MatchResponse
from praxis.matching.scorer import CompatibilityScorer
from praxis.users.models import User
from praxis.users.service import require_user

logger = logging.getLogger(__name__)


def _candidate_trees(db: Session, user_id: UUID) -> List[GoalTree]:
    nodes = (
        db.query(GoalNode)
        .filter(GoalNode.user_id != user_id)
        .order_by(GoalNode.created_at)
        .all()
    )
    grouped = defaultdict(list)
    for node in nodes:
        grouped[node.user_id].append(node)
    return [
        GoalTree(user_id=uid, nodes=user_nodes, root_nodes=[n for n in user_nodes if n.parent_id is None])
        for uid, user_nodes in grouped.items()
    ]


def rank_matches(db: Session, user_id: UUID, scorer: CompatibilityScorer, limit: int = 50) -> List[MatchResponse]:
    """
    Scores the user's goal tree against every other user with goals.

    Candidates with a zero score are dropped; the rest come back best first,
    ties broken by user id so the order is stable.
    """
    require_user(db, user_id)
    own_tree = get_tree(db, user_id)
    if not own_tree.nodes:
        return []

    candidates = _candidate_trees(db, user_id)
    names = {}
    if candidates:
        users = db.query(User).filter(User.id.in_([t.user_id for t in candidates])).all()
        names = {u.id: u.name for u in users}

    matches = []
    for tree in candidates:
        result = scorer.score(own_tree, tree)
        if result.score > 0:
            matches.append(MatchResponse(
                user_id=tree.user_id,
                name=names.get(tree.user_id, ""),
                score=result.score,
                shared_domains=list(result.shared_domains),
                shared_goal_names=list(result.shared_goal_names),
            ))

    matches.sort(key=lambda m: (-m.score, str(m.user_id)))
    logger.info("Scored %d candidates for user %s, %d matches", len(candidates), user_id, len(matches))
    return matches[:limit]


def compare_users(db: Session, user_id: UUID, other_user_id: UUID, scorer: CompatibilityScorer) -> CompatibilityResponse:
    require_user(db, user_id)
    require_user(db, other_user_id)
    result = scorer.score(get_tree(db, user_id), get_tree(db, other_user_id))
    return CompatibilityResponse(
        user_id=other_user_id,
        score=result.score,
        domain_overlap=result.domain_overlap,
        name_similarity=result.name_similarity,
        shared_domains=list(result.shared_domains),
        shared_goal_names=list(result.shared_goal_names),
    )
