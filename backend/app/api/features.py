"""Feature request endpoints."""

import logging
import uuid
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import desc, func, select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from backend.app.db import get_db
from backend.app.models.feature import Feature, FeatureComment, FeatureVote
from backend.app.schemas.feature import (
    CommentCreate,
    CommentResponse,
    FeatureCreate,
    FeatureResponse,
    FeatureUpdate,
    FeatureVoteCreate,
    FeatureVoteResponse,
    VoteMembershipResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["features"])


def _comment_to_dict(comment: FeatureComment) -> dict:
    return {
        "id": comment.id,
        "feature_id": comment.feature_id,
        "author_id": comment.author_id,
        "content": comment.content,
        "created_at": comment.created_at,
    }


def _feature_to_dict(feature: Feature, votes_count: int, comments: list[dict]) -> dict:
    return {
        "id": feature.id,
        "app_id": feature.app_id,
        "title": feature.title,
        "description": feature.description,
        "status": feature.status,
        "created_at": feature.created_at,
        "votes_count": votes_count,
        "comments": comments,
    }


def _features_query():
    return (
        select(
            Feature,
            func.count(FeatureVote.user_id).label("votes_count"),
        )
        .outerjoin(FeatureVote, Feature.id == FeatureVote.feature_id)
        .group_by(Feature.id)
        .options(selectinload(Feature.comments))
        .execution_options(populate_existing=True)
    )


async def _load_feature(db: AsyncSession, feature_id: str) -> dict:
    result = await db.execute(_features_query().where(Feature.id == feature_id))
    row = result.one_or_none()
    if row is None:
        raise HTTPException(status_code=404, detail="Feature not found")
    feature, votes_count = row
    return _feature_to_dict(feature, votes_count, [_comment_to_dict(c) for c in feature.comments])


async def _count_votes(db: AsyncSession, feature_id: str) -> int:
    result = await db.execute(
        select(func.count(FeatureVote.user_id)).where(FeatureVote.feature_id == feature_id)
    )
    return result.scalar_one()


async def _require_feature(db: AsyncSession, feature_id: str) -> Feature:
    result = await db.execute(select(Feature).where(Feature.id == feature_id))
    feature = result.scalar_one_or_none()
    if not feature:
        raise HTTPException(status_code=404, detail="Feature not found")
    return feature


@router.get("/apps/{app_id}/features", response_model=list[FeatureResponse])
async def list_features(
    app_id: str,
    status: str | None = None,
    db: AsyncSession = Depends(get_db),
) -> list[dict]:
    query = _features_query().where(Feature.app_id == app_id)

    if status:
        query = query.where(Feature.status == status)

    query = query.order_by(desc(Feature.created_at))
    result = await db.execute(query)
    rows = result.all()

    return [
        _feature_to_dict(feature, votes_count, [_comment_to_dict(c) for c in feature.comments])
        for feature, votes_count in rows
    ]


@router.post("/apps/{app_id}/features", response_model=FeatureResponse, status_code=201)
async def create_feature(
    app_id: str, data: FeatureCreate, db: AsyncSession = Depends(get_db)
) -> dict:
    feature = Feature(
        id=str(uuid.uuid4()),
        app_id=app_id,
        title=data.title,
        description=data.description,
        status="open",
        created_at=datetime.now(UTC).isoformat(),
    )
    db.add(feature)
    await db.flush()

    logger.info("Feature '%s' created on board %s", feature.title, app_id)
    return _feature_to_dict(feature, 0, [])


@router.get("/apps/{app_id}/votes", response_model=VoteMembershipResponse)
async def list_votes(app_id: str, user_id: str, db: AsyncSession = Depends(get_db)) -> dict:
    """Vote membership: the ids of features on this board the user has voted for."""
    result = await db.execute(
        select(FeatureVote.feature_id)
        .join(Feature, Feature.id == FeatureVote.feature_id)
        .where(Feature.app_id == app_id, FeatureVote.user_id == user_id)
        .order_by(FeatureVote.created_at)
    )
    return {"app_id": app_id, "user_id": user_id, "feature_ids": list(result.scalars().all())}


@router.post("/features/{feature_id}/vote", response_model=FeatureVoteResponse)
async def vote_feature(
    feature_id: str,
    data: FeatureVoteCreate,
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Upvote a feature at most once per user.

    The insert is a single ``ON CONFLICT DO NOTHING`` statement, so concurrent
    duplicates resolve on the primary key rather than on a read-then-write check.
    """
    await _require_feature(db, feature_id)

    result = await db.execute(
        insert(FeatureVote)
        .values(
            feature_id=feature_id,
            user_id=data.user_id,
            created_at=datetime.now(UTC).isoformat(),
        )
        .on_conflict_do_nothing(index_elements=["feature_id", "user_id"])
    )
    status = "voted" if result.rowcount else "already_voted"
    votes_count = await _count_votes(db, feature_id)

    logger.info(
        "Vote on %s by %s: %s (votes_count=%d)", feature_id, data.user_id, status, votes_count
    )
    return {"status": status, "feature_id": feature_id, "votes_count": votes_count}


@router.patch("/features/{feature_id}", response_model=FeatureResponse)
async def update_feature(
    feature_id: str, data: FeatureUpdate, db: AsyncSession = Depends(get_db)
) -> dict:
    feature = await _require_feature(db, feature_id)
    if feature.status != data.status:
        logger.info("Feature %s status %s -> %s", feature_id, feature.status, data.status)
        feature.status = data.status
        await db.flush()
    return await _load_feature(db, feature_id)


@router.post(
    "/features/{feature_id}/comments", response_model=CommentResponse, status_code=201
)
async def create_comment(
    feature_id: str, data: CommentCreate, db: AsyncSession = Depends(get_db)
) -> dict:
    await _require_feature(db, feature_id)

    comment = FeatureComment(
        id=str(uuid.uuid4()),
        feature_id=feature_id,
        author_id=data.author_id,
        content=data.content,
        created_at=datetime.now(UTC).isoformat(),
    )
    db.add(comment)
    await db.flush()
    return _comment_to_dict(comment)
