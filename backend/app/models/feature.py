from __future__ import annotations

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.db import Base


class Feature(Base):
    __tablename__ = "features"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    app_id: Mapped[str] = mapped_column(String, nullable=False)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(String, nullable=False)
    # "open", "planned", "in_progress" or "completed"
    status: Mapped[str] = mapped_column(String, nullable=False, default="open")
    # ISO 8601 string, same convention as every other timestamp column
    created_at: Mapped[str] = mapped_column(String, nullable=False)

    __table_args__ = (Index("idx_features_app", "app_id"),)

    comments: Mapped[list[FeatureComment]] = relationship(
        "FeatureComment",
        back_populates="feature",
        order_by="FeatureComment.created_at",
        cascade="all, delete-orphan",
    )


class FeatureVote(Base):
    """One row per (feature, user). The composite key makes a repeat vote a no-op."""

    __tablename__ = "feature_votes"

    feature_id: Mapped[str] = mapped_column(
        String, ForeignKey("features.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[str] = mapped_column(String, primary_key=True)
    created_at: Mapped[str] = mapped_column(String, nullable=False)


class FeatureComment(Base):
    __tablename__ = "feature_comments"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    feature_id: Mapped[str] = mapped_column(
        String, ForeignKey("features.id", ondelete="CASCADE"), nullable=False
    )
    author_id: Mapped[str] = mapped_column(String, nullable=False)
    content: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[str] = mapped_column(String, nullable=False)

    feature: Mapped[Feature] = relationship("Feature", back_populates="comments")
