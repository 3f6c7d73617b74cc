from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.campaign import Campaign, campaign_publication
from app.models.media_file import MediaFile, publication_media
from app.models.social_post_log import SocialPostLog
from app.models.user import User
from app.services.tokens import utcnow


class Publication(Base):
    __tablename__ = "publications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    workspace_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("workspaces.id", ondelete="CASCADE"), index=True, nullable=False
    )
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    title: Mapped[str] = mapped_column(String(300), nullable=False)
    slug: Mapped[str | None] = mapped_column(String(300), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # draft | pending_review | approved | scheduled | publishing | published | failed
    status: Mapped[str] = mapped_column(String(30), default="draft")

    scheduled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), index=True, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    owner: Mapped[User] = relationship(User)
    campaigns: Mapped[list[Campaign]] = relationship(
        Campaign, secondary=campaign_publication, order_by=campaign_publication.c.order
    )
    media_files: Mapped[list[MediaFile]] = relationship(
        MediaFile, secondary=publication_media, order_by=publication_media.c.order
    )
    post_logs: Mapped[list[SocialPostLog]] = relationship(
        SocialPostLog, order_by=SocialPostLog.id, cascade="all, delete-orphan", passive_deletes=True
    )

    @property
    def platforms(self) -> list[str]:
        """Platforms this publication was actually routed to, in first-seen order."""
        seen: list[str] = []
        for log in self.post_logs:
            if log.platform and log.platform not in seen:
                seen.append(log.platform)
        return seen
