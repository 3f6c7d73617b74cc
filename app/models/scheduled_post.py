from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.publication import Publication
from app.models.social_account import SocialAccount
from app.services.tokens import utcnow


class ScheduledPost(Base):
    __tablename__ = "scheduled_posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    publication_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("publications.id", ondelete="CASCADE"), index=True, nullable=False
    )
    social_account_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("social_accounts.id", ondelete="CASCADE"), nullable=False
    )

    scheduled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), index=True, nullable=True)
    status: Mapped[str] = mapped_column(String(30), default="pending")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    publication: Mapped[Publication] = relationship(Publication)
    social_account: Mapped[SocialAccount] = relationship(SocialAccount)
