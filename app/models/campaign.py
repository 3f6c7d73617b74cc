from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.services.tokens import utcnow

campaign_publication = Table(
    "campaign_publication",
    Base.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("campaign_id", Integer, ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False),
    Column("publication_id", Integer, ForeignKey("publications.id", ondelete="CASCADE"), nullable=False),
    Column("order", Integer, default=0, nullable=False),
    UniqueConstraint("campaign_id", "publication_id", name="uq_campaign_publication"),
)


class Campaign(Base):
    __tablename__ = "campaigns"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    workspace_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("workspaces.id", ondelete="CASCADE"), index=True, nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="draft")  # active | paused | completed | draft

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
