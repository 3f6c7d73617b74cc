from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base, JSON_VARIANT
from app.services.tokens import utcnow


class BulkOperationHistory(Base):
    """Undo payload for the latest bulk calendar operation of a (user, workspace)."""

    __tablename__ = "bulk_operation_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    workspace_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False
    )

    operation_type: Mapped[str] = mapped_column(String(20), nullable=False)  # move | delete | update

    event_ids: Mapped[list[str]] = mapped_column(JSON_VARIANT, nullable=False)
    previous_state: Mapped[list[dict[str, Any]]] = mapped_column(JSON_VARIANT, nullable=False)
    new_state: Mapped[dict[str, Any] | None] = mapped_column(JSON_VARIANT, nullable=True)

    successful_count: Mapped[int] = mapped_column(Integer, default=0)
    failed_count: Mapped[int] = mapped_column(Integer, default=0)
    error_details: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON_VARIANT, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)


Index("ix_bulk_history_user_ws_created", BulkOperationHistory.user_id, BulkOperationHistory.workspace_id, BulkOperationHistory.created_at)
