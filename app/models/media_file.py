from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.services.tokens import utcnow

publication_media = Table(
    "publication_media",
    Base.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("publication_id", Integer, ForeignKey("publications.id", ondelete="CASCADE"), nullable=False),
    Column("media_file_id", Integer, ForeignKey("media_files.id", ondelete="CASCADE"), nullable=False),
    Column("order", Integer, default=0, nullable=False),
)


class MediaFile(Base):
    __tablename__ = "media_files"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_path: Mapped[str] = mapped_column(String(1500), nullable=False)
    file_type: Mapped[str] = mapped_column(String(20), nullable=False)  # image | video
    thumbnail_path: Mapped[str | None] = mapped_column(String(1500), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    @property
    def thumbnail(self) -> str:
        # videos carry a generated poster frame; images are their own thumbnail
        return self.thumbnail_path or self.file_path
