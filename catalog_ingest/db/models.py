"""
SQLAlchemy Models for the catalog
"""

import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy import String, Integer, Float, BigInteger, Boolean, Text, JSON, Index
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    pass


def _new_id() -> str:
    return str(uuid.uuid4())


class CatalogEntry(Base):
    __tablename__ = "books"

    # Primary key
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)

    # Natural key: ISBN-13, ISBN-10 or <SOURCE>-<external id>
    isbn: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    external_id: Mapped[str] = mapped_column(String(100), nullable=False)
    source: Mapped[str] = mapped_column(String(50), nullable=False)

    # Core metadata
    title: Mapped[str] = mapped_column(Text, nullable=False)
    subtitle: Mapped[Optional[str]] = mapped_column(Text)
    authors: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    publisher: Mapped[Optional[str]] = mapped_column(Text)
    published_date: Mapped[Optional[str]] = mapped_column(String(32))
    description: Mapped[Optional[str]] = mapped_column(Text)
    page_count: Mapped[Optional[int]] = mapped_column(Integer)
    language: Mapped[str] = mapped_column(String(16), nullable=False, default="pt")
    cover_url: Mapped[str] = mapped_column(Text, nullable=False)
    cover_thumbnail: Mapped[Optional[str]] = mapped_column(Text)
    categories: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    # Rating stats from the source
    avg_rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    ratings_count: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index('idx_books_title_lower', func.lower(title)),
        Index('idx_books_source_external_id', 'source', 'external_id'),
    )

    def __repr__(self):
        return f"<CatalogEntry(id={self.id}, isbn='{self.isbn}', title='{self.title}')>"

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses"""
        return {
            'id': self.id,
            'isbn': self.isbn,
            'external_id': self.external_id,
            'source': self.source,
            'title': self.title,
            'subtitle': self.subtitle,
            'authors': self.authors or [],
            'publisher': self.publisher,
            'published_date': self.published_date,
            'description': self.description,
            'page_count': self.page_count,
            'language': self.language,
            'cover_url': self.cover_url,
            'cover_thumbnail': self.cover_thumbnail,
            'categories': self.categories or [],
            'avg_rating': self.avg_rating,
            'ratings_count': self.ratings_count,
            'is_verified': self.is_verified,
        }


class IngestOffset(Base):
    __tablename__ = "ingest_offsets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    dataset_variant: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    next_offset: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<IngestOffset(dataset_variant='{self.dataset_variant}', next_offset={self.next_offset})>"
