"""
Database Models for URL Shortener Service

This module defines the SQLModel database schemas for:
- Link: Stores the mapping between short names and original URLs
- LinkVisit: Stores one row per redirect served for a link

Design Decisions:
- Separate link_visits table, linked with ON DELETE CASCADE so deleting a
  link removes its history in the same statement
- Unique index on short_name; the database is the only arbiter of uniqueness
- Timestamps are assigned on insert; server_default=now() covers raw SQL inserts
- BIGINT ids on PostgreSQL, INTEGER on SQLite so rowid autoincrement works
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlmodel import Field, SQLModel

BigIntId = BigInteger().with_variant(Integer, "sqlite")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Link(SQLModel, table=True):
    """
    Main table storing URL shortening mappings.

    Fields:
    - id: Auto-incrementing primary key
    - original_url: The long URL that was shortened
    - short_name: Unique short code (3-32 chars, [a-zA-Z0-9_-])
    - created_at: Timestamp when the link was created
    """
    __tablename__ = "links"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntId, primary_key=True, autoincrement=True)
    )
    original_url: str = Field(sa_column=Column(Text, nullable=False))
    short_name: str = Field(
        sa_column=Column(String(32), nullable=False, unique=True, index=True)
    )
    created_at: datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    )


class LinkVisit(SQLModel, table=True):
    """
    Visit log table.

    One row is written for every redirect served, with the request's
    IP address, User-Agent and Referer and the HTTP status returned.
    """
    __tablename__ = "link_visits"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntId, primary_key=True, autoincrement=True)
    )
    link_id: int = Field(
        sa_column=Column(
            BigIntId,
            ForeignKey("links.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    ip: str = Field(default="", sa_column=Column(Text, nullable=False, server_default=""))
    user_agent: str = Field(default="", sa_column=Column(Text, nullable=False, server_default=""))
    referer: str = Field(default="", sa_column=Column(Text, nullable=False, server_default=""))
    status: int = Field(sa_column=Column(Integer, nullable=False))
    created_at: datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(
            DateTime(timezone=True), nullable=False, server_default=func.now(), index=True
        )
    )
