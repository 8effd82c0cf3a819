from datetime import datetime, timezone
from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LinkORM(Base):
    """ORM модель короткой ссылки"""
    __tablename__ = "links"
    # AUTOINCREMENT: SQLite не переиспользует id после удаления строк
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    author = Column(BigInteger, nullable=False)  # chat id владельца
    target = Column(Text, nullable=False)
    title = Column(Text, nullable=False)


class AccessORM(Base):
    """ORM модель обращения к короткой ссылке"""
    __tablename__ = "accesses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    link_id = Column(Integer, ForeignKey("links.id"), nullable=False)
    address = Column(String, nullable=False)
    accessed_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    __table_args__ = (
        Index('idx_accesses_link_id', 'link_id'),
        {"sqlite_autoincrement": True},
    )
