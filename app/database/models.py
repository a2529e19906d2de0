from sqlalchemy import Column, String, Text
from app.database.config import Base


class StorageEntry(Base):
    """One key of the origin-wide persistent key-value storage."""

    __tablename__ = "storage_entries"

    key = Column(String, primary_key=True, index=True)
    value = Column(Text, nullable=False)
