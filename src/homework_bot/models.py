from __future__ import annotations
import datetime as dt
from sqlalchemy import String, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column
from .db import Base

UTC = dt.timezone.utc
def utcnow() -> dt.datetime:
    return dt.datetime.now(tz=UTC)

class KVEntry(Base):
    __tablename__ = "kv_entries"
    # exercise:<id> | chat:<chat_id>:current_exercise | submissions:<id>
    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
