"""Joke model — declared in the schema, not used by the risk flow."""

from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from riskassess.database import Base


class Joke(Base):
    __tablename__ = "jokes"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    setup: Mapped[str] = mapped_column(Text, nullable=False)
    punchline: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
