"""Project model — a saved idea and its AI-generated risk assessment."""

from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from riskassess.database import Base


class Project(Base):
    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    project_idea: Mapped[str] = mapped_column(Text, nullable=False)

    # ── Serialized JSON ({"risks": [...]}), stored as opaque text ──
    ai_response: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Owner, always taken from the verified token.
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
