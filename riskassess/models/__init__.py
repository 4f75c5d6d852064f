"""
Risk Assessment Platform – SQLAlchemy ORM models package.

Imports all model classes so the metadata sees every table through a
single ``import riskassess.models``.
"""

from riskassess.models.joke import Joke           # noqa: F401
from riskassess.models.project import Project     # noqa: F401
