from datetime import datetime

import sqlalchemy
from sqlalchemy import Column, String
from sqlalchemy.orm import declarative_base
from uuid_extension import uuid7

Base = declarative_base()


class BaseModel(Base):
    __abstract__ = True
    id = Column(String, primary_key=True, default=lambda: str(uuid7()), index=True)
    # Naive UTC, set client-side so sliding-window queries compare like with like
    created_at = Column(sqlalchemy.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(
        sqlalchemy.DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

# Note: Models will import this Base. Do not import models here to avoid circular imports.
# Import models in alembic/env.py instead for migrations.
