from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all persisted models."""


TIMESTAMP = DateTime(timezone=False)
