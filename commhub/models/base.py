"""Declarative base for ORM models."""

import uuid

from sqlalchemy.orm import DeclarativeBase


def new_uuid() -> str:
    """Generate a string UUID primary key."""
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all models."""
    pass
