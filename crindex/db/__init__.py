"""Database package: ORM model and keyed state facade."""

from crindex.db.facade import StateDatabase
from crindex.db.orm import Base, StateBlobRow

__all__ = ["Base", "StateBlobRow", "StateDatabase"]
