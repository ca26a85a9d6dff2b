"""
Repository contract shared by every aggregate.

Writes are staged on the session; committing is the service's job.
"""

from typing import Any, Optional, Protocol, TypeVar

from sqlalchemy.orm import Session

T = TypeVar("T")


class BaseRepository(Protocol[T]):
    db: Session

    def get_by_id(self, id: int) -> Optional[T]:
        ...

    def create(self, obj_in: Any) -> T:
        """Stage a new row built from a schema or mapping."""
        ...

    def update(self, db_obj: T, obj_in: Any) -> T:
        """Copy the supplied fields onto ``db_obj``."""
        ...

    def delete(self, id: int) -> Optional[T]:
        """Stage deletion; returns the removed row or None."""
        ...
