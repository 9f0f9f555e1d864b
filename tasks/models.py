"""
tasks/models.py -- Domain dataclass for protected task records.

Pure data container with zero logic. Ownership checks live in auth/policy.py;
persistence lives in tasks/store.py.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Task:
    """A record owned by exactly one identity.

    owner_id is the subject id of the identity that created the task. It is
    taken from the verified token at creation, never from the request body,
    and TaskStore offers no way to change it afterwards.

    id is None before the record is written to the database.
    """

    title: str
    owner_id: str
    id: Optional[int] = None
    created_at: str = ""  # ISO 8601, set by store on insert
    updated_at: str = ""  # ISO 8601, set by store on insert and update
