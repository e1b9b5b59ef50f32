"""User class for vehicle owners and notification recipients."""
from datetime import datetime
from typing import Optional


class User:
    """A CarMonitor user."""

    def __init__(
        self,
        username: str,
        email: Optional[str] = None,
        id: Optional[int] = None,
        created_at: Optional[datetime] = None,
    ):
        self.id = id
        self.username = username
        self.email = email
        self.created_at = created_at
