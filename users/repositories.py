"""
User repository - Data access for user accounts audited as records.
"""
from core.repositories import BaseRepository
from .models import User


class UserRepository(BaseRepository[User]):
    """Repository for User"""

    def __init__(self):
        super().__init__(User)
