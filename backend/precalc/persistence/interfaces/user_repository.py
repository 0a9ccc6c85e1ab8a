"""Abstract repository interface for registered users."""
from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class User:
    id: str
    username: str
    password_hash: str
    role: str = "student"
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    created_at: str = ""


class UserRepository(ABC):

    @abstractmethod
    def add(self, user: User) -> bool:
        """Insert a new user. Returns False if the username is already taken."""
        ...

    @abstractmethod
    def get_by_username(self, username: str) -> Optional[User]:
        ...

    @abstractmethod
    def get_by_id(self, user_id: str) -> Optional[User]:
        ...
