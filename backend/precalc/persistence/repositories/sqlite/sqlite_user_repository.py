"""SQLite implementation of UserRepository."""
from __future__ import annotations
import sqlite3
from typing import Optional

from precalc.persistence.db import get_connection
from precalc.persistence.interfaces.user_repository import User, UserRepository


def _row_to_user(row) -> User:
    return User(
        id=row["id"],
        username=row["username"],
        password_hash=row["password_hash"],
        role=row["role"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        created_at=row["created_at"],
    )


class SqliteUserRepository(UserRepository):

    def add(self, user: User) -> bool:
        conn = get_connection()
        try:
            conn.execute(
                """
                INSERT INTO users (id, username, password_hash, first_name, last_name, role, created_at)
                VALUES (:id, :username, :password_hash, :first_name, :last_name, :role, :created_at)
                """,
                {
                    "id": user.id,
                    "username": user.username,
                    "password_hash": user.password_hash,
                    "first_name": user.first_name,
                    "last_name": user.last_name,
                    "role": user.role,
                    "created_at": user.created_at,
                },
            )
            conn.commit()
        except sqlite3.IntegrityError:
            return False
        finally:
            conn.close()
        return True

    def get_by_username(self, username: str) -> Optional[User]:
        conn = get_connection()
        row = conn.execute("SELECT * FROM users WHERE username = ?", (username,)).fetchone()
        conn.close()
        return _row_to_user(row) if row else None

    def get_by_id(self, user_id: str) -> Optional[User]:
        conn = get_connection()
        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        conn.close()
        return _row_to_user(row) if row else None
