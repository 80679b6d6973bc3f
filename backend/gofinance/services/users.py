from typing import Any

from gofinance.core.errors import NotFound

# The password hash is never selected for responses.
USER_COLUMNS = "id, username, email, created_at"


def get_user_by_username(cur, username: str) -> dict[str, Any]:
    cur.execute(f"SELECT {USER_COLUMNS} FROM users WHERE username=%s", (username,))
    user = cur.fetchone()
    if not user:
        raise NotFound("User not found")
    return user


def get_user_by_id(cur, user_id: int) -> dict[str, Any]:
    cur.execute(f"SELECT {USER_COLUMNS} FROM users WHERE id=%s", (user_id,))
    user = cur.fetchone()
    if not user:
        raise NotFound("User not found")
    return user
