"""Connection registry — which user is reachable over which connection.

At most one connection per user id. A second registration for the same
id overwrites the first; the old connection stays open but is no longer
reachable for direct delivery. Closing connections is the transport's
job, not the registry's.
"""

from typing import Any, Optional


class ConnectionRegistry:
    """Maps user id → its single live connection."""

    def __init__(self) -> None:
        self._by_user: dict[int, Any] = {}

    def register(self, user_id: int, connection: Any) -> None:
        """Associate user_id with connection, replacing any prior entry."""
        self._by_user[user_id] = connection

    def lookup(self, user_id: int) -> Optional[Any]:
        return self._by_user.get(user_id)

    def unregister(self, user_id: int, connection: Any = None) -> bool:
        """Remove the entry for user_id. Returns True if something was removed.

        With a connection, this is compare-and-delete: the entry is removed
        only if it still points at that exact instance, so a late close
        event from a stale connection cannot orphan a newer one. Without a
        connection, removal is unconditional.
        """
        current = self._by_user.get(user_id)
        if current is None:
            return False
        if connection is not None and current is not connection:
            return False
        del self._by_user[user_id]
        return True

    def __contains__(self, user_id: int) -> bool:
        return user_id in self._by_user

    def __len__(self) -> int:
        return len(self._by_user)
