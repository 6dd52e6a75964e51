"""Memoized uid to user-name lookup."""

import pwd
import threading
from collections.abc import Callable


def _passwd_name(uid: int) -> str | None:
    try:
        return pwd.getpwuid(uid).pw_name
    except KeyError:
        return None


class IdCache:
    """
    Cache of user names keyed by uid.

    One instance lives for one run. Unknown uids are cached as their
    decimal text so the password database is asked once per uid.
    """

    def __init__(self, lookup: Callable[[int], str | None] = _passwd_name) -> None:
        self._lookup = lookup
        self._names: dict[int, str] = {}
        self._lock = threading.Lock()

    def username(self, uid: int) -> str:
        """Name for `uid`, or the uid as text when it has no name."""
        with self._lock:
            name = self._names.get(uid)
            if name is None:
                name = self._lookup(uid) or str(uid)
                self._names[uid] = name
            return name

    def __len__(self) -> int:
        return len(self._names)
