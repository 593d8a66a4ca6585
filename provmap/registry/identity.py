"""Owner identity policy: which scope a uid belongs to and who is calling.

A uid below ``first_application_uid`` belongs to a system-level identity and
its providers live in the global tables. Every other uid encodes a user id
and an application id as ``user_id * per_user_range + app_id``.
"""

from __future__ import annotations

from typing import Callable

FIRST_APPLICATION_UID = 10000
PER_USER_RANGE = 100000
USER_OWNER = 0


def _owner_user() -> int:
    return USER_OWNER


class UserIdentity:
    """Derives user ids from uids and resolves the ambient calling user.

    Parameters
    ----------
    first_application_uid : int
        Lowest uid that is tied to a user rather than to the system.
    per_user_range : int
        Number of uids reserved for each user.
    calling_user : Callable[[], int] | None
        Returns the user on whose behalf the current call is made. Used
        only when a caller does not pass an explicit user id.
    """

    def __init__(
        self,
        first_application_uid: int = FIRST_APPLICATION_UID,
        per_user_range: int = PER_USER_RANGE,
        calling_user: Callable[[], int] | None = None,
    ) -> None:
        if per_user_range <= 0:
            raise ValueError(f"per_user_range must be positive, got {per_user_range}")
        if not 0 <= first_application_uid < per_user_range:
            raise ValueError(
                "first_application_uid must lie within the first user's range "
                f"[0, {per_user_range}), got {first_application_uid}"
            )
        self.first_application_uid = first_application_uid
        self.per_user_range = per_user_range
        self._calling_user = calling_user or _owner_user

    def is_system(self, uid: int) -> bool:
        """Return *True* if ``uid`` selects the global tables."""
        return uid < self.first_application_uid

    def user_id_of(self, uid: int) -> int:
        return uid // self.per_user_range

    def app_id_of(self, uid: int) -> int:
        return uid % self.per_user_range

    def uid_for(self, user_id: int, app_id: int) -> int:
        """Compose the uid of ``app_id`` running as ``user_id``."""
        if user_id < 0:
            raise ValueError(f"user_id must be >= 0, got {user_id}")
        if not 0 <= app_id < self.per_user_range:
            raise ValueError(f"app_id {app_id} outside [0, {self.per_user_range})")
        return user_id * self.per_user_range + app_id

    def resolve_user(self, user_id: int | None = None) -> int:
        """Return ``user_id`` when given, otherwise the calling user.

        Negative ids are treated as "not given", matching callers that use
        ``-1`` for the current user.
        """
        if user_id is not None and user_id >= 0:
            return user_id
        return self._calling_user()
