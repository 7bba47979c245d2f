# app/services/user_service.py
import logging
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from app.models.user import User
from app.repositories.user_repo import UserRepository
from app.schemas.user import ProfileUpdate, UserRead, UserRoleUpdate, UserStatusUpdate

logger = logging.getLogger(__name__)

_OPTIONAL_PROFILE_FIELDS = ("phone", "address", "city", "state", "avatar_url")


class UserService:
    """
    Account rules of the storefront.

      - shoppers edit their own contact and shipping details
      - the shop owner lists accounts, changes roles and disables accounts
      - the last active admin can never be demoted or disabled
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    @staticmethod
    def to_read(user: User) -> UserRead:
        return UserRead.model_validate(user, from_attributes=True)

    # ----- Own profile -----

    def update_profile(
        self,
        session: Session,
        current_user: User,
        payload: ProfileUpdate,
    ) -> UserRead:
        changes = payload.model_dump(exclude_unset=True)
        for field, value in changes.items():
            if field in _OPTIONAL_PROFILE_FIELDS and value == "":
                value = None
            if value is None and field not in _OPTIONAL_PROFILE_FIELDS:
                continue
            setattr(current_user, field, value)
        return self.to_read(self.repo.update(session, current_user))

    # ----- Admin operations -----

    def list_users(
        self,
        session: Session,
        role: str | None,
        search: str | None,
        skip: int,
        limit: int,
    ) -> list[UserRead]:
        users = self.repo.list_users(session, role=role, search=search, skip=skip, limit=limit)
        return [self.to_read(u) for u in users]

    def _get(self, session: Session, user_id: uuid.UUID) -> User:
        user = self.repo.get_by_id(session, user_id)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found",
            )
        return user

    def get_user(self, session: Session, user_id: uuid.UUID) -> UserRead:
        return self.to_read(self._get(session, user_id))

    def _guard_last_admin(self, session: Session, user: User) -> None:
        if user.role == "admin" and user.is_active and self.repo.count_admins(session) <= 1:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="The shop needs at least one active admin",
            )

    def update_role(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: UserRoleUpdate,
    ) -> UserRead:
        user = self._get(session, user_id)
        if payload.role != "admin":
            self._guard_last_admin(session, user)
        user.role = payload.role
        logger.info(f"User {user.email} is now {payload.role}")
        return self.to_read(self.repo.update(session, user))

    def update_status(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: UserStatusUpdate,
    ) -> UserRead:
        user = self._get(session, user_id)
        if not payload.is_active:
            self._guard_last_admin(session, user)
        user.is_active = payload.is_active
        logger.info(f"User {user.email} {'enabled' if payload.is_active else 'disabled'}")
        return self.to_read(self.repo.update(session, user))
