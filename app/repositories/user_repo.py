# app/repositories/user_repo.py
import uuid

from sqlmodel import Session, col, or_, select

from app.models.user import User


class UserRepository:
    def get_by_id(self, session: Session, user_id: uuid.UUID) -> User | None:
        return session.get(User, user_id)

    def list_users(
        self,
        session: Session,
        role: str | None = None,
        search: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[User]:
        """Oldest accounts first; `search` matches name or email."""
        stmt = select(User)
        if role:
            stmt = stmt.where(User.role == role)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(col(User.name).ilike(pattern), col(User.email).ilike(pattern))
            )
        stmt = stmt.order_by(col(User.created_at)).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def count_admins(self, session: Session) -> int:
        stmt = select(User).where(User.role == "admin", User.is_active == True)  # noqa: E712
        return len(session.exec(stmt).all())

    def update(self, session: Session, user: User) -> User:
        session.add(user)
        session.commit()
        session.refresh(user)
        return user
