# app/repositories/cart_repo.py
import uuid

from sqlmodel import Session, col, select

from app.models.cart import CartItem


class CartRepository:
    """
    Data access layer for CartItem.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    def list_for_user(self, session: Session, user_id: uuid.UUID) -> list[CartItem]:
        stmt = (
            select(CartItem)
            .where(CartItem.user_id == user_id)
            .order_by(col(CartItem.added_at))
        )
        return list(session.exec(stmt).all())

    def get_product_line(
        self, session: Session, user_id: uuid.UUID, product_id: uuid.UUID
    ) -> CartItem | None:
        """Catalog-product line of a user's cart (custom designs never match)."""
        stmt = select(CartItem).where(
            CartItem.user_id == user_id,
            CartItem.product_id == product_id,
            CartItem.is_custom_design == False,  # noqa: E712
        )
        return session.exec(stmt).first()

    def get_by_cart_item_id(
        self, session: Session, user_id: uuid.UUID, cart_item_id: str
    ) -> CartItem | None:
        stmt = select(CartItem).where(
            CartItem.user_id == user_id,
            CartItem.cart_item_id == cart_item_id,
        )
        return session.exec(stmt).first()

    def get_by_id(
        self, session: Session, user_id: uuid.UUID, item_id: uuid.UUID
    ) -> CartItem | None:
        item = session.get(CartItem, item_id)
        if item is None or item.user_id != user_id:
            return None
        return item

    # CRUD
    def create(self, session: Session, item: CartItem) -> CartItem:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def update(self, session: Session, item: CartItem) -> CartItem:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def delete(self, session: Session, item: CartItem) -> None:
        session.delete(item)
        session.commit()

    def clear_user_cart(self, session: Session, user_id: uuid.UUID) -> None:
        for row in self.list_for_user(session, user_id):
            session.delete(row)
        session.commit()
