# market/api/deps.py
from dataclasses import dataclass
from fastapi import Depends, Header
from sqlalchemy.orm import Session
from market.data.database import get_db
from market.domain.errors import Forbidden, Unauthorized
from market.services.cart_service import CartService
from market.services.catalog_service import CatalogService
from market.services.order_service import OrderService


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, as asserted by the upstream auth layer."""

    user_id: int
    is_admin: bool = False


def get_identity(
    x_user_id: int | None = Header(None),
    x_user_admin: bool = Header(False),
) -> Identity:
    if x_user_id is None:
        raise Unauthorized()
    return Identity(user_id=x_user_id, is_admin=x_user_admin)


def require_admin(identity: Identity = Depends(get_identity)) -> Identity:
    if not identity.is_admin:
        raise Forbidden("Admin access required")
    return identity


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


def get_cart_service(db: Session = Depends(get_db)) -> CartService:
    return CartService(db=db, catalog=CatalogService(db))


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    return OrderService(db=db, catalog=CatalogService(db))
