# market/api/routers/orders.py
from typing import List
from fastapi import APIRouter, Depends
from market.api.deps import Identity, get_identity, get_order_service, require_admin
from market.domain.schemas import OrderCreate, OrderOut, StatusUpdate
from market.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderCreate,
    identity: Identity = Depends(get_identity),
    svc: OrderService = Depends(get_order_service),
):
    """
    Places an order from the caller's cart.
    Stock is committed and the cart emptied in the same transaction.
    """
    return svc.checkout(identity.user_id, payload)


@router.get("", response_model=List[OrderOut])
def list_orders(
    identity: Identity = Depends(get_identity),
    svc: OrderService = Depends(get_order_service),
):
    return svc.list_orders(identity.user_id)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    identity: Identity = Depends(get_identity),
    svc: OrderService = Depends(get_order_service),
):
    return svc.get_order(order_id, identity.user_id, identity.is_admin)


@router.put("/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: int,
    payload: StatusUpdate,
    _admin: Identity = Depends(require_admin),
    svc: OrderService = Depends(get_order_service),
):
    return svc.update_status(order_id, payload.status)


@router.post("/{order_id}/settle", response_model=OrderOut)
def settle_order(
    order_id: int,
    _admin: Identity = Depends(require_admin),
    svc: OrderService = Depends(get_order_service),
):
    """Re-runs the stock/cart steps of checkout that did not complete."""
    return svc.settle_order(order_id)
