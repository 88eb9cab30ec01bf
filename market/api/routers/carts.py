#market/api/routers/carts.py
from fastapi import APIRouter, Depends
from market.api.deps import Identity, get_cart_service, get_identity
from market.domain.schemas import CartOut, ItemIn, ItemUpdate, MessageOut
from market.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=CartOut)
def get_cart(
    identity: Identity = Depends(get_identity),
    svc: CartService = Depends(get_cart_service),
):
    return svc.get_cart(identity.user_id)


@router.post("/add", response_model=CartOut)
def add_item(
    payload: ItemIn,
    identity: Identity = Depends(get_identity),
    svc: CartService = Depends(get_cart_service),
):
    return svc.add_item(
        user_id=identity.user_id,
        product_id=payload.product_id,
        quantity=payload.quantity,
    )


@router.put("/update", response_model=CartOut)
def update_item(
    payload: ItemUpdate,
    identity: Identity = Depends(get_identity),
    svc: CartService = Depends(get_cart_service),
):
    return svc.update_item_quantity(
        user_id=identity.user_id,
        product_id=payload.product_id,
        quantity=payload.quantity,
    )


@router.delete("/remove/{product_id}", response_model=CartOut)
def remove_item(
    product_id: int,
    identity: Identity = Depends(get_identity),
    svc: CartService = Depends(get_cart_service),
):
    return svc.remove_item(identity.user_id, product_id)


@router.delete("/clear", response_model=MessageOut)
def clear_cart(
    identity: Identity = Depends(get_identity),
    svc: CartService = Depends(get_cart_service),
):
    svc.clear(identity.user_id)
    return {"message": "Cart cleared successfully"}
