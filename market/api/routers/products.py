# market/api/routers/products.py
from fastapi import APIRouter, Depends
from market.api.deps import Identity, get_catalog_service, get_identity
from market.domain.schemas import MessageOut, ProductIn, ProductOut, ProductUpdate
from market.services.catalog_service import CatalogService

router = APIRouter(prefix="/products", tags=["products"])


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, svc: CatalogService = Depends(get_catalog_service)):
    return svc.get_product(product_id)


@router.post("", response_model=ProductOut, status_code=201)
def create_product(
    payload: ProductIn,
    identity: Identity = Depends(get_identity),
    svc: CatalogService = Depends(get_catalog_service),
):
    return svc.create_product(identity.user_id, payload)


@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    identity: Identity = Depends(get_identity),
    svc: CatalogService = Depends(get_catalog_service),
):
    return svc.update_product(product_id, identity.user_id, identity.is_admin, payload)


@router.delete("/{product_id}", response_model=MessageOut)
def delete_product(
    product_id: int,
    identity: Identity = Depends(get_identity),
    svc: CatalogService = Depends(get_catalog_service),
):
    svc.delete_product(product_id, identity.user_id, identity.is_admin)
    return {"message": "Product deleted successfully"}
