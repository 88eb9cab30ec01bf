# market/services/catalog_service.py
from sqlalchemy.orm import Session
from market.data.models.product import ProductModel
from market.domain.errors import Forbidden, InsufficientStock, NotFound
from market.domain.schemas import ProductIn, ProductUpdate
from market.repos.product_repo import ProductRepo
from market.utils.logging import get_logger

logger = get_logger(__name__)


class CatalogService:
    """
    Product catalog: lookups for the cart and checkout,
    seller/admin CRUD and the atomic stock decrement.
    """

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    def get_product(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFound("Product not found")
        return product

    def find_product(self, product_id: int) -> ProductModel | None:
        return self.repo.get_product(product_id)

    def decrement_stock_if_available(self, product_id: int, quantity: int, title: str | None = None) -> None:
        """
        Atomically take `quantity` units of stock.
        Joins the caller's transaction; the caller commits or rolls back.
        """
        if self.repo.decrement_stock(product_id, quantity) == 0:
            logger.warning(f"Stock decrement refused for product {product_id} (qty {quantity})")
            raise InsufficientStock(product_id, title)
        logger.info(f"Stock of product {product_id} decremented by {quantity}")

    def create_product(self, seller_id: int, payload: ProductIn) -> ProductModel:
        data = payload.model_dump()
        data["category"] = payload.category.value
        product = self.repo.create_product(ProductModel(seller_id=seller_id, **data))
        logger.info(f"Product {product.id} created by seller {seller_id}")
        return product

    def update_product(self, product_id: int, user_id: int, is_admin: bool, payload: ProductUpdate) -> ProductModel:
        product = self.get_product(product_id)
        self._check_owner(product, user_id, is_admin, "update")

        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "category" in changes:
            changes["category"] = payload.category.value
        for field, value in changes.items():
            setattr(product, field, value)

        product = self.repo.save_product(product)
        logger.info(f"Product {product_id} updated ({', '.join(sorted(changes)) or 'no changes'})")
        return product

    def delete_product(self, product_id: int, user_id: int, is_admin: bool) -> None:
        product = self.get_product(product_id)
        self._check_owner(product, user_id, is_admin, "delete")
        self.repo.delete_product(product)
        logger.info(f"Product {product_id} deleted by user {user_id}")

    def _check_owner(self, product: ProductModel, user_id: int, is_admin: bool, action: str):
        if product.seller_id != user_id and not is_admin:
            raise Forbidden(f"Not authorized to {action} this product")
