# market/repos/product_repo.py
from sqlalchemy import func, select, update
from sqlalchemy.orm import Session
from market.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def count_products(self) -> int:
        return self.db.execute(select(func.count(ProductModel.id))).scalar_one()

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def save_product(self, product: ProductModel) -> ProductModel:
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete_product(self, product: ProductModel) -> None:
        self.db.delete(product)
        self.db.commit()

    def decrement_stock(self, product_id: int, quantity: int) -> int:
        #UPDATE products SET quantity = quantity - n WHERE id = x AND in_stock AND quantity >= n
        #single conditional statement, the database serializes concurrent decrements
        #no commit here, runs inside the caller's transaction
        result = self.db.execute(
            update(ProductModel)
            .where(
                ProductModel.id == product_id,
                ProductModel.in_stock.is_(True),
                ProductModel.quantity >= quantity,
            )
            .values(quantity=ProductModel.quantity - quantity)
            .execution_options(synchronize_session=False)
        )

        #drop the cached stock so later reads in this session see the new value
        cached = self.db.identity_map.get(Session.identity_key(ProductModel, product_id))
        if cached is not None:
            self.db.expire(cached, ["quantity"])
        return result.rowcount
