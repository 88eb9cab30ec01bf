# market/data/seed.py
from decimal import Decimal
from market.data.database import Base, SessionLocal, engine
from market.data.models.product import ProductModel
from market.repos.product_repo import ProductRepo
from market.utils.logging import get_logger
from market.utils.settings import DEFAULT_CURRENCY

logger = get_logger(__name__)

#products owned by the bootstrap admin account
ADMIN_SELLER_ID = 1

SAMPLE_PRODUCTS = [
    {
        "title": "Wireless Bluetooth Headphones",
        "description": "High-quality wireless headphones with noise cancellation and 20-hour battery life.",
        "price": "120",
        "category": "Electronics",
        "image": "headphones",
        "quantity": 25,
        "featured": True,
    },
    {
        "title": "Men's Casual T-Shirt",
        "description": "Comfortable 100% cotton t-shirt available in multiple colors.",
        "price": "45",
        "category": "Fashion",
        "image": "tshirt",
        "quantity": 50,
    },
    {
        "title": "Smartphone X Pro",
        "description": "Latest smartphone with 128GB storage, dual camera, and fast charging.",
        "price": "980",
        "category": "Electronics",
        "image": "smartphone",
        "quantity": 15,
        "featured": True,
    },
    {
        "title": "Home Blender 2000",
        "description": "Powerful 1000W blender perfect for smoothies, soups, and food processing.",
        "price": "85",
        "category": "Home & Living",
        "image": "blender",
        "quantity": 20,
    },
    {
        "title": "Women's Running Shoes",
        "description": "Lightweight running shoes with excellent cushioning and breathable material.",
        "price": "110",
        "category": "Fashion",
        "image": "shoe",
        "quantity": 30,
    },
    {
        "title": "Car Phone Holder",
        "description": "Universal car phone holder with 360-degree rotation.",
        "price": "35",
        "category": "Automotive",
        "image": "mobile-alt",
        "quantity": 40,
    },
    {
        "title": "Wireless Keyboard",
        "description": "Slim wireless keyboard with backlight and long battery life.",
        "price": "65",
        "category": "Electronics",
        "image": "keyboard",
        "quantity": 20,
    },
    {
        "title": "Women's Handbag",
        "description": "Elegant leather handbag with multiple compartments.",
        "price": "75",
        "category": "Fashion",
        "image": "handbag",
        "quantity": 15,
    },
    {
        "title": "LED Desk Lamp",
        "description": "Adjustable LED desk lamp with USB charging port and touch controls.",
        "price": "55",
        "category": "Home & Living",
        "image": "lightbulb",
        "quantity": 25,
    },
    {
        "title": "Bluetooth Speaker",
        "description": "Portable Bluetooth speaker with 12-hour battery life. Waterproof design.",
        "price": "90",
        "category": "Electronics",
        "image": "volume-up",
        "quantity": 18,
        "featured": True,
    },
]


def seed() -> int:
    db = SessionLocal()
    try:
        repo = ProductRepo(db)
        # not forcing: only seed if empty
        if repo.count_products() > 0:
            logger.info("Catalog already seeded")
            return 0

        for data in SAMPLE_PRODUCTS:
            db.add(
                ProductModel(
                    seller_id=ADMIN_SELLER_ID,
                    currency=DEFAULT_CURRENCY,
                    **{**data, "price": Decimal(data["price"])},
                )
            )
        db.commit()
        logger.info(f"Seeded {len(SAMPLE_PRODUCTS)} sample products")
        return len(SAMPLE_PRODUCTS)
    finally:
        db.close()


if __name__ == "__main__":
    import market.data.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    seed()
