# market/main.py
import uvicorn
from market.api import create_app
from market.data.database import Base, engine
from market.data.seed import seed
from market.utils.logging import get_logger
from market.utils.settings import SEED_ON_STARTUP

# import all models before create_all
import market.data.models  # noqa: F401

logger = get_logger(__name__)

logger.info(f"Initializing database, tables: {list(Base.metadata.tables.keys())}")

try:
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready")
except Exception as e:
    logger.error(f"Failed to create tables: {e}")
    raise

if SEED_ON_STARTUP:
    seed()

app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
