# foodmarket/main.py
import uvicorn

from foodmarket.api import create_app
from foodmarket.data.database import Base, engine
from foodmarket.utils.logging import configure_logging, get_logger

# importing the models registers their tables in Base.metadata
import foodmarket.data.models  # noqa: F401

configure_logging()
logger = get_logger(__name__)

logger.info(f"Creating tables: {list(Base.metadata.tables.keys())}")
Base.metadata.create_all(bind=engine)

app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
