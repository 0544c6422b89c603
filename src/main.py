import logging

import uvicorn
from dotenv import load_dotenv

load_dotenv()

from api.server import create_app  # noqa: E402
from shared.config import settings  # noqa: E402

if __name__ == "__main__":
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    print(f"Starting SeaChart Maritime Engine API on port {settings.PORT}...")
    uvicorn.run(create_app(), host="0.0.0.0", port=settings.PORT)
