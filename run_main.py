# run_main.py
import logging

from dotenv import load_dotenv

from vocab_backend.app.core.config import config
from vocab_backend.app.main import get_app

load_dotenv()

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = get_app()


if __name__ == "__main__":
    import os
    import uvicorn

    uvicorn.run("run_main:app", host="0.0.0.0", port=int(os.getenv("PORT", "5000")))
