import os
import logging

import uvicorn

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

if os.environ.get("DEBUG", "0") == "1":
    logging.getLogger().setLevel(logging.DEBUG)

from echo_minutes.api import create_app
from echo_minutes.config import get_config


def run() -> None:
    config = get_config()
    app = create_app(cfg=config)
    logger.info(f"Starting echo-minutes on {config.host}:{config.port}")
    if not os.path.isfile(config.model_path):
        logger.warning(f"Model not found at {config.model_path}; transcription requests will fail")
    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    run()
