import logging
import os

import uvicorn

from app.ventura.web import app


logger = logging.getLogger("uvicorn.error")


def run() -> None:
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    logger.info("ventura_server_starting host=%s port=%s", host, port)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run()
