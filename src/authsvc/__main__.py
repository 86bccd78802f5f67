"""authsvc entrypoint.

Run with:
  python -m authsvc
"""

import logging
import os

import uvicorn


def main() -> None:
    host = os.getenv("AUTHSVC_HOST", "0.0.0.0")
    port = int(os.getenv("AUTHSVC_PORT", "8080"))
    reload = os.getenv("AUTHSVC_RELOAD", "false").lower() in {"1", "true", "yes", "y"}
    level = os.getenv("AUTHSVC_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run("authsvc.app:app", host=host, port=port, reload=reload, log_level=level.lower())


if __name__ == "__main__":
    main()
