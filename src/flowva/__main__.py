"""Flowva entrypoint.

Run with:
  python -m flowva
"""

import logging
import os

import uvicorn


def main() -> None:
    logging.basicConfig(
        level=os.getenv("FLOWVA_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    host = os.getenv("FLOWVA_HOST", "0.0.0.0")
    port = int(os.getenv("FLOWVA_PORT", "8000"))
    reload = os.getenv("FLOWVA_RELOAD", "false").lower() in {"1", "true", "yes", "y"}
    uvicorn.run("flowva.app:create_app", factory=True, host=host, port=port, reload=reload)

if __name__ == "__main__":
    main()
