"""Run the API with uvicorn: ``python -m cryptoquest``."""

from __future__ import annotations

import uvicorn

from .core import HOST, PORT, setup_logging


def main() -> None:
    setup_logging()
    uvicorn.run("cryptoquest.app:app", host=HOST, port=PORT, log_config=None)


if __name__ == "__main__":
    main()
