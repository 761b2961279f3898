# Run locally with: pip install -e . && python app.py
from __future__ import annotations

import logging
import os

from menu_editor.app import app


def _configure_logging() -> None:
    level = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


if __name__ == "__main__":
    _configure_logging()
    port = int(os.environ.get("PORT", "3001"))
    app.run(debug=os.environ.get("FLASK_DEBUG") == "1", port=port)
