"""Entry point: Telegram buy-alert bot — long-poll commands + scheduled updates.

Runs until SIGINT/SIGTERM; the config store is saved once more on the way out.
"""

import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dotenv import load_dotenv

from src.app import build_app, install_signal_handlers, run
from src.utils.config import get_settings
from src.utils.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    load_dotenv()
    settings = get_settings()
    setup_logging(settings.log_path)

    app = build_app(settings)
    install_signal_handlers()
    run(app)


if __name__ == "__main__":
    main()
