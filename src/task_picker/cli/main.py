# src/task_picker/cli/main.py

"""
CLI entrypoint: `task-picker`.

Sets up logging, wires AppState over the configured vault, then hands the
main thread to the console REPL until /exit or EOF.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..host.console import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    console_level = getattr(logging, str(settings.log_level).upper(), logging.INFO)
    if not isinstance(console_level, int):
        console_level = logging.INFO
    log_file = setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s (log file: %s)", settings.app_name, log_file)
    state = create_initial_state(settings=settings)

    try:
        run_console_loop(state)
    finally:
        editor = state.editor
        if editor is not None and editor.dirty:
            logger.warning("Open note %s has unsaved changes; they were not written.", editor.document_path)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
