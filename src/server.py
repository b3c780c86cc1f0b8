"""
Stdio Server
Line-delimited JSON front end: one request object per input line,
one response object per output line.
"""

import signal
import sys
from typing import IO, Iterable

from core import (
    JSONParseError,
    configure_logging,
    create_container,
    extract_json,
    get_logger,
    get_settings,
    safe_json_dumps,
)
from handlers import UIHandler
from models.loader import ModelLoader


logger = get_logger(__name__)


def handle_line(handler: UIHandler, line: str) -> str:
    """Decode one request line and return the encoded response."""
    try:
        payload = extract_json(line, repair=False)
    except JSONParseError as e:
        logger.warning("bad_request_line", error=str(e))
        return safe_json_dumps({"error": "invalid_input", "details": str(e), "success": False})
    return handler.generate_json(payload)


def run(handler: UIHandler, lines: Iterable[str], out: IO[str]) -> int:
    """Answer every non-blank line. Returns the number of requests served."""
    served = 0
    for line in lines:
        if not line.strip():
            continue
        out.write(handle_line(handler, line) + "\n")
        out.flush()
        served += 1
    return served


def serve() -> None:
    """Entry point - answer requests from stdin until EOF."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.json_logs)

    # Resolve dependencies
    container = create_container(settings)
    ui_handler = container.get(UIHandler)

    def shutdown(signum, frame):
        logger.info("shutdown_signal", signal=signal.Signals(signum).name)
        ModelLoader.unload()
        sys.exit(0)

    for sig in (signal.SIGINT, signal.SIGTERM):
        signal.signal(sig, shutdown)

    logger.info("listening", transport="stdio", model=settings.gemini_model)
    served = run(ui_handler, sys.stdin, sys.stdout)

    ModelLoader.unload()
    logger.info("stopped", served=served)


if __name__ == "__main__":
    serve()
