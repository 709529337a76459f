import logging
import sys


def setup_logging(level: str = "INFO", db_echo: bool = False) -> None:
    """
    Configure the root logger with a single console handler.

    Safe to call more than once: existing handlers are replaced, so the
    uvicorn reloader and the test client do not stack duplicate output.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    for handler in list(root.handlers):
        root.removeHandler(handler)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(fmt)
    root.addHandler(console)

    # SQL statements only when explicitly asked for
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if db_echo else logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)

    logging.captureWarnings(True)
