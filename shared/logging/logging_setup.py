"""Logging for the API server and the ingest runner.

Console and file handlers share one format with timestamps in the case's
local timezone (TIMEZONE, default Asia/Vladivostok). Configured API keys and
the admin password are masked before any handler writes a record.
"""

from datetime import datetime
import logging
import logging.config
import os

from pytz import timezone

debug_mode = os.getenv("LOG_LEVEL", "info").lower() == "debug"
loglevel = logging.DEBUG if debug_mode else logging.INFO

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_ANSI_RESET = "\033[0m"
_COLOR_MAP: dict[str, str] = {
    "cyan": "\033[36m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "red": "\033[31m",
    "magenta": "\033[35m",
    "blue": "\033[34m",
    "white": "\033[37m",
}

_LEVEL_PREFIX = {
    logging.ERROR: "⛔ ",
    logging.CRITICAL: "⛔ ",
    logging.WARNING: "⚠️ ",
}


class SecretFilter(logging.Filter):
    """Replace known secret values in the rendered message with ***."""

    def __init__(self, secrets: list[str]):
        super().__init__()
        # very short values would mask ordinary words
        self._secrets = [s for s in secrets if s and len(s) >= 4]

    def filter(self, record):
        if not self._secrets:
            return True
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            return True
        masked = message
        for secret in self._secrets:
            masked = masked.replace(secret, "***")
        if masked != message:
            record.msg, record.args = masked, ()
        return True


class CustomFormatter(logging.Formatter):
    """Formats timestamps in tz_name and prefixes warnings and errors with a marker."""

    def __init__(self, tz_name, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.tz = timezone(tz_name)

    def formatTime(self, record, datefmt=None):
        dt = datetime.fromtimestamp(record.created, self.tz)
        return dt.strftime(datefmt) if datefmt else dt.isoformat()

    def format(self, record):
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            message = str(record.msg)
        record.msg = _LEVEL_PREFIX.get(record.levelno, "") + message
        record.args = ()
        return super().format(record)


class ColoredFormatter(CustomFormatter):
    """Console variant: wraps the line in the ANSI color named by record.color, if any."""

    def format(self, record) -> str:
        line = super().format(record)
        ansi = _COLOR_MAP.get(getattr(record, "color", None) or "", "")
        return f"{ansi}{line}{_ANSI_RESET}" if ansi and line else line


class ColorLogger:
    """Logger wrapper whose methods accept color="green" etc. for console highlighting.

    Anything else (setLevel, handlers, ...) is delegated to the wrapped logger.
    """

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    def log(self, level: int, msg, *args, color: str | None = None, **kwargs):
        if color is not None:
            kwargs["extra"] = {**(kwargs.get("extra") or {}), "color": color}
        self._logger.log(level, msg, *args, **kwargs)

    def debug(self, msg, *args, **kwargs):
        self.log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg, *args, **kwargs):
        self.log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg, *args, **kwargs):
        self.log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg, *args, **kwargs):
        self.log(logging.ERROR, msg, *args, **kwargs)

    def critical(self, msg, *args, **kwargs):
        self.log(logging.CRITICAL, msg, *args, **kwargs)

    def exception(self, msg, *args, **kwargs):
        kwargs.setdefault("exc_info", True)
        self.log(logging.ERROR, msg, *args, **kwargs)

    def __getattr__(self, name):
        return getattr(self._logger, name)


def _collect_secrets() -> list[str]:
    secrets = [val for key, val in os.environ.items() if key.endswith("_API_KEY")]
    secrets.append(os.getenv("APP_ADMIN_PASSWORD", ""))
    return secrets


def _build_config(log_file: str, tz_name: str) -> dict:
    def formatter(cls) -> dict:
        return {"()": cls, "format": LOG_FORMAT, "datefmt": DATE_FORMAT, "tz_name": tz_name}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": formatter(CustomFormatter),
            "colored": formatter(ColoredFormatter),
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "colored",
                "level": loglevel,
                "stream": "ext://sys.stdout",
            },
            "file": {
                "class": "logging.FileHandler",
                "formatter": "standard",
                "level": loglevel,
                "filename": log_file,
                "encoding": "utf-8",
            },
        },
        "root": {"handlers": ["console", "file"], "level": loglevel},
    }


def setup_logging() -> ColorLogger:
    """Configure root logging and return the application logger.

    Logs go to stdout and to $ROOT_DIR/logs/app.log (ROOT_DIR defaults to the
    working directory).
    """
    log_dir = os.path.join(os.getenv("ROOT_DIR", os.getcwd()), "logs")
    os.makedirs(log_dir, exist_ok=True)
    logging.config.dictConfig(
        _build_config(os.path.join(log_dir, "app.log"), os.getenv("TIMEZONE", "Asia/Vladivostok"))
    )

    # request lines can carry API keys in query strings
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug_mode else logging.WARNING)

    secret_filter = SecretFilter(_collect_secrets())
    for handler in logging.getLogger().handlers:
        handler.addFilter(secret_filter)

    return ColorLogger(logging.getLogger("case_assistant"))
