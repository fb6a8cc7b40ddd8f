import logging, json, sys, time, os


class JsonFormatter(logging.Formatter):
    """One JSON object per line: ts, level, name, msg (+ exc when present)."""
    converter = time.gmtime  # Use UTC timestamps

    def format(self, record):
        entry = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%SZ"),
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def get_logger(name="doggo", level=None, to_file=None):
    """
    Structured logger shared by every Doggo component.

    ``level`` falls back to $DOGGO_LOG_LEVEL, then INFO. Handlers are attached
    only the first time a name is requested.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level or os.getenv("DOGGO_LOG_LEVEL", "INFO").upper())

    if not logger.handlers:
        formatter = JsonFormatter()
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

        if to_file:
            os.makedirs(os.path.dirname(to_file) or ".", exist_ok=True)
            file_handler = logging.FileHandler(to_file)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger
