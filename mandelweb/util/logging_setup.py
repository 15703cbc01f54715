import logging
import logging.handlers
from typing import Optional

def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(f"mandelweb.{name}" if name else "mandelweb")

def configure_root_logging(*, level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    logger = get_logger()
    logger.setLevel(level)
    logger.propagate = False
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.handlers.RotatingFileHandler(log_file, maxBytes=5 << 20, backupCount=5, encoding="utf-8"))
    fmt = logging.Formatter("%(asctime)s %(threadName)s %(levelname)s %(name)s - %(message)s")
    for h in handlers:
        h.setFormatter(fmt)
        logger.addHandler(h)
    # werkzeug logs every request at INFO.
    logging.getLogger("werkzeug").setLevel(logging.WARNING)
    return logger
