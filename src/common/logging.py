import logging
import time
from functools import wraps
from typing import Callable, Union

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(threadName)s - %(message)s'

def setup_logger(name: str, level: Union[int, str] = logging.INFO) -> logging.Logger:
    """
    Sets up a logger with a standard format.

    Accepts a level name from config ("DEBUG", "info", ...). Calling it again
    only changes the level, handlers are attached once.
    """
    logger = logging.getLogger(name)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger

def log_execution_time(logger: logging.Logger, threshold_s: float = 0.01):
    """
    Decorator logging how long a call took once it exceeds threshold_s.
    Failures are logged with traceback and re-raised.
    """
    def decorator(func: Callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(f"{func.__qualname__} failed: {e}", exc_info=True)
                raise
            elapsed = time.perf_counter() - start
            if elapsed > threshold_s:
                logger.info(f"{func.__qualname__} took {elapsed:.3f}s")
            else:
                logger.debug(f"{func.__qualname__} took {elapsed:.3f}s")
            return result
        return wrapper
    return decorator
