"""
Logging setup for slab pricing.

Engine modules log through named loggers; the entry points (API, UI,
scripts) call configure_logging() once.
"""
import logging

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_configured = False


def configure_logging(level: str = 'INFO', fmt: str = DEFAULT_FORMAT):
    """Configure the package root logger with a console handler."""
    global _configured
    
    root_logger = logging.getLogger('slab_pricing')
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    
    # Remove existing handlers to prevent duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(fmt))
    root_logger.addHandler(console_handler)
    
    _configured = True
    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the package namespace."""
    if not name.startswith('slab_pricing'):
        name = f'slab_pricing.{name}'
    return logging.getLogger(name)


def is_configured() -> bool:
    return _configured
