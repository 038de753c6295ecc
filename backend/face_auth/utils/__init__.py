from .config import settings, Settings
from .logger import setup_logging

__all__ = ["settings", "Settings", "setup_logging"]
