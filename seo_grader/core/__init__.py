"""Core application modules."""
from .config import settings, Settings, StorageKeys

__all__ = ["settings", "Settings", "StorageKeys"]
