"""Storage backends for uploaded profile images."""

from .abstract_storage import AbstractStorage
from .local_storage import LocalStorage

__all__ = ["AbstractStorage", "LocalStorage"]
