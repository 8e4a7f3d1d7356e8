# Services package initialization
# This file makes the services directory a Python package
# and allows importing service modules

from . import add_service
from . import command_service
from . import search_service
from . import undo_service

__all__ = [
    "add_service",
    "command_service",
    "search_service",
    "undo_service",
]
