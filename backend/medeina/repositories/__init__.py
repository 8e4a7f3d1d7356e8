# Repositories package initialization
# Concrete Entity Store implementations

from .clinic_repo import ClinicRepository
from .memory_store import InMemoryClinicStore

__all__ = [
    "ClinicRepository",
    "InMemoryClinicStore",
]
