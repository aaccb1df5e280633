"""
Capacity ledger interface and the in-process implementation.
The Redis-backed ledger lives in services.admission_service.
"""

from .capacity_ledger import CapacityLedger
from .local_ledger import LocalLockLedger

__all__ = ['CapacityLedger', 'LocalLockLedger']
