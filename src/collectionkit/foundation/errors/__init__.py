"""Error types raised by collectionkit itself.

- ErrorCode: Standard codes for library errors
- CollectionkitError: Base exception
- BarrierError: JoinBarrier misuse
- UnitCancelled: Cooperative cancellation observed inside a work unit
"""

from .errors import BarrierError, CollectionkitError, ErrorCode, UnitCancelled

__all__ = ["ErrorCode", "CollectionkitError", "BarrierError", "UnitCancelled"]
