from __future__ import annotations

from typing import ContextManager, Protocol


class TransactionManager(Protocol):
    """Unit of atomicity for multi-step mutations.

    ``DatabaseConnection`` is the production implementation; tests use an
    in-memory store that snapshots and restores its tables.
    """

    def transaction(self) -> ContextManager[None]:
        raise NotImplementedError
