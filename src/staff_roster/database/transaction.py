from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Protocol


class TransactionManager(Protocol):
    """Unit-of-work boundary.

    Repository calls made inside ``with tx.transaction():`` commit or roll back
    together.
    """

    def transaction(self) -> AbstractContextManager[None]:
        raise NotImplementedError
