"""
BaseService -- abstract base for all kernel write services.

Responsibility:
    Provides the common constructor and the atomic-unit helper every write
    operation runs inside.  An atomic unit is a SAVEPOINT wrapping all of an
    operation's writes (the transaction row AND the account balance), so a
    failure anywhere leaves neither write behind.

Architecture position:
    Kernel > Services -- imperative shell infrastructure.

Invariants enforced:
    - All-or-nothing: every write of an operation happens inside one
      ``session.begin_nested()`` block.  Any exception rolls it back.
    - Transaction boundaries: with ``auto_commit=True`` (default) the service
      commits on success and rolls back on failure.  With
      ``auto_commit=False`` the caller owns commit/rollback and the service
      only flushes, so several operations can share one transaction.

Failure modes:
    - LedgerKernelError raised inside the unit propagates unchanged.
    - StaleDataError (account version moved) -> OptimisticLockError.
    - IntegrityError -> the caller-supplied conflict error, if any.
    - Any other SQLAlchemyError -> StoreFailureError chained to the cause.
"""

from abc import ABC
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Generic, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from ledger_kernel.db.base import Base
from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.exceptions import (
    LedgerKernelError,
    OptimisticLockError,
    StoreFailureError,
)
from ledger_kernel.logging_config import get_logger

ModelType = TypeVar("ModelType", bound=Base)

logger = get_logger("services.base")


class BaseService(ABC, Generic[ModelType]):
    """
    Abstract base class for kernel services.

    Contract:
        Accepts a SQLAlchemy ``Session`` from the caller.  Write operations
        wrap their work in ``self._atomic(...)``.  Reads are delegated to
        selectors.

    Guarantees:
        - Validation errors are raised before ``_atomic`` is entered, so a
          rejected request never touches the session.
        - After any failure with ``auto_commit=True`` the session has been
          rolled back and is usable again.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        auto_commit: bool = True,
    ):
        """
        Initialize the service.

        Args:
            session: SQLAlchemy session for database operations.
            clock: Clock for record timestamps. Defaults to SystemClock.
            auto_commit: If True (default), each write operation commits on
                success and rolls back on failure.  If False, the caller
                manages the transaction.
        """
        self.session = session
        self._clock = clock or SystemClock()
        self._auto_commit = auto_commit

    def _rollback(self) -> None:
        if self._auto_commit:
            self.session.rollback()

    @contextmanager
    def _atomic(
        self,
        operation: str,
        *,
        stale_entity: tuple[str, str] | None = None,
        on_integrity_error: Callable[[], LedgerKernelError] | None = None,
    ) -> Iterator[None]:
        """
        Run the body as one all-or-nothing unit.

        Args:
            operation: Event-style name of the operation, used in logs and in
                StoreFailureError.
            stale_entity: (entity_type, entity_id) reported if the unit fails
                on a stale version.
            on_integrity_error: Builds the kernel error an IntegrityError
                maps to.  Without it, IntegrityError is a store failure.
        """
        try:
            with self.session.begin_nested():
                yield
            if self._auto_commit:
                self.session.commit()
        except LedgerKernelError:
            self._rollback()
            raise
        except StaleDataError as exc:
            self._rollback()
            entity_type, entity_id = stale_entity or ("record", "unknown")
            logger.warning(
                "optimistic_lock_conflict",
                extra={"operation": operation, "entity_type": entity_type, "entity_id": entity_id},
            )
            raise OptimisticLockError(entity_type, entity_id) from exc
        except IntegrityError as exc:
            self._rollback()
            if on_integrity_error is not None:
                raise on_integrity_error() from exc
            logger.error(
                "atomic_unit_rolled_back",
                extra={"operation": operation},
                exc_info=True,
            )
            raise StoreFailureError(operation, str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            self._rollback()
            logger.error(
                "atomic_unit_rolled_back",
                extra={"operation": operation},
                exc_info=True,
            )
            raise StoreFailureError(operation, str(exc)) from exc
