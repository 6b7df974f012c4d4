"""
Typed Exception Hierarchy for the Ledger Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers (a web layer, a CLI, a job runner) must be able to tell "the account
does not exist" from "the amount was zero" from "the database went away"
without parsing message strings. Every error therefore has:

  1. A TYPED exception class (catch by type, not message)
  2. A CODE attribute (machine-readable, API-safe)
  3. Structured DATA attributes (not just a message string)

Example:

    try:
        budgets.create(draft)
    except DuplicateBudgetError as e:
        return {"error": e.code, "category": e.category, "period": e.period}

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from LedgerKernelError:

    LedgerKernelError (base)
    |
    +-- NotFoundError
    |   +-- AccountNotFoundError
    |   +-- TransactionNotFoundError
    |   +-- BudgetNotFoundError
    |
    +-- ValidationError
    |   +-- MissingIdentifierError
    |   +-- MissingOwnerError
    |   +-- NonPositiveAmountError
    |   +-- InvalidBudgetLimitError
    |   +-- NonExpenseCategoryError
    |
    +-- ConflictError
    |   +-- DuplicateBudgetError
    |
    +-- ConcurrencyError
    |   +-- OptimisticLockError
    |
    +-- StoreFailureError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category     | Code                        | When Raised
-------------|-----------------------------|-----------------------------------------
Not found    | ACCOUNT_NOT_FOUND           | Account ID doesn't resolve
             | TRANSACTION_NOT_FOUND       | Transaction ID doesn't resolve
             | BUDGET_NOT_FOUND            | Budget ID doesn't resolve
-------------|-----------------------------|-----------------------------------------
Validation   | MISSING_IDENTIFIER          | Update target carries no ID
             | MISSING_OWNER               | Budget/account without an owner
             | NON_POSITIVE_AMOUNT         | Transaction amount <= 0
             | INVALID_BUDGET_LIMIT        | Budget limit <= 0
             | NON_EXPENSE_CATEGORY        | Budget on an income category
-------------|-----------------------------|-----------------------------------------
Conflict     | DUPLICATE_BUDGET            | Same (owner, category, period) exists
-------------|-----------------------------|-----------------------------------------
Concurrency  | OPTIMISTIC_LOCK_CONFLICT    | Account row changed underneath us
-------------|-----------------------------|-----------------------------------------
Store        | STORE_FAILURE               | Atomic unit failed and was rolled back

===============================================================================
PROPAGATION
===============================================================================

All errors are raised synchronously from the operation that was invoked.
Validation errors are raised before any write is attempted. Store errors are
raised after the atomic unit has been rolled back, chained to the original
SQLAlchemy exception (``raise StoreFailureError(...) from exc``). The kernel
never retries; retry policy belongs to the caller.
"""


class LedgerKernelError(Exception):
    """
    Base exception for all ledger kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "LEDGER_KERNEL_ERROR"


# Not-found exceptions


class NotFoundError(LedgerKernelError):
    """Base exception for identifiers that do not resolve."""

    code: str = "NOT_FOUND"


class AccountNotFoundError(NotFoundError):
    """Account was not found."""

    code: str = "ACCOUNT_NOT_FOUND"

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Account not found: {account_id}")


class TransactionNotFoundError(NotFoundError):
    """Transaction was not found."""

    code: str = "TRANSACTION_NOT_FOUND"

    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction not found: {transaction_id}")


class BudgetNotFoundError(NotFoundError):
    """Budget was not found."""

    code: str = "BUDGET_NOT_FOUND"

    def __init__(self, budget_id: str):
        self.budget_id = budget_id
        super().__init__(f"Budget not found: {budget_id}")


# Validation exceptions


class ValidationError(LedgerKernelError):
    """Base exception for rejected input. Raised before any store mutation."""

    code: str = "VALIDATION_ERROR"


class MissingIdentifierError(ValidationError):
    """An update was requested for a record that carries no identifier."""

    code: str = "MISSING_IDENTIFIER"

    def __init__(self, entity_type: str):
        self.entity_type = entity_type
        super().__init__(f"Cannot update {entity_type} without an ID")


class MissingOwnerError(ValidationError):
    """A record that must belong to a user has no owner set."""

    code: str = "MISSING_OWNER"

    def __init__(self, entity_type: str):
        self.entity_type = entity_type
        super().__init__(f"{entity_type} must be associated with an owner")


class NonPositiveAmountError(ValidationError):
    """Transaction amount is zero or negative. Direction is carried by type."""

    code: str = "NON_POSITIVE_AMOUNT"

    def __init__(self, amount: str):
        self.amount = amount
        super().__init__(f"Transaction amount must be greater than 0, got {amount}")


class InvalidBudgetLimitError(ValidationError):
    """Budget limit is zero or negative."""

    code: str = "INVALID_BUDGET_LIMIT"

    def __init__(self, limit: str):
        self.limit = limit
        super().__init__(f"Budget limit must be greater than 0, got {limit}")


class NonExpenseCategoryError(ValidationError):
    """Budgets may only be defined for expense categories."""

    code: str = "NON_EXPENSE_CATEGORY"

    def __init__(self, category: str):
        self.category = category
        super().__init__(f"Budgets require an expense category, got {category}")


# Conflict exceptions


class ConflictError(LedgerKernelError):
    """Base exception for requests that collide with existing state."""

    code: str = "CONFLICT"


class DuplicateBudgetError(ConflictError):
    """A budget already exists for this owner, category, and period."""

    code: str = "DUPLICATE_BUDGET"

    def __init__(self, owner_id: str, category: str, period: str):
        self.owner_id = owner_id
        self.category = category
        self.period = period
        super().__init__(f"Budget already exists for {category} in {period}")


# Concurrency exceptions


class ConcurrencyError(LedgerKernelError):
    """Base exception for concurrency-related errors."""

    code: str = "CONCURRENCY_ERROR"


class OptimisticLockError(ConcurrencyError):
    """Optimistic locking conflict detected."""

    code: str = "OPTIMISTIC_LOCK_CONFLICT"

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(
            f"Optimistic lock conflict on {entity_type} {entity_id}: "
            "entity was modified by another transaction"
        )


# Store exceptions


class StoreFailureError(LedgerKernelError):
    """The record store could not complete an atomic unit; it was rolled back."""

    code: str = "STORE_FAILURE"

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"Store failure during {operation}: {reason}")
