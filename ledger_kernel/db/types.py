"""
Module: ledger_kernel.db.types
Responsibility: Column types for exact monetary storage and the annotated
    aliases models declare their columns with.
Architecture position: Kernel > DB.  May be imported by models/ and
    selectors/.  MUST NOT import from models/, services/, selectors/ or domain/.

Invariants enforced:
    - No floats anywhere in the stored ledger.  ExactDecimal stores amounts as
      NUMERIC(38, 9) where the backend has an exact numeric type, and as a
      canonical decimal string on SQLite, whose NUMERIC affinity is a
      binary float.  Values always come back as ``decimal.Decimal``.

Failure modes:
    - TypeError on binding a float to an ExactDecimal column.
    - decimal.InvalidOperation if a stored string is not a decimal (only
      possible if the column was written outside this type).
"""

from decimal import Decimal
from typing import Annotated

from sqlalchemy import Numeric, String
from sqlalchemy.types import TypeDecorator

# Precision of monetary columns: 38 digits total, 9 decimal places.
MONEY_PRECISION = 38
MONEY_SCALE = 9


class ExactDecimal(TypeDecorator):
    """
    Decimal column that never round-trips through a binary float.

    Contract:
        Binds ``Decimal`` (or ``int``/``str``) values and returns ``Decimal``
        on every supported dialect.

    Guarantees:
        - PostgreSQL: NUMERIC(38, 9), driver returns Decimal natively.
        - SQLite: VARCHAR(64) holding ``format(value, "f")``.
        - cache_ok=True enables SQLAlchemy statement caching.

    Non-goals:
        - Does NOT support ordering or arithmetic in SQL on SQLite; callers
          that aggregate amounts sum them in Python.
    """

    impl = Numeric(MONEY_PRECISION, MONEY_SCALE, asdecimal=True)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String(64))
        return dialect.type_descriptor(
            Numeric(MONEY_PRECISION, MONEY_SCALE, asdecimal=True)
        )

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, float):
            raise TypeError("ExactDecimal columns do not accept float values")
        if not isinstance(value, Decimal):
            value = Decimal(str(value))
        if dialect.name == "sqlite":
            return format(value, "f")
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, Decimal):
            return value
        return Decimal(str(value))


# Monetary amount column
Amount = Annotated[Decimal, ExactDecimal()]

# Short identifier strings (enum values, kinds)
ShortCode = Annotated[str, String(50)]

# Free-text descriptions
LongText = Annotated[str, String(1000)]
