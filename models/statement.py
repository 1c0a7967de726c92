"""
models/statement.py
-------------------
Value objects passed between the statement builder, the dispatcher
and the normalizer.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from models.errors import ErrorKind


@dataclass(frozen=True)
class Statement:
    """
    SQL text plus its ordered positional parameters.

    Every value position in `sql` is a placeholder; `params[i]` binds to
    the i-th placeholder.
    """
    sql: str
    params: tuple = field(default_factory=tuple)

    def driver_params(self) -> Optional[tuple]:
        """Parameters in the form the driver expects: None when there are none."""
        return self.params or None


@dataclass(frozen=True)
class Success:
    """Rows (list of dicts) or a single row (dict, or None if nothing came back)."""
    payload: Any

    is_error = False


@dataclass(frozen=True)
class Failure:
    message: str
    kind: ErrorKind = ErrorKind.DATABASE_ERROR

    is_error = True


ExecutionResult = Union[Success, Failure]
