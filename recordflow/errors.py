from typing import List, Optional


class RecordflowError(Exception):
    """Base class for every error raised by the DSL interpreter."""


# ------------------------------------------------------------------ #
#                  structural (fatal, whole run)
# ------------------------------------------------------------------ #

class ValidationError(RecordflowError):
    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("DSL validation failed:\n" + "\n".join(f"  - {e}" for e in self.errors))


class UnsupportedOperationError(RecordflowError):
    pass


# ------------------------------------------------------------------ #
#                   row-scoped (one record only)
# ------------------------------------------------------------------ #

class RowError(RecordflowError):
    """A failure confined to a single input record."""

    def __init__(self, message: str, step_index: Optional[int] = None):
        self.message = message
        self.step_index = step_index
        super().__init__(message)

    def at_step(self, step_index: int) -> "RowError":
        if self.step_index is None:
            self.step_index = step_index
        return self


class ConversionError(RowError):
    pass


class MissingFieldError(RowError):
    def __init__(self, field: str, step_index: Optional[int] = None):
        self.field = field
        super().__init__(f"Field '{field}' not found in record", step_index)


class DivisionByZeroError(RowError):
    def __init__(self, step_index: int, target: str):
        self.target = target
        super().__init__(f"Step {step_index}: Division by zero in target field '{target}'", step_index)


class WriteError(RowError):
    pass
