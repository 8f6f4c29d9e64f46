from typing import List

from recordflow.engine.data_mapping import merge_records
from recordflow.engine.field_value import Record


class AccumulatedContext:
    """
    Per-record union of every field produced by the steps executed so far.
    Created fresh for each input record and never shared between records.
    """

    def __init__(self):
        self._fields: Record = {}
        self.step_outputs: List[Record] = []

    @property
    def fields(self) -> Record:
        return self._fields

    def fold(self, output: Record) -> None:
        """Merge one step's output; later writers win."""
        self.step_outputs.append(dict(output))
        self._fields = merge_records(self._fields, output)

    def snapshot(self) -> Record:
        return dict(self._fields)

