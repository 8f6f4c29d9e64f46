from typing import Any, Callable, Dict, List, Optional, Tuple

from recordflow.io.interfaces import IRecordSink, IRecordSource, RawRecord


class InMemorySource(IRecordSource):
    def __init__(self, records: List[RawRecord],
                 lookups: Optional[Dict[int, Callable[[RawRecord], RawRecord]]] = None):
        self.records = list(records)
        self.lookups = lookups or {}

    def fetch(self, from_def):
        return iter(self.records)

    def lookup(self, step_index: int, from_def, payload: RawRecord) -> RawRecord:
        fn = self.lookups.get(step_index)
        return fn(payload) if fn else payload


class InMemorySink(IRecordSink):
    def __init__(self, fail_when: Optional[Callable[[RawRecord], bool]] = None):
        self.written: List[Tuple[Any, RawRecord]] = []
        self.fail_when = fail_when

    def write(self, to_def, record: RawRecord) -> None:
        if self.fail_when and self.fail_when(record):
            raise IOError(f"sink rejected record: {record}")
        self.written.append((to_def, record))

    @property
    def records(self) -> List[RawRecord]:
        return [r for _, r in self.written]
