# recordflow/io/interfaces.py

from abc import ABC, abstractmethod
from typing import Any, AsyncIterable, Dict, Iterable, Union

RawRecord = Dict[str, Any]


class IRecordSource(ABC):
    """
    Collaborator that produces raw records for Format / Entity steps.
    fetch() may return a plain iterable or an async iterable.
    """

    @abstractmethod
    def fetch(self, from_def) -> Union[Iterable[RawRecord], AsyncIterable[RawRecord]]:
        pass

    def lookup(self, step_index: int, from_def, payload: RawRecord) -> RawRecord:
        """Raw record for a Format / Entity step after step 0; defaults to the driving payload."""
        return payload


class IRecordSink(ABC):
    """Collaborator receiving the final accumulated record of each successful input."""

    @abstractmethod
    def write(self, to_def, record: RawRecord) -> Any:
        """May be sync or return an awaitable; raising marks the record as failed."""
        pass
