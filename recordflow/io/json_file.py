import json
import logging
from pathlib import Path
from typing import Iterator, TextIO, Union

from recordflow.io.interfaces import IRecordSink, IRecordSource, RawRecord

logger = logging.getLogger(__name__)


class JsonFileSource(IRecordSource):
    """
    Reads a JSON array of objects, or one object per line (NDJSON).
    An NDJSON line that does not parse is logged and passed on as its raw
    text, so the engine fails that record alone.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def fetch(self, from_def) -> Iterator[RawRecord]:
        text = self.path.read_text(encoding="utf-8")
        stripped = text.lstrip()
        if stripped.startswith("["):
            yield from json.loads(stripped)
            return
        for line_no, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                yield json.loads(line)
            except json.JSONDecodeError as e:
                logger.warning("%s:%s: malformed JSON line: %s", self.path, line_no, e)
                yield line


class NdjsonFileSink(IRecordSink):
    def __init__(self, stream: TextIO):
        self.stream = stream
        self.count = 0

    def write(self, to_def, record: RawRecord) -> None:
        self.stream.write(json.dumps(record, ensure_ascii=False) + "\n")
        self.count += 1
