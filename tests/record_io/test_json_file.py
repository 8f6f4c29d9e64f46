import io
import json

from recordflow.io.json_file import JsonFileSource, NdjsonFileSink


def test_reads_json_array(tmp_path):
    path = tmp_path / "in.json"
    path.write_text(json.dumps([{"a": 1}, {"a": 2}]), encoding="utf-8")
    assert list(JsonFileSource(path).fetch(None)) == [{"a": 1}, {"a": 2}]


def test_reads_ndjson_skipping_blank_lines(tmp_path):
    path = tmp_path / "in.ndjson"
    path.write_text('{"a": 1}\n\n{"a": "こんにちは"}\n', encoding="utf-8")
    assert list(JsonFileSource(path).fetch(None)) == [{"a": 1}, {"a": "こんにちは"}]


def test_ndjson_sink():
    buf = io.StringIO()
    sink = NdjsonFileSink(buf)
    sink.write(None, {"x": "🚀"})
    sink.write(None, {"x": 2.5})
    assert buf.getvalue().splitlines() == ['{"x": "🚀"}', '{"x": 2.5}']
    assert sink.count == 2


def test_malformed_ndjson_line_is_passed_on_raw(tmp_path):
    path = tmp_path / "in.ndjson"
    path.write_text('{"a": 1}\n{"a": \n{"a": 2}\n', encoding="utf-8")
    assert list(JsonFileSource(path).fetch(None)) == [{"a": 1}, '{"a": ', {"a": 2}]
