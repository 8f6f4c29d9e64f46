import json

from recordflow.dsl.validate_dsl import main


def test_valid_file(tmp_path, capsys, chaining_workflow):
    path = tmp_path / "wf.json"
    path.write_text(json.dumps(chaining_workflow), encoding="utf-8")
    assert main([str(path)]) == 0
    assert "✅ Semantic validation passed." in capsys.readouterr().out


def test_invalid_file(tmp_path, capsys, dsl):
    path = tmp_path / "wf.json"
    path.write_text(json.dumps({"steps": [dsl.step(dsl.previous_step(), dsl.api_to())]}), encoding="utf-8")
    assert main([str(path)]) == 1
    out = capsys.readouterr().out
    assert "❌ Semantic validation failed:" in out
    assert "Step 0 cannot use PreviousStep source" in out


def test_unknown_transform(tmp_path, capsys, dsl):
    path = tmp_path / "wf.json"
    step = dsl.step(dsl.format_from(), dsl.api_to(), {"type": "lookup"})
    path.write_text(json.dumps({"steps": [step]}), encoding="utf-8")
    assert main([str(path)]) == 1
    assert "❌ Model validation failed:" in capsys.readouterr().out


def test_dump_schema(capsys):
    assert main(["--dump-schema"]) == 0
    schema = json.loads(capsys.readouterr().out)
    assert "steps" in schema["properties"]
