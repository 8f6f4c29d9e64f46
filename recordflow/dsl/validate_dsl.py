import argparse
import json
import sys

from recordflow.dsl.dsl_loader import (
    load_dsl_file,
    parse_dsl_model,
    validate_with_schema,
    workflow_json_schema,
    SchemaValidationError,
)
from recordflow.dsl.dsl_validator import collect_warnings, validate_semantic
from recordflow.errors import UnsupportedOperationError, ValidationError


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Validate a recordflow workflow DSL file.")
    parser.add_argument("file", nargs="?", help="Path to the DSL file (JSON/YAML)")
    parser.add_argument("--schema", help="Path to JSON Schema file (defaults to the built-in schema)")
    parser.add_argument("--dump-schema", action="store_true", help="Print the built-in JSON Schema and exit")
    args = parser.parse_args(argv)

    if args.dump_schema:
        print(json.dumps(workflow_json_schema(), indent=2, ensure_ascii=False))
        return 0
    if not args.file:
        parser.error("file is required unless --dump-schema is given")

    raw = load_dsl_file(args.file)
    try:
        if args.schema:
            validate_with_schema(raw, args.schema)
            print("✅ Schema validation passed.")
        model = parse_dsl_model(raw)
    except SchemaValidationError as e:
        print("❌ Schema validation failed:")
        for msg in e.errors:
            print(f"  - {msg}")
        return 1
    except (ValidationError, UnsupportedOperationError) as e:
        print("❌ Model validation failed:")
        print(e)
        return 1

    for w in collect_warnings(model):
        print(f"⚠️ {w}")

    semantic_errors = validate_semantic(model)
    if semantic_errors:
        print("❌ Semantic validation failed:")
        for e in semantic_errors:
            print(f"  - {e}")
        return 1

    print("✅ Semantic validation passed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
