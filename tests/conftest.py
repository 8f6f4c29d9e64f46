import pytest


def _format_from(mapping=None):
    return {
        "type": "format",
        "source": {"source_type": "api", "config": {}},
        "format": {"format_type": "json", "options": {}},
        "mapping": mapping or {},
    }


def _previous_step(mapping=None):
    return {"type": "previous_step", "mapping": mapping or {}}


def _api_to(mapping=None):
    return {
        "type": "format",
        "output": {"mode": "api"},
        "format": {"format_type": "json", "options": {}},
        "mapping": mapping or {},
    }


def _next_step():
    return {"type": "next_step", "mapping": {}}


def _calc(target, left, op, right):
    return {"type": "calculate", "target": target, "op": op, "left": left, "right": right}


def _field(name):
    return {"kind": "field", "field": name}


def _const(value):
    return {"kind": "const", "value": value}


class DslFactory:
    format_from = staticmethod(_format_from)
    previous_step = staticmethod(_previous_step)
    api_to = staticmethod(_api_to)
    next_step = staticmethod(_next_step)
    calc = staticmethod(_calc)
    field = staticmethod(_field)
    const = staticmethod(_const)

    @staticmethod
    def step(from_, to, transform=None):
        return {"from": from_, "transform": transform or {"type": "none"}, "to": to}


@pytest.fixture
def dsl():
    """Builders for workflow DSL dicts."""
    return DslFactory


@pytest.fixture
def chaining_workflow(dsl):
    # price * quantity, then * 1.19
    return {
        "steps": [
            dsl.step(dsl.format_from({"price": "price", "quantity": "quantity"}), dsl.next_step()),
            dsl.step(
                dsl.previous_step(),
                dsl.next_step(),
                dsl.calc("total_value", dsl.field("price"), "multiply", dsl.field("quantity")),
            ),
            dsl.step(
                dsl.previous_step(),
                dsl.api_to(),
                dsl.calc("total_with_tax", dsl.field("total_value"), "multiply", dsl.const(1.19)),
            ),
        ]
    }


@pytest.fixture
def ratio_workflow(dsl):
    # division happens at step index 2
    return {
        "steps": [
            dsl.step(dsl.format_from(), dsl.next_step()),
            dsl.step(dsl.previous_step(), dsl.next_step()),
            dsl.step(
                dsl.previous_step(),
                dsl.api_to(),
                dsl.calc("ratio", dsl.field("a"), "divide", dsl.field("b")),
            ),
        ]
    }
