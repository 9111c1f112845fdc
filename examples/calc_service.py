"""Numeric service: string arguments are coerced to ints by the schema."""
from core_decorators import decorate, ValidationError


def add(a, b):
    return a + b


add.schema = {"a": int, "b": int}

# decorate() mutates CalcService in place
CalcService = {"add": add}
decorate(CalcService, "CalcService")


def main() -> None:
    print(CalcService["add"](1, 3))      # 4
    print(CalcService["add"]("5", "6"))  # 11, inputs coerced to int
    try:
        CalcService["add"]("1", {"foo": "bar"})  # logs and raises
    except ValidationError as exc:
        print(f"rejected: {exc}")


if __name__ == "__main__":
    main()
