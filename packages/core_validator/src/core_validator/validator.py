from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Union

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError as _JsonSchemaError
from pydantic import BaseModel, ConfigDict, create_model
from pydantic import ValidationError as _PydanticValidationError
from pydantic.fields import FieldInfo
from pydantic.errors import PydanticUserError

from core_logging import get_logger, ErrorCode

logger = get_logger("core_validator")

# Argument models reject names the schema does not declare.
_ARGS_CONFIG = ConfigDict(extra="forbid", arbitrary_types_allowed=True)


class ValidationError(ValueError):
    """Schema violation for a named-argument mapping.

    ``field`` and ``constraint`` describe the first violation; ``errors``
    holds all of them as ``{"field", "message", "type"}`` dicts.
    """

    def __init__(self, errors: List[Dict[str, Any]]) -> None:
        self.errors = list(errors) or [{"field": "", "message": "is invalid", "type": "unknown"}]
        self.field: str = self.errors[0]["field"]
        self.constraint: str = self.errors[0]["message"]
        super().__init__("; ".join(f'"{e["field"]}" {e["message"]}' for e in self.errors))


class SchemaError(TypeError):
    """The schema descriptor itself is malformed."""


def _is_json_schema(schema: Mapping[str, Any]) -> bool:
    # A JSON Schema document, as opposed to a mapping of argument name → type.
    if "$schema" in schema:
        return True
    return schema.get("type") == "object" and isinstance(schema.get("properties"), Mapping)


def _field_definition(descriptor: Any) -> tuple:
    if isinstance(descriptor, tuple) and len(descriptor) == 2:
        return descriptor
    if isinstance(descriptor, FieldInfo):
        return (descriptor.annotation if descriptor.annotation is not None else Any, descriptor)
    # Bare annotation → required field
    return (descriptor, ...)


class CompiledSchema:
    """A schema descriptor prepared once and applied on every call."""

    __slots__ = ("source", "_model", "_json")

    def __init__(
        self,
        source: Any,
        model: Optional[type[BaseModel]] = None,
        json_validator: Optional[Draft202012Validator] = None,
    ) -> None:
        self.source = source
        self._model = model
        self._json = json_validator

    def attempt(self, value: Mapping[str, Any]) -> Dict[str, Any]:
        """Return the normalized mapping or raise :class:`ValidationError`."""
        if self._model is not None:
            try:
                instance = self._model.model_validate(dict(value))
            except _PydanticValidationError as exc:
                raise ValidationError([
                    {
                        "field": ".".join(str(p) for p in err.get("loc", ())),
                        "message": err.get("msg", "is invalid"),
                        "type": err.get("type", "value_error"),
                    }
                    for err in exc.errors()
                ]) from None
            # Unset fields whose schema default is None are left out so the
            # operation's own parameter defaults apply.
            fields_set = instance.model_fields_set
            return {k: v for k, v in instance if k in fields_set or v is not None}

        if self._json is not None:
            errors = []
            for err in sorted(self._json.iter_errors(dict(value)), key=lambda e: list(e.absolute_path)):
                field = ".".join(str(p) for p in err.absolute_path)
                if not field and err.validator == "required":
                    missing = [p for p in err.validator_value if p not in (err.instance or {})]
                    field = str(missing[0]) if missing else ""
                errors.append({"field": field, "message": err.message, "type": str(err.validator)})
            if errors:
                raise ValidationError(errors)
            return dict(value)

        return dict(value)


def compile_schema(schema: Any, *, name: str = "Arguments") -> CompiledSchema:
    """
    Prepare *schema* for repeated validation.

    Accepted descriptors:
      - ``None``                        → pass-through (no validation)
      - a pydantic ``BaseModel`` subclass
      - a JSON Schema document (``{"type": "object", "properties": ...}``)
      - a mapping of argument name → annotation, ``(annotation, default)``
        or ``FieldInfo``; bare annotations are required
    """
    if schema is None:
        return CompiledSchema(None)
    if isinstance(schema, CompiledSchema):
        return schema
    try:
        if isinstance(schema, type) and issubclass(schema, BaseModel):
            return CompiledSchema(schema, model=schema)
        if isinstance(schema, Mapping):
            if _is_json_schema(schema):
                Draft202012Validator.check_schema(dict(schema))
                return CompiledSchema(schema, json_validator=Draft202012Validator(dict(schema)))
            fields = {str(k): _field_definition(v) for k, v in schema.items()}
            model = create_model(name, __config__=_ARGS_CONFIG, **fields)  # type: ignore[call-overload]
            return CompiledSchema(schema, model=model)
    except (_JsonSchemaError, PydanticUserError, TypeError, ValueError) as exc:
        logger.error(
            "core_validator.invalid_schema",
            extra={"schema_name": name, "error": str(exc), "error_code": ErrorCode.invalid_schema.value},
        )
        raise SchemaError(f"invalid schema for {name}: {exc}") from exc
    raise SchemaError(f"unsupported schema descriptor for {name}: {type(schema).__name__}")


def attempt(value: Mapping[str, Any], schema: Union[CompiledSchema, Any]) -> Dict[str, Any]:
    """Validate *value* against *schema*; return the normalized mapping."""
    return compile_schema(schema).attempt(value)
