import pytest
from pydantic import ValidationError as ConfigValidationError

from core_decorators import DecoratorConfig, DecoratorContext, configure, default_context, reset_id


def test_configure_merges_matching_keys_only():
    before = default_context.config
    cfg = configure({"depth": 2})
    assert cfg is default_context.config
    assert cfg.depth == 2
    assert cfg.debug is before.debug
    assert cfg.max_array_length == before.max_array_length
    assert before.depth == 4  # the old snapshot is left untouched


def test_camel_case_option_names():
    cfg = configure({"removeFields": ["secret"], "maxArrayLength": 3})
    assert cfg.remove_fields == frozenset({"secret"})
    assert cfg.max_array_length == 3


def test_keyword_options():
    assert configure(debug=False).debug is False


def test_unknown_option_rejected():
    with pytest.raises(TypeError, match="colour"):
        configure({"colour": "blue"})


def test_invalid_value_rejected_and_config_kept():
    before = default_context.config
    with pytest.raises(ConfigValidationError):
        configure(depth=-1)
    assert default_context.config is before


def test_depth_none_means_unbounded():
    assert configure(depth=None).depth is None


def test_counter_is_monotonic_and_resettable():
    ctx = DecoratorContext(DecoratorConfig())
    assert [ctx.next_id() for _ in range(3)] == [1, 2, 3]
    ctx.reset_id()
    assert ctx.next_id() == 1


def test_module_reset_id():
    default_context.next_id()
    default_context.next_id()
    reset_id()
    assert default_context.next_id() == 1


def test_reset_restores_defaults():
    configure(depth=1, debug=False)
    default_context.reset()
    assert default_context.config.depth == 4
    assert default_context.config.debug is True
