from core_config.constants import DEFAULT_DEPTH, DEFAULT_MAX_ARRAY_LENGTH, DEFAULT_REMOVE_FIELDS
from core_config.settings import get_settings


def test_decorator_defaults_match_constants(monkeypatch):
    """Settings defaults must mirror the shared constants."""
    for var in ("DECORATOR_DEBUG", "DECORATOR_DEPTH", "DECORATOR_MAX_ARRAY_LENGTH", "DECORATOR_REMOVE_FIELDS"):
        monkeypatch.delenv(var, raising=False)
    s = get_settings()
    assert s.decorator_debug is True
    assert s.decorator_depth == DEFAULT_DEPTH
    assert s.decorator_max_array_length == DEFAULT_MAX_ARRAY_LENGTH
    assert s.decorator_remove_fields == DEFAULT_REMOVE_FIELDS == {"password", "token", "accessToken"}


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("DECORATOR_DEBUG", "false")
    monkeypatch.setenv("DECORATOR_DEPTH", "2")
    monkeypatch.setenv("DECORATOR_MAX_ARRAY_LENGTH", "5")
    monkeypatch.setenv("DECORATOR_REMOVE_FIELDS", " secret, ssn ,,")
    s = get_settings()
    assert s.decorator_debug is False
    assert s.decorator_depth == 2
    assert s.decorator_max_array_length == 5
    assert s.decorator_remove_fields == {"secret", "ssn"}
