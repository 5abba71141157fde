from logsage.config import DEFAULT_LLM_MODEL, Settings, load_settings


def test_load_settings_from_env(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")
    monkeypatch.setenv("LLM_MODEL", "claude-custom")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")
    settings = load_settings()
    assert settings.ai_enabled
    assert settings.llm_model == "claude-custom"
    assert settings.cors_origins == ("http://a.test", "http://b.test")


def test_load_settings_defaults(monkeypatch):
    for var in ("ANTHROPIC_API_KEY", "LLM_MODEL", "CORS_ORIGINS", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    settings = load_settings()
    assert not settings.ai_enabled
    assert settings.llm_model == DEFAULT_LLM_MODEL
    assert settings.log_level == "INFO"


def test_settings_are_frozen():
    import dataclasses
    import pytest
    with pytest.raises(dataclasses.FrozenInstanceError):
        Settings().llm_model = "x"
