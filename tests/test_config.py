import pytest

from config.config import (
    DEFAULT_GEMINI_MODEL,
    DEFAULT_OPENAI_MODEL,
    DEFAULT_OPENROUTER_MODEL,
    Bounds,
    load_config,
    parse_model_list,
    validate_api_keys,
)


ENV_VARS = [
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
    "OPENAI_SYNTH_MODEL",
    "OPENROUTER_API_KEY",
    "OPENROUTER_MODELS",
    "OPENROUTER_MODEL",
    "GEMINI_API_KEY",
    "GEMINI_MODEL",
    "GEMINI_ENABLED",
    "CROSSCHECK_KEY",
    "CROSSCHECK_TIMEOUT_MS",
    "DEBUG",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_environment() -> None:
    config = load_config()

    assert config.openai.model_id == DEFAULT_OPENAI_MODEL
    assert config.openai.api_key is None
    assert config.synthesis.model_id == DEFAULT_OPENAI_MODEL
    assert config.gemini.model_id == DEFAULT_GEMINI_MODEL
    assert config.openrouter_models == [DEFAULT_OPENROUTER_MODEL]
    assert config.gemini_enabled is True
    assert (config.timeout_ms.minimum, config.timeout_ms.maximum, config.timeout_ms.default) == (8_000, 120_000, 45_000)
    assert (config.max_tokens.minimum, config.max_tokens.maximum, config.max_tokens.default) == (200, 2_000, 900)
    assert validate_api_keys(config) == {"openai": False, "openrouter": False, "gemini": False}


def test_environment_is_read_on_every_load(monkeypatch: pytest.MonkeyPatch) -> None:
    assert load_config().openai.api_key is None

    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("OPENAI_MODEL", "gpt-custom")
    monkeypatch.setenv("OPENROUTER_MODELS", "a/one, b/two,, ")
    monkeypatch.setenv("GEMINI_ENABLED", "false")
    monkeypatch.setenv("CROSSCHECK_TIMEOUT_MS", "30000")
    config = load_config()

    assert config.openai.api_key == "sk-test"
    assert config.synthesis.api_key == "sk-test"
    assert config.synthesis.model_id == "gpt-custom"
    assert config.openrouter_models == ["a/one", "b/two"]
    assert config.gemini_enabled is False
    assert config.timeout_ms.default == 30_000


def test_synthesis_model_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENAI_SYNTH_MODEL", "gpt-synth")

    assert load_config().synthesis.model_id == "gpt-synth"


def test_single_openrouter_model_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENROUTER_MODEL", "deepseek/deepseek-chat")

    assert load_config().openrouter_models == ["deepseek/deepseek-chat"]


def test_parse_model_list_falls_back_to_default() -> None:
    assert parse_model_list(None) == [DEFAULT_OPENROUTER_MODEL]
    assert parse_model_list(" , ,") == [DEFAULT_OPENROUTER_MODEL]


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, 45_000),
        (100, 8_000),
        (500_000, 120_000),
        (30_000.9, 30_000),
        ("30000", 45_000),
        (True, 45_000),
        (float("nan"), 45_000),
        (float("inf"), 45_000),
    ],
)
def test_bounds_clamp(value, expected) -> None:
    assert Bounds(8_000, 120_000, 45_000).clamp(value) == expected


def test_bounds_validity() -> None:
    assert Bounds(1, 10, 5).is_valid()
    assert not Bounds(10, 1, 5).is_valid()
    assert not Bounds(1, 10, 11).is_valid()
