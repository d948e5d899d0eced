from config import Settings
from contracts import MorphologyPolicy


def test_defaults(monkeypatch):
    monkeypatch.delenv("FURIGANA_MORPHOLOGY_POLICY", raising=False)
    monkeypatch.delenv("FURIGANA_LLM_PROVIDER", raising=False)
    settings = Settings(_env_file=None)
    assert settings.morphology_policy is MorphologyPolicy.COVERAGE_GAPS
    assert settings.llm_provider == "openai"
    assert settings.sudachi_split_mode == "C"


def test_env_prefix(monkeypatch):
    monkeypatch.setenv("FURIGANA_MORPHOLOGY_POLICY", "no_candidates")
    monkeypatch.setenv("FURIGANA_LLM_PROVIDER", "anthropic")
    monkeypatch.setenv("FURIGANA_MOCK_LLM", "true")
    settings = Settings(_env_file=None)
    assert settings.morphology_policy is MorphologyPolicy.NO_CANDIDATES
    assert settings.llm_provider == "anthropic"
    assert settings.mock_llm is True
