def test_recent_searches_dedup_and_cap(tmp_path):
    from genelinker.prefs import MAX_RECENT, Preferences
    p = Preferences(tmp_path / "prefs.json")
    for i in range(12):
        p.add_recent_search(f"q{i}")
    p.add_recent_search("q5")
    p.add_recent_search("  ")
    xs = Preferences(tmp_path / "prefs.json").recent_searches()
    assert len(xs) == MAX_RECENT
    assert xs[0] == "q5" and xs.count("q5") == 1
    assert xs[1] == "q11"


def test_tour_flag_and_api_config(tmp_path):
    import pytest
    from genelinker.errors import UserInputError
    from genelinker.prefs import API_KEY, Preferences
    p = Preferences(tmp_path / "sub" / "prefs.json")
    assert not p.tour_completed
    p.mark_tour_completed()
    assert p.tour_completed
    with pytest.raises(UserInputError):
        p.save_api_config("  ", "m")
    p.save_api_config(" sk-abc ", "gpt-4o")
    assert p.get(API_KEY) == "sk-abc"
    p.clear_api_config()
    assert p.get(API_KEY) is None


def test_unreadable_prefs_are_ignored(tmp_path):
    from genelinker.prefs import Preferences
    f = tmp_path / "prefs.json"
    f.write_text("{not json", encoding="utf-8")
    assert Preferences(f).recent_searches() == []


def test_llm_config_precedence(tmp_path, monkeypatch):
    from genelinker.config import DEFAULT_LLM_MODEL, load_llm_config
    from genelinker.prefs import Preferences
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("GENELINKER_LLM_MODEL", raising=False)
    p = Preferences(tmp_path / "prefs.json")
    cfg = load_llm_config(p)
    assert not cfg.is_configured and cfg.model_name == DEFAULT_LLM_MODEL

    p.save_api_config("sk-stored", "stored-model")
    cfg = load_llm_config(p)
    assert cfg.credential == "sk-stored" and cfg.model_name == "stored-model"

    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    assert load_llm_config(p).credential == "sk-env"
    assert load_llm_config(p, credential="sk-arg").credential == "sk-arg"

    # a template value left in the environment must not hide the saved key
    monkeypatch.setenv("OPENAI_API_KEY", "your_api_key_here")
    p.save_api_config("sk-real-saved-key", "stored-model")
    cfg = load_llm_config(p)
    assert cfg.is_configured and cfg.credential == "sk-real-saved-key"
    assert load_llm_config(p, credential="  ").credential == "sk-real-saved-key"


def test_placeholders_are_not_credentials(monkeypatch):
    from genelinker.config import ClientConfig, load_search_config, looks_like_placeholder
    for s in ("", "   ", "your_api_key_here", "YOUR-API-KEY", "<key>", "changeme"):
        assert looks_like_placeholder(s)
    assert not looks_like_placeholder("sk-real-looking-1234")
    monkeypatch.setenv("CORE_API_KEY", "your_core_key")
    assert not load_search_config().is_configured
    assert load_search_config(credential="core-real-1234").credential == "core-real-1234"
    assert load_search_config(credential="<key>").credential is None
    cfg = ClientConfig(endpoint="http://x", credential="sk-secret-value")
    assert "sk-secret-value" not in repr(cfg)
