from prepwise.core.settings import Settings


def test_blank_gemini_key_means_offline():
    assert Settings(GEMINI_API_KEY="   ").gemini_key_value is None
    assert Settings(GEMINI_API_KEY=None).gemini_key_value is None


def test_gemini_key_is_trimmed():
    assert Settings(GEMINI_API_KEY=" abc ").gemini_key_value == "abc"


def test_collection_names_are_configurable(monkeypatch):
    monkeypatch.setenv("INTERVIEW_INSIGHTS_COLLECTION", "insights_test")
    cfg = Settings()
    assert cfg.interview_insights_collection == "insights_test"
    assert cfg.submissions_collection == "submissions"


def test_server_address_is_configurable(monkeypatch):
    monkeypatch.setenv("HOST", "127.0.0.1")
    monkeypatch.setenv("PORT", "9000")
    cfg = Settings()
    assert (cfg.host, cfg.port) == ("127.0.0.1", 9000)
