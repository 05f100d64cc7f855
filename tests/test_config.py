from follow_redirects.config import Config, load_config


def test_defaults_without_environment(monkeypatch, tmp_path):
    for name in ("FR_MAX_REDIRECTS", "FR_TIMEOUT", "FR_USER_AGENT", "FR_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    config = load_config(str(tmp_path / "missing.env"))
    assert config == Config()
    assert config.max_redirects == 5


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("FR_MAX_REDIRECTS", "12")
    monkeypatch.setenv("FR_TIMEOUT", "2.5")
    monkeypatch.setenv("FR_USER_AGENT", "tester/1.0")
    config = load_config(None)
    assert config.max_redirects == 12
    assert config.timeout == 2.5
    assert config.user_agent == "tester/1.0"


def test_env_file_does_not_override_process_environment(monkeypatch, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("FR_MAX_REDIRECTS=7\nFR_LOG_LEVEL=DEBUG\n")
    monkeypatch.setenv("FR_MAX_REDIRECTS", "3")
    # recorded by monkeypatch so the value loaded from the file is removed afterwards
    monkeypatch.setenv("FR_LOG_LEVEL", "unset")
    monkeypatch.delenv("FR_LOG_LEVEL")
    config = load_config(str(env_file))
    assert config.max_redirects == 3
    assert config.log_level == "DEBUG"
