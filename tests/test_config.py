import pytest

from echo_minutes.config import Config, create_audio_adapter, create_use_case, get_config


@pytest.fixture()
def fresh_config(tmp_path, monkeypatch):
    monkeypatch.setattr(Config, "_instance", None)
    monkeypatch.setenv("TEMP_DIR", str(tmp_path / "temp"))
    monkeypatch.setenv("VAULT_DIR", str(tmp_path / "vault"))
    monkeypatch.setenv("MODEL_DIR", str(tmp_path / "models"))
    for name in ("MODEL_SIZE", "LANGUAGE", "TRANSCRIBE_TIMEOUT", "AUDIO_DECODER", "AUTO_LINK_NOTES"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


def test_defaults(fresh_config):
    cfg = get_config()

    assert cfg.model_size == "base"
    assert cfg.language == "auto"
    assert cfg.transcribe_timeout is None
    assert cfg.auto_link_notes is True
    assert cfg.model_path == str(fresh_config / "models" / "ggml-base.bin")
    assert (fresh_config / "temp").is_dir()


def test_env_overrides(fresh_config, monkeypatch):
    monkeypatch.setenv("MODEL_SIZE", "small.en")
    monkeypatch.setenv("LANGUAGE", "de")
    monkeypatch.setenv("TRANSCRIBE_TIMEOUT", "90")
    monkeypatch.setenv("AUTO_LINK_NOTES", "false")

    cfg = get_config()

    assert cfg.model_path.endswith("ggml-small.en.bin")
    assert cfg.language == "de"
    assert cfg.transcribe_timeout == 90.0
    assert cfg.auto_link_notes is False
    assert cfg.as_dict()["model_size"] == "small.en"


def test_singleton(fresh_config):
    assert get_config() is get_config()


def test_unknown_decoder(fresh_config, monkeypatch):
    monkeypatch.setenv("AUDIO_DECODER", "gstreamer")
    with pytest.raises(ValueError, match="gstreamer"):
        create_audio_adapter(get_config())


def test_use_case_wiring(fresh_config, monkeypatch):
    monkeypatch.setenv("AUDIO_DECODER", "soundfile")
    use_case = create_use_case(get_config())
    assert use_case.session.state.value == "idle"
