import os

import pytest

from conftest import make_engine, requires_posix_shell
from echo_minutes.adapters.whisper_cpp import transcription as wc
from echo_minutes.adapters.whisper_cpp.transcription import WhisperCppTranscriptionAdapter
from echo_minutes.domain.errors import (
    EmptyTranscriptWarning,
    EngineNotFoundError,
    TranscriptionEngineError,
)


def test_build_command_omits_language_for_auto():
    cmd = wc.build_command("whisper-cli", "/m/ggml-base.bin", "/t/meeting.wav", "auto")
    assert cmd == ["whisper-cli", "-m", "/m/ggml-base.bin", "-f", "/t/meeting.wav", "--output-txt"]


def test_build_command_with_language():
    cmd = wc.build_command("whisper-cli", "/m/ggml-base.bin", "/t/meeting.wav", "de")
    assert cmd == [
        "whisper-cli", "-m", "/m/ggml-base.bin", "-l", "de", "-f", "/t/meeting.wav", "--output-txt",
    ]


def test_model_paths_and_listing(tmp_path):
    assert wc.resolve_model_path(str(tmp_path), "small.en") == str(tmp_path / "ggml-small.en.bin")
    (tmp_path / "ggml-base.bin").write_bytes(b"")
    (tmp_path / "ggml-tiny.en.bin").write_bytes(b"")
    (tmp_path / "notes.txt").write_bytes(b"")
    assert wc.list_models(str(tmp_path)) == ["base", "tiny.en"]
    assert wc.list_models(str(tmp_path / "missing")) == []


def test_missing_executable(tmp_path, model_file, audio_file):
    adapter = WhisperCppTranscriptionAdapter(executable=str(tmp_path / "nope"))
    with pytest.raises(EngineNotFoundError):
        adapter.transcribe(audio_file, model_file)
    assert os.path.exists(audio_file)


@requires_posix_shell
def test_missing_model(tmp_path, audio_file):
    engine = make_engine(tmp_path, "hello")
    adapter = WhisperCppTranscriptionAdapter(executable=engine["path"])
    with pytest.raises(EngineNotFoundError):
        adapter.transcribe(audio_file, str(tmp_path / "ggml-large-v3.bin"))


@requires_posix_shell
def test_missing_input(tmp_path, model_file):
    engine = make_engine(tmp_path, "hello")
    adapter = WhisperCppTranscriptionAdapter(executable=engine["path"])
    with pytest.raises(FileNotFoundError):
        adapter.transcribe(str(tmp_path / "absent.wav"), model_file)


@requires_posix_shell
def test_reads_sidecar_and_cleans_up(tmp_path, model_file, audio_file, progress):
    engine = make_engine(tmp_path, "  Hello team, thanks for joining.  ")
    adapter = WhisperCppTranscriptionAdapter(executable=engine["path"], progress=progress)

    result = adapter.transcribe(audio_file, model_file, language="en", job_id="job1")

    assert result.text == "Hello team, thanks for joining."
    assert result.sidecar_found
    assert not os.path.exists(audio_file)
    assert not os.path.exists(audio_file + ".txt")
    assert engine["args_log"].read_text().split() == [
        "-m", model_file, "-l", "en", "-f", audio_file, "--output-txt",
    ]
    assert progress.stages == ["starting", "transcribing", "post_processing"]
    assert [p for _, _, p, _ in progress.events] == [0.10, 0.30, 0.70]


@requires_posix_shell
def test_missing_sidecar_is_empty_transcript(tmp_path, model_file, audio_file):
    engine = make_engine(tmp_path, transcript=None)
    adapter = WhisperCppTranscriptionAdapter(executable=engine["path"])

    with pytest.warns(EmptyTranscriptWarning):
        result = adapter.transcribe(audio_file, model_file)

    assert result.text == ""
    assert not result.sidecar_found
    assert not os.path.exists(audio_file)


@requires_posix_shell
def test_stale_sidecar_is_not_reused(tmp_path, model_file, audio_file):
    with open(audio_file + ".txt", "w") as f:
        f.write("transcript from a crashed run")
    engine = make_engine(tmp_path, transcript=None)
    adapter = WhisperCppTranscriptionAdapter(executable=engine["path"])

    with pytest.warns(EmptyTranscriptWarning):
        result = adapter.transcribe(audio_file, model_file)

    assert result.text == ""


@requires_posix_shell
def test_nonzero_exit_keeps_audio(tmp_path, model_file, audio_file):
    engine = make_engine(tmp_path, "partial", exit_code=3)
    adapter = WhisperCppTranscriptionAdapter(executable=engine["path"])

    with pytest.raises(TranscriptionEngineError) as exc:
        adapter.transcribe(audio_file, model_file)

    assert exc.value.returncode == 3
    assert os.path.exists(audio_file)
    assert not os.path.exists(audio_file + ".txt")


@requires_posix_shell
def test_nonzero_exit_can_discard_audio(tmp_path, model_file, audio_file):
    engine = make_engine(tmp_path, "partial", exit_code=1)
    adapter = WhisperCppTranscriptionAdapter(executable=engine["path"], keep_audio_on_failure=False)

    with pytest.raises(TranscriptionEngineError):
        adapter.transcribe(audio_file, model_file)

    assert not os.path.exists(audio_file)


@requires_posix_shell
def test_timeout_raises_engine_error(tmp_path, model_file, audio_file):
    engine = make_engine(tmp_path, "late", sleep=5)
    adapter = WhisperCppTranscriptionAdapter(executable=engine["path"], timeout_seconds=0.5)

    with pytest.raises(TranscriptionEngineError, match="timed out"):
        adapter.transcribe(audio_file, model_file)


@requires_posix_shell
def test_large_engine_output_does_not_block(tmp_path, model_file, audio_file):
    engine = make_engine(tmp_path, "done", stdout_bytes=512 * 1024)
    adapter = WhisperCppTranscriptionAdapter(executable=engine["path"], timeout_seconds=30)

    result = adapter.transcribe(audio_file, model_file)

    assert result.text == "done"


def test_output_cap_has_ten_megabyte_floor():
    adapter = WhisperCppTranscriptionAdapter(max_output_bytes=1024)
    assert adapter._max_output_bytes == 10 * 1024 * 1024
