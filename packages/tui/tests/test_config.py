"""Tests for toon_tui.config"""
import pytest
from pydantic import ValidationError

from toon_tui.config import RendererConfig


class TestRendererConfig:
    def test_defaults(self):
        config = RendererConfig()
        assert config.capture_stdio
        assert config.alternate_screen
        assert config.mouse_capture
        assert config.bracketed_paste
        assert config.input_timeout_ms == 10
        assert config.write_log is None

    def test_empty_environment_gives_defaults(self):
        assert RendererConfig.from_env({}) == RendererConfig()

    def test_flags_from_environment(self):
        config = RendererConfig.from_env({
            "TOON_CAPTURE_STDIO": "0",
            "TOON_ALTERNATE_SCREEN": "1",
            "TOON_MOUSE_CAPTURE": "no",
            "TOON_BRACKETED_PASTE": "",
        })
        assert not config.capture_stdio
        assert config.alternate_screen
        assert not config.mouse_capture
        assert config.bracketed_paste

    def test_values_from_environment(self):
        config = RendererConfig.from_env({
            "TOON_INPUT_TIMEOUT_MS": "25",
            "TOON_WRITE_LOG": "/tmp/toon.log",
        })
        assert config.input_timeout_ms == 25
        assert config.write_log == "/tmp/toon.log"

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("TOON_CAPTURE_STDIO", "0")
        assert not RendererConfig.from_env().capture_stdio

    def test_negative_timeout_rejected(self):
        with pytest.raises(ValidationError):
            RendererConfig(input_timeout_ms=-1)

    def test_frozen(self):
        config = RendererConfig()
        with pytest.raises(ValidationError):
            config.capture_stdio = False
