"""
Renderer configuration.

Every option can be set from the environment:

    TOON_CAPTURE_STDIO=0       leave stdout/stderr alone while rendering
    TOON_ALTERNATE_SCREEN=0    draw on the main screen
    TOON_MOUSE_CAPTURE=0       don't report mouse events
    TOON_BRACKETED_PASTE=0     don't enable bracketed paste
    TOON_INPUT_TIMEOUT_MS=25   how long to wait for the rest of an escape sequence
    TOON_WRITE_LOG=/tmp/out    append every byte written to the terminal to a file
"""
from __future__ import annotations

import os
from typing import Mapping

from pydantic import BaseModel, Field


def _flag(environ: Mapping[str, str], name: str, default: bool) -> bool:
    value = environ.get(name)
    if value is None or value == "":
        return default
    return value == "1"


class RendererConfig(BaseModel):
    capture_stdio: bool = True
    alternate_screen: bool = True
    mouse_capture: bool = True
    bracketed_paste: bool = True
    input_timeout_ms: int = Field(default=10, ge=0)
    write_log: str | None = None

    model_config = {"frozen": True}

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RendererConfig:
        env = os.environ if environ is None else environ
        defaults = cls()
        timeout = env.get("TOON_INPUT_TIMEOUT_MS", "").strip()
        return cls(
            capture_stdio=_flag(env, "TOON_CAPTURE_STDIO", defaults.capture_stdio),
            alternate_screen=_flag(env, "TOON_ALTERNATE_SCREEN", defaults.alternate_screen),
            mouse_capture=_flag(env, "TOON_MOUSE_CAPTURE", defaults.mouse_capture),
            bracketed_paste=_flag(env, "TOON_BRACKETED_PASTE", defaults.bracketed_paste),
            input_timeout_ms=int(timeout) if timeout else defaults.input_timeout_ms,
            write_log=env.get("TOON_WRITE_LOG", "").strip() or None,
        )
