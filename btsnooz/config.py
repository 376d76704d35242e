"""
Configuration schema for the btsnooz decoder.

Keep this lean: only the knobs the command line and the runner actually
consult. Values can be overridden from the environment through
`DecoderConfig.from_env()`.
"""

from __future__ import annotations

import codecs
import os
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_ENV_PREFIX = "BTSNOOZ_"


class DecoderConfig(BaseModel):
    """
    Centralized, validated configuration for one conversion run.
    """

    model_config = ConfigDict(frozen=True)

    # === Locating the payload ===
    begin_marker: str = Field(
        default="--- BEGIN:BTSNOOP_LOG_SUMMARY",
        min_length=1,
        description="Prefix of the line that opens the base64 block.",
    )
    end_marker: str = Field(
        default="--- END:BTSNOOP_LOG_SUMMARY",
        min_length=1,
        description="Prefix of the line that closes the base64 block.",
    )
    input_encoding: str = Field(
        default="latin-1",
        description="Text encoding of the report; bug reports are not always valid UTF-8.",
    )

    # === Output ===
    atomic_output: bool = Field(
        default=True,
        description="Write to a temporary file and rename on success; "
        "when False, a failed run leaves partial output behind.",
    )

    # === Logging ===
    log_level: LogLevel = Field(
        default="WARNING",
        description="Console/file log level for the 'btsnooz' logger.",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="If set, also log to this file through a rotating handler.",
    )

    @field_validator("input_encoding")
    @classmethod
    def _known_encoding(cls, v: str) -> str:
        try:
            codecs.lookup(v)
        except LookupError as exc:
            raise ValueError(f"unknown encoding: {v}") from exc
        return v

    @classmethod
    def from_env(cls, environ: Optional[dict[str, str]] = None) -> "DecoderConfig":
        """Build a config from BTSNOOZ_* environment variables (unset keys keep defaults)."""
        env = os.environ if environ is None else environ
        overrides: dict[str, object] = {}
        for name in cls.model_fields:
            raw = env.get(_ENV_PREFIX + name.upper())
            if raw is None or raw == "":
                continue
            overrides[name] = raw.upper() if name == "log_level" else raw
        return cls(**overrides)
