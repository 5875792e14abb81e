"""Diff-lens settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings read from `DIFF_LENS_*` environment variables."""

    model_config = SettingsConfigDict(env_prefix="DIFF_LENS_")

    context_lines: int = Field(default=3, ge=0)
    prompt_context_lines: int = Field(default=4, ge=0)
    line_preview_chars: int = Field(default=100, gt=0)
    summary_max_chars: int = Field(default=500, gt=0)
    max_comments_per_pr: int = Field(default=20, ge=0)
    include_raw_diff: bool = True
    log_level: str = "INFO"
