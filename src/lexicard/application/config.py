from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from lexicard.domain.constants import DEFAULT_NEW_CARDS_PER_DAY, MAX_RECENT_CARDS


class StudyMode(str, Enum):
    LOOP = "loop"  # keep practising reviewed cards once nothing is due
    STUDY_UNTIL_EMPTY = "study_until_empty"
    DUE_ONLY = "due_only"  # no new cards


class StudySettings(BaseSettings):
    """
    Study configuration for lexicard.
    Supports loading from:
    1. Environment variables (LEXICARD_*)
    2. Config file (~/.config/lexicard/config.toml)
    3. Manual overrides
    """

    model_config = SettingsConfigDict(
        env_prefix="LEXICARD_",
        extra="ignore",
    )

    new_cards_per_day: int = Field(default=DEFAULT_NEW_CARDS_PER_DAY, ge=0)
    max_recent_cards: int = Field(default=MAX_RECENT_CARDS, ge=1, le=50)
    study_mode: StudyMode = StudyMode.LOOP

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # Find the first existing config file
        toml_file = next((f for f in _config_files() if f.exists()), None)

        # Earlier sources win: overrides > env > toml
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("study_mode", mode="before")
    @classmethod
    def normalize_study_mode(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower().replace("-", "_")
        return v


def _config_files() -> list[Path]:
    # Resolved lazily so a patched HOME is honoured
    return [
        Path.home() / ".config/lexicard/config.toml",
        Path.home() / ".lexicard.toml",
    ]


def resolve_settings(overrides: dict[str, Any] | None = None) -> StudySettings:
    """
    Multi-layered settings resolution.
    1. Defaults in StudySettings
    2. ~/.config/lexicard/config.toml (if exists)
    3. Environment variables (LEXICARD_*)
    4. overrides (None values are ignored)
    """
    clean = {k: v for k, v in (overrides or {}).items() if v is not None}
    return StudySettings(**clean)
