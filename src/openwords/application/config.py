import json
from pathlib import Path
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    NoDecode,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from openwords.domain.constants import (
    DEFAULT_EXPLORE_RATIO,
    DEFAULT_HEAD_FRACTION,
    DEFAULT_MAX_EFACTOR_FOR_LINK,
    DEFAULT_RECALL_FRACTION,
)
from openwords.domain.models import FieldNames


def config_files() -> list[Path]:
    return [
        Path.home() / ".config/openwords/config.toml",
        Path.home() / ".openwords.toml",
    ]


class AppConfig(BaseSettings):
    """
    Configuration model for OpenWords.
    Supports loading from:
    1. Environment variables (OPENWORDS_*)
    2. Config file (~/.config/openwords/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="OPENWORDS_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Paths
    vault_root: Path | None = None
    folder_path: str = ""

    # Study scope
    enabled_tags: Annotated[list[str], NoDecode] = Field(default_factory=list)
    field_names: FieldNames = Field(default_factory=FieldNames)

    # Sampling
    explore_ratio: float = Field(default=DEFAULT_EXPLORE_RATIO, ge=0.0, le=1.0)
    head_fraction: float = Field(default=DEFAULT_HEAD_FRACTION, gt=0.0, le=1.0)
    recall_fraction: float = Field(default=DEFAULT_RECALL_FRACTION, gt=0.0, le=1.0)

    # Annotation
    max_efactor_for_link: float = DEFAULT_MAX_EFACTOR_FOR_LINK

    verbose: int = 1

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

        # Find the first existing file
        toml_file = next((f for f in config_files() if f.exists()), None)

        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("vault_root", mode="before")
    @classmethod
    def resolve_vault_root(cls, v: Any) -> Path | None:
        if v is None:
            return None
        return Path(v).expanduser().resolve()

    @field_validator("enabled_tags", mode="before")
    @classmethod
    def split_enabled_tags(cls, v: Any) -> Any:
        # Env values arrive raw: accept a JSON list or "L1, L2"
        if isinstance(v, str):
            if v.lstrip().startswith("["):
                return json.loads(v)
            return [t.strip() for t in v.split(",") if t.strip()]
        return v

    @property
    def words_dir(self) -> Path:
        root = self.vault_root or Path.cwd()
        return root / self.folder_path if self.folder_path else root


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/openwords/config.toml (if exists)
    3. Environment variables (OPENWORDS_*)
    4. cli_overrides (passed from Typer)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    config = AppConfig(**overrides)

    if config.vault_root is None:
        # No vault configured? Use the current directory.
        config.vault_root = Path.cwd()

    return config
