"""Process-wide defaults for bag operations.

Uses Pydantic v2 BaseSettings so the defaults can be tuned through
``NUGRANT_*`` environment variables. Each concern reads only its own
variables, so a bad merge default never breaks conversions.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from nugrant.merge import ArrayStrategy

# Module-level override installed with set_settings()
_settings: "BagSettings | None" = None


class MergeSettings(BaseSettings):
    """Defaults used by merge_into."""

    model_config = SettingsConfigDict(
        env_prefix="NUGRANT_",
        case_sensitive=False,
        extra="ignore",
    )

    array_strategy: ArrayStrategy = Field(
        default=ArrayStrategy.REPLACE,
        description="How sequences are combined by merge_into",
    )


class ConversionSettings(BaseSettings):
    """Defaults used by to_dict."""

    model_config = SettingsConfigDict(
        env_prefix="NUGRANT_",
        case_sensitive=False,
        extra="ignore",
    )

    use_string_keys: bool = Field(
        default=False,
        description="Emit str() keys from to_dict",
    )


class BagSettings(MergeSettings, ConversionSettings):
    """Defaults used when a bag operation is called without explicit options.

    Settings are loaded with the following priority (highest to lowest):
    1. Constructor kwargs
    2. Environment variables with NUGRANT_ prefix
    3. Field defaults
    """


@lru_cache(maxsize=None)
def _load_settings(settings_cls: type[BaseSettings]) -> BaseSettings:
    return settings_cls()


def get_settings(settings_cls: type[BaseSettings] = BagSettings) -> BaseSettings:
    """Get the active settings.

    The environment is read once per settings class and cached until
    clear_settings() is called.

    Args:
        settings_cls: The settings to load when no override is installed.
            Bag operations ask for the narrowest class they need.

    Returns:
        The override installed with set_settings(), or the cached settings
        read from the environment.
    """
    if _settings is not None:
        return _settings
    return _load_settings(settings_cls)


def set_settings(settings: BagSettings) -> None:
    """Install process-wide settings used by every bag operation.

    Args:
        settings: The settings to use until clear_settings() is called.
    """
    global _settings
    _settings = settings


def clear_settings() -> None:
    """Clear the settings override and the cached environment.

    This is primarily useful for testing to ensure a clean state.
    """
    global _settings
    _settings = None
    _load_settings.cache_clear()
