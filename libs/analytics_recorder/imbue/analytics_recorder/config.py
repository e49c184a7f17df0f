"""Resolve the analytics cache directory from environment variables.

ANALYTICS_CACHE_DIR overrides the location outright. Otherwise the directory is
~/.{ANALYTICS_ROOT_NAME}/cache/analytics (default: ~/.hab/cache/analytics).
"""

import os
from pathlib import Path
from typing import Final
from typing import Self

from imbue.analytics_recorder.data_types import FrozenModel
from imbue.analytics_recorder.errors import InvalidNamespaceError
from imbue.analytics_recorder.primitives import LogLevel

CACHE_DIR_ENV_VAR: Final[str] = "ANALYTICS_CACHE_DIR"
ROOT_NAME_ENV_VAR: Final[str] = "ANALYTICS_ROOT_NAME"
DEFAULT_ROOT_NAME: Final[str] = "hab"


def scope_to_namespace(base_dir: Path, namespace: str | None) -> Path:
    """Append namespace to base_dir as a single sub-directory."""
    if namespace is None:
        return base_dir
    if not namespace or namespace in (".", "..") or "/" in namespace or "\\" in namespace:
        raise InvalidNamespaceError(namespace)
    return base_dir / namespace


def get_cache_analytics_dir(namespace: str | None = None) -> Path:
    """Return the analytics cache directory, optionally scoped to a namespace.

    Does not create the directory.
    """
    env_cache_dir = os.environ.get(CACHE_DIR_ENV_VAR)
    if env_cache_dir:
        base_dir = Path(env_cache_dir).expanduser()
    else:
        root_name = os.environ.get(ROOT_NAME_ENV_VAR, DEFAULT_ROOT_NAME)
        base_dir = Path(f"~/.{root_name}").expanduser() / "cache" / "analytics"
    return scope_to_namespace(base_dir, namespace)


class RecorderConfig(FrozenModel):
    """Resolved settings for recording events."""

    cache_dir: Path
    log_level: LogLevel = LogLevel.WARNING

    @classmethod
    def from_env(
        cls,
        namespace: str | None = None,
        cache_dir: Path | None = None,
        log_level: LogLevel = LogLevel.WARNING,
    ) -> Self:
        """Build a config, letting an explicit cache_dir win over the environment."""
        if cache_dir is not None:
            resolved_dir = scope_to_namespace(cache_dir, namespace)
        else:
            resolved_dir = get_cache_analytics_dir(namespace)
        return cls(cache_dir=resolved_dir, log_level=log_level)
