"""Registry configuration loaded from YAML.

Example::

    first_application_uid: 10000
    per_user_range: 100000
    default_user: 0
    log_level: INFO
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from provmap.registry.identity import (
    FIRST_APPLICATION_UID,
    PER_USER_RANGE,
    USER_OWNER,
    UserIdentity,
)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(ValueError):
    """Raised for configuration files that cannot be used."""


@dataclass
class RegistryConfig:
    """Identity constants and ambient defaults for a provider map."""

    first_application_uid: int = FIRST_APPLICATION_UID
    per_user_range: int = PER_USER_RANGE
    default_user: int = USER_OWNER
    log_level: str = "WARNING"

    def identity(self) -> UserIdentity:
        """Build the identity policy; the calling user is ``default_user``."""
        default_user = self.default_user
        return UserIdentity(
            first_application_uid=self.first_application_uid,
            per_user_range=self.per_user_range,
            calling_user=lambda: default_user,
        )


def load_config(path: str | Path) -> RegistryConfig:
    """Load a registry configuration from a YAML file."""
    with open(path) as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"{path}: not valid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")

    unknown = set(data) - set(RegistryConfig.__dataclass_fields__)
    if unknown:
        raise ConfigError(f"{path}: unknown key(s): {', '.join(sorted(unknown))}")

    try:
        config = RegistryConfig(
            first_application_uid=int(data.get("first_application_uid", FIRST_APPLICATION_UID)),
            per_user_range=int(data.get("per_user_range", PER_USER_RANGE)),
            default_user=int(data.get("default_user", USER_OWNER)),
            log_level=str(data.get("log_level", "WARNING")).upper(),
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{path}: {e}") from e

    if config.log_level not in LOG_LEVELS:
        raise ConfigError(f"{path}: unknown log_level {config.log_level!r}")
    if config.default_user < 0:
        raise ConfigError(f"{path}: default_user must be >= 0")
    try:
        config.identity()
    except ValueError as e:
        raise ConfigError(f"{path}: {e}") from e

    return config
