"""
Configuration module for cf-ddns.
"""

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    ValidationError,
    field_validator,
)

from cf_ddns.exceptions import ConfigError

DEFAULT_IP_SERVICES = [
    "https://checkip.amazonaws.com",
    "https://api.ipify.org",
    "https://api.my-ip.io/ip",
]


class Config(BaseModel):
    """Configuration for a single cf-ddns run."""

    model_config = ConfigDict(frozen=True)

    # Record to manage
    domain: str = Field(min_length=1)
    fqdn: str = Field(min_length=1)
    token: SecretStr

    # IP discovery configuration
    ip_services: List[str] = Field(default_factory=lambda: list(DEFAULT_IP_SERVICES))
    timeout: float = Field(default=5.0, gt=0)

    # Controller configuration
    dry_run: bool = False

    # Logging configuration
    log_level: str = "info"

    @field_validator("token")
    @classmethod
    def _token_not_empty(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError("token must not be empty")
        return value

    @classmethod
    def from_yaml(
        cls,
        config_path: Optional[Union[str, Path]] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "Config":
        """
        Load configuration from a YAML file, then apply overrides.

        Args:
            config_path: Path to the YAML configuration file
            overrides: Values that take precedence over the file (None values are ignored)

        Returns:
            Config: Config instance populated with values from the YAML file and overrides

        Raises:
            ConfigError: If the file is unreadable or the resulting configuration is invalid
        """
        # Default configuration paths to check
        default_paths = [
            Path("./cf-ddns.yaml"),
            Path("./cf-ddns.yml"),
            Path("/etc/cf-ddns/config.yaml"),
        ]

        if config_path:
            config_path = Path(config_path)
            if not config_path.exists():
                raise ConfigError(f"Configuration file not found: {config_path}")
            paths = [config_path]
        else:
            paths = default_paths

        # Load configuration from the first existing path
        config_data = {}
        for path in paths:
            if path.exists():
                try:
                    with open(path, "r") as f:
                        yaml_content = cls._substitute_env_vars(f.read())
                    config_data = yaml.safe_load(yaml_content) or {}
                except (OSError, yaml.YAMLError) as e:
                    raise ConfigError(
                        f"Could not read configuration file {path}: {e}"
                    ) from e
                break

        if not isinstance(config_data, dict):
            raise ConfigError("Configuration file must contain a mapping")

        flat_config = cls._flatten_config(config_data)
        for key, value in (overrides or {}).items():
            if value is not None:
                flat_config[key] = value

        try:
            return cls(**flat_config)
        except ValidationError as e:
            # Input values are left out since they may include the token
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in e.errors(include_input=False)
            )
            raise ConfigError(f"Invalid configuration: {problems}") from None

    @staticmethod
    def _substitute_env_vars(content: str) -> str:
        """
        Substitute environment variables in the configuration content.

        Args:
            content: Configuration content

        Returns:
            str: Configuration content with environment variables substituted
        """
        # Pattern for ${ENV_VAR} or ${ENV_VAR:-default}
        pattern = r"\${([^}]+)}"

        def replace_env_var(match):
            env_var = match.group(1)
            if ":-" in env_var:
                env_var, default = env_var.split(":-", 1)
                return os.environ.get(env_var, default)
            return os.environ.get(env_var, "")

        return re.sub(pattern, replace_env_var, content)

    @staticmethod
    def _flatten_config(config_data: dict) -> dict:
        """
        Flatten nested configuration.

        Only keys present in the file are returned, so model defaults apply
        to everything else.

        Args:
            config_data: Nested configuration data

        Returns:
            dict: Flattened configuration data
        """
        flat_config = {}

        # Cloudflare configuration
        cloudflare = config_data.get("cloudflare") or {}
        for key, field in (("domain", "domain"), ("fqdn", "fqdn"), ("api_token", "token")):
            if cloudflare.get(key) is not None:
                flat_config[field] = cloudflare[key]

        # IP discovery configuration
        discovery = config_data.get("discovery") or {}
        if discovery.get("services"):
            flat_config["ip_services"] = discovery["services"]
        if discovery.get("timeout") is not None:
            flat_config["timeout"] = discovery["timeout"]

        if config_data.get("dry_run") is not None:
            flat_config["dry_run"] = config_data["dry_run"]

        # Logging configuration
        logging = config_data.get("logging") or {}
        if logging.get("level"):
            flat_config["log_level"] = logging["level"]

        return flat_config
