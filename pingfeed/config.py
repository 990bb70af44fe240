import tomllib
from pathlib import Path
from typing import Any, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from pingfeed.errors import ConfigError

CONFIG_NAME = "pingfeed.toml"
SEARCH_PATHS = (Path("/etc"), Path("/usr/local/etc"), Path("/config"), Path("."))
DEFAULT_HOSTS = ("localhost",)


class InfluxSettings(BaseModel):
    model_config = ConfigDict(extra="forbid", validate_assignment=True, populate_by_name=True)

    enabled: bool = False
    host: str = "localhost"
    port: int = Field(default=8086, gt=0, lt=65536)
    user: str = ""
    password: str = Field(default="", alias="pass")
    secure: bool = False
    db: str = "pingfeed"
    policy: str = ""            # retention policy, server default when empty


class FPingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    binary: str = "fping"
    backoff: str = "1"          # -B
    retries: str = "0"          # -r
    tos: str = "0"              # -O
    summary: str = "10"         # -Q, seconds between summary blocks
    period: str = "1000"        # -p, milliseconds between pings to one host
    dualstack: bool = False     # -m, ping every address a name resolves to
    show_address: bool = True   # -n -A, print "name (address)"

    # flag -> value overrides; "" makes a bare switch
    custom: dict[str, str] = Field(default_factory=dict)

    # fping takes every flag value as a string; TOML lets people write numbers
    @field_validator("binary", "backoff", "retries", "tos", "summary", "period", mode="before")
    @classmethod
    def _number_to_str(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("custom", mode="before")
    @classmethod
    def _custom_values_to_str(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {str(k): "" if v is None else str(v) for k, v in value.items()}
        return value


class Settings(BaseModel):
    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    influx: InfluxSettings = Field(default_factory=InfluxSettings)
    fping: FPingSettings = Field(default_factory=FPingSettings)
    hosts: tuple[str, ...] = Field(default=DEFAULT_HOSTS, min_length=1)

    @model_validator(mode="before")
    @classmethod
    def _flatten_hosts(cls, data: Any) -> Any:
        # the file spells it [hosts] hosts = [...]
        if isinstance(data, dict) and isinstance(data.get("hosts"), dict):
            section = data["hosts"]
            extra = set(section) - {"hosts"}
            if extra:
                raise ValueError(f"unknown key(s) in [hosts]: {', '.join(sorted(extra))}")
            data = dict(data)
            if "hosts" in section:
                data["hosts"] = section["hosts"]
            else:
                del data["hosts"]
        return data

    @field_validator("hosts", mode="before")
    @classmethod
    def _single_host(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value


def parse_settings(data: dict, path: Optional[Path] = None) -> Settings:
    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        where = f" in {path}" if path is not None else ""
        raise ConfigError(f"invalid configuration{where}: {e}", path=path) from e


def find_config(search_paths=SEARCH_PATHS) -> Path:
    for directory in search_paths:
        candidate = directory / CONFIG_NAME
        if candidate.is_file():
            return candidate
    searched = ", ".join(str(d) for d in search_paths)
    raise ConfigError(f"{CONFIG_NAME} not found in: {searched}")


def load_settings(path: Optional[Path] = None, search_paths=SEARCH_PATHS) -> Settings:
    """
    Load settings from a TOML file. With no explicit path the first
    pingfeed.toml found in search_paths is used; a missing file is fatal.
    """
    path = Path(path) if path is not None else find_config(search_paths)
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"unable to read config file {path}: {e}", path=path) from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"invalid TOML in {path}: {e}", path=path) from e

    settings = parse_settings(data, path)
    logger.info("Loaded configuration from {}", path)
    return settings
