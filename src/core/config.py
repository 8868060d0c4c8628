"""
Tracker configuration.

Values come from a YAML file or from TX_TRACKER_* environment variables
(a local .env file is loaded first):

    TX_TRACKER_CHAIN_ID=cosmoshub-4
    TX_TRACKER_RPC_ADDRESS=http://127.0.0.1:26657
    TX_TRACKER_RPC_TIMEOUT=10
    TX_TRACKER_BACKOFF=0.3
    TX_TRACKER_REQUEST_TIMEOUT=5
    TX_TRACKER_BASE64_ATTRIBUTES=false
"""

import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from dotenv import load_dotenv

from .errors import ConfigError
from .height import ChainId

ENV_PREFIX = "TX_TRACKER_"

DEFAULT_RPC_TIMEOUT = 10.0
DEFAULT_BACKOFF = 0.3
DEFAULT_REQUEST_TIMEOUT = 5.0

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass
class TrackerConfig:
    """Settings for waiting on transaction confirmations."""
    chain_id: str
    rpc_address: str = "http://127.0.0.1:26657"
    rpc_timeout: float = DEFAULT_RPC_TIMEOUT       # total wait budget, seconds
    backoff: float = DEFAULT_BACKOFF               # pause between polling passes
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT  # single HTTP request
    base64_attributes: bool = False                # Tendermint 0.34 encodes event attributes

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        if not self.chain_id:
            raise ConfigError("chain_id is required")
        if not self.rpc_address.startswith(("http://", "https://")):
            raise ConfigError(f"rpc_address must be an http(s) URL, got {self.rpc_address!r}")
        for name in ("rpc_timeout", "backoff", "request_timeout"):
            value = getattr(self, name)
            if value <= 0:
                raise ConfigError(f"{name} must be positive, got {value}")

    @property
    def chain(self) -> ChainId:
        return ChainId(self.chain_id)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TrackerConfig":
        known = {f.name: f for f in fields(cls)}
        unknown = set(data) - set(known)
        if unknown:
            raise ConfigError(f"unknown config keys: {', '.join(sorted(unknown))}")

        values: Dict[str, Any] = {}
        for key, raw in data.items():
            values[key] = _coerce(key, raw, known[key].type)
        try:
            return cls(**values)
        except TypeError as e:
            raise ConfigError(f"incomplete config: {e}") from e

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "TrackerConfig":
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError as e:
            raise ConfigError(f"config file not found: {path}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"{path} must contain a mapping")
        # Either a flat mapping or nested under "tracker:"
        section = data.get("tracker", data)
        return cls.from_dict(section)

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "TrackerConfig":
        load_dotenv(env_file)
        data = {}
        for f in fields(cls):
            value = os.getenv(ENV_PREFIX + f.name.upper())
            if value is not None:
                data[f.name] = value
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _coerce(key: str, raw: Any, field_type: Any) -> Any:
    type_name = field_type if isinstance(field_type, str) else getattr(field_type, "__name__", "")
    try:
        if type_name == "float":
            return float(raw)
        if type_name == "bool":
            if isinstance(raw, bool):
                return raw
            text = str(raw).strip().lower()
            if text in _TRUE_VALUES:
                return True
            if text in _FALSE_VALUES:
                return False
            raise ValueError(f"not a boolean: {raw!r}")
        return str(raw)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"invalid value for {key}: {e}") from e
