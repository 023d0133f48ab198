"""Configuration loading and saving.

Secrets come from the environment only:
    REDDIT_CLIENT_ID
    REDDIT_CLIENT_SECRET

Everything else lives in ~/.config/subreddit-media/config.toml (optional).

Schema:
    [images]
    remote_hostnames = ["i.imgur.com"]  # extra hosts allowed in output

    [fetch]
    limit = 25
    timeout = 15.0

    [api]
    user_agent = "..."
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

import tomli_w

CONFIG_DIR = Path.home() / ".config" / "subreddit-media"
CONFIG_FILE = CONFIG_DIR / "config.toml"

CLIENT_ID_ENV = "REDDIT_CLIENT_ID"
CLIENT_SECRET_ENV = "REDDIT_CLIENT_SECRET"

# Reddit asks for <platform>:<app id>:<version> (by ...) and throttles
# generic agents hard
DEFAULT_USER_AGENT = "python:subreddit-media:0.1.0 (hot subreddit media fetcher)"

DEFAULT_LIMIT = 25
MAX_LIMIT = 100
DEFAULT_TIMEOUT = 15.0


@dataclass
class Credentials:
    client_id: str
    client_secret: str

    @property
    def complete(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def __repr__(self) -> str:
        return f"Credentials(client_id={self.client_id!r}, client_secret='***')"


@dataclass
class AppConfig:
    remote_hostnames: list[str] = field(default_factory=list)
    limit: int = DEFAULT_LIMIT
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT


def load_credentials(environ: dict[str, str] | None = None) -> Credentials:
    """Read the client id/secret pair from the environment."""
    env = os.environ if environ is None else environ
    return Credentials(
        client_id=env.get(CLIENT_ID_ENV, "").strip(),
        client_secret=env.get(CLIENT_SECRET_ENV, "").strip(),
    )


def load_config(config_path: Path = CONFIG_FILE) -> AppConfig:
    """Load and validate config from TOML file. Missing file means defaults."""
    if not config_path.exists():
        return AppConfig()

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    images_data = _section(data, "images")
    fetch_data = _section(data, "fetch")
    api_data = _section(data, "api")

    hostnames = images_data.get("remote_hostnames", [])
    if not isinstance(hostnames, list) or not all(
        isinstance(h, str) for h in hostnames
    ):
        raise ValueError("images.remote_hostnames must be a list of strings")

    limit = fetch_data.get("limit", DEFAULT_LIMIT)
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise ValueError("fetch.limit must be an integer")
    if not 1 <= limit <= MAX_LIMIT:
        raise ValueError(f"fetch.limit must be between 1 and {MAX_LIMIT}")

    timeout = fetch_data.get("timeout", DEFAULT_TIMEOUT)
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
        raise ValueError("fetch.timeout must be a number")
    if timeout <= 0:
        raise ValueError("fetch.timeout must be positive")

    user_agent = api_data.get("user_agent", "")
    if not isinstance(user_agent, str):
        raise ValueError("api.user_agent must be a string")

    return AppConfig(
        remote_hostnames=[h.strip() for h in hostnames if h.strip()],
        limit=limit,
        timeout=float(timeout),
        user_agent=user_agent.strip() or DEFAULT_USER_AGENT,
    )


def _section(data: dict, name: str) -> dict:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ValueError(f"[{name}] must be a table")
    return section


def save_config(config: AppConfig, config_path: Path = CONFIG_FILE) -> None:
    """Write config to TOML file."""
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "images": {
            "remote_hostnames": list(config.remote_hostnames),
        },
        "fetch": {
            "limit": config.limit,
            "timeout": config.timeout,
        },
    }

    if config.user_agent != DEFAULT_USER_AGENT:
        data["api"] = {"user_agent": config.user_agent}

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)


def config_exists(config_path: Path = CONFIG_FILE) -> bool:
    """Check if config file exists."""
    return config_path.exists()
