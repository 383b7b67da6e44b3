"""
Configuration Management
========================

All environment variables Robin reads are parsed and validated here.

The configuration is split into sections so that processes which only
need part of it can load just that part: the knowledge tool server runs
without any Slack credentials and calls load_knowledge_config() directly.

Usage:
    from robin.utils.config import get_config

    config = get_config()
    print(config.slack.bot_token)
    print(config.knowledge.data_dir)
"""

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Supported values for the selector variables
GENERATION_PROVIDERS = ("generations", "openai")
KNOWLEDGE_TRANSPORTS = ("local", "stdio")

DEFAULT_GENERATION_URL = "https://api.cohere.ai/v1/generate"
DEFAULT_HOME_DIR = Path.home() / ".robin"


def _required(name: str) -> str:
    """
    Get a required environment variable.

    Raises:
        ValueError: If the variable is not set
    """
    value = os.getenv(name)
    if not value:
        raise ValueError(
            f"Missing required environment variable: {name}\n"
            f"Please ensure {name} is set in your .env file."
        )
    return value


def _optional(name: str, default: str) -> str:
    """Get an optional environment variable with a default."""
    return os.getenv(name) or default


def _optional_int(name: str, default: int) -> int:
    """
    Get an optional integer environment variable.

    Invalid values fall back to the default with a warning.
    """
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        print(f"Warning: {name} is not a valid integer, using default: {default}", file=sys.stderr)
        return default


def _optional_float(name: str, default: float) -> float:
    """Get an optional float environment variable."""
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        print(f"Warning: {name} is not a valid number, using default: {default}", file=sys.stderr)
        return default


def _choice(name: str, default: str, choices: tuple[str, ...]) -> str:
    """
    Get an environment variable restricted to a fixed set of values.

    Raises:
        ValueError: If the value is not one of the choices
    """
    value = _optional(name, default).lower()
    if value not in choices:
        raise ValueError(
            f"Invalid value for {name}: {value!r}. "
            f"Expected one of: {', '.join(choices)}"
        )
    return value


def _optional_path(name: str, default: Path) -> Path:
    """Get a path from the environment, expanding ~."""
    value = os.getenv(name)
    if not value:
        return default
    return Path(value).expanduser()


# ==============================================================================
# Configuration Dataclasses
# ==============================================================================

@dataclass(frozen=True)
class SlackConfig:
    """Slack API configuration."""
    bot_token: str           # xoxb-... token for bot operations
    app_token: str           # xapp-... token for Socket Mode
    signing_secret: str
    bot_user_id: str | None  # Resolved with auth.test when not set


@dataclass(frozen=True)
class GenerationConfig:
    """Text generation backend configuration."""
    provider: str               # "generations" or "openai"
    url: str                    # Endpoint returning {generations: [{text}]}
    api_key: str | None         # Bearer token for the endpoint
    model: str
    max_tokens: int
    timeout_seconds: float
    openai_api_key: str | None
    openai_model: str


@dataclass(frozen=True)
class KnowledgeConfig:
    """Knowledge files and how the bot reaches the get-knowledge tool."""
    data_dir: Path              # One <sanitized-email>.json per user
    log_dir: Path               # Tool server log directory
    transport: str              # "local" or "stdio"
    server_command: tuple[str, ...]

    @property
    def server_log_file(self) -> Path:
        return self.log_dir / "mcp-server.log"


@dataclass(frozen=True)
class DiscussionConfig:
    """Discussion orchestration settings."""
    rounds: int


@dataclass(frozen=True)
class Config:
    """
    Root configuration object.

        config = get_config()
        config.slack.bot_token
        config.generation.url
        config.discussion.rounds
    """
    slack: SlackConfig
    generation: GenerationConfig
    knowledge: KnowledgeConfig
    discussion: DiscussionConfig
    log_level: str


def load_knowledge_config() -> KnowledgeConfig:
    """
    Load only the knowledge section.

    Used by the tool server, which must start without Slack credentials.
    """
    load_dotenv()

    command = os.getenv("KNOWLEDGE_SERVER_COMMAND")
    if command:
        server_command = tuple(command.split())
    else:
        server_command = (sys.executable, "-m", "robin.tools.server")

    return KnowledgeConfig(
        data_dir=_optional_path("ROBIN_DATA_DIR", DEFAULT_HOME_DIR / "data"),
        log_dir=_optional_path("ROBIN_LOG_DIR", DEFAULT_HOME_DIR / "logs"),
        transport=_choice("KNOWLEDGE_TRANSPORT", "local", KNOWLEDGE_TRANSPORTS),
        server_command=server_command,
    )


def load_config() -> Config:
    """
    Load and validate all configuration from the environment.

    Raises:
        ValueError: If required configuration is missing or invalid
    """
    load_dotenv()

    rounds = _optional_int("DISCUSSION_ROUNDS", 3)
    if rounds < 1:
        raise ValueError("DISCUSSION_ROUNDS must be at least 1")

    return Config(
        slack=SlackConfig(
            bot_token=_required("SLACK_BOT_TOKEN"),
            app_token=_required("SLACK_APP_TOKEN"),
            signing_secret=_required("SLACK_SIGNING_SECRET"),
            bot_user_id=os.getenv("SLACK_BOT_USER_ID") or None,
        ),
        generation=GenerationConfig(
            provider=_choice("GENERATION_PROVIDER", "generations", GENERATION_PROVIDERS),
            url=_optional("GENERATION_URL", DEFAULT_GENERATION_URL),
            api_key=os.getenv("GENERATION_API_KEY") or None,
            model=_optional("GENERATION_MODEL", "command"),
            max_tokens=_optional_int("GENERATION_MAX_TOKENS", 300),
            timeout_seconds=_optional_float("GENERATION_TIMEOUT_SECONDS", 60.0),
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            openai_model=_optional("OPENAI_MODEL", "gpt-4o-mini"),
        ),
        knowledge=load_knowledge_config(),
        discussion=DiscussionConfig(rounds=rounds),
        log_level=_optional("LOG_LEVEL", "info"),
    )


# ==============================================================================
# Singleton
# ==============================================================================

_config_instance: Config | None = None


def get_config() -> Config:
    """Get the process-wide configuration, loading it on first access."""
    global _config_instance
    if _config_instance is None:
        _config_instance = load_config()
    return _config_instance


def reset_config() -> None:
    """Forget the cached configuration (next get_config() reloads it)."""
    global _config_instance
    _config_instance = None
