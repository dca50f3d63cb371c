"""
Per-invocation options parsed from the command line.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

DEFAULT_COMMAND = "run"


class EnvMode(StrEnum):
    DEV = "dev"
    PROD = "prod"
    TEST = "test"


class Options(BaseModel):
    """
    Immutable record of the flags given for one invocation.

    `env_mode` holds the last of --dev, --prod or --test that was given. It is
    None when no environment flag was given, and the configured
    `env.default_env` applies. `arguments` holds the positional tokens that
    followed the subcommand. `command_argument` is the raw token directly after
    the subcommand, flags included, or "" when there is none.
    """

    model_config = ConfigDict(frozen=True)

    file: str = ""
    run_after: bool = False
    release: bool = False
    skip: bool = False
    save: bool = False
    auto_yes: bool = False
    verbose: bool = False
    very_verbose: bool = False
    use_config: bool = False
    config_path: str = ""
    lint: bool = False
    format: bool = False
    env_mode: str | None = None
    command: str = DEFAULT_COMMAND
    arguments: tuple[str, ...] = ()
    command_argument: str = ""

    @property
    def echo_commands(self) -> bool:
        return self.verbose or self.very_verbose

    def effective_env(self, default_env: str) -> str:
        return self.env_mode or default_env
