"""
Configuration loading and writing for rskid.

The configuration file is a small INI-style document: `[section]` headers,
one `key=value` pair per line and `#` comment lines. Every field has a
hard-coded default and loading never fails; missing files, unreadable files
and unknown sections or keys all fall back to the defaults.

Sections are modelled as frozen pydantic models so the loaded configuration
can be passed around as an immutable value.
"""

import functools
import pathlib
import sys
from os import PathLike
from typing import Annotated, Any, Callable

import typer
from mergedeep import merge
from pydantic import BaseModel, ConfigDict, Field

from rskid import utils
from rskid.errors import ConfigWriteError
from rskid.options import Options
from rskid.utils import logger

LOG = logger(__file__)

# Load-time default used by -G
DEFAULT_CONFIG_NAME = ".rskid.toml"
# Name written by earlier releases of `rskid init`, still read when present
LEGACY_CONFIG_NAME = ".rskid"

_TRIM_CHARS = " \t\r\n"
_TRUE_LITERALS = frozenset(("true", "1", "yes"))
_BANNER_WIDTH = 61


class _Section(BaseModel):
    model_config = ConfigDict(frozen=True)


class CompilerSection(_Section):
    experimental: Annotated[
        bool, Field(description="Use experimental compiler (rustcc) if true")
    ] = False
    flags: Annotated[str, Field(description="Additional flags for rustc/rustcc")] = (
        "-C opt-level=3"
    )
    target: Annotated[str, Field(description="Compilation target (optional)")] = (
        "x86_64-unknown-linux-gnu"
    )
    custom_path: Annotated[
        str, Field(description="Custom path to rustc/rustcc (optional)")
    ] = "rustc"


class EnvSection(_Section):
    default_env: Annotated[str, Field(description="Default environment mode")] = "dev"
    dev_flags: Annotated[str, Field(description="Flags for dev build")] = ""
    prod_flags: Annotated[str, Field(description="Flags for production build")] = (
        "--release"
    )
    test_flags: Annotated[str, Field(description="Flags for tests")] = "--all-targets"


class CustomSection(_Section):
    pre_build: Annotated[str, Field(description="Commands executed before build")] = (
        'echo "Preparing build..."'
    )
    post_build: Annotated[str, Field(description="Commands executed after build")] = (
        'echo "Build finished successfully!"'
    )
    pre_test: Annotated[
        str, Field(description="Commands before tests (optional)")
    ] = 'echo "Running tests..."'
    post_test: Annotated[str, Field(description="Commands after tests (optional)")] = (
        'echo "All tests done!"'
    )


class LintSection(_Section):
    run_clippy: Annotated[bool, Field(description="Enable clippy")] = True
    clippy_flags: Annotated[str, Field(description="Custom clippy flags")] = (
        "--deny warnings"
    )


class FmtSection(_Section):
    auto_format: Annotated[bool, Field(description="Automatically format code")] = True
    formatter: Annotated[str, Field(description="Formatter executable")] = "rustfmt"
    formatter_flags: Annotated[str, Field(description="Formatter flags")] = (
        "--edition 2021"
    )


class BinarySection(_Section):
    output_dir: Annotated[
        str, Field(description="Directory to save compiled binaries")
    ] = "./bin"
    overwrite: Annotated[bool, Field(description="Automatically overwrite binaries")] = (
        False
    )
    skip_existing: Annotated[
        bool, Field(description="Skip compilation if binary exists")
    ] = False
    save_backup: Annotated[bool, Field(description="Save old binary as backup")] = True


class ProjectSection(_Section):
    name: Annotated[str, Field(description="Project metadata")] = "MyRustApp"
    version: str = "0.1.0"
    author: str = "User <user@example.com>"
    description: str = "A sample Rust project using rskid"


class FeaturesSection(_Section):
    enable_experimental: Annotated[
        bool, Field(description="Enable experimental compiler features at runtime")
    ] = False
    enable_logging: Annotated[bool, Field(description="Enable verbose logging")] = True
    run_on_save: Annotated[
        bool, Field(description="Automatically run binary after build/save")
    ] = False


class Config(BaseModel):
    """The complete rskid configuration, one attribute per file section."""

    model_config = ConfigDict(frozen=True)

    compiler: CompilerSection = Field(default_factory=CompilerSection)
    env: EnvSection = Field(default_factory=EnvSection)
    custom: CustomSection = Field(default_factory=CustomSection)
    lint: LintSection = Field(default_factory=LintSection)
    fmt: FmtSection = Field(default_factory=FmtSection)
    binary: BinarySection = Field(default_factory=BinarySection)
    project: ProjectSection = Field(default_factory=ProjectSection)
    features: FeaturesSection = Field(default_factory=FeaturesSection)


def parse_boolean(value: str) -> bool:
    """Return True only for the exact literals "true", "1" and "yes"."""
    return value in _TRUE_LITERALS


@functools.cache
def _field_parsers() -> dict[tuple[str, str], Callable[[str], Any]]:
    """
    Map every known (section, key) pair to the function that types its value.

    Boolean fields go through parse_boolean, all other fields keep the raw text.
    """
    parsers = {}
    for section, section_field in Config.model_fields.items():
        for key, field in section_field.annotation.model_fields.items():
            parsers[(section, key)] = parse_boolean if field.annotation is bool else str
    return parsers


def parse_config(text: str) -> Config:
    """
    Parse configuration text and merge the recognized values over the defaults.

    Lines are trimmed of spaces, tabs, CR and LF. Blank lines and lines starting
    with '#' are skipped. A `[section]` line switches the current section and a
    `key=value` line is split on the first '='. Pairs outside a known section or
    with an unknown key are ignored.
    """
    parsers = _field_parsers()
    values: dict[str, dict[str, Any]] = {}
    section = ""
    for line in text.splitlines():
        line = line.strip(_TRIM_CHARS)
        if not line or line.startswith("#"):
            continue
        if line.startswith("["):
            end = line.find("]")
            if end != -1:
                section = line[1:end]
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip(_TRIM_CHARS)
        if parser := parsers.get((section, key)):
            utils.mapping_set(values, section, key, value=parser(value.strip(_TRIM_CHARS)))
        else:
            LOG.debug("Ignoring config entry: [%s] %s", section, key)
    return Config.model_validate(merge({}, Config().model_dump(), values))


def load_config(path: PathLike | str) -> Config:
    """
    Load a configuration file, returning defaults when it cannot be read.
    """
    path = pathlib.Path(path)
    try:
        text = path.read_text()
    except (OSError, UnicodeDecodeError) as e:
        LOG.debug("Config not loaded, using defaults: %s (%s)", path, e)
        return Config()
    LOG.debug("Loading config: %s", path)
    return parse_config(text)


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def render_config(config: Config | None = None) -> str:
    """
    Render a configuration as fully commented file text.

    Loading the rendered text back yields the same field values.
    """
    config = config or Config()
    lines = [
        "# " + "=" * _BANNER_WIDTH,
        "# " + "rskid Configuration".center(_BANNER_WIDTH).rstrip(),
        "# " + "=" * _BANNER_WIDTH,
    ]
    for section in type(config).model_fields:
        section_value = getattr(config, section)
        lines.append(f"[{section}]")
        for key, field in type(section_value).model_fields.items():
            if field.description:
                lines.append(f"# {field.description}")
            lines.append(f"{key}={_format_value(getattr(section_value, key))}")
        lines.append("")
    return "\n".join(lines)


def create_default_config(
    path: PathLike | str, config: Config | None = None
) -> pathlib.Path:
    """
    Write a commented configuration file.

    Args:
        path: Destination file.
        config: Values to write. Defaults are written when omitted.

    Returns:
        The path that was written.

    Raises:
        ConfigWriteError: If the file cannot be written.
    """
    path = pathlib.Path(path)
    try:
        path.write_text(render_config(config))
    except OSError as e:
        reason = e.strerror or str(e)
        LOG.error("Error creating config file: %s", reason)
        raise ConfigWriteError(path, reason) from e
    LOG.info("Created default config file: %s", path)
    return path


def config_path(options: Options) -> pathlib.Path:
    """
    Return the configuration file selected by the options.

    `--cfg` wins. Otherwise `.rskid.toml` is used, unless only a legacy
    `.rskid` file exists in the working directory.
    """
    if options.config_path:
        return pathlib.Path(options.config_path)
    path = pathlib.Path(DEFAULT_CONFIG_NAME)
    legacy_path = pathlib.Path(LEGACY_CONFIG_NAME)
    if not path.exists() and legacy_path.is_file():
        return legacy_path
    return path


def _confirm_create(path: pathlib.Path, interactive: bool | None) -> bool:
    if interactive is None:
        interactive = _stdin_is_interactive()
    if not interactive:
        LOG.warning(
            f"Config file '{path}' not found and no terminal to confirm; "
            "using defaults (pass -y to create it)"
        )
        return False
    return typer.confirm(f"Config file '{path}' not found. Create default?")


def _stdin_is_interactive() -> bool:
    return bool(utils.run_catching(sys.stdin.isatty))


def resolve_config(options: Options, interactive: bool | None = None) -> Config:
    """
    Produce the configuration for this invocation.

    Without -G or --cfg the defaults are used. With them, a missing file is
    created when -y was given or the user confirms, and then loaded. Failing to
    create the file falls back to the defaults.

    Args:
        options: Parsed command line options.
        interactive: Whether a confirmation prompt may be shown. Detected from
                     stdin when omitted.

    Returns:
        The loaded configuration.
    """
    if not options.use_config:
        return Config()
    path = config_path(options)
    if not path.exists() and (options.auto_yes or _confirm_create(path, interactive)):
        try:
            create_default_config(path)
        except ConfigWriteError:
            LOG.warning("Using default configuration")
    if path.exists():
        return load_config(path)
    return Config()
