"""
Help and version text for the rskid command line.
"""

import typer

from rskid import __version__

PROG = "rskid"
_RULE = "=" * 61


def _banner(title: str) -> str:
    return f"{_RULE}\n{title.center(61).rstrip()}\n{_RULE}\n"


GENERAL_HELP = _banner(f"{PROG} - Rust CLI Wrapper") + """\
DESCRIPTION:
rskid is a unified command-line interface for Rust development.
It wraps rustc, Cargo, and experimental compilers, while providing
QoL features, interactive prompts, configuration support, and
project initialization.

COMMANDS:
  run       : Compile & run a Rust file or Cargo project
  build     : Build the project using Cargo or rustc
  test      : Run all tests for the project
  fmt       : Format Rust code using rustfmt
  doc       : Generate documentation using cargo doc
  create    : Alias for creating a new Cargo project
  clean     : Clean build artifacts
  list      : List available binaries in Cargo project
  version   : Show rustc and cargo versions
  init      : Create new Cargo project + base .rskid.toml config

FLAGS:
  -f, --file <path>        : Rust source file (optional for Cargo)
  -R, --run                : Run binary after build
  -r, --release            : Build in release mode
  -s, --skip               : Skip compilation if binary exists
  -S, --save               : Save binary even if it exists
  -y, --yes                : Auto yes to all prompts
  -v, --verbose            : Enable verbose logging
  -V, --very-verbose       : Enable debug logging (extra verbose)
  -G                       : Use default .rskid.toml configuration
  --cfg <path>             : Specify custom config path
  --lint                   : Run cargo clippy after build
  --fmt                    : Format Rust code before build/run
  --dev / --prod / --test  : Set environment mode for build/run

EXAMPLES:
# Create new project with config
rskid init my_project

# Compile and run with config
rskid -f src/main.rs -R -G

# Build in release mode with formatting and linting
rskid build --prod --fmt --lint -G

# Run Cargo project in dev mode
rskid run --dev -v

# Format all code
rskid fmt

# Run tests with verbose output
rskid test -v -G

# Get help for specific command
rskid <command> --help
"""

COMMAND_HELP = {
    "run": _banner(f"{PROG} run") + """\
DESCRIPTION:
  Compile and run a Rust file or Cargo project.
  Automatically detects if you're in a Cargo project or
  working with standalone Rust files.

USAGE:
  rskid run [OPTIONS]
  rskid run -f <file> [OPTIONS]

OPTIONS:
  -f, --file <path>    : Rust source file to compile and run
  -r, --release        : Build in release mode (optimized)
  -v, --verbose        : Enable verbose output
  -G                   : Use .rskid.toml configuration file
  --cfg <path>         : Use custom configuration file
  --fmt                : Format code before running
  --lint               : Run clippy after build
  --dev                : Use development build settings
  --prod               : Use production build settings

EXAMPLES:
  rskid run                    # Run Cargo project
  rskid run -f main.rs         # Run standalone Rust file
  rskid run --prod --fmt -G    # Production run with formatting
  rskid run --dev -v           # Development run with verbose output
""",
    "build": _banner(f"{PROG} build") + """\
DESCRIPTION:
  Build a Rust project or standalone file without running it.
  Supports both Cargo projects and individual Rust files.

USAGE:
  rskid build [OPTIONS]
  rskid build -f <file> [OPTIONS]

OPTIONS:
  -f, --file <path>    : Rust source file to compile
  -r, --release        : Build in release mode
  -S, --save           : Save binary even if it exists
  -s, --skip           : Skip compilation if binary exists
  -v, --verbose        : Enable verbose output
  -G                   : Use .rskid.toml configuration file
  --fmt                : Format code before building
  --lint               : Run clippy after build
  --dev/--prod         : Environment-specific build settings

EXAMPLES:
  rskid build                  # Build Cargo project
  rskid build -f src/main.rs   # Build standalone file
  rskid build --release -G     # Release build with config
""",
    "test": _banner(f"{PROG} test") + """\
DESCRIPTION:
  Run all tests for the Rust project.
  Executes pre-test and post-test scripts if configured.

USAGE:
  rskid test [OPTIONS]

OPTIONS:
  -v, --verbose        : Enable verbose test output
  -G                   : Use .rskid.toml configuration file
  --cfg <path>         : Use custom configuration file
  --test               : Use test-specific build settings

EXAMPLES:
  rskid test           # Run all tests
  rskid test -v -G     # Verbose tests with config
""",
    "fmt": _banner(f"{PROG} fmt") + """\
DESCRIPTION:
  Format Rust code using rustfmt.
  Can format specific files or entire src/ directory.

USAGE:
  rskid fmt [OPTIONS]
  rskid fmt -f <file> [OPTIONS]

OPTIONS:
  -f, --file <path>    : Specific Rust file to format
  -v, --verbose        : Enable verbose output
  -G                   : Use .rskid.toml configuration file

EXAMPLES:
  rskid fmt            # Format all files in src/
  rskid fmt -f main.rs # Format specific file
  rskid fmt -G         # Format using config settings
""",
    "init": _banner(f"{PROG} init/create") + """\
DESCRIPTION:
  Create a new Cargo project with base .rskid.toml configuration.
  If no name is provided, initializes in current directory.

USAGE:
  rskid init [project_name]
  rskid create [project_name]

OPTIONS:
  -v, --verbose        : Enable verbose output
  -y, --yes            : Auto-confirm all prompts

EXAMPLES:
  rskid init           # Initialize in current directory
  rskid init my_app    # Create new project 'my_app'
  rskid create web_app # Create new project 'web_app'
""",
    "clean": _banner(f"{PROG} clean") + """\
DESCRIPTION:
  Clean build artifacts and target directory.
  Equivalent to 'cargo clean' for Cargo projects.

USAGE:
  rskid clean [OPTIONS]

OPTIONS:
  -v, --verbose        : Enable verbose output

EXAMPLES:
  rskid clean          # Clean build artifacts
  rskid clean -v       # Clean with verbose output
""",
    "doc": _banner(f"{PROG} doc") + """\
DESCRIPTION:
  Generate documentation for the Rust project.
  Uses 'cargo doc' to build HTML documentation.

USAGE:
  rskid doc [OPTIONS]

OPTIONS:
  -v, --verbose        : Enable verbose output
  --dev/--prod         : Environment-specific doc generation

EXAMPLES:
  rskid doc            # Generate documentation
  rskid doc -v         # Generate with verbose output
""",
    "list": _banner(f"{PROG} list") + """\
DESCRIPTION:
  List available binary targets in Cargo project.
  Shows all binaries that can be run.

USAGE:
  rskid list [OPTIONS]

OPTIONS:
  -v, --verbose        : Enable verbose output

EXAMPLES:
  rskid list           # List all binaries
""",
    "version": _banner(f"{PROG} version") + """\
DESCRIPTION:
  Show version information for rskid, rustc, and cargo.

USAGE:
  rskid version

EXAMPLES:
  rskid version        # Show all version info
""",
}
COMMAND_HELP["create"] = COMMAND_HELP["init"]


def print_help():
    typer.echo(GENERAL_HELP, nl=False)


def print_command_help(command: str | None):
    """Print help for a subcommand, or the general help when none was given."""
    if not command:
        print_help()
    elif text := COMMAND_HELP.get(command):
        typer.echo(text, nl=False)
    else:
        typer.echo(f"Unknown command: {command}")
        typer.echo(f"Use '{PROG} --help' to see available commands.")


def version_banner() -> str:
    return f"{PROG} version {__version__}"
