import pytest

from rskid import commands
from rskid.commands import (
    MAX_COMMAND_LENGTH,
    MAX_PATH_LENGTH,
    CommandLine,
    cargo_command,
    compile_command,
    format_command,
    lint_command,
    new_project_command,
    output_path,
    run_binary_command,
)
from rskid.config import BinarySection, CompilerSection, Config, EnvSection, FeaturesSection
from rskid.errors import CommandTooLongError
from rskid.options import Options

_ENV = EnvSection(dev_flags="--features dev", prod_flags="--release", test_flags="--all-targets")


def test_command_line_joins_non_empty_parts():
    cmd = CommandLine("test").append("cargo", "", "build").append("").append("--verbose")
    assert str(cmd) == "cargo build --verbose"
    assert len(cmd) == len("cargo build --verbose")


def test_command_line_accepts_exact_limit():
    cmd = CommandLine("test", max_length=10).append("12345", "6789")
    assert str(cmd) == "12345 6789"


def test_command_line_fails_instead_of_truncating():
    cmd = CommandLine("test", max_length=10).append("12345")
    with pytest.raises(CommandTooLongError) as exc_info:
        cmd.append("67890")
    assert exc_info.value.length == 11
    assert exc_info.value.limit == 10
    # nothing was written by the failed append
    assert str(cmd) == "12345"


def test_compile_command_with_defaults():
    cmd = compile_command(Options(file="main.x"), Config(), "dev")
    assert cmd == (
        "rustc -C opt-level=3 --target x86_64-unknown-linux-gnu -o ./bin/main main.x"
    )


@pytest.mark.parametrize(
    "options,env_mode,expected",
    [
        (Options(file="a.rs"), "prod", "rustc -g --release -o ./bin/a a.rs"),
        (Options(file="a.rs", release=True), "dev", "rustc -g --release -o ./bin/a a.rs"),
        (Options(file="a.rs"), "dev", "rustc -g --features dev -o ./bin/a a.rs"),
        (Options(file="a.rs"), "test", "rustc -g -o ./bin/a a.rs"),
        (Options(file="a.rs"), "staging", "rustc -g -o ./bin/a a.rs"),
    ],
)
def test_compile_command_environment_flags(options, env_mode, expected):
    cfg = Config(compiler=CompilerSection(flags="-g", target=""), env=_ENV)
    assert compile_command(options, cfg, env_mode) == expected


def test_compile_command_selects_compiler():
    options = Options(file="main.rs")
    experimental = Config(compiler=CompilerSection(experimental=True, target=""))
    assert compile_command(options, experimental, "dev").startswith("rustcc ")
    custom = Config(
        compiler=CompilerSection(custom_path="/opt/rust/bin/rustc"),
        features=FeaturesSection(enable_experimental=True),
    )
    assert compile_command(options, custom, "dev").startswith("/opt/rust/bin/rustc ")
    empty = Config(compiler=CompilerSection(custom_path=""))
    assert compile_command(options, empty, "dev").startswith("rustc ")


def test_compile_command_quotes_paths():
    cfg = Config(compiler=CompilerSection(target=""), binary=BinarySection(output_dir="out"))
    cmd = compile_command(Options(file="my src/main.rs"), cfg, "dev")
    assert cmd.endswith("-o out/main 'my src/main.rs'")


def test_compile_command_rejects_long_file_path():
    options = Options(file="src/" + "a" * MAX_COMMAND_LENGTH + ".rs")
    with pytest.raises(CommandTooLongError):
        compile_command(options, Config(), "dev")


def test_compile_command_never_exceeds_limit():
    cfg = Config(compiler=CompilerSection(target=""))
    for size in range(900, 1100, 7):
        options = Options(file="a" * size + ".rs")
        try:
            cmd = compile_command(options, cfg, "dev")
        except CommandTooLongError:
            continue
        assert len(cmd) <= MAX_COMMAND_LENGTH


@pytest.mark.parametrize(
    "file,output_dir,expected",
    [
        ("main.x", "./bin", "./bin/main"),
        ("src/bin/tool.rs", "./bin", "./bin/tool"),
        ("archive.tar.gz", "out", "out/archive.tar"),
        ("noext", "", "./noext"),
    ],
)
def test_output_path(file, output_dir, expected):
    assert output_path(file, output_dir) == expected


def test_output_path_is_bounded():
    with pytest.raises(CommandTooLongError):
        output_path("x" * MAX_PATH_LENGTH + ".rs", "./bin")


@pytest.mark.parametrize(
    "options,env_mode,expected",
    [
        (Options(), "prod", "cargo build --release"),
        (Options(release=True), "test", "cargo build --release"),
        (Options(), "dev", "cargo build --features dev"),
        (Options(), "test", "cargo build --all-targets"),
        (Options(), "staging", "cargo build"),
        (Options(verbose=True), "prod", "cargo build --release --verbose"),
    ],
)
def test_cargo_command_environment_flags(options, env_mode, expected):
    assert cargo_command("build", options, Config(env=_ENV), env_mode) == expected


def test_cargo_command_includes_prod_flags_once():
    cmd = cargo_command("run", Options(release=True), Config(), "prod")
    assert cmd.split().count("--release") == 1


def test_cargo_command_with_empty_flags():
    cfg = Config(env=EnvSection(prod_flags=""))
    assert cargo_command("doc", Options(), cfg, "prod") == "cargo doc"


def test_format_command():
    assert format_command(Options(), Config()) == "rustfmt --edition 2021 src/"
    assert format_command(Options(file="main.rs"), Config()) == "rustfmt --edition 2021 main.rs"


def test_lint_command():
    assert lint_command(Config()) == "cargo clippy --deny warnings"


def test_new_project_command():
    assert new_project_command("myapp") == "cargo new myapp"
    assert new_project_command("my app") == "cargo new 'my app'"
    with pytest.raises(CommandTooLongError):
        new_project_command("p" * MAX_COMMAND_LENGTH)


@pytest.mark.parametrize(
    "binary,expected",
    [
        ("./bin/main", "./bin/main"),
        ("bin/main", "./bin/main"),
        ("../bin/main", "../bin/main"),
        ("/tmp/bin/main", "/tmp/bin/main"),
    ],
)
def test_run_binary_command(binary, expected):
    assert run_binary_command(binary) == expected


def test_env_flags_unknown_mode_selects_nothing():
    assert commands.env_flags(Options(), Config(env=_ENV), "qa", include_test=True) == ""
