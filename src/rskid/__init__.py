"""
rskid - a unified command-line wrapper for Rust development.

Wraps rustc, cargo, rustfmt and clippy behind a single CLI driven by
flags and an INI-style `.rskid.toml` configuration file.
"""

__version__ = "1.0.0"
