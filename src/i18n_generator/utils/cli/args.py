"""
Command-line argument parsing for the i18n generator.

Every flag is optional: values not given on the command line come from the
discovered configuration file.
"""

import argparse
from pathlib import Path
from typing import NamedTuple

from ..core.version import get_version


class ParsedArgs(NamedTuple):
    """Container for parsed command-line arguments."""

    config_file: Path | None
    input_dir: Path | None
    output_dir: Path | None
    languages: list[str] | None
    max_workers: int | None
    chunk_size: int | None
    use_workers: bool | None
    use_streaming: bool | None
    log_folder: Path | None
    verbose: bool
    init: bool

    def config_overrides(self) -> dict[str, object]:
        """Configuration values supplied on the command line."""
        return {
            "input_dir": self.input_dir,
            "output_dir": self.output_dir,
            "languages": self.languages,
            "max_workers": self.max_workers,
            "chunk_size": self.chunk_size,
            "use_workers": self.use_workers,
            "use_streaming": self.use_streaming,
        }


def positive_int(value: str) -> int:
    """argparse type accepting integers greater than zero."""
    try:
        number = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from e
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {number}")
    return number


def _path(value: str) -> Path:
    return Path(value).expanduser()


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser for the i18n generator.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="i18n-gen",
        description="Generate per-language translation files from multi-language JSON sources",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  i18n-gen
    Generate translations using i18n.config.yml (or pyproject.toml / package.json)

  i18n-gen --config-file config/i18n.yml --languages vi en zh
    Use a custom config file and language list

  i18n-gen --no-workers --chunk-size 500
    Process every file in the main process with smaller chunks

  i18n-gen --init
    Write an example i18n.config.yml to the current directory

Config file (i18n.config.yml):
  languages: [vi, en, zh]
  input_dir: ./src/translations
  output_dir: ./public/locales
""",
    )

    _ = parser.add_argument(
        "--config-file",
        type=_path,
        default=None,
        help="Path to the configuration file (default: discovered in the current directory)",
        metavar="PATH",
    )
    _ = parser.add_argument(
        "--input-dir",
        type=_path,
        default=None,
        help="Directory containing the multi-language JSON documents",
        metavar="PATH",
    )
    _ = parser.add_argument(
        "--output-dir",
        type=_path,
        default=None,
        help="Directory receiving <language>/<file name> outputs",
        metavar="PATH",
    )
    _ = parser.add_argument(
        "--languages",
        nargs="+",
        default=None,
        help="Language codes to generate",
        metavar="CODE",
    )
    _ = parser.add_argument(
        "--max-workers",
        type=positive_int,
        default=None,
        help="Maximum number of files processed concurrently",
        metavar="N",
    )
    _ = parser.add_argument(
        "--chunk-size",
        type=positive_int,
        default=None,
        help="Top-level keys extracted per cooperative step",
        metavar="N",
    )
    _ = parser.add_argument(
        "--no-workers",
        dest="use_workers",
        action="store_const",
        const=False,
        default=None,
        help="Process every file in the main process",
    )
    _ = parser.add_argument(
        "--no-streaming",
        dest="use_streaming",
        action="store_const",
        const=False,
        default=None,
        help="Read each document in one piece instead of in 64 KiB blocks",
    )
    _ = parser.add_argument(
        "--log-folder",
        type=_path,
        default=None,
        help="Also write rotating log files to this folder",
        metavar="PATH",
    )
    _ = parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging on the console",
    )
    _ = parser.add_argument(
        "--init",
        action="store_true",
        help="Write an example i18n.config.yml and exit",
    )
    _ = parser.add_argument(
        "--version", action="version", version=f"%(prog)s {get_version()}"
    )

    return parser


def parse_arguments(args: list[str] | None = None) -> ParsedArgs:
    """
    Parse command-line arguments.

    Args:
        args: List of arguments to parse (defaults to sys.argv[1:])

    Returns:
        ParsedArgs with optional values left as None

    Raises:
        SystemExit: If argument parsing fails or --help/--version is requested
    """
    parsed = create_argument_parser().parse_args(args)

    return ParsedArgs(
        config_file=getattr(parsed, "config_file", None),
        input_dir=getattr(parsed, "input_dir", None),
        output_dir=getattr(parsed, "output_dir", None),
        languages=getattr(parsed, "languages", None),
        max_workers=getattr(parsed, "max_workers", None),
        chunk_size=getattr(parsed, "chunk_size", None),
        use_workers=getattr(parsed, "use_workers", None),
        use_streaming=getattr(parsed, "use_streaming", None),
        log_folder=getattr(parsed, "log_folder", None),
        verbose=bool(getattr(parsed, "verbose", False)),
        init=bool(getattr(parsed, "init", False)),
    )
