"""
Main entry point for the i18n generator.

This module parses command-line arguments, sets up logging, loads the
configuration, runs the pipeline and maps the outcome to an exit code.
"""

import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path

from .config.manager import ConfigManager
from .config.schema import GeneratorConfig
from .pipeline.orchestrator import PipelineOrchestrator, PipelineSummary
from .utils.cli.args import ParsedArgs, parse_arguments
from .utils.core.exceptions import ConfigurationError

LOG_FILES: tuple[str, ...] = ("i18n-generator.log", "i18n-generator-errors.log")
EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def rotate_logs_on_startup(logs_dir: Path) -> None:
    """
    Rotate existing log files on startup with timestamp-based naming.

    Args:
        logs_dir: Directory containing log files
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    for log_file in LOG_FILES:
        log_path = logs_dir / log_file
        if log_path.exists():
            backup_path = logs_dir / f"{log_file}.{timestamp}"
            try:
                _ = log_path.rename(backup_path)
            except OSError as e:
                print(f"Warning: Failed to rotate {log_file}: {e}", file=sys.stderr)


def cleanup_old_logs(logs_dir: Path, max_files: int = 10) -> None:
    """
    Clean up old timestamped log files, keeping only the most recent ones.

    Args:
        logs_dir: Directory containing log files
        max_files: Maximum number of timestamped log files to keep per type
    """
    for log_type in LOG_FILES:
        timestamped_files = [
            file_path
            for file_path in logs_dir.glob(f"{log_type}.*")
            if file_path.name != log_type
        ]

        # Newest first
        timestamped_files.sort(key=lambda x: x.stat().st_mtime, reverse=True)

        for file_path in timestamped_files[max_files:]:
            try:
                file_path.unlink()
            except OSError as e:
                print(f"Warning: Failed to remove {file_path.name}: {e}", file=sys.stderr)


def setup_logging(log_folder: Path | None = None, verbose: bool = False) -> None:
    """
    Configure console logging and, optionally, rotating log files.

    Args:
        log_folder: Folder for log files; console only when None
        verbose: Log DEBUG messages to the console
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    detailed_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
    )
    simple_formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(simple_formatter)
    root_logger.addHandler(console_handler)

    if log_folder is not None:
        log_folder.mkdir(parents=True, exist_ok=True)
        rotate_logs_on_startup(log_folder)
        cleanup_old_logs(log_folder, max_files=10)

        file_handler = logging.handlers.RotatingFileHandler(
            log_folder / "i18n-generator.log",
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(detailed_formatter)

        error_handler = logging.handlers.RotatingFileHandler(
            log_folder / "i18n-generator-errors.log",
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=3,
            encoding="utf-8",
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(detailed_formatter)

        root_logger.addHandler(file_handler)
        root_logger.addHandler(error_handler)

    logging.getLogger("asyncio").setLevel(logging.WARNING)


logger = logging.getLogger(__name__)


def write_example_config(cwd: Path) -> int:
    """Write ``i18n.config.yml`` with default settings unless it already exists."""
    config_path = cwd / "i18n.config.yml"
    if config_path.exists():
        logger.error(f"{config_path} already exists, not overwriting it")
        return EXIT_FAILURE

    example = GeneratorConfig(
        input_dir=Path("src/translations"),
        output_dir=Path("public/locales"),
    )
    ConfigManager.save_config(example, config_path, exclude={"max_workers"})
    logger.info(f"Wrote example configuration to {config_path}")
    return EXIT_SUCCESS


def load_configuration(args: ParsedArgs, cwd: Path) -> GeneratorConfig:
    """
    Load the configuration file and apply command-line overrides.

    Raises:
        ConfigurationError: If the configuration is missing or invalid
    """
    config_manager = ConfigManager()
    config = config_manager.load(args.config_file, cwd=cwd)
    return ConfigManager.apply_overrides(config, **args.config_overrides())


async def run_generator(config: GeneratorConfig, enabled: bool = True) -> PipelineSummary:
    """Run the pipeline for an already loaded configuration."""
    logger.info(f"Input: {config.input_dir}")
    logger.info(f"Output: {config.output_dir}")
    logger.info(f"Languages: {', '.join(config.languages)}")

    orchestrator = PipelineOrchestrator(config, enabled=enabled)
    return await orchestrator.run()


async def main(argv: list[str] | None = None) -> int:
    """
    Async main entry point.

    Returns:
        Process exit code: 0 on success, 1 on configuration errors or when
        any file or output failed
    """
    args = parse_arguments(argv)
    setup_logging(args.log_folder, args.verbose)
    cwd = Path.cwd()

    if args.init:
        return write_example_config(cwd)

    try:
        config = load_configuration(args, cwd)
        summary = await run_generator(config)
    except ConfigurationError as e:
        logger.error(f"Error: {e.message}")
        return EXIT_FAILURE

    if not summary.success:
        return EXIT_FAILURE

    logger.info(f"Done! Generated {summary.outputs_written} files")
    return EXIT_SUCCESS
