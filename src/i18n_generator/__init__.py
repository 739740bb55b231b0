"""
i18n generator - split multi-language translation JSON into per-language files.
"""

import asyncio
import logging
import sys

from .main import main as async_main

EXIT_INTERRUPTED = 130


def main() -> None:
    """Synchronous entry point that runs the async main function."""
    try:
        exit_code = asyncio.run(async_main())
    except KeyboardInterrupt:
        logging.getLogger(__name__).info("Generation interrupted by user")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as e:
        logging.getLogger(__name__).exception(f"Translation generation failed: {e}")
        sys.exit(1)
    sys.exit(exit_code)


__all__ = ["main"]
