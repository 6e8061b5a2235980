"""Command-line interface for TLSA rollover."""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import List

from ..config import build_config, load_config_file
from ..digest import build_digest_provider
from ..errors import ConfigError, RolloverError
from ..output import to_json, to_text
from ..providers import build_provider
from ..rollover import RolloverController
from ..status import ExitCodes
from .parser import _setup_logging, build_parser
from .parsing import _parse_port, _parse_positive_float, _parse_positive_int

LOGGER = logging.getLogger(__name__)

# state files and mirror links are readable by the owner only
_UMASK = 0o077

__all__ = [
    "_parse_port",
    "_parse_positive_float",
    "_parse_positive_int",
    "_setup_logging",
    "build_parser",
    "main",
]


def main(argv: List[str] | None = None) -> int:
    """Run the CLI entrypoint.

    Args:
        argv (List[str] | None): Optional argument list for parsing.

    Returns:
        int: Exit code (0=OK, 1=error, 2=usage, 3=activation hook failed).
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)
    LOGGER.debug("Parsed arguments: %s", args)
    os.umask(_UMASK)

    try:
        file_data = load_config_file(args.config) if args.config else None
        config = build_config(vars(args), file_data)
    except ConfigError as err:
        parser.error(str(err))

    report_time = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M")
    try:
        provider = build_provider(config.dns)
        digest_provider = build_digest_provider(config.digest_backend)
        result = RolloverController(config, provider, digest_provider).run()
    except (RolloverError, ValueError) as err:
        LOGGER.error("%s", err)
        return ExitCodes.ERROR

    if args.output == "json":
        print(to_json(result, report_time))
    else:
        print(to_text(result, report_time))

    if result.hook_error is not None:
        return ExitCodes.HOOK_FAILED
    return ExitCodes.OK
