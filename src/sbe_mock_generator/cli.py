"""Command-line interface for generating mocks of SBE codec classes.

Notes:
    - The input is the token stream IR of a schema, serialized as JSON.
"""

from __future__ import annotations

import argparse
import logging
import os.path
from collections.abc import Sequence

from sbe_mock_generator.ir import IrLoadError
from sbe_mock_generator.run import run

logger = logging.getLogger(__name__)


def setup_parser() -> argparse.ArgumentParser:
    """Setup for the parser.

    Returns:
        argparse.ArgumentParser: The parser after setup.
    """
    parser = argparse.ArgumentParser(description="Generate mock classes for SBE codecs.")

    parser.add_argument(
        "-i",
        "--ir",
        type=str,
        required=True,
        help="path of the JSON file that holds the token stream IR of a schema.",
    )

    parser.add_argument(
        "-o",
        "--output-dir",
        type=str,
        default="",
        help="directory to write all generated mock modules; defaults to the working directory.",
    )

    parser.add_argument(
        "-n",
        "--namespace",
        type=str,
        default=None,
        help="package of the real codec classes; overrides the namespace of the IR.",
    )

    parser.add_argument(
        "--format",
        dest="format",
        default=False,
        action="store_true",
        help="format generated mock modules with ruff.",
    )

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point of the mock generator.

    Args:
        argv (Sequence[str] | None, optional): Run arguments. Defaults to None.

    Returns:
        int: Error code.
    """
    logging.basicConfig(level=logging.INFO)

    root_directory = os.getcwd()
    logging.info("Working from root directory: %s", root_directory)

    parser = setup_parser()
    args = parser.parse_args(argv)

    try:
        run(args, root_directory)
    except IrLoadError as e:
        logger.error("%s", e)
        return 1

    return 0
