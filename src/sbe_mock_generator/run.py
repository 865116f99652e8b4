"""Top-level module for mock generation."""

from __future__ import annotations

import argparse
import logging
import os.path
import subprocess
import tempfile
from pathlib import Path

from sbe_mock_generator.ir import load_ir
from sbe_mock_generator.output import DirectoryOutputManager
from sbe_mock_generator.writer import MockGenerator

logger = logging.getLogger(__name__)


def format_outputs(raw_input: str) -> str:
    """Formats raw input using ruff.

    Args:
        raw_input (str): The unformatted input.

    Returns:
        str: The formatted outputs, or the raw input if ruff failed.
    """
    try:
        # Write to temporary file for ruff to process
        with tempfile.NamedTemporaryFile(mode="w", suffix=".py", delete=False, encoding="utf-8") as f:
            temp_path = Path(f.name)
            f.write(raw_input)

        try:
            subprocess.run(
                ["ruff", "format", str(temp_path)],
                capture_output=True,
                check=True,
            )

            return temp_path.read_text(encoding="utf-8")

        finally:
            temp_path.unlink(missing_ok=True)

    except FileNotFoundError:
        logger.error("ruff not found. Please install ruff: pip install ruff")
        return raw_input
    except subprocess.CalledProcessError as e:
        logger.error(f"Ruff formatting failed: {e}")
        logger.error(f"Stderr: {e.stderr.decode('utf-8', errors='replace')}")
        # Return unformatted output on error
        return raw_input


def generate_mocks(
    ir_path: str,
    output_directory: str,
    namespace: str | None = None,
    format_output: bool = False,
) -> list[str]:
    """Entry-point for generating mock modules from a JSON IR file.

    Args:
        ir_path (str): Path of the JSON IR file.
        output_directory (str): The directory where mock modules are written.
        namespace (str | None, optional): Package of the real codec classes; overrides the one in the IR.
            Defaults to None.
        format_output (bool, optional): Whether to format the mock modules with ruff. Defaults to False.

    Returns:
        list[str]: The names of the generated mock modules.
    """
    ir = load_ir(ir_path)
    if namespace:
        ir.applicable_namespace = namespace

    generator = MockGenerator(
        ir,
        DirectoryOutputManager(output_directory),
        formatter=format_outputs if format_output else None,
    )
    generator.generate()

    logger.info("Wrote %d mock module(s) to '%s'.", len(generator.written), output_directory)
    return generator.written


def run(args: argparse.Namespace, root_directory: str) -> list[str]:
    """Run the mock generator with the arguments of the command line.

    Relative paths are resolved against the root directory.

    Args:
        args (argparse.Namespace): The arguments that were passed when calling the mock generator.
        root_directory (str): The directory, from which the generator is executed.

    Returns:
        list[str]: The names of the generated mock modules.
    """
    ir_path = os.path.join(root_directory, args.ir)
    output_directory = os.path.join(root_directory, args.output_dir)

    logger.info("Generating mocks from '%s'.", ir_path)

    return generate_mocks(
        ir_path,
        output_directory,
        namespace=getattr(args, "namespace", None),
        format_output=getattr(args, "format", False),
    )
