"""
Argument validation for the Pickpocket CLI.

These functions are used as argparse ``type=`` callables, so they raise
``argparse.ArgumentTypeError`` for invalid values.
"""

import argparse
import os


def validate_input_file(file_path: str) -> str:
    """
    Validate that the input file exists and is readable.

    Parameters
    ----------
    file_path : str
        Path to the input file.

    Returns
    -------
    str
        The validated file path.

    Raises
    ------
    argparse.ArgumentTypeError
        If the file doesn't exist or isn't readable.
    """
    if not os.path.exists(file_path):
        raise argparse.ArgumentTypeError(f"Input file does not exist: {file_path}")
    if not os.path.isfile(file_path):
        raise argparse.ArgumentTypeError(f"Input path is not a file: {file_path}")
    if not os.access(file_path, os.R_OK):
        raise argparse.ArgumentTypeError(f"Input file is not readable: {file_path}")
    return file_path


def validate_output_file(file_path: str) -> str:
    """
    Validate that the output file path is writable.

    Parameters
    ----------
    file_path : str
        Path to the output file.

    Returns
    -------
    str
        The validated file path.

    Raises
    ------
    argparse.ArgumentTypeError
        If the output directory doesn't exist or isn't writable.
    """
    output_dir = os.path.dirname(file_path) or "."
    if not os.path.exists(output_dir):
        raise argparse.ArgumentTypeError(f"Output directory does not exist: {output_dir}")
    if not os.access(output_dir, os.W_OK):
        raise argparse.ArgumentTypeError(f"Output directory is not writable: {output_dir}")
    return file_path


def validate_delay(value: str) -> float:
    """Parse a delay in seconds, rejecting negative and non-numeric values."""
    try:
        delay = float(value)
    except (TypeError, ValueError):
        raise argparse.ArgumentTypeError(f"Delay must be a number of seconds: {value}")
    if delay < 0:
        raise argparse.ArgumentTypeError(f"Delay cannot be negative: {value}")
    return delay
