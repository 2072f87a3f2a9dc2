"""
Output path resolution for generated PDFs.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from .errors import FilesystemError, InputValidationError

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_FILENAME = "output.pdf"


def normalize_filename(filename: Optional[str]) -> str:
    """
    Ensure the output filename ends in ``.pdf``.

    The suffix check is case-insensitive, so "REPORT.PDF" is kept as-is
    while "report" becomes "report.pdf".

    Example:
        >>> normalize_filename("report")
        'report.pdf'
    """
    name = (filename or "").strip()
    if not name:
        return DEFAULT_OUTPUT_FILENAME
    if not name.lower().endswith(".pdf"):
        name = f"{name}.pdf"
    return name


def resolve_output_dir(configured_dir: Optional[str] = None) -> Path:
    """
    Pick the directory PDFs are written to.

    Order: configured directory (M2P_OUTPUT_DIR), $HOME, working directory.
    """
    if configured_dir:
        return Path(configured_dir).expanduser().resolve()
    home = os.environ.get("HOME")
    if home:
        return Path(home).resolve()
    return Path.cwd().resolve()


def join_output_path(output_dir: Union[str, Path], filename: str) -> Path:
    """
    Place filename under output_dir, never outside it.

    A leading root is dropped, so "/tmp/x.pdf" lands at
    "<output_dir>/tmp/x.pdf". Subdirectories are allowed, ".." is not.

    Raises:
        InputValidationError: the filename points outside output_dir
    """
    output_dir = Path(output_dir)
    relative = Path(filename.lstrip("/\\"))
    if ".." in relative.parts:
        raise InputValidationError(f"outputFilename must not contain '..' segments: {filename}")

    candidate = output_dir / relative
    # A symlink inside the output directory can still point elsewhere
    if not candidate.resolve().is_relative_to(output_dir.resolve()):
        raise InputValidationError(f"outputFilename resolves outside the output directory: {filename}")
    return candidate


def get_incremental_path(base_path: Union[str, Path]) -> Path:
    """
    Return base_path, or the first free "<name>-N<ext>" sibling if it exists.

    Example:
        output.pdf exists -> output-1.pdf; both exist -> output-2.pdf
    """
    base_path = Path(base_path)
    directory = base_path.parent
    ext = base_path.suffix
    name = base_path.name[: len(base_path.name) - len(ext)] if ext else base_path.name

    counter = 1
    candidate = base_path
    while candidate.exists():
        candidate = directory / f"{name}-{counter}{ext}"
        counter += 1

    return candidate


def prepare_output_path(requested_path: Union[str, Path]) -> Path:
    """
    Resolve the final absolute PDF path and create its directory.

    Raises:
        FilesystemError: the directory cannot be created
    """
    final_path = get_incremental_path(requested_path).resolve()
    try:
        final_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"Cannot create output directory {final_path.parent}: {e}") from e

    if final_path != Path(requested_path).resolve():
        logger.info(f"Output file exists, writing to {final_path.name} instead")
    return final_path
