"""Evaluate a file of arithmetic expressions, one per line."""
import lzma
from pathlib import Path
import tarfile
import tempfile
from typing import List, Optional, TextIO
import zipfile

import py7zr
import py7zr.exceptions
from pydantic import BaseModel, ConfigDict, Field

from distroless_calculator.common.errors import CalculatorError, InvalidArchiveError
from distroless_calculator.common.logger import logger
from distroless_calculator.common.operations import OperationResult
from distroless_calculator.common.parser import ExpressionParser


class BatchSummary(BaseModel):
    """Counts reported once a batch has been evaluated."""

    model_config = ConfigDict(frozen=True)

    output_file: Optional[Path] = Field(default=None, description="File the results were written to")
    evaluated: int = Field(default=0, ge=0, description="Expressions evaluated successfully")
    failed: int = Field(default=0, ge=0, description="Expressions that raised an error")


def build_output_path(input_path: Path) -> Path:
    """
    Construct a safe output file path based on the input file.

    - Preserves the original folder
    - Replaces dots in extensions with underscores
    - Appends '_results.txt' at the end

    Examples
    --------
    input: resources/operations_short.7z
    output: resources/operations_short_7z_results.txt

    :param input_path: Path to the input file
    :return: Path to the output file
    """
    suffix_safe = "".join(input_path.suffixes).replace(".", "_")
    stem = input_path.name[: len(input_path.name) - len("".join(input_path.suffixes))]
    return input_path.with_name(f"{stem}{suffix_safe}_results.txt")


def read_expressions(input_file: Path) -> str:
    """
    Load the text of an operations file, extracting it first when it is an archive.

    :param Path input_file: Path to a .txt file or a supported archive
    :return: File content
    :rtype: str
    """
    if input_file.suffix == ".txt":
        return input_file.read_text(encoding="utf-8")
    return extract_archive(input_file)


def _first_txt(names: List[str], kind: str) -> str:
    txt_files = [name for name in names if name.endswith(".txt")]
    if not txt_files:
        raise InvalidArchiveError(f"No .txt file found in {kind} archive")
    return txt_files[0]


def _read_7z_member(archive_path: Path) -> str:
    # py7zr only extracts to disk
    with tempfile.TemporaryDirectory() as tmpdir:
        with py7zr.SevenZipFile(archive_path, mode="r") as archive:
            name = _first_txt(archive.getnames(), "7z")
            archive.extract(targets=[name], path=tmpdir)
        return (Path(tmpdir) / name.lstrip("/")).read_text(encoding="utf-8")


def extract_archive(archive_path: Path) -> str:
    """
    Return the content of the first .txt member of a supported archive.

    Supported formats: .zip, .tar.xz and .7z. Zip and tar members are read in
    memory; member names never become paths on disk.

    :param Path archive_path: Path to the archive file

    :return: Content of the .txt member
    :rtype: str
    :raises InvalidArchiveError: If the archive is corrupt, holds no .txt file or has an unsupported format
    """
    try:
        if archive_path.suffix == ".zip":
            with zipfile.ZipFile(archive_path, "r") as zf:
                return zf.read(_first_txt(zf.namelist(), "zip")).decode("utf-8")

        if archive_path.suffixes[-2:] == [".tar", ".xz"]:
            with tarfile.open(archive_path, "r:xz") as tf:
                members = {m.name: m for m in tf.getmembers() if m.isfile()}
                member = members[_first_txt(list(members), "tar.xz")]
                return tf.extractfile(member).read().decode("utf-8")

        if archive_path.suffix == ".7z":
            return _read_7z_member(archive_path)

    except (
        zipfile.BadZipFile,
        tarfile.TarError,
        lzma.LZMAError,
        EOFError,
        py7zr.exceptions.ArchiveError,
        py7zr.exceptions.AbsolutePathError,
    ) as exc:
        raise InvalidArchiveError(f"Cannot read archive {archive_path.name}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise InvalidArchiveError(f"Archive {archive_path.name} does not hold UTF-8 text: {exc}") from exc

    raise InvalidArchiveError(f"Unsupported archive format: {archive_path.suffix}")


def evaluate_lines(lines: List[str], f_out: TextIO) -> BatchSummary:
    """
    Evaluate expressions in order and write one result line per expression.

    Blank lines are skipped. A failing expression is reported on its own line
    and does not stop the batch.

    :param List[str] lines: Raw input lines
    :param TextIO f_out: Open file handle for writing results
    :return: Counts of evaluated and failed expressions
    :rtype: BatchSummary
    """
    evaluated = failed = 0
    for line_number, raw in enumerate(lines, start=1):
        expr = raw.strip()
        if not expr:
            continue
        try:
            result = ExpressionParser.evaluate(expr)
        except CalculatorError as exc:
            logger.info("Line %d failed: %s", line_number, exc)
            f_out.write(f"{expr} -> ERROR: {exc}\n")
            failed += 1
        else:
            f_out.write(f"{OperationResult(expression=expr, result=result)}\n")
            evaluated += 1
    return BatchSummary(evaluated=evaluated, failed=failed)


def evaluate_file(input_file: Path, output_file: Optional[Path] = None) -> BatchSummary:
    """
    Evaluate every expression in an operations file or archive.

    :param Path input_file: Path to the input file or archive
    :param Path output_file: Where results are written; derived from input_file when omitted
    :return: Counts of evaluated and failed expressions
    :rtype: BatchSummary
    """
    if output_file is None:
        output_file = build_output_path(input_file)

    content = read_expressions(input_file)
    logger.info("Evaluating %s into %s", input_file, output_file)

    with output_file.open("w", encoding="utf-8") as f_out:
        summary = evaluate_lines(content.splitlines(), f_out)

    return summary.model_copy(update={"output_file": output_file})
