"""Evaluate a file of arithmetic expressions, one per line."""
from pathlib import Path
import lzma
import tarfile
import tempfile
from typing import Callable, List, Optional
import zipfile

import py7zr
from pydantic import BaseModel, ConfigDict, Field, FilePath

from pocket_calculator.common.config import CalculatorSettings
from pocket_calculator.common.formatting import format_number
from pocket_calculator.common.logger import logger
from pocket_calculator.common.models import EvaluationResult
from pocket_calculator.common.parser import evaluate


def build_output_path(input_path: Path) -> Path:
    """
    Construct the results path next to the input file.

    - Preserves the original folder
    - Replaces the dots of every extension with underscores
    - Appends '_results.txt' at the end

    Examples
    --------
    input: resources/operations_short.7z
    output: resources/operations_short_7z_results.txt

    :param input_path: Path to the input file
    :return: Path to the output file
    """
    base, *extensions = input_path.name.split(".")
    suffix_safe = "".join(f"_{ext}" for ext in extensions if ext)
    return input_path.with_name(f"{base}{suffix_safe}_results.txt")


class BatchLine(BaseModel):
    """A single non-blank line of a batch file."""

    model_config = ConfigDict(frozen=True)

    expression: str = Field(..., description="Single arithmetic expression to evaluate")
    line_number: int = Field(..., ge=1, description="Line number among the non-blank lines of the input")

    def run(self, settings: CalculatorSettings) -> EvaluationResult:
        """
        Evaluate the expression of this line.

        :param CalculatorSettings settings: Settings forwarded to the evaluator

        :return: Evaluation result
        :rtype: EvaluationResult
        """
        logger.info(f"📄🏁 Evaluating line {self.line_number}: {self.expression}")
        result = evaluate(self.expression, settings)
        if result.ok:
            logger.info(f"📄✅ Line {self.line_number}: {result.value}")
        return result


class BatchRunner(BaseModel):
    """
    Read expressions from a plain text file or an archive and write one result per line.

    Output lines look like:
        - ``2 + 3 = 5``
        - ``10 / 0 -> ERROR: DivisionByZero: Division by zero at position 2``
    """

    model_config = ConfigDict(frozen=True)

    settings: CalculatorSettings = Field(default_factory=CalculatorSettings)

    def read_lines(self, input_file: FilePath) -> List[BatchLine]:
        """
        Load the expressions of a file, skipping blank lines.

        :param FilePath input_file: Path to a .txt file or a supported archive

        :return: Numbered expression lines
        :rtype: List[BatchLine]
        :raises ValueError: If the archive format is unsupported or contains no .txt file
        """
        if input_file.suffix == ".txt":
            content = input_file.read_text(encoding="utf-8")
        else:
            content = self._extract_archive(input_file)

        lines = [line.strip() for line in content.splitlines() if line.strip()]
        return [BatchLine(expression=expr, line_number=n) for n, expr in enumerate(lines, start=1)]

    def format_result(self, result: EvaluationResult) -> str:
        if result.ok:
            return f"{result.expression} = {format_number(result.value, self.settings.max_fraction_digits)}"
        return f"{result.expression} -> ERROR: {result.error.value}: {result.message}"

    def run(self, input_file: FilePath, output_file: Optional[Path] = None) -> Path:
        """
        Evaluate every expression of ``input_file`` and write the results.

        :param FilePath input_file: Path to the input file or archive
        :param Path output_file: Where results are written, derived from the input path when omitted

        :return: Path of the written results file
        :rtype: Path
        """
        output_file = output_file or build_output_path(input_file)
        lines = self.read_lines(input_file)
        logger.info(f"📄 {len(lines)} expressions read from {input_file}")

        failures = 0
        with output_file.open("w", encoding="utf-8") as f_out:
            for line in lines:
                result = line.run(self.settings)
                if not result.ok:
                    failures += 1
                f_out.write(self.format_result(result) + "\n")
                # Keep partial results on disk if the run is interrupted
                f_out.flush()

        logger.info(f"📄 Results written to {output_file} ({failures} failed)")
        return output_file

    def _extract_archive(self, archive_path: FilePath) -> str:
        """
        Extract the first .txt file found in a supported archive and return its content as a string.

        Supported formats:
        - .zip
        - .tar.xz
        - .7z

        :param FilePath archive_path: Path to the archive file

        :return: Content of the extracted .txt file
        :rtype: str
        :raises ValueError: If the format is unsupported, the archive is corrupt or holds no .txt file
        """
        extract = _archive_extractor(archive_path)

        # Create a temporary directory for safe extraction
        with tempfile.TemporaryDirectory() as tmpdir:
            try:
                extracted = extract(archive_path, Path(tmpdir))
            except ARCHIVE_ERRORS as exc:
                raise ValueError(f"📄❌ Corrupt archive {archive_path.name}: {exc}") from exc
            return extracted.read_text(encoding="utf-8")


# Extracts the first .txt member of an archive into a directory and returns its path
Extractor = Callable[[Path, Path], Path]

# Errors raised by the archive libraries on damaged input
ARCHIVE_ERRORS = (zipfile.BadZipFile, tarfile.TarError, lzma.LZMAError, EOFError, py7zr.Bad7zFile)


def _first_txt(names: List[str], archive_format: str) -> str:
    txt_files = [name for name in names if name.endswith(".txt")]
    if not txt_files:
        raise ValueError(f"📄❌ No .txt file found in {archive_format} archive")
    return txt_files[0]


def _extract_zip(archive_path: Path, dest: Path) -> Path:
    with zipfile.ZipFile(archive_path, "r") as zf:
        member = _first_txt(zf.namelist(), "zip")
        return Path(zf.extract(member, path=dest))


def _extract_tar_xz(archive_path: Path, dest: Path) -> Path:
    with tarfile.open(archive_path, "r:xz") as tf:
        member = _first_txt([m.name for m in tf.getmembers() if m.isfile()], "tar.xz")
        tf.extract(member, path=dest, filter="data")
    return dest / member


def _extract_7z(archive_path: Path, dest: Path) -> Path:
    with py7zr.SevenZipFile(archive_path, mode="r") as archive:
        member = _first_txt(archive.getnames(), "7z")
        archive.extract(path=dest, targets=[member])
    return dest / member


def _archive_extractor(archive_path: Path) -> Extractor:
    """
    Pick the extractor matching the archive extension.

    :raises ValueError: If the format is unsupported
    """
    if archive_path.suffix == ".zip":
        return _extract_zip
    if archive_path.suffixes[-2:] == [".tar", ".xz"]:
        return _extract_tar_xz
    if archive_path.suffix == ".7z":
        return _extract_7z
    raise ValueError(f"📄❌ Unsupported archive format: {archive_path.suffix}")
