"""Test classes BatchRunner and BatchLine."""
from pathlib import Path
import tarfile
import zipfile

import py7zr
from pydantic import ValidationError
import pytest

from pocket_calculator.batch.runner import BatchLine, BatchRunner, build_output_path
from pocket_calculator.common.config import CalculatorSettings
from pocket_calculator.common.errors import ErrorKind


@pytest.mark.parametrize("name,expected", [
    ("ops.txt", "ops_txt_results.txt"),
    ("operations_short.7z", "operations_short_7z_results.txt"),
    ("ops.tar.xz", "ops_tar_xz_results.txt"),
    ("ops", "ops_results.txt"),
])
def test_build_output_path(tmp_path: Path, name: str, expected: str) -> None:
    """Output file sits next to the input with its extensions folded into the name."""
    assert build_output_path(tmp_path / name) == tmp_path / expected


@pytest.mark.parametrize(
    "expr,expected",
    [
        ("2 + 3", 5.0),
        ("10 - 4", 6.0),
        ("3 * 4", 12.0),
        ("(8 / 2)", 4.0),
    ],
)
def test_line_returns_result_for_valid_expression(expr: str, expected: float) -> None:
    """A line evaluates its expression to a successful result."""
    result = BatchLine(expression=expr, line_number=1).run(CalculatorSettings())
    assert result.ok
    assert result.expression == expr
    assert result.value == expected


@pytest.mark.parametrize(
    "expr,kind",
    [
        ("2 +", ErrorKind.MALFORMED_EXPRESSION),
        ("* 3", ErrorKind.MALFORMED_EXPRESSION),
        ("3 4 + 5", ErrorKind.MALFORMED_EXPRESSION),
        ("4 / 0", ErrorKind.DIVISION_BY_ZERO),
    ],
)
def test_line_returns_error_for_invalid_expression(expr: str, kind: ErrorKind) -> None:
    """A malformed expression gives a failed result instead of raising."""
    result = BatchLine(expression=expr, line_number=2).run(CalculatorSettings())
    assert result.error is kind
    assert isinstance(result.message, str)


def test_line_rejects_zero_line_number() -> None:
    with pytest.raises(ValidationError):
        BatchLine(expression="1", line_number=0)


def test_read_lines_skips_blank_lines(tmp_path: Path) -> None:
    input_file = tmp_path / "ops.txt"
    input_file.write_text("2 + 3\n\n   \n4 * 5\n")

    lines = BatchRunner().read_lines(input_file)

    assert [(line.line_number, line.expression) for line in lines] == [(1, "2 + 3"), (2, "4 * 5")]


def test_run_writes_results(tmp_path: Path) -> None:
    """Each expression gets one output line, successes and failures alike."""
    input_file = tmp_path / "ops.txt"
    input_file.write_text("2+3*4\n(2+3)*4\n\n10/0\n1/3\n(1+2\n2#3\n")

    output_file = BatchRunner().run(input_file)

    assert output_file == tmp_path / "ops_txt_results.txt"
    lines = output_file.read_text().splitlines()
    assert lines[0] == "2+3*4 = 14"
    assert lines[1] == "(2+3)*4 = 20"
    assert lines[2].startswith("10/0 -> ERROR: DivisionByZero: ")
    assert lines[3] == "1/3 = 0.3333333333"
    assert lines[4].startswith("(1+2 -> ERROR: UnbalancedParentheses: ")
    assert lines[5].startswith("2#3 -> ERROR: InvalidCharacter: ")
    assert len(lines) == 6


def test_run_uses_settings(tmp_path: Path) -> None:
    input_file = tmp_path / "ops.txt"
    input_file.write_text("2/3\n")
    output_file = tmp_path / "custom.txt"

    BatchRunner(settings=CalculatorSettings(max_fraction_digits=3)).run(input_file, output_file)

    assert output_file.read_text() == "2/3 = 0.667\n"


def test_extract_zip(tmp_path: Path) -> None:
    """Check that a .zip archive can be extracted and read correctly."""
    txt = tmp_path / "ops.txt"
    txt.write_text("3+3\n")

    zip_path = tmp_path / "ops.zip"
    with zipfile.ZipFile(zip_path, "w") as zf:
        zf.write(txt, arcname="ops.txt")

    assert BatchRunner()._extract_archive(zip_path) == "3+3\n"


def test_extract_tar_xz(tmp_path: Path) -> None:
    """Check that a .tar.xz archive can be extracted and read correctly."""
    txt = tmp_path / "ops.txt"
    txt.write_text("4*4\n")

    tar_path = tmp_path / "ops.tar.xz"
    with tarfile.open(tar_path, "w:xz") as tf:
        tf.add(txt, arcname="ops.txt")

    assert BatchRunner()._extract_archive(tar_path) == "4*4\n"


def test_run_7z_archive(tmp_path: Path) -> None:
    """Check that a .7z archive is extracted and its expressions evaluated."""
    txt = tmp_path / "ops.txt"
    txt.write_text("5-2\n")

    archive_path = tmp_path / "ops.7z"
    with py7zr.SevenZipFile(archive_path, "w") as archive:
        archive.write(txt, arcname="ops.txt")

    output_file = BatchRunner().run(archive_path)

    assert output_file == tmp_path / "ops_7z_results.txt"
    assert output_file.read_text() == "5-2 = 3\n"


def test_extract_archive_no_txt(tmp_path: Path) -> None:
    """Verify that extraction fails if no .txt file exists in the archive."""
    zip_path = tmp_path / "empty.zip"
    with zipfile.ZipFile(zip_path, "w") as zf:
        zf.writestr("data.bin", b"\x00\x01")

    with pytest.raises(ValueError):
        BatchRunner()._extract_archive(zip_path)


def test_extract_unsupported_format(tmp_path: Path) -> None:
    """Ensure unsupported archive formats raise a ValueError."""
    file_path = tmp_path / "ops.rar"
    file_path.write_text("1+1")

    with pytest.raises(ValueError):
        BatchRunner().read_lines(file_path)


@pytest.mark.parametrize("name", ["ops.zip", "ops.tar.xz", "ops.7z"])
def test_corrupt_archive_raises_value_error(tmp_path: Path, name: str) -> None:
    """Damaged archives are reported as a ValueError instead of a library-specific error."""
    archive_path = tmp_path / name
    archive_path.write_bytes(b"this is not an archive")

    with pytest.raises(ValueError, match="Corrupt archive"):
        BatchRunner().read_lines(archive_path)
