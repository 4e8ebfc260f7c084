"""
CSV format detection.

Responsibilities:
- encoding sniffing (ASCII / UTF-8 / UTF-8 with BOM)
- newline detection
- delimiter detection, consistent across the first sample lines
- header row detection

Only the first ``sample_size`` bytes are ever looked at. Nothing here keeps
state between calls.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .errors import EmptyInput, InspectionError, InsufficientLines, NoColumnStructure
from .models import CsvFormat, DetectionConfig, InspectionReport
from .rules import (
    DECODE_CODECS,
    DEFAULT_DELIMITERS,
    DELIMITER_SCAN_LINES,
    ENCODING_ASCII,
    ENCODING_SCAN_LIMIT,
    ENCODING_UTF8,
    ENCODING_UTF8_BOM,
    HEADER_MAX_LENGTH,
    UTF8_BOM,
)

log = logging.getLogger("csv_inspector.detect")

Options = Union[DetectionConfig, Mapping[str, Any], None]

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
# Whitespace as JavaScript trims it: includes U+FEFF, excludes U+001C-U+001F and U+0085.
_WHITESPACE = (
    "\t\n\x0b\x0c\r \xa0\u1680"
    + "".join(chr(code) for code in range(0x2000, 0x200B))
    + "\u2028\u2029\u202f\u205f\u3000\ufeff"
)
_SPACE_CLASS = re.escape(_WHITESPACE)
_HEADER_PATTERN = re.compile(r"[a-zA-Z0-9_" + _SPACE_CLASS + r"]+")
# Leading numeric prefix, the way parseFloat reads one: "12abc" counts, ASCII digits only.
_NUMERIC_PREFIX = re.compile(
    r"[" + _SPACE_CLASS + r"]*[+-]?(?:Infinity|(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)"
)


def _detect_encoding(raw: bytes) -> str:
    if raw[:3] == UTF8_BOM:
        return ENCODING_UTF8_BOM

    if any(byte > 127 for byte in raw[:ENCODING_SCAN_LIMIT]):
        return ENCODING_UTF8

    return ENCODING_ASCII


def _split_lines(text: str) -> List[str]:
    return [line for line in _LINE_BREAK.split(text) if line]


def _detect_newline(text: str, newlines: Sequence[str]) -> str:
    for token in newlines:
        if token in text:
            return token
    return "\n"


def _count_delimiters(line: str, delimiters: Sequence[str]) -> Dict[str, int]:
    """
    Count candidate delimiters outside quoted spans.

    Every ``"`` flips the in-quotes state, so an escaped ``""`` nets out.
    """
    counts = {delimiter: 0 for delimiter in delimiters}
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif not in_quotes and char in counts:
            counts[char] += 1

    return counts


def _detect_delimiter(lines: List[str], delimiters: Sequence[str]) -> Optional[str]:
    """
    Pick the delimiter that occurs the same number of times on each of the
    first few lines. Among the survivors the highest count wins; on a tie
    the one listed first is kept.
    """
    candidates = _count_delimiters(lines[0], delimiters)

    for line in lines[1:DELIMITER_SCAN_LINES]:
        line_counts = _count_delimiters(line, delimiters)
        candidates = {
            delimiter: count
            for delimiter, count in candidates.items()
            if line_counts.get(delimiter) == count
        }

    best_delimiter = None
    max_count = 0
    for delimiter, count in candidates.items():
        if count > max_count:
            max_count = count
            best_delimiter = delimiter

    return best_delimiter


def _is_quoted(text: str) -> bool:
    """True if ``text`` is one quoted field with every inner quote doubled."""
    if not (text.startswith('"') and text.endswith('"')):
        return False

    escaped = False
    for char in text[1:-1]:
        if char == '"':
            escaped = not escaped
        elif escaped:
            return False

    return not escaped


def _split_fields(line: str, delimiter: str) -> List[str]:
    fields: List[str] = []
    field = ""
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
            field += char
        elif not in_quotes and char == delimiter:
            fields.append(field)
            field = ""
        else:
            field += char

    fields.append(field)
    return fields


def _clean_field(field: str) -> str:
    cleaned = field.strip(_WHITESPACE)
    if cleaned.startswith('"') and cleaned.endswith('"'):
        cleaned = cleaned[1:-1]
    return cleaned.strip(_WHITESPACE)


def _is_numeric(value: str) -> bool:
    if value == "":
        return False
    return _NUMERIC_PREFIX.match(value) is not None


def _looks_like_header(value: str) -> bool:
    # Header names are short and made of plain word characters.
    if len(value) > HEADER_MAX_LENGTH:
        return False
    return _HEADER_PATTERN.fullmatch(value) is not None


def _detect_headers(first_line: str, second_line: str, delimiter: Optional[str]) -> bool:
    """
    Compare the first two rows field by field.

    The first row is a header when every field is non-empty, non-numeric
    and header-like, and the second row has at least one numeric or empty
    field. Rows with different field counts never count as a header pair.
    """
    if not (delimiter and first_line and second_line):
        return False

    first_fields = [_clean_field(f) for f in _split_fields(first_line, delimiter)]
    second_fields = [_clean_field(f) for f in _split_fields(second_line, delimiter)]

    if len(first_fields) != len(second_fields):
        return False

    first_row_valid = all(
        f and not _is_numeric(f) and _looks_like_header(f) for f in first_fields
    )
    second_row_has_data = any(_is_numeric(f) or not f for f in second_fields)

    return first_row_valid and second_row_has_data


def _is_valid_single_column(lines: List[str]) -> bool:
    # Checked against the default delimiters, whatever the caller configured.
    for line in lines:
        trimmed = line.strip(_WHITESPACE)
        if not trimmed or any(d in trimmed for d in DEFAULT_DELIMITERS):
            return False
    return True


def _detect_single_column_headers(first_line: str, second_line: str, delimiter: Optional[str]) -> bool:
    if delimiter:
        return _detect_headers(first_line, second_line, delimiter)

    header = _clean_field(first_line)
    return _looks_like_header(header) and not _is_numeric(header)


def _resolve_config(options: Options) -> DetectionConfig:
    if isinstance(options, DetectionConfig):
        return options
    return DetectionConfig.model_validate(dict(options or {}))


def _run(raw: Optional[bytes], options: Options) -> CsvFormat:
    if not raw:
        raise EmptyInput("buffer is empty")

    config = _resolve_config(options)

    encoding = _detect_encoding(raw)
    sample = raw[: config.sample_size].decode(DECODE_CODECS[encoding], errors="replace").strip(_WHITESPACE)
    if not sample:
        raise EmptyInput("sample is blank after trimming")

    lines = _split_lines(sample)
    if len(lines) < config.min_lines:
        raise InsufficientLines(f"{len(lines)} line(s) in sample, {config.min_lines} required")

    newline = _detect_newline(sample, config.newlines)

    quoted = _is_quoted(lines[0])

    # A lone quoted line gives nothing to compare delimiter counts against.
    delimiter = None
    if not quoted or len(lines) > 1:
        delimiter = _detect_delimiter(lines, config.delimiters)

    if not (delimiter or quoted or _is_valid_single_column(lines)):
        raise NoColumnStructure("no consistent delimiter and not a single column")

    has_headers = False
    if len(lines) >= 2:
        has_headers = _detect_single_column_headers(lines[0], lines[1], delimiter)

    return CsvFormat(
        delimiter=delimiter,
        newline=newline,
        has_headers=has_headers,
        encoding=encoding,
    )


def diagnose(raw: Optional[bytes], options: Options = None) -> InspectionReport:
    """
    Inspect ``raw`` and report either the detected format or why detection
    gave up. Invalid ``options`` raise ``pydantic.ValidationError``.
    """
    try:
        detected = _run(raw, options)
    except InspectionError as exc:
        log.debug("csv inspection failed (%s): %s", exc.code, exc)
        return InspectionReport(failure=exc.code)

    log.debug(
        "csv inspection: delimiter=%r newline=%r headers=%s encoding=%s",
        detected.delimiter,
        detected.newline,
        detected.has_headers,
        detected.encoding,
    )
    return InspectionReport(format=detected)


def inspect(raw: Optional[bytes], options: Options = None) -> Optional[CsvFormat]:
    """
    Detect delimiter, newline, header row and encoding of a CSV buffer.

    ``options`` may be a ``DetectionConfig`` or a mapping of overrides
    (``delimiters``, ``newlines``, ``sample_size``/``sampleSize``,
    ``min_lines``/``minLines``). Returns ``None`` when the buffer cannot be
    confidently read as CSV.
    """
    return diagnose(raw, options).format
