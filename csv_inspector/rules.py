"""
Fixed detection rules.

Defaults here are what a caller gets when it passes no overrides. The
single-column guard always checks DEFAULT_DELIMITERS, even when the caller
supplies its own candidate list.
"""

DEFAULT_DELIMITERS = (",", ";", "\t", "|")
DEFAULT_NEWLINES = ("\n", "\r\n", "\r")
DEFAULT_SAMPLE_SIZE = 4096  # bytes
DEFAULT_MIN_LINES = 2

UTF8_BOM = b"\xef\xbb\xbf"
ENCODING_SCAN_LIMIT = 1024  # bytes inspected for non-ASCII content

ENCODING_ASCII = "ASCII"
ENCODING_UTF8 = "UTF-8"
ENCODING_UTF8_BOM = "UTF-8 with BOM"

# Python codec used to decode the sample for each detected encoding.
DECODE_CODECS = {
    ENCODING_ASCII: "ascii",
    ENCODING_UTF8: "utf-8",
    ENCODING_UTF8_BOM: "utf-8-sig",
}

DELIMITER_SCAN_LINES = 5
HEADER_MAX_LENGTH = 50

ACCEPTED_EXTENSIONS = (".csv", ".tsv", ".txt")
