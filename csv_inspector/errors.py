"""
Reasons a buffer could not be inspected as CSV.

These are raised inside the detection pipeline and turned into a report
by ``detect.diagnose``; callers of ``detect.inspect`` only ever see ``None``.
"""


class InspectionError(Exception):
    code = "inspection_failed"


class EmptyInput(InspectionError):
    code = "empty_input"


class InsufficientLines(InspectionError):
    code = "insufficient_lines"


class NoColumnStructure(InspectionError):
    code = "no_column_structure"
