import csv
import io
import re
import pandas as pd
from utils.errors import ValidationError

HEADER_CELLS = {"roll", "roll no", "roll number", "name", "student name"}


def _delimiter_for(lines):
    sample = "\n".join(lines[:20])
    try:
        return csv.Sniffer().sniff(sample, delimiters=",\t").delimiter
    except csv.Error:
        return "\t" if "\t" in sample else ","


def _normalise_cell(cell):
    return " ".join(cell.lower().replace("_", " ").replace(".", " ").split())


def _looks_like_header(row):
    return any(_normalise_cell(cell) in HEADER_CELLS for cell in row[:2])


def _rows_from_frame(df, joiner=None):
    rows = [[str(cell).strip() for cell in row] for row in df.fillna("").values.tolist()]
    rows = [row for row in rows if any(row)]
    if rows and _looks_like_header(rows[0]):
        rows = rows[1:]

    students = []
    for row in rows:
        surplus = [cell for cell in row[2:] if cell]
        name = row[1] if len(row) > 1 else ""
        if joiner and surplus:
            name = joiner.join([name] + surplus)
        students.append({"roll_number": row[0] if row else "", "name": name})
    return students


def parse_student_csv(text):
    """
    Parses a two column roll_number,name sheet (comma or tab delimited).
    A first row with a cell reading "roll", "roll number", "roll no", "name"
    or "student name" is treated as a header and skipped.
    An unquoted comma inside a name spills it into extra fields; those are
    joined back onto the name instead of failing the whole upload.
    Returns a list of {"roll_number", "name"} dicts; short rows keep empty strings
    so the import can report them per row.
    """
    lines = [line for line in (text or "").splitlines() if line.strip()]
    if not lines:
        return []

    sep = _delimiter_for(lines)
    # widest row sets the column count, otherwise pandas rejects longer rows
    width = max(2, max(line.count(sep) + 1 for line in lines))
    try:
        df = pd.read_csv(
            io.StringIO("\n".join(lines)),
            sep=sep,
            header=None,
            names=list(range(width)),
            dtype=str,
            keep_default_na=False,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise ValidationError(f"Failed to read CSV: {e}")
    return _rows_from_frame(df, joiner=", " if sep == "," else " ")


def parse_student_sheet(stream):
    """Same two columns from the first worksheet of an .xls/.xlsx upload. Further columns are ignored."""
    try:
        df = pd.read_excel(stream, header=None, dtype=str)
    except Exception as e:
        raise ValidationError(f"Failed to read file: {e}")
    return _rows_from_frame(df)


def parse_name_list(text):
    """One name per line, or comma separated."""
    return [name.strip() for name in re.split(r"[\n,]", text or "") if name.strip()]
