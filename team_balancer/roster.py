"""Roster ingestion for Team Balancer.

Rows follow the attendance sheet layout::

    first name, last name, gender, rating, attending[, team lock[, positions]]

e.g. ``Jane,Doe,F,7.5,y,A,gk/df``. Only rows marked ``y`` as attending make
it into the roster.
"""

import io
import math
import re
from pathlib import Path
from typing import List, NamedTuple, Optional, Sequence, Union
from urllib.request import urlopen

import pandas as pd

from .exceptions import RosterError, RowParseError
from .models import SIDE_A, SIDE_B, Player

HEADER_MARKER = "fName"

SHEET_URL_RE = re.compile(
    r"(https?://)?docs\.google\.com/spreadsheets/d/([\w-]*)/edit\?gid=(\w*)#?.*"
)


class RosterLoad(NamedTuple):
    """Players read from a source plus the rows that had to be skipped."""

    players: List[Player]
    skipped: List[RowParseError]


def player_from_fields(
    fields: Sequence[str], row: str = "", line_number: Optional[int] = None
) -> Optional[Player]:
    """Build a player from the fields of one row.

    Args:
        fields: Raw field values in sheet order
        row: Original row text, used in error messages
        line_number: Source line number, used in error messages

    Returns:
        The player, or None if the row is not marked as attending

    Raises:
        RowParseError: If the row is missing fields or has a bad rating
    """
    fields = [str(value).strip() for value in fields]
    if len(fields) < 5:
        raise RowParseError(f"expected at least 5 fields, got {len(fields)}", row, line_number)

    first_name, last_name, gender, rating_text, attending = fields[:5]
    if attending != "y":
        return None

    name = f"{first_name} {last_name}".strip()
    if not name:
        raise RowParseError("missing player name", row, line_number)

    try:
        rating = float(rating_text)
    except ValueError:
        raise RowParseError(f"invalid rating {rating_text!r}", row, line_number)
    if not math.isfinite(rating):
        raise RowParseError(f"invalid rating {rating_text!r}", row, line_number)

    lock = fields[5] if len(fields) > 5 else ""
    if lock == "A":
        fixed_side = SIDE_A
    elif lock == "B":
        fixed_side = SIDE_B
    else:
        fixed_side = None

    positions = fields[6] if len(fields) > 6 else ""
    position_tags = positions.split("/") if positions else None

    return Player(
        name=name,
        rating=rating,
        female=gender == "F",
        fixed_side=fixed_side,
        position_tags=position_tags,
    )


def parse_row(text: str, line_number: Optional[int] = None) -> Optional[Player]:
    """Parse one comma-separated roster row.

    Returns None for rows not marked as attending.
    """
    return player_from_fields(text.split(","), text, line_number)


def sheet_export_url(url: str) -> str:
    """Convert a Google Sheets edit URL into its CSV export URL.

    Raises:
        RosterError: If the URL is not a Google Sheets edit link
    """
    match = SHEET_URL_RE.match(url.strip())
    if not match:
        raise RosterError(f"Not a Google Sheets edit URL: {url}")

    sheet_id, gid = match.group(2), match.group(3)
    return f"https://docs.google.com/spreadsheets/d/{sheet_id}/export?format=csv&gid={gid}"


def _resolve_source(source: Union[str, Path]) -> Union[str, Path]:
    if isinstance(source, str) and SHEET_URL_RE.match(source.strip()):
        return sheet_export_url(source)
    if isinstance(source, str) and re.match(r"https?://", source):
        return source

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"Roster file not found: {path}")
    return path


def _read_text(resolved: Union[str, Path]) -> str:
    try:
        if isinstance(resolved, Path):
            return resolved.read_text(encoding="utf-8-sig")
        with urlopen(resolved) as response:
            return response.read().decode("utf-8-sig")
    except (OSError, ValueError) as e:
        raise RosterError(f"Failed to read roster CSV: {e}") from e


def load_roster(source: Union[str, Path]) -> RosterLoad:
    """Load attending players from a CSV file, URL or Google Sheets link.

    Anything up to and including a header row starting with ``fName`` is
    treated as sheet preamble. Rows may have different numbers of fields,
    since the team lock and positions are optional. Malformed rows are
    skipped and reported in the result rather than aborting the load.

    Args:
        source: Local path, CSV URL or Google Sheets edit URL

    Returns:
        The attending players and the rows that were skipped

    Raises:
        FileNotFoundError: If a local roster file doesn't exist
        RosterError: If the source cannot be read as CSV
    """
    text = _read_text(_resolve_source(source))
    lines = text.splitlines()
    if not any(line.strip() for line in lines):
        raise RosterError("Roster CSV is empty")

    # Wide enough for the longest row so pandas never rejects a ragged one.
    width = max(line.count(",") + 1 for line in lines)

    try:
        df = pd.read_csv(
            io.StringIO(text),
            header=None,
            names=list(range(width)),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=False,
        )
    except Exception as e:
        raise RosterError(f"Failed to read roster CSV: {e}") from e

    header_rows = df.index[df[0].fillna("").str.strip() == HEADER_MARKER]
    start = header_rows[0] + 1 if len(header_rows) else 0

    players = []
    skipped = []
    for index in range(start, len(df)):
        # Fields a row doesn't have are NaN; present but empty fields stay "".
        fields = [value for value in df.iloc[index] if isinstance(value, str)]
        if not any(value.strip() for value in fields):
            continue

        row = ",".join(fields).rstrip(",")
        try:
            player = player_from_fields(fields, row, line_number=index + 1)
        except RowParseError as e:
            skipped.append(e)
            continue
        if player is not None:
            players.append(player)

    return RosterLoad(players=players, skipped=skipped)
