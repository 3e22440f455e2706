"""RotorGeneParser — multi-section parsing for Rotor-Gene quantitation exports.

The export is a text dump with one "Quantitative analysis of ..." section per
fluorescence channel. Each section has a "No." header line followed by data
rows. Rows are tagged with the channel of the section they appear in.
"""

import logging
import re
from typing import Dict, List, Optional

import pandas as pd

from hpvqpcr.config import get_config
from hpvqpcr.constants import (
    CHANNEL_ANCHOR,
    CHANNEL_COLUMN,
    CHANNEL_NAME_MAP,
    HEADER_MARKER,
    HPV_LOOKUP_TABLE,
    SECTION_MARKER,
)
from hpvqpcr.errors import EmptyDataSet, FileTooLarge, InvalidFileFormat
from hpvqpcr.models import RawRow

logger = logging.getLogger(__name__)

_CELL_SPLIT = re.compile(r"[,\t]")
_LINE_SPLIT = re.compile(r"\r?\n")
_TOKEN_PUNCTUATION = "():.,"

# cursor states
SEEKING_SECTION = "seeking_section"
EXPECTING_HEADER = "expecting_header"
READING_DATA = "reading_data"


class RotorGeneParser:
    ENCODINGS = ["utf-8-sig", "utf-16", "latin-1"]
    KNOWN_CHANNELS = tuple(HPV_LOOKUP_TABLE)

    @staticmethod
    def split_cells(line: str) -> List[str]:
        """Split on comma or tab and strip quotes and whitespace from each cell."""
        return [cell.strip().replace('"', "").strip() for cell in _CELL_SPLIT.split(line)]

    @staticmethod
    def extract_channel(title: str) -> Optional[str]:
        """Resolve the channel name from a section title.

        Uses the token right after "Cycling A." first, then falls back to any
        known channel alias appearing in the title.

        Args:
            title: First cell of the section line

        Returns:
            One of the known channel names, or None
        """
        text = title.lower()
        if CHANNEL_ANCHOR in text:
            remainder = text.split(CHANNEL_ANCHOR, 1)[1].split()
            if remainder:
                token = remainder[0].strip(_TOKEN_PUNCTUATION)
                candidate = CHANNEL_NAME_MAP.get(token) or token.title()
                if candidate in RotorGeneParser.KNOWN_CHANNELS:
                    return candidate

        for alias, channel in CHANNEL_NAME_MAP.items():
            if alias in text:
                return channel
        return None

    @staticmethod
    def parse(content: str) -> List[RawRow]:
        """Parse the full export text into raw rows.

        Raises:
            InvalidFileFormat: the section marker appears nowhere in the text
            EmptyDataSet: no data row could be extracted
        """
        if SECTION_MARKER not in content:
            raise InvalidFileFormat(
                "Not a recognized Rotor-Gene export: no 'Quantitative analysis of' section found."
            )

        rows = []
        header = []
        channel = None
        state = SEEKING_SECTION
        dropped = 0

        for line in _LINE_SPLIT.split(content):
            if not line.strip():
                continue
            cells = RotorGeneParser.split_cells(line)
            first = cells[0]

            if first.startswith(SECTION_MARKER):
                channel = RotorGeneParser.extract_channel(first)
                if channel is None:
                    logger.warning(f"Could not determine channel for section '{first}'")
                else:
                    logger.debug(f"Found {channel} section")
                state = EXPECTING_HEADER
                continue

            if state == EXPECTING_HEADER:
                if first.startswith(HEADER_MARKER):
                    if not header and channel is not None:
                        header = [CHANNEL_COLUMN] + cells
                    state = READING_DATA
                continue

            if state == READING_DATA:
                if channel is None:
                    dropped += 1
                    continue
                values = [channel] + cells
                fields = {
                    column: values[i] if i < len(values) else ""
                    for i, column in enumerate(header)
                }
                rows.append(RawRow(channel=channel, fields=fields))

        if dropped:
            logger.info(f"Note: {dropped} rows in sections without a known channel were skipped.")

        if not rows:
            raise EmptyDataSet("No data rows were found in the export.")

        logger.debug(f"Parsed {len(rows)} raw rows")
        return rows

    @staticmethod
    def parse_file(
        file, max_size_mb: float = None, config: Optional[Dict] = None
    ) -> List[RawRow]:
        """Read an uploaded file-like object (bytes or text) and parse it.

        The size limit is ``max_size_mb`` when given, else ``MAX_FILE_SIZE_MB``
        from the configuration.
        """
        limit = max_size_mb
        if limit is None:
            limit = get_config(config)["MAX_FILE_SIZE_MB"]

        file.seek(0, 2)
        file_size_mb = file.tell() / (1024 * 1024)
        file.seek(0)

        if file_size_mb > limit:
            raise FileTooLarge(
                f"File too large ({file_size_mb:.1f} MB). Maximum size is {limit} MB."
            )

        raw = file.read()
        if isinstance(raw, bytes):
            content = RotorGeneParser.decode(raw)
        else:
            content = raw

        if not content.strip():
            raise EmptyDataSet("The uploaded file is empty.")

        return RotorGeneParser.parse(content)

    @staticmethod
    def decode(raw: bytes) -> str:
        # utf-16 without a BOM decodes ASCII into garbage, so prefer the
        # first encoding that exposes the section marker
        fallback = None
        for enc in RotorGeneParser.ENCODINGS:
            try:
                content = raw.decode(enc)
            except UnicodeError:
                continue
            if SECTION_MARKER in content:
                return content
            if fallback is None:
                fallback = content
        return fallback

    @staticmethod
    def to_dataframe(rows: List[RawRow]) -> pd.DataFrame:
        if not rows:
            return pd.DataFrame()
        return pd.DataFrame([row.fields for row in rows])
