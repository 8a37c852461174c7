"""Latest-row extraction from the NDBC realtime2 fixed-width text feed.

The feed has two header lines followed by data rows, newest first. Each row
holds 19 whitespace-separated columns. The newest row is located by a fixed
byte window, so a change in the upstream column widths shifts the window and
breaks extraction.
"""

import logging

from buoybot.models.errors import RecordExtractionError

logger = logging.getLogger(__name__)

FEED_HEADER = (
    "#YY  MM DD hh mm WDIR WSPD GST  WVHT   DPD   APD MWD   PRES  ATMP  WTMP  DEWP  VIS PTDY  TIDE\n"
    "#yr  mo dy hr mn degT m/s  m/s     m   sec   sec degT   hPa  degC  degC  degC  nmi  hPa    ft"
)

# Byte window of the third line (two 94-byte header lines precede it).
RECORD_START = 188
RECORD_END = 281

EXPECTED_COLUMNS = 19

# Column positions within a row.
YEAR = 0
MONTH = 1
DAY = 2
HOUR = 3
MINUTE = 4
WIND_DIRECTION = 5
WIND_SPEED = 6
GUST = 7
WAVE_HEIGHT = 8
DOMINANT_PERIOD = 9
AVERAGE_PERIOD = 10
MEAN_WAVE_DIRECTION = 11
PRESSURE = 12
AIR_TEMP = 13
WATER_TEMP = 14
DEW_POINT = 15
VISIBILITY = 16
PRESSURE_TENDENCY = 17
TIDE = 18


def extract_latest_record(
    raw: bytes, start: int = RECORD_START, end: int = RECORD_END
) -> list[str]:
    """Return the newest row's tokens in feed column order."""
    if len(raw) < end:
        raise RecordExtractionError(
            f"Feed body is {len(raw)} bytes, record window ends at {end}"
        )

    try:
        line = raw[start:end].decode("utf-8")
    except UnicodeDecodeError as e:
        raise RecordExtractionError(f"Record window is not text: {e}") from e

    logger.debug("Feed header:\n%s\nLatest row:\n%s", FEED_HEADER, line)

    tokens = line.split()
    if len(tokens) < EXPECTED_COLUMNS:
        raise RecordExtractionError(
            f"Expected {EXPECTED_COLUMNS} columns in latest row, found "
            f"{len(tokens)}: {line!r}"
        )
    return tokens
