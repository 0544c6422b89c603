"""
Harbor protocol parser.

The harbor service answers with a JavaScript snippet rather than JSON:

    putHarbourMarker(123, 8.1234, 53.5, 'Wilhelmshaven', 'DE', 3);
    putHarbourMarker(124, 8.2, 53.6, 'Hooksiel', 'DE', 2);

Every call is decoded into a HarborFacility. A call that does not match the
expected shape is skipped; it never aborts the rest of the batch.
"""

import logging
import re
from typing import List

from engine.features import HarborFacility
from shared.constants import HARBOR_ICON_URL
from shared.errors import ParseSkipped

logger = logging.getLogger("HarborParser")

# Splits the text into individual calls, whether or not they are well formed
_CALL_RE = re.compile(r"putHarbourMarker\s*\((?P<args>(?:'[^']*'|[^()'])*)\)\s*;?")

_ARGS_RE = re.compile(
    r"""^\s*
    (?P<id>\d+)\s*,\s*
    (?P<lon>-?\d+(?:\.\d+)?)\s*,\s*
    (?P<lat>-?\d+(?:\.\d+)?)\s*,\s*
    '(?P<name>[^']*)'\s*,\s*
    '(?P<country>[^']*)'\s*,\s*
    (?P<size>\d+)
    \s*$""",
    re.VERBOSE,
)


def _parse_call(args: str) -> HarborFacility:
    match = _ARGS_RE.match(args)
    if match is None:
        raise ParseSkipped(f"Malformed putHarbourMarker arguments: {args!r}")

    return HarborFacility(
        id=match.group("id"),
        name=match.group("name"),
        coordinates=(float(match.group("lon")), float(match.group("lat"))),
        metadata={
            "country": match.group("country"),
            "size": int(match.group("size")),
            "icon": HARBOR_ICON_URL,
        },
    )


def parse_harbor_data(text: str) -> List[HarborFacility]:
    """Decode every putHarbourMarker call in ``text``, in order of appearance."""
    harbors = []
    if not text:
        return harbors

    for call in _CALL_RE.finditer(text):
        try:
            harbors.append(_parse_call(call.group("args")))
        except ParseSkipped as e:
            logger.debug(f"Skipping harbor record: {e}")

    return harbors
