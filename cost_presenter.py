# cost_presenter.py
import sys
import json
import logging
from typing import NamedTuple, Optional

HEADER = "Date\t\tCost"
SEPARATOR = "---------------------"
NO_DATA = "No cost data found."
INVALID_RECORD = "Invalid or missing data in response."

logger = logging.getLogger(__name__)


class UsageRecord(NamedTuple):
    """One entry of the ``value`` array. ``None`` marks an absent field."""
    usage_start: Optional[str]
    pretax_cost: Optional[str]

    @property
    def is_complete(self) -> bool:
        return self.usage_start is not None and self.pretax_cost is not None


def _as_text(value) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return str(value)


def _property(entry, name):
    if not isinstance(entry, dict):
        return None
    properties = entry.get("properties")
    if not isinstance(properties, dict):
        return None
    return _as_text(properties.get(name))


def extract_record(entry) -> UsageRecord:
    usage_start = _property(entry, "usageStart")
    if usage_start is not None:
        # 2024-01-15T00:00:00Z -> 2024-01-15
        usage_start = usage_start.split("T", 1)[0]
    return UsageRecord(usage_start, _property(entry, "pretaxCost"))


def format_rows(document) -> list:
    lines = [HEADER, SEPARATOR]

    entries = document.get("value") if isinstance(document, dict) else None
    if not isinstance(entries, list) or not entries:
        lines.append(NO_DATA)
        return lines

    for index, entry in enumerate(entries):
        record = extract_record(entry)
        if record.is_complete:
            lines.append(f"{record.usage_start}\t{record.pretax_cost}")
        else:
            logger.debug("Record %d is missing usageStart or pretaxCost: %r", index, entry)
            lines.append(INVALID_RECORD)
    return lines


def render(document, out=None) -> list:
    """Print the Date/Cost table for a usage details document and return its lines."""
    if out is None:
        out = sys.stdout
    lines = format_rows(document)
    for line in lines:
        print(line, file=out)
    return lines
