"""Constants shared across tripledger modules."""

from __future__ import annotations

USER_AGENT = "tripledger/1.0 (+aiohttp)"

#: Label rendered for trips whose client record no longer exists.
UNKNOWN_CLIENT_LABEL = "Unknown client"

#: Number of per-date buckets kept by the statistics summary.
DEFAULT_SUMMARY_DAYS = 7

#: Compact JSON separators used for serialized history payloads.
JSON_SEPARATORS = (",", ":")
