"""Gap-fill provenance flags using bitmasks.

A forcing row carries one fill_flags value. Each bit records that at
least one variable on that date came from a lower-precedence tier.

Rules:
- Never change data here
- Only label where values came from
- 0 means every variable on that date was observed at the site
"""

FILL_OK = 0

FILL_SECONDARY = 1 << 0    # Value taken from a gridded or global record
FILL_CLIMATOLOGY = 1 << 1  # Value taken from the day-of-year climatology
FILL_UNFILLED = 1 << 2     # No tier had a value; left missing

# Tier index returned by resolve_precedence when no candidate had a value
TIER_NONE = -1

# Per-variable provenance labels, one per tier
SOURCE_OBSERVED = "observed"
SOURCE_SECONDARY = "secondary"
SOURCE_CLIMATOLOGY = "climatology"
SOURCE_MISSING = "missing"
