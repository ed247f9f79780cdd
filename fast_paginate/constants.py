"""
Library-level constants for hardcoded pagination behavior.

These values define how the pagination rewrite behaves and should NEVER be
changed via environment variables or configuration.

For configurable values (default page size, database URL, logging),
see fast_paginate/settings.py where values can be overridden via environment
variables.
"""

# ============================================================================
# Pagination Safety Limits
# ============================================================================

# Maximum allowed page size to prevent excessive database loads
# Hard safety limit regardless of what callers request
# For default page size, see fast_paginate/settings.py (DEFAULT_PAGE_SIZE)
MAX_PAGE_SIZE = 1000

# Per-page sentinel meaning "every row, no LIMIT/OFFSET"
# Queries asking for it are never rewritten
ALL_ROWS = -1

# Query-string parameter holding the current page number
DEFAULT_PAGE_NAME = "page"


# ============================================================================
# Pagination Modes
# ============================================================================

# Length-aware pagination: runs a COUNT query, knows total and last page
PAGINATE = "paginate"

# Simple pagination: fetches one extra row, only knows "has more pages"
SIMPLE_PAGINATE = "simple_paginate"


# ============================================================================
# Query Builder
# ============================================================================

# Categories that raw-clause bindings are stored under
BINDING_CATEGORIES = ("join", "where", "having")

# Key types that take the literal integer IN filter
INTEGER_KEY_TYPES = frozenset({"int", "integer"})


# ============================================================================
# Fallback Reasons
# ============================================================================

FALLBACK_DISABLED = "disabled"
FALLBACK_HAVING = "having"
FALLBACK_GROUP_BY = "group_by"
FALLBACK_UNION = "union"
FALLBACK_ALL_ROWS = "all_rows"
FALLBACK_PARAMETERIZED_COLUMN = "parameterized_column"
