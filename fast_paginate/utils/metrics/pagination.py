"""
Prometheus metrics for deferred-join pagination.

Tracks how often calls take the rewritten path versus falling back to the
standard primitive, and why they fell back.
"""

from fast_paginate.utils.metrics._helpers import (
    _get_or_create_counter,
    _get_or_create_histogram,
)

fast_paginate_requests_total = _get_or_create_counter(
    "fast_paginate_requests_total",
    "Total fast pagination calls",
    ["mode", "outcome"],  # outcome: deferred, fallback
)

fast_paginate_fallbacks_total = _get_or_create_counter(
    "fast_paginate_fallbacks_total",
    "Fast pagination calls served by the standard primitive",
    ["reason"],
)

fast_paginate_duration_seconds = _get_or_create_histogram(
    "fast_paginate_duration_seconds",
    "Duration of a fast pagination call in seconds",
    ["mode"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

__all__ = [
    "fast_paginate_requests_total",
    "fast_paginate_fallbacks_total",
    "fast_paginate_duration_seconds",
]
