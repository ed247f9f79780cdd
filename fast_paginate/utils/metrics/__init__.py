"""
Prometheus metrics definitions.

Metrics are organized into submodules by subsystem and re-exported here:

    from fast_paginate.utils.metrics import fast_paginate_requests_total
    from fast_paginate.utils.metrics import db_query_duration_seconds
"""

from fast_paginate.utils.metrics.database import (
    db_query_duration_seconds,
    db_slow_queries_total,
)
from fast_paginate.utils.metrics.pagination import (
    fast_paginate_duration_seconds,
    fast_paginate_fallbacks_total,
    fast_paginate_requests_total,
)

__all__ = [
    "db_query_duration_seconds",
    "db_slow_queries_total",
    "fast_paginate_duration_seconds",
    "fast_paginate_fallbacks_total",
    "fast_paginate_requests_total",
]
