from fast_paginate.storage.pagination.columns import (
    Incompatible,
    InnerColumns,
    incompatibility_reason,
    select_inner_columns,
)
from fast_paginate.storage.pagination.constraints import (
    apply_key_filter,
    clear_constraints,
)
from fast_paginate.storage.pagination.factory import select_assembly, select_strategy
from fast_paginate.storage.pagination.fast import (
    fast_paginate,
    fast_simple_paginate,
    simple_fast_paginate,
)
from fast_paginate.storage.pagination.forker import KeyPage, fork_and_paginate_keys
from fast_paginate.storage.pagination.length_aware import (
    LengthAwarePaginationStrategy,
)
from fast_paginate.storage.pagination.paginator import (
    LengthAwarePaginator,
    PaginatorOptions,
    SimplePaginator,
)
from fast_paginate.storage.pagination.simple import SimplePaginationStrategy

__all__ = [
    "Incompatible",
    "InnerColumns",
    "KeyPage",
    "LengthAwarePaginationStrategy",
    "LengthAwarePaginator",
    "PaginatorOptions",
    "SimplePaginationStrategy",
    "SimplePaginator",
    "apply_key_filter",
    "clear_constraints",
    "fast_paginate",
    "fast_simple_paginate",
    "fork_and_paginate_keys",
    "incompatibility_reason",
    "select_assembly",
    "select_inner_columns",
    "select_strategy",
    "simple_fast_paginate",
]
