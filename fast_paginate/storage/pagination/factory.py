from fast_paginate.constants import PAGINATE, SIMPLE_PAGINATE
from fast_paginate.exceptions import ValidationError
from fast_paginate.storage.pagination.assembler import (
    LengthAwareAssembly,
    PaginationAssembly,
    SimpleAssembly,
)
from fast_paginate.storage.pagination.protocol import PaginationStrategy

_ASSEMBLIES: dict[str, PaginationAssembly] = {
    PAGINATE: LengthAwareAssembly(),
    SIMPLE_PAGINATE: SimpleAssembly(),
}


def select_assembly(mode: str) -> PaginationAssembly:
    """
    Get the assembly of a pagination mode.

    Args:
        mode: PAGINATE or SIMPLE_PAGINATE.

    Returns:
        The mode's PaginationAssembly.

    Raises:
        ValidationError: If the mode is unknown.
    """
    try:
        return _ASSEMBLIES[mode]
    except KeyError:
        raise ValidationError(f"Unknown pagination mode '{mode}'") from None


def select_strategy(
    mode: str, page_name: str, page: int | None
) -> PaginationStrategy:
    """Build the standard pagination primitive of a mode."""
    return select_assembly(mode).strategy(page_name, page)
