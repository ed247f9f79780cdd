from fast_paginate.constants import ALL_ROWS, MAX_PAGE_SIZE
from fast_paginate.exceptions import ValidationError
from fast_paginate.settings import app_settings


def resolve_per_page(per_page: int | None) -> int:
    """
    Resolve the page size a pagination call runs with.

    Uses settings default if not specified and caps at MAX_PAGE_SIZE.
    ``ALL_ROWS`` (-1) is passed through unchanged.

    Args:
        per_page: Page size requested by the caller.

    Returns:
        The page size to paginate with.

    Raises:
        ValidationError: If per_page is zero or negative (other than -1).
    """
    if per_page is None:
        return app_settings.DEFAULT_PAGE_SIZE
    if per_page == ALL_ROWS:
        return ALL_ROWS
    if per_page < 1:
        raise ValidationError(
            f"per_page must be a positive integer or {ALL_ROWS}, got {per_page}"
        )
    return min(per_page, MAX_PAGE_SIZE)


def resolve_page(page: int | None) -> int:
    """Resolve the current page; missing or non-positive pages become 1."""
    if page is None or page < 1:
        return 1
    return page
