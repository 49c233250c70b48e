"""Page/limit handling for listing queries."""

from dataclasses import dataclass, field
from math import ceil

from protean.exceptions import ValidationError

from storefront.settings import default_page_size, max_page_size


@dataclass(frozen=True)
class Page:
    items: list = field(default_factory=list)
    page: int = 1
    limit: int = 20
    total: int = 0

    @property
    def pages(self) -> int:
        return ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.pages

    def pagination(self) -> dict:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "pages": self.pages,
            "has_next": self.has_next,
            "has_prev": self.page > 1,
        }


def clamp(page: int | None, limit: int | None) -> tuple[int, int]:
    """Normalise page and limit: page >= 1, 1 <= limit <= MAX_PAGE_SIZE."""
    page = max(1, page or 1)
    limit = limit or default_page_size()
    return page, max(1, min(limit, max_page_size()))


def sort_key(sort_by: str | None, order: str | None, allowed: set[str], default: str) -> str:
    """Translate a sort field and direction into a Protean ``order_by`` key."""
    sort_by = sort_by or default
    if sort_by not in allowed:
        raise ValidationError({"sort_by": [f"Cannot sort by {sort_by}; choose one of {', '.join(sorted(allowed))}"]})

    direction = (order or "desc").lower()
    if direction not in ("asc", "desc"):
        raise ValidationError({"order": ["Sort order must be 'asc' or 'desc'"]})

    return f"-{sort_by}" if direction == "desc" else sort_by


def paginate(queryset, page: int | None = None, limit: int | None = None, order_by: str | None = None) -> Page:
    """Run ``queryset`` for a single page of results."""
    page, limit = clamp(page, limit)
    if order_by:
        queryset = queryset.order_by(order_by)

    results = queryset.offset((page - 1) * limit).limit(limit).all()
    return Page(items=list(results.items), page=page, limit=limit, total=results.total)


def iterate(queryset, batch_size: int = 100):
    """Yield every record matching ``queryset``, one batch at a time."""
    offset = 0
    while True:
        results = queryset.offset(offset).limit(batch_size).all()
        yield from results.items
        offset += batch_size
        if offset >= results.total or not results.items:
            break
