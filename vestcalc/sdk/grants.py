"""Grant repository: ordered grants with monotonic id assignment."""

from typing import Any, Iterator, List, Optional

from .commands import GrantCommand, SetShares, SetStart, SetTitle, SetYears
from .sanitize import sanitize_shares, sanitize_start_date, sanitize_title, sanitize_years, to_number
from .schemas import Grant, GrantFields


class GrantRepository:
    """Ordered collection of grants.

    Ids come from a counter that only moves forward, so a removed grant's
    id is never handed out again.
    """

    def __init__(self, grants: Optional[List[Grant]] = None, next_id: int = 1):
        self.grants: List[Grant] = list(grants or [])
        highest = max((g.id for g in self.grants), default=0)
        self.next_id = max(next_id, highest + 1)

    def __iter__(self) -> Iterator[Grant]:
        return iter(self.grants)

    def __len__(self) -> int:
        return len(self.grants)

    def is_empty(self) -> bool:
        return not self.grants

    def get(self, grant_id: int) -> Optional[Grant]:
        return next((g for g in self.grants if g.id == grant_id), None)

    def add(self, template: Optional[GrantFields] = None, **overrides: Any) -> Grant:
        """Append a new grant.

        Args:
            template: Field values for anything not overridden (built-in
                default grant when omitted)
            **overrides: Raw shares/start/years/title values; sanitized

        Returns:
            The stored grant
        """
        base = (template or GrantFields()).model_dump()
        base.update({k: v for k, v in overrides.items() if v is not None})
        grant = Grant(id=self.next_id, **base)
        self.next_id += 1
        self.grants.append(grant)
        return grant

    def remove(self, grant_id: int) -> bool:
        """Delete a grant by id. Returns False (no-op) if it doesn't exist."""
        grant = self.get(grant_id)
        if grant is None:
            return False
        self.grants.remove(grant)
        return True

    def update(self, grant_id: int, command: GrantCommand) -> bool:
        """Apply a field edit to one grant.

        Blank or non-numeric raw values for shares/years, and blank start
        dates, are ignored.

        Returns:
            True only if the stored value actually changed
        """
        grant = self.get(grant_id)
        if grant is None:
            return False

        raw = getattr(command, "value", None)
        if isinstance(command, SetShares):
            if to_number(raw) is None:
                return False
            field, value = "shares", sanitize_shares(raw)
        elif isinstance(command, SetYears):
            if to_number(raw) is None:
                return False
            field, value = "years", sanitize_years(raw)
        elif isinstance(command, SetStart):
            if not raw:
                return False
            field, value = "start", sanitize_start_date(raw)
        elif isinstance(command, SetTitle):
            field, value = "title", sanitize_title(raw)
        else:
            raise TypeError(f"Unsupported grant command: {command!r}")

        if getattr(grant, field) == value:
            return False
        setattr(grant, field, value)
        return True
