"""Session state and the mutate -> recompute -> persist cycle.

``CalculatorState`` bundles the grant repository and assumption model; it
is passed explicitly to the projection instead of living in module
globals. ``Session`` owns one state plus a store. Every public mutation
runs to completion (recompute buckets, then persist) before returning.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .assumptions import AssumptionModel
from .codec import deserialize, serialize
from .commands import AssumptionCommand, GrantCommand
from .grants import GrantRepository
from .projection import aggregate_buckets, summarize_projection
from .schemas import Defaults, Grant, ProjectionSummary, SavedState, YearBucket
from .store import StateStore

logger = logging.getLogger(__name__)


@dataclass
class CalculatorState:
    """Grants plus assumptions for one session."""

    grants: GrantRepository
    assumptions: AssumptionModel

    @classmethod
    def fresh(cls, defaults: Optional[Defaults] = None) -> "CalculatorState":
        """Default assumptions with a single default grant."""
        defaults = defaults or Defaults()
        grants = GrantRepository()
        grants.add(defaults.grant)
        return cls(grants=grants, assumptions=AssumptionModel(defaults=defaults.assumptions))

    @classmethod
    def from_saved(cls, saved: SavedState, defaults: Optional[Defaults] = None) -> "CalculatorState":
        defaults = defaults or Defaults()
        return cls(
            grants=GrantRepository(saved.grants, saved.next_id),
            assumptions=AssumptionModel(
                values=saved.assumptions,
                fmv_locked=saved.meta.fmv_locked,
                defaults=defaults.assumptions,
            ),
        )


def project(state: CalculatorState) -> Dict[int, YearBucket]:
    """Per-year buckets for the state's grants and assumptions."""
    return aggregate_buckets(state.grants, state.assumptions.values)


class Session:
    """A calculator session bound to a state store."""

    def __init__(
        self,
        state: CalculatorState,
        store: Optional[StateStore] = None,
        defaults: Optional[Defaults] = None,
    ):
        """
        Args:
            state: Session state (owned by the session from here on)
            store: Where to persist after each change; None disables persistence
            defaults: Template for new grants and assumption resets
        """
        self.state = state
        self.store = store
        self.defaults = defaults or Defaults()
        self.buckets = project(state)

    @classmethod
    def open(cls, store: Optional[StateStore] = None, defaults: Optional[Defaults] = None) -> "Session":
        """Restore the saved session, or start from defaults.

        Missing, expired or malformed saved state all fall back to the
        default grant and assumptions.
        """
        defaults = defaults or Defaults()
        store = store if store is not None else StateStore()

        saved = deserialize(store.load(), defaults.assumptions, defaults.grant)
        if saved is None:
            logger.debug("No usable saved state; starting from defaults")
            state = CalculatorState.fresh(defaults)
        else:
            state = CalculatorState.from_saved(saved, defaults)

        return cls(state, store, defaults)

    @property
    def grants(self) -> List[Grant]:
        return list(self.state.grants)

    @property
    def assumptions(self) -> AssumptionModel:
        return self.state.assumptions

    def add_grant(self, **overrides: Any) -> Grant:
        """Add a grant (defaults for anything not given)."""
        grant = self.state.grants.add(self.defaults.grant, **overrides)
        self._commit()
        return grant

    def remove_grant(self, grant_id: int) -> bool:
        """Remove a grant. Removing the last one resets the assumptions."""
        if not self.state.grants.remove(grant_id):
            return False
        if self.state.grants.is_empty():
            self.state.assumptions.reset()
        self._commit()
        return True

    def update_grant(self, grant_id: int, command: GrantCommand) -> bool:
        """Apply a grant edit; recompute and persist only if it changed something."""
        changed = self.state.grants.update(grant_id, command)
        if changed:
            self._commit()
        return changed

    def update_assumptions(self, command: AssumptionCommand) -> bool:
        """Apply an assumption edit; recompute and persist only if it changed something."""
        changed = self.state.assumptions.apply(command)
        if changed:
            self._commit()
        return changed

    def reset_assumptions(self) -> None:
        self.state.assumptions.reset()
        self._commit()

    def load_state(self, saved: SavedState) -> None:
        """Replace the whole session state (e.g. from an imported payload)."""
        self.state = CalculatorState.from_saved(saved, self.defaults)
        self._commit()

    def payload(self) -> Dict[str, Any]:
        return serialize(self.state.grants, self.state.assumptions)

    def summary(self) -> ProjectionSummary:
        return summarize_projection(self.grants, self.buckets, self.state.assumptions.values)

    def _commit(self) -> None:
        self.buckets = project(self.state)
        if self.store is not None:
            self.store.save(self.payload())
