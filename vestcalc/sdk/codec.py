"""Versioned state payload: serialize and deserialize with migration.

Current payload (version 3)::

    {
      "version": 3,
      "assumptions": {"totalShares", "postMoney", "fmv", "conversionDate",
                      "taxRate", "growthRate"},
      "grants": [{"id", "shares", "start", "years", "title"}],
      "meta": {"fmvLocked", "nextId"}
    }

Older generations still load:

- v1 stored taxRate/growthRate on each grant (and the label as "name").
- v2 moved them to a top-level "global" block.

For each assumption field the newest tier that supplies it wins:
"assumptions" > "global" > first legacy grant carrying the field > default.
Every value, from any tier, goes through the same sanitizers as live input.
Persisted FMV is only a cache: unless the user pinned it (meta.fmvLocked),
it is re-derived from valuation and share count when either is present.
meta.nextId carries the id counter across sessions so a removed grant's id
is not handed out again.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from .assumptions import AssumptionModel, derive_fmv
from .grants import GrantRepository
from .sanitize import sanitize_grant_id
from .schemas import Assumptions, Grant, GrantFields, SavedState, StateMeta

logger = logging.getLogger(__name__)

STATE_VERSION = 3

# Assumption field -> payload keys it may appear under (first match wins)
ASSUMPTION_KEYS = {
    "total_shares_outstanding": ("totalShares", "totalSharesOutstanding"),
    "post_money_valuation": ("postMoney", "postMoneyValuation"),
    "fmv": ("fmv",),
    "conversion_date": ("conversionDate",),
    "tax_rate": ("taxRate",),
    "growth_rate": ("growthRate",),
}

# Fields the v1 schema kept per grant
LEGACY_GRANT_KEYS = {
    "tax_rate": "taxRate",
    "growth_rate": "growthRate",
}

_MISSING = object()


def serialize(repository: GrantRepository, assumptions: AssumptionModel) -> Dict[str, Any]:
    """Build the current-version payload for the session state."""
    values = assumptions.values
    return {
        "version": STATE_VERSION,
        "assumptions": {
            "totalShares": values.total_shares_outstanding,
            "postMoney": values.post_money_valuation,
            "fmv": values.fmv,
            "conversionDate": values.conversion_date.isoformat(),
            "taxRate": values.tax_rate,
            "growthRate": values.growth_rate,
        },
        "grants": [
            {
                "id": grant.id,
                "shares": grant.shares,
                "start": grant.start.isoformat(),
                "years": grant.years,
                "title": grant.title,
            }
            for grant in repository
        ],
        "meta": {"fmvLocked": assumptions.fmv_locked, "nextId": repository.next_id},
    }


def deserialize(
    payload: Any,
    defaults: Optional[Assumptions] = None,
    grant_template: Optional[GrantFields] = None,
) -> Optional[SavedState]:
    """
    Rebuild session state from a payload of any schema generation.

    Args:
        payload: Parsed payload dict, or its JSON text
        defaults: Assumptions used for fields no tier supplies
        grant_template: Values used for grant fields missing from an entry

    Returns:
        SavedState, or None if the payload is structurally unusable
        (not a mapping, or grants missing / not a list)
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except ValueError:
            logger.debug("State payload is not valid JSON")
            return None

    if not isinstance(payload, dict):
        logger.debug("State payload is not a mapping")
        return None

    raw_grants = payload.get("grants")
    if not isinstance(raw_grants, list):
        logger.debug("State payload has no grants list")
        return None

    grants = _migrate_grants(raw_grants, grant_template or GrantFields())
    meta_block = _meta_block(payload)
    meta = StateMeta(fmv_locked=meta_block.get("fmvLocked") is True)
    assumptions = _migrate_assumptions(payload, raw_grants, defaults or Assumptions(), meta.fmv_locked)

    # The saved counter may run ahead of the ids in use (removed grants) but
    # never behind them
    saved_next_id = sanitize_grant_id(meta_block.get("nextId")) or 1
    next_id = max(saved_next_id, max((g.id for g in grants), default=0) + 1)

    return SavedState(
        grants=grants,
        next_id=next_id,
        assumptions=assumptions,
        meta=meta,
    )


def _meta_block(payload: Dict[str, Any]) -> Dict[str, Any]:
    meta = payload.get("meta")
    return meta if isinstance(meta, dict) else {}


def _lookup(block: Any, keys: tuple) -> Any:
    """First non-null value under any of ``keys``, or _MISSING."""
    if not isinstance(block, dict):
        return _MISSING
    for key in keys:
        if block.get(key) is not None:
            return block[key]
    return _MISSING


def _migrate_assumptions(
    payload: Dict[str, Any],
    raw_grants: List[Any],
    defaults: Assumptions,
    fmv_locked: bool,
) -> Assumptions:
    supplied: Dict[str, Any] = {}

    # v1: first grant that carries the field
    for field, key in LEGACY_GRANT_KEYS.items():
        for entry in raw_grants:
            value = _lookup(entry, (key,))
            if value is not _MISSING:
                supplied[field] = value
                logger.debug(f"Promoting legacy per-grant {key}={value!r} to global assumptions")
                break

    # v2 "global" block, then the current "assumptions" block
    for block_name in ("global", "assumptions"):
        block = payload.get(block_name)
        for field, keys in ASSUMPTION_KEYS.items():
            value = _lookup(block, keys)
            if value is not _MISSING:
                supplied[field] = value

    values = defaults.model_dump()
    values.update(supplied)
    assumptions = Assumptions(**values)

    valuation_supplied = "total_shares_outstanding" in supplied or "post_money_valuation" in supplied
    if not fmv_locked and valuation_supplied:
        derived = derive_fmv(assumptions.post_money_valuation, assumptions.total_shares_outstanding)
        if derived is not None:
            assumptions.fmv = derived

    return assumptions


def _migrate_grants(raw_grants: List[Any], template: GrantFields) -> List[Grant]:
    entries = [entry for entry in raw_grants if isinstance(entry, dict)]
    if len(entries) != len(raw_grants):
        logger.debug(f"Skipped {len(raw_grants) - len(entries)} malformed grant entries")

    ids = [sanitize_grant_id(entry.get("id")) for entry in entries]
    fresh_id = max((i for i in ids if i is not None), default=0) + 1

    base = template.model_dump()
    grants = []
    seen = set()
    for entry, grant_id in zip(entries, ids):
        if grant_id is None or grant_id in seen:
            grant_id = fresh_id
            fresh_id += 1
        seen.add(grant_id)

        title = entry.get("title")
        if title is None:
            title = entry.get("name")

        fields = dict(base)
        raw_fields = {
            "shares": entry.get("shares"),
            "start": entry.get("start"),
            "years": entry.get("years"),
            "title": title,
        }
        fields.update({k: v for k, v in raw_fields.items() if v is not None})
        grants.append(Grant(id=grant_id, **fields))

    return grants
