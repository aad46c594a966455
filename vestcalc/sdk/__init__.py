"""Vest Calc SDK - Core functionality for vesting tax projections."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_profile_path,
    load_profile,
    save_profile,
    load_profile_defaults,
    ProfileNotFoundError,
    ProfileValidationError,
    get_cache_path,
    get_data_path,
)

from .dates import add_years, parse_iso_date

from .schemas import (
    Assumptions,
    Defaults,
    Grant,
    GrantFields,
    ProjectionSummary,
    SavedState,
    VestingEvent,
    YearBucket,
)

from .commands import (
    SetShares,
    SetStart,
    SetYears,
    SetTitle,
    SetTotalShares,
    SetPostMoney,
    SetFmv,
    SetConversionDate,
    SetTaxRate,
    SetGrowthRate,
    UnlockFmv,
    grant_command,
    assumption_command,
)

from .assumptions import AssumptionModel, derive_fmv
from .grants import GrantRepository
from .vesting import build_vesting_events, grant_vesting_events
from .projection import aggregate_buckets, summarize_projection
from .codec import serialize, deserialize, STATE_VERSION
from .store import StateStore, SessionFileStore, DurableFileStore, STATE_KEY
from .session import CalculatorState, Session, project

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "get_profile_path",
    "load_profile",
    "save_profile",
    "load_profile_defaults",
    "ProfileNotFoundError",
    "ProfileValidationError",
    "get_cache_path",
    "get_data_path",
    # Dates
    "add_years",
    "parse_iso_date",
    # Schemas
    "Assumptions",
    "Defaults",
    "Grant",
    "GrantFields",
    "ProjectionSummary",
    "SavedState",
    "VestingEvent",
    "YearBucket",
    # Commands
    "SetShares",
    "SetStart",
    "SetYears",
    "SetTitle",
    "SetTotalShares",
    "SetPostMoney",
    "SetFmv",
    "SetConversionDate",
    "SetTaxRate",
    "SetGrowthRate",
    "UnlockFmv",
    "grant_command",
    "assumption_command",
    # Engine
    "AssumptionModel",
    "derive_fmv",
    "GrantRepository",
    "build_vesting_events",
    "grant_vesting_events",
    "aggregate_buckets",
    "summarize_projection",
    # Persistence
    "serialize",
    "deserialize",
    "STATE_VERSION",
    "StateStore",
    "SessionFileStore",
    "DurableFileStore",
    "STATE_KEY",
    # Session
    "CalculatorState",
    "Session",
    "project",
]
