"""Pydantic schemas for vest-calc state.

Grant and assumption fields are sanitized by ``mode="before"`` validators,
so constructing or assigning a field with raw input (CLI text, profile
values, persisted payloads) always yields an in-range value instead of a
validation error. Profile schemas use extra='forbid' so that typos in
profile.yaml cause clear errors rather than silent ignoring.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .dates import parse_iso_date
from .sanitize import (
    DEFAULT_CONVERSION_DATE,
    DEFAULT_GRANT_SHARES,
    DEFAULT_GRANT_YEARS,
    DEFAULT_GROWTH_RATE,
    DEFAULT_POST_MONEY,
    DEFAULT_START,
    DEFAULT_TAX_RATE,
    DEFAULT_TOTAL_SHARES,
    sanitize_conversion_date,
    sanitize_fmv,
    sanitize_growth_rate,
    sanitize_post_money,
    sanitize_shares,
    sanitize_start_date,
    sanitize_tax_rate,
    sanitize_title,
    sanitize_total_shares,
    sanitize_years,
)


# =============================================================================
# Grants
# =============================================================================


class GrantFields(BaseModel):
    """Editable grant fields. Used on its own as the default-grant template."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    shares: int = Field(default=DEFAULT_GRANT_SHARES, ge=1, description="Total shares granted")
    start: date = Field(
        default_factory=lambda: parse_iso_date(DEFAULT_START),
        description="Grant start date; first vest is one year later",
    )
    years: int = Field(default=DEFAULT_GRANT_YEARS, ge=1, le=100, description="Vesting duration in years")
    title: str = Field(default="", max_length=60, description="Optional display label")

    @field_validator("shares", mode="before")
    @classmethod
    def _shares(cls, v: Any) -> int:
        return sanitize_shares(v)

    @field_validator("start", mode="before")
    @classmethod
    def _start(cls, v: Any) -> date:
        return sanitize_start_date(v)

    @field_validator("years", mode="before")
    @classmethod
    def _years(cls, v: Any) -> int:
        return sanitize_years(v)

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, v: Any) -> str:
        return sanitize_title(v)


class Grant(GrantFields):
    """A single equity grant vesting in equal yearly tranches."""

    id: int = Field(..., ge=1, description="Unique id, never reused")

    def display_name(self, index: int) -> str:
        """Title, or 'Grant N' (1-based position) when the title is blank."""
        return self.title if self.title.strip() else f"Grant {index + 1}"


@dataclass(frozen=True)
class VestingEvent:
    """One yearly tranche of a grant becoming vested."""

    year: int
    date: date
    shares: int


# =============================================================================
# Assumptions
# =============================================================================


class Assumptions(BaseModel):
    """Global projection parameters. A bare ``Assumptions()`` is the built-in default set."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    total_shares_outstanding: int = Field(default=DEFAULT_TOTAL_SHARES, ge=1)
    post_money_valuation: float = Field(default=DEFAULT_POST_MONEY, ge=0)
    fmv: float = Field(
        default=DEFAULT_POST_MONEY / DEFAULT_TOTAL_SHARES, ge=0,
        description="Per-share FMV at the conversion date",
    )
    conversion_date: date = Field(
        default_factory=lambda: parse_iso_date(DEFAULT_CONVERSION_DATE),
        description="Vests on or before this date are taxed in the conversion year",
    )
    tax_rate: float = Field(default=DEFAULT_TAX_RATE, ge=0, le=100, description="Flat tax rate (%)")
    growth_rate: float = Field(default=DEFAULT_GROWTH_RATE, ge=-100, le=500, description="Annual FMV growth (%)")

    @field_validator("total_shares_outstanding", mode="before")
    @classmethod
    def _total_shares(cls, v: Any) -> int:
        return sanitize_total_shares(v)

    @field_validator("post_money_valuation", mode="before")
    @classmethod
    def _post_money(cls, v: Any) -> float:
        return sanitize_post_money(v)

    @field_validator("fmv", mode="before")
    @classmethod
    def _fmv(cls, v: Any) -> float:
        return sanitize_fmv(v)

    @field_validator("conversion_date", mode="before")
    @classmethod
    def _conversion_date(cls, v: Any) -> date:
        return sanitize_conversion_date(v)

    @field_validator("tax_rate", mode="before")
    @classmethod
    def _tax_rate(cls, v: Any) -> float:
        return sanitize_tax_rate(v)

    @field_validator("growth_rate", mode="before")
    @classmethod
    def _growth_rate(cls, v: Any) -> float:
        return sanitize_growth_rate(v)

    @property
    def conversion_year(self) -> int:
        return self.conversion_date.year


class Defaults(BaseModel):
    """Values restored on reset and used for newly added grants."""

    assumptions: Assumptions = Field(default_factory=Assumptions)
    grant: GrantFields = Field(default_factory=GrantFields)


# =============================================================================
# Projection output
# =============================================================================


class YearBucket(BaseModel):
    """Aggregated shares, income and tax for one tax year."""

    model_config = ConfigDict(extra="forbid")

    year: int
    shares: int = Field(default=0, ge=0)
    income: float = Field(default=0, ge=0)
    tax: float = Field(default=0, ge=0)

    @property
    def avg_fmv(self) -> float:
        """Share-weighted FMV across the bucket (0 when empty)."""
        return self.income / self.shares if self.shares else 0.0


class ProjectionRow(BaseModel):
    """A display row for one tax year."""

    year: int
    shares: int
    avg_fmv: float
    income: float
    tax: float


class Election83bSummary(BaseModel):
    """Shares covered if an 83(b) election is made at grant."""

    total_shares: int = Field(default=0, ge=0)
    tax: float = Field(default=0, description="Tax due at election (always 0 here)")


class ProjectionSummary(BaseModel):
    """Tabular view of a projection with totals."""

    rows: List[ProjectionRow] = Field(default_factory=list)
    total_income: float = 0
    total_tax: float = 0
    election_83b: Election83bSummary = Field(default_factory=Election83bSummary)
    empty_message: Optional[str] = Field(
        None, description="Why there are no rows (None when rows exist)"
    )


# =============================================================================
# Persisted state
# =============================================================================


class StateMeta(BaseModel):
    """Session metadata persisted next to the grants."""

    fmv_locked: bool = False


class SavedState(BaseModel):
    """In-memory state rebuilt from a persisted payload."""

    grants: List[Grant] = Field(default_factory=list)
    next_id: int = Field(default=1, ge=1)
    assumptions: Assumptions = Field(default_factory=Assumptions)
    meta: StateMeta = Field(default_factory=StateMeta)


# =============================================================================
# Profile (profile.yaml)
# =============================================================================


class ProfileAssumptions(BaseModel):
    """Assumption overrides from profile.yaml."""

    model_config = ConfigDict(extra="forbid")

    total_shares: Optional[float] = Field(None, description="Total shares outstanding")
    post_money: Optional[float] = Field(None, description="Post-money valuation ($)")
    conversion_date: Optional[date] = None
    tax_rate: Optional[float] = Field(None, description="Flat tax rate (%)")
    growth_rate: Optional[float] = Field(None, description="Annual FMV growth (%)")


class ProfileGrant(BaseModel):
    """Default grant overrides from profile.yaml."""

    model_config = ConfigDict(extra="forbid")

    shares: Optional[int] = None
    start: Optional[date] = None
    years: Optional[int] = None
    title: Optional[str] = None


class Profile(BaseModel):
    """Top-level profile.yaml schema."""

    model_config = ConfigDict(extra="forbid")

    assumptions: Optional[ProfileAssumptions] = None
    default_grant: Optional[ProfileGrant] = None
