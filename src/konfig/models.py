"""Pydantic models shared across konfig.

All models inherit from :class:`KonfigBaseModel`, which forbids unknown fields
and makes instances immutable so they can be shared between threads.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class KonfigBaseModel(BaseModel):
    """Base model for all konfig Pydantic models.

    - extra="forbid": Rejects any fields not defined in the model
    - frozen=True: Makes instances immutable (and hashable)
    """

    model_config = ConfigDict(extra="forbid", frozen=True)


class SourceKind(str, Enum):
    """Identifies one of the three standard property sources."""

    SYSTEM_PROPERTIES = "SYSTEM_PROPERTIES"
    ENV_PROPERTIES = "ENV_PROPERTIES"
    APP_PROPERTIES = "APP_PROPERTIES"


class PropertySourceMetaData(KonfigBaseModel):
    """Snapshot of every entry held by a single property source.

    Attributes:
        source: Which source the snapshot was taken from
        values: Raw key/value pairs, exactly as stored by the source
    """

    source: SourceKind
    values: dict[str, str] = Field(default_factory=dict)


class Period(KonfigBaseModel):
    """A date-based amount of time, such as ``P1Y2M3D``.

    Unlike :class:`datetime.timedelta` a period keeps years, months and days
    apart, because their length depends on the date they are applied to.

    Example:
        >>> str(Period(years=1, days=10))
        'P1Y10D'
    """

    years: int = 0
    months: int = 0
    days: int = 0

    @property
    def is_zero(self) -> bool:
        return self.years == 0 and self.months == 0 and self.days == 0

    def __str__(self) -> str:
        if self.is_zero:
            return "P0D"
        parts = ["P"]
        if self.years:
            parts.append(f"{self.years}Y")
        if self.months:
            parts.append(f"{self.months}M")
        if self.days:
            parts.append(f"{self.days}D")
        return "".join(parts)
