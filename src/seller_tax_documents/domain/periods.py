"""Reporting period definitions."""

from dataclasses import dataclass
from datetime import date
from enum import Enum


class PeriodLabel(str, Enum):
    Q1 = "Q1"
    Q2 = "Q2"
    Q3 = "Q3"
    Q4 = "Q4"
    ANNUAL = "ANNUAL"

    @property
    def is_quarter(self) -> bool:
        return self is not PeriodLabel.ANNUAL


QUARTER_LABELS: tuple[PeriodLabel, ...] = (
    PeriodLabel.Q1,
    PeriodLabel.Q2,
    PeriodLabel.Q3,
    PeriodLabel.Q4,
)

# (start month, start day, end month, end day)
_QUARTER_BOUNDS = {
    PeriodLabel.Q1: (1, 1, 3, 31),
    PeriodLabel.Q2: (4, 1, 6, 30),
    PeriodLabel.Q3: (7, 1, 9, 30),
    PeriodLabel.Q4: (10, 1, 12, 31),
}


@dataclass(frozen=True, slots=True)
class PeriodDefinition:
    """A reporting period covering start_date..end_date, both inclusive."""

    label: PeriodLabel
    start_date: date
    end_date: date

    def __post_init__(self) -> None:
        if not isinstance(self.label, PeriodLabel):
            object.__setattr__(self, "label", PeriodLabel(self.label))
        if self.end_date < self.start_date:
            raise ValueError(
                f"Period {self.label.value} ends before it starts: "
                f"{self.start_date} > {self.end_date}"
            )

    @property
    def year(self) -> int:
        return self.start_date.year

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


def annual_period(year: int) -> PeriodDefinition:
    return PeriodDefinition(PeriodLabel.ANNUAL, date(year, 1, 1), date(year, 12, 31))


def quarter_period(year: int, label: PeriodLabel | str) -> PeriodDefinition:
    """Return the calendar quarter ``label`` of ``year``."""
    label = PeriodLabel(label)
    if not label.is_quarter:
        raise ValueError(f"Not a quarter: {label.value}")
    start_month, start_day, end_month, end_day = _QUARTER_BOUNDS[label]
    return PeriodDefinition(
        label, date(year, start_month, start_day), date(year, end_month, end_day)
    )


def quarter_periods(year: int) -> list[PeriodDefinition]:
    """Return Q1..Q4 of ``year`` in calendar order."""
    return [quarter_period(year, label) for label in QUARTER_LABELS]
