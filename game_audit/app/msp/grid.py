"""Daily MSP sheet: one row per machine, MSP1..n columns, EOD and total."""

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class MspRow:
    machine_no: str
    msp_amounts: List[float] = field(default_factory=list)
    eod_amount: Optional[float] = None
    total: float = 0.0

    def padded(self, width):
        return self.msp_amounts + [None] * (width - len(self.msp_amounts))

    def to_dict(self, width):
        return {
            "machine_no": self.machine_no,
            "msp": self.padded(width),
            "eod": self.eod_amount,
            "total": self.total,
        }


@dataclass
class MspGrid:
    rows: List[MspRow]
    msp_columns: int
    daily_total: float

    def to_dict(self):
        return {
            "columns": [f"MSP{i}" for i in range(1, self.msp_columns + 1)],
            "rows": [row.to_dict(self.msp_columns) for row in self.rows],
            "daily_total": self.daily_total,
        }


def build_msp_grid(entries) -> MspGrid:
    """Group entries (already in entry order) by machine."""
    rows = OrderedDict()
    daily_total = 0.0
    for entry in entries:
        row = rows.setdefault(entry.machine_no, MspRow(machine_no=entry.machine_no))
        amount = float(entry.amount or 0)
        if entry.entry_type == "EOD":
            # First EOD of the day counts for the EOD column.
            if row.eod_amount is None:
                row.eod_amount = amount
        else:
            row.msp_amounts.append(amount)
        row.total += amount
        daily_total += amount
    width = max((len(row.msp_amounts) for row in rows.values()), default=0)
    return MspGrid(rows=list(rows.values()), msp_columns=width, daily_total=daily_total)
