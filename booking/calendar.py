from datetime import date, timedelta

from booking.validation import parse_date, parse_grid

# The 11:00-13:00 gap is the clinic's lunch break
DEFAULT_SLOT_GRID = ("09:00", "10:00", "11:00", "13:00", "14:00", "15:00", "16:00", "17:00")


class SlotCalendar:
    """Derives bookable time labels from the ledger on every call."""

    def __init__(self, ledger, grid=DEFAULT_SLOT_GRID):
        self.ledger = ledger
        self.grid = parse_grid(grid)

    def is_grid_time(self, label: str) -> bool:
        return label in self.grid

    def available_slots(self, day, professional_id: str) -> list:
        day = parse_date(day)
        taken = {a.time for a in self.ledger.find_active(day, professional_id)}
        return [label for label in self.grid if label not in taken]


def bookable_dates(today: date, window_days: int) -> list:
    """Days offered by the booking flow: today and the following window_days - 1."""
    return [today + timedelta(days=offset) for offset in range(max(window_days, 0))]
