from booking.calendar import DEFAULT_SLOT_GRID, SlotCalendar, bookable_dates
from booking.catalog import professional_store, service_store
from booking.errors import (
    BookingError,
    InvalidTransition,
    NotFoundError,
    SlotConflict,
    ValidationError,
)
from booking.ledger import InMemoryLedger, SqlLedger
from booking.orchestrator import AppointmentView, BookingOrchestrator
from booking.site_config import InMemorySiteConfigStore, SqlSiteConfigStore

BACKENDS = ("sql", "memory")


def build_orchestrator(backend: str = "sql", grid=DEFAULT_SLOT_GRID, default_hero_image_url: str = ""):
    """Wire one set of stores for the whole process.

    ``sql`` persists through Flask-SQLAlchemy and needs an app context per call;
    ``memory`` keeps everything in this process and is meant for tests and demos.
    """
    if backend not in BACKENDS:
        raise ValueError(f"Unknown store backend: {backend!r}")

    if backend == "sql":
        ledger = SqlLedger()
        site_config = SqlSiteConfigStore(default_hero_image_url)
    else:
        ledger = InMemoryLedger()
        site_config = InMemorySiteConfigStore(default_hero_image_url)

    return BookingOrchestrator(
        services=service_store(backend),
        professionals=professional_store(backend),
        ledger=ledger,
        calendar=SlotCalendar(ledger, grid),
        site_config=site_config,
    )
