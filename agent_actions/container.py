"""
Wiring of the agent actions services.

The surrounding service builds one container per process and calls
``container.catalog.generate(...)`` and ``container.dispatcher.dispatch(...)``.
The admin API shares the same instance, so cache invalidation reaches the
cache the dispatcher reads.
"""

from typing import Optional

from .config import Settings, StoreConfig, get_settings
from .services import (
    AppointmentManager,
    AvailabilityCalculator,
    CalendarStore,
    ErrorReporter,
    NameResolutionService,
    ResourceCache,
    SupabaseCalendarStore,
    ToolCatalogGenerator,
    ToolDispatcher,
)


class ActionsContainer:
    """Owns the store, the resource cache and the services built on them."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        store: Optional[CalendarStore] = None,
        cache: Optional[ResourceCache] = None,
        reporter: Optional[ErrorReporter] = None,
    ):
        self.settings = settings or get_settings()
        if store is None:
            store = SupabaseCalendarStore(StoreConfig.from_settings(self.settings))
        self.store = store
        self.cache = cache if cache is not None else ResourceCache.from_settings(self.settings)
        self.reporter = reporter if reporter is not None else ErrorReporter()

        self.resolver = NameResolutionService(self.store, self.cache)
        self.availability = AvailabilityCalculator(
            self.store,
            slot_interval_minutes=self.settings.slot_interval_minutes,
            default_duration_minutes=self.settings.default_service_duration_minutes,
            display_date_format=self.settings.display_date_format,
        )
        self.appointments = AppointmentManager(
            self.store,
            self.availability,
            reporter=self.reporter,
            default_timezone=self.settings.default_timezone,
        )
        self.catalog = ToolCatalogGenerator(self.store, self.reporter)
        self.dispatcher = ToolDispatcher(self.store, self.resolver, self.appointments, self.reporter)
