"""Polling reconciliation between the claim log and a client-held occupancy view."""

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from config.defaults import HALF_LABELS, POLL_INTERVAL_SECONDS, MIN_POLL_INTERVAL_SECONDS
from data.claim_log import ClaimLog
from engine.occupancy import diff_occupancy, get_occupancy
from models.catalog import Catalog, HalfKey
from models.occupancy import Occupancy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Selection:
    """A tentative, unsubmitted choice. Never stored in the claim log."""
    lot_id: str
    spot_number: int
    half: Optional[str] = None  # None = whole spot (solo)

    @property
    def is_solo(self) -> bool:
        return self.half is None

    @property
    def halves(self) -> Tuple[HalfKey, ...]:
        labels = HALF_LABELS if self.is_solo else (self.half,)
        return tuple(HalfKey(self.lot_id, self.spot_number, h) for h in labels)


@dataclass(frozen=True)
class SelectionInvalidated:
    selection: Selection
    taken: Tuple[str, ...]  # "<half>: <status>" for each half no longer free

    @property
    def message(self) -> str:
        s = self.selection
        target = "the whole spot" if s.is_solo else f"half {s.half}"
        return (f"Spot {s.lot_id}-{s.spot_number} ({target}) was taken while you were choosing "
                f"({', '.join(self.taken)}). Please pick another spot.")


@dataclass
class SyncUpdate:
    occupancy: Occupancy
    changed: List[HalfKey] = field(default_factory=list)
    invalidated: Optional[SelectionInvalidated] = None

    @property
    def has_changes(self) -> bool:
        return bool(self.changed) or self.invalidated is not None


def check_selection(selection: Selection, occupancy: Occupancy) -> Optional[SelectionInvalidated]:
    taken = tuple(
        f"{key.half}: {occupancy.get(*key).status.value}"
        for key in selection.halves
        if not occupancy.is_half_free(*key)
    )
    return SelectionInvalidated(selection, taken) if taken else None


class SyncReconciler:
    """Re-derives occupancy every ``interval`` seconds and flags stale selections."""

    def __init__(
        self,
        catalog: Catalog,
        claim_log: ClaimLog,
        interval: Optional[float] = None,
        lot_id: Optional[str] = None,
    ):
        self.catalog = catalog
        self.claim_log = claim_log
        self.lot_id = lot_id
        interval = POLL_INTERVAL_SECONDS if interval is None else interval
        self.interval = max(MIN_POLL_INTERVAL_SECONDS, float(interval))
        self._occupancy: Optional[Occupancy] = None
        self._selection: Optional[Selection] = None
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def occupancy(self) -> Occupancy:
        if self._occupancy is None:
            self.poll()
        return self._occupancy

    @property
    def selection(self) -> Optional[Selection]:
        return self._selection

    def select(self, selection: Selection) -> Optional[SelectionInvalidated]:
        """Hold a tentative selection if it is free in a fresh view."""
        update = self.poll()
        notice = check_selection(selection, update.occupancy)
        with self._lock:
            self._selection = None if notice else selection
        return notice

    def clear_selection(self):
        with self._lock:
            self._selection = None

    def poll(self) -> SyncUpdate:
        """Fetch active records, recompute, and diff against the last view."""
        fresh = get_occupancy(self.catalog, self.claim_log)
        with self._lock:
            previous = self._occupancy
            changed = diff_occupancy(previous, fresh) if previous is not None else []
            if self.lot_id is not None:
                changed = [k for k in changed if k.lot_id == self.lot_id]
            invalidated = None
            if self._selection is not None:
                invalidated = check_selection(self._selection, fresh)
                if invalidated:
                    logger.info("Selection invalidated: %s", invalidated.message)
                    self._selection = None
            self._occupancy = fresh
        return SyncUpdate(occupancy=fresh, changed=changed, invalidated=invalidated)

    # --- Background polling ---

    def start(self, on_update: Callable[[SyncUpdate], None]):
        """Poll on a daemon thread, calling ``on_update`` when something changed."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()

        def loop():
            while not self._stop.wait(self.interval):
                try:
                    update = self.poll()
                    if update.has_changes:
                        on_update(update)
                except Exception:
                    logger.exception("Occupancy poll failed")

        self._thread = threading.Thread(target=loop, daemon=True, name="occupancy-sync")
        self._thread.start()

    def stop(self, timeout: Optional[float] = None):
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
