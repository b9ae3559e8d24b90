from dataclasses import dataclass, field
from typing import Dict, Iterator, List, NamedTuple, Optional, Tuple

from config.defaults import HALF_LABELS


class HalfKey(NamedTuple):
    """Address of one claimable half: (lot, spot number, half label)."""
    lot_id: str
    spot_number: int
    half: str


@dataclass(frozen=True)
class Spot:
    lot_id: str
    number: int
    blocked: bool = False  # reserved in the catalog itself, never claimable

    @property
    def spot_id(self) -> str:
        return f"{self.lot_id}-{self.number}"

    @property
    def halves(self) -> Tuple[HalfKey, HalfKey]:
        return tuple(HalfKey(self.lot_id, self.number, h) for h in HALF_LABELS)


@dataclass(frozen=True)
class Lot:
    lot_id: str
    name: str
    spots: Tuple[Spot, ...] = ()

    @property
    def total_spots(self) -> int:
        return len(self.spots)


@dataclass
class Catalog:
    """Addressable resource space, read-only once loaded."""
    lots: Dict[str, Lot] = field(default_factory=dict)
    _index: Dict[Tuple[str, int], Spot] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self):
        for lot in self.lots.values():
            for spot in lot.spots:
                self._index[(lot.lot_id, spot.number)] = spot

    def lookup(self, lot_id: str, spot_number: int) -> Optional[Spot]:
        return self._index.get((lot_id, spot_number))

    def lot(self, lot_id: str) -> Optional[Lot]:
        return self.lots.get(lot_id)

    def lot_ids(self) -> List[str]:
        return list(self.lots.keys())

    def iter_spots(self) -> Iterator[Spot]:
        for lot in self.lots.values():
            yield from lot.spots

    @property
    def total_spots(self) -> int:
        return len(self._index)
