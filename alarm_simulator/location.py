#!/usr/bin/env python3
"""
Bounding box for simulated alarm locations.

Each bound is split into integral degrees and a fractional part in
micro-degrees so that a location is drawn with two independent random
numbers per axis: the degrees first, then the fraction, narrowed to the
bound's own fraction when the degrees land on the edge of the box.
"""

import random
from decimal import Decimal, ROUND_CEILING, ROUND_FLOOR
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

MICRO = 10 ** 6


def split_coordinate(value: Decimal, upper: bool) -> Tuple[int, int]:
    """
    Split a coordinate into (degrees, micro-degrees).

    Degrees are floored so the fraction is always 0..999999, which keeps
    negative coordinates ordered the same way as positive ones. Extra
    precision beyond six decimals is rounded inwards.
    """
    rounding = ROUND_FLOOR if upper else ROUND_CEILING
    total = int((value * MICRO).to_integral_value(rounding=rounding))
    return divmod(total, MICRO)


def join_coordinate(degrees: int, fraction: int) -> Decimal:
    return Decimal(degrees) + Decimal(fraction).scaleb(-6)


class BoundingBox(BaseModel):
    """Area within which random coordinates are created"""
    model_config = ConfigDict(frozen=True)

    max_lat: Decimal = Field(..., ge=-90, le=90, description="Northern edge in decimal degrees")
    min_lat: Decimal = Field(..., ge=-90, le=90, description="Southern edge in decimal degrees")
    max_long: Decimal = Field(..., ge=-180, le=180, description="Eastern edge in decimal degrees")
    min_long: Decimal = Field(..., ge=-180, le=180, description="Western edge in decimal degrees")
    swapped: bool = Field(False, exclude=True)

    @model_validator(mode='before')
    @classmethod
    def order_bounds(cls, values):
        if not isinstance(values, dict):
            return values
        values = dict(values)
        swapped = False
        for low, high in (('min_lat', 'max_lat'), ('min_long', 'max_long')):
            if values.get(low) is None or values.get(high) is None:
                continue
            if Decimal(str(values[low])) > Decimal(str(values[high])):
                values[low], values[high] = values[high], values[low]
                swapped = True
        values['swapped'] = values.get('swapped', False) or swapped
        return values

    def _axis(self, low: Decimal, high: Decimal, rng: random.Random) -> Decimal:
        low_deg, low_frac = split_coordinate(low, upper=False)
        high_deg, high_frac = split_coordinate(high, upper=True)

        # Precision finer than a micro-degree can leave an empty range
        if (low_deg, low_frac) > (high_deg, high_frac):
            return join_coordinate(low_deg, low_frac)

        degrees = rng.randint(low_deg, high_deg)
        frac_low = low_frac if degrees == low_deg else 0
        frac_high = high_frac if degrees == high_deg else MICRO - 1
        return join_coordinate(degrees, rng.randint(frac_low, frac_high))

    def random_location(self, rng: random.Random = None) -> Tuple[Decimal, Decimal]:
        """Return a (longitude, latitude) pair inside the box"""
        rng = rng or random.Random()
        latitude = self._axis(self.min_lat, self.max_lat, rng)
        longitude = self._axis(self.min_long, self.max_long, rng)
        return longitude, latitude

    def contains(self, longitude: Decimal, latitude: Decimal) -> bool:
        return (self.min_lat <= latitude <= self.max_lat
                and self.min_long <= longitude <= self.max_long)


# Rectangle covering the bulk of England without hitting sea
# Bottom left 51.010299, -3.114624 (Taunton)
# Bottom right 51.083686, -0.145569 (Mid Sussex)
# Top left 53.810382, -3.048706 (Blackpool)
# Top right 53.745462, -0.346069 (Hull)
DEFAULT_BOX = BoundingBox(
    max_lat=Decimal('53.810382'),
    min_lat=Decimal('51.010299'),
    max_long=Decimal('-0.145569'),
    min_long=Decimal('-3.048706')
)
