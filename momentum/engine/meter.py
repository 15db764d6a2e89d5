# Copyright (C) 2025 Richard Owen
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""Bounded, decaying momentum accumulator."""

from __future__ import annotations

from typing import Optional

from momentum.engine.config import MOMENTUM_CONFIG, MeterConfig


class MomentumMeter:
    """Signed momentum scalar for one team that drifts back toward neutral.

    The meter keeps fractional decay internally so that small per-frame
    ``delta_time`` values still wear momentum down; observers only ever see
    the integer part, truncated toward zero.

    Parameters
    ----------
    min_value : int | None, optional
        Lowest allowed value. Defaults to the configured meter minimum.
    max_value : int | None, optional
        Highest allowed value. Defaults to the configured meter maximum.
    decay_rate : float | None, optional
        Points per second removed by :meth:`decay`. Defaults to the configured rate.
    config : MeterConfig | None, optional
        Configuration block supplying any value not passed explicitly.
    """

    def __init__(
        self,
        min_value: Optional[int] = None,
        max_value: Optional[int] = None,
        decay_rate: Optional[float] = None,
        config: Optional[MeterConfig] = None,
    ) -> None:
        """Create a neutral meter, failing fast on inconsistent bounds.

        Parameters
        ----------
        min_value : int | None, optional
            Lowest allowed value.
        max_value : int | None, optional
            Highest allowed value.
        decay_rate : float | None, optional
            Points per second removed by :meth:`decay`.
        config : MeterConfig | None, optional
            Fallback configuration for omitted values.

        Raises
        ------
        ValueError
            If ``min_value`` exceeds ``max_value`` or ``decay_rate`` is negative.
        """
        cfg = config or MOMENTUM_CONFIG.meter
        self.min_value = cfg.min_value if min_value is None else min_value
        self.max_value = cfg.max_value if max_value is None else max_value
        self.decay_rate = cfg.decay_rate if decay_rate is None else decay_rate

        if self.min_value > self.max_value:
            raise ValueError(f"min_value ({self.min_value}) must not exceed max_value ({self.max_value})")
        if self.decay_rate < 0:
            raise ValueError("decay_rate must be non-negative")

        self._value = 0.0
        self.clamp()

    @property
    def value(self) -> int:
        """Current momentum as an integer."""
        return self.get_value()

    def get_value(self) -> int:
        """Return the current clamped momentum.

        Returns
        -------
        int
            Meter value truncated toward zero.
        """
        return int(self._value)

    def add(self, points: int) -> None:
        """Accumulate a momentum swing and re-apply the bounds.

        Parameters
        ----------
        points : int
            Signed number of points to add.
        """
        self._value += points
        self.clamp()

    def decay(self, delta_time: float) -> None:
        """Pull the value toward zero without crossing it.

        Parameters
        ----------
        delta_time : float
            Elapsed seconds since the previous decay; negative values count as zero.
        """
        step = self.decay_rate * max(0.0, delta_time)
        if self._value > 0:
            self._value = max(0.0, self._value - step)
        elif self._value < 0:
            self._value = min(0.0, self._value + step)
        self.clamp()

    def clamp(self) -> None:
        """Force the value into ``[min_value, max_value]``."""
        self._value = max(float(self.min_value), min(float(self.max_value), self._value))

    def reset(self) -> None:
        """Return the meter to neutral momentum."""
        self._value = 0.0
        self.clamp()

    def __repr__(self) -> str:
        """Return a compact debug representation.

        Returns
        -------
        str
            Value and bounds of the meter.
        """
        return f"MomentumMeter(value={self.get_value()}, bounds=[{self.min_value}, {self.max_value}])"
