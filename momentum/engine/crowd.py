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
"""Ambient crowd-noise intensity driven by momentum."""

from __future__ import annotations

from typing import Optional

from momentum.engine.config import MOMENTUM_CONFIG, CrowdConfig

MIN_INTENSITY = 0.0
MAX_INTENSITY = 1.0


class CrowdNoiseController:
    """Bounded crowd intensity that spikes on big plays and settles back.

    Parameters
    ----------
    config : CrowdConfig | None, optional
        Crowd tuning; the shared default configuration when omitted.
    """

    def __init__(self, config: Optional[CrowdConfig] = None) -> None:
        """Start the crowd at its resting intensity.

        Parameters
        ----------
        config : CrowdConfig | None, optional
            Crowd tuning; the shared default configuration when omitted.
        """
        self.config = config or MOMENTUM_CONFIG.crowd
        self._intensity = self.config.baseline_intensity

    def set_intensity(self, value: float) -> None:
        """Set the intensity, clamped to ``[0, 1]``.

        Parameters
        ----------
        value : float
            Requested intensity.
        """
        self._intensity = max(MIN_INTENSITY, min(MAX_INTENSITY, value))

    def get_intensity(self) -> float:
        """Return the current intensity.

        Returns
        -------
        float
            Crowd intensity in ``[0, 1]``.
        """
        return self._intensity

    def pulse_on_big_play(self, severity: int = 1) -> None:
        """Add a one-shot spike for a high-impact play.

        Parameters
        ----------
        severity : int, optional
            Size of the play; each step adds ``pulse_amount`` up to ``max_pulse``.
        """
        spike = min(self.config.max_pulse, self.config.pulse_amount * max(1, severity))
        self.set_intensity(self._intensity + spike)

    def decay(self, delta_time: float) -> None:
        """Relax toward the baseline without overshooting it.

        Parameters
        ----------
        delta_time : float
            Elapsed seconds; negative values count as zero.
        """
        step = self.config.decay_rate * max(0.0, delta_time)
        baseline = self.config.baseline_intensity
        if self._intensity > baseline:
            self.set_intensity(max(baseline, self._intensity - step))
        elif self._intensity < baseline:
            self.set_intensity(min(baseline, self._intensity + step))

    def apply_home_field_advantage(self, edge: float = 1.0) -> None:
        """Raise the intensity floor while the home side owns the momentum.

        Parameters
        ----------
        edge : float, optional
            Home momentum advantage normalised to ``[0, 1]``.
        """
        edge = max(0.0, min(1.0, edge))
        floor = self.config.baseline_intensity + self.config.home_field_bonus * edge
        if self._intensity < floor:
            self.set_intensity(floor)

    def reset(self) -> None:
        """Return the crowd to its resting intensity."""
        self._intensity = self.config.baseline_intensity
