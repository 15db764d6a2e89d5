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
"""Rule engine translating gameplay events into momentum deltas.

The engine is deliberately stateless apart from its configuration: both
:meth:`MomentumRuleEngine.calculate_delta` and
:meth:`MomentumRuleEngine.apply_rivalry_multiplier` are pure so they can be
exercised without meters, teams or a running match. The base-point table is
held as a read-only mapping; :meth:`MomentumRuleEngine.set_base_points`
swaps in a fresh table rather than editing the live one.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

from momentum.engine.config import MOMENTUM_CONFIG, RuleConfig
from momentum.engine.events import EventType, MomentumEvent
from momentum.models.game_state import GameState, RivalryProfile


class MomentumRuleEngine:
    """Pure scoring rules for momentum swings.

    Parameters
    ----------
    config : RuleConfig | None, optional
        Scoring weights; the shared default configuration when omitted.
    """

    def __init__(self, config: Optional[RuleConfig] = None) -> None:
        """Load the base-point table from configuration.

        Parameters
        ----------
        config : RuleConfig | None, optional
            Scoring weights; the shared default configuration when omitted.
        """
        self.config = config or MOMENTUM_CONFIG.rules
        self._base_points: Mapping[EventType, int] = MappingProxyType(dict(self.config.base_points))

    def base_points(self, event_type: EventType) -> int:
        """Return the configured points for ``event_type``.

        Parameters
        ----------
        event_type : EventType
            Event category to look up.

        Returns
        -------
        int
            Points per unit of severity, ``0`` when unconfigured.
        """
        return self._base_points.get(event_type, 0)

    def set_base_points(self, event_type: EventType, points: int) -> None:
        """Replace the points awarded for one event type.

        Intended for match setup; changing the table mid-match behaves as a
        configuration reset for subsequent events.

        Parameters
        ----------
        event_type : EventType
            Event category to tune.
        points : int
            New points per unit of severity.
        """
        table = dict(self._base_points)
        table[event_type] = points
        self._base_points = MappingProxyType(table)

    def calculate_delta(self, event: MomentumEvent, game_state: GameState) -> int:
        """Score an event in its game context.

        Parameters
        ----------
        event : MomentumEvent
            Event reported by the dispatcher.
        game_state : GameState
            Clock and score snapshot at the time of the event.

        Returns
        -------
        int
            Momentum delta before any rivalry weighting.
        """
        base = self.base_points(event.event_type)
        severity = event.effective_severity
        if base == 0 or severity == 0:
            return 0

        delta = float(base * severity)
        cfg = self.config
        if game_state.is_late_and_close(cfg.late_game_quarter, cfg.late_game_seconds, cfg.close_score_margin):
            delta *= cfg.clutch_multiplier
        if game_state.is_online_competitive:
            delta *= cfg.online_competitive_multiplier
        return int(round(delta))

    def rivalry_multiplier(self, rivalry: RivalryProfile) -> float:
        """Return the scaling factor a rivalry applies to momentum swings.

        Parameters
        ----------
        rivalry : RivalryProfile
            Matchup context.

        Returns
        -------
        float
            ``1.0`` outside rivalry games, otherwise hostility times tier
            (tiers below one count as one).
        """
        if not rivalry.is_rivalry_game:
            return 1.0
        return max(0.0, rivalry.hostility_factor) * max(1, rivalry.tier)

    def apply_rivalry_multiplier(self, delta: int, rivalry: RivalryProfile) -> int:
        """Scale ``delta`` by the rivalry's hostility and tier.

        Parameters
        ----------
        delta : int
            Momentum delta from :meth:`calculate_delta`.
        rivalry : RivalryProfile
            Matchup context.

        Returns
        -------
        int
            ``delta`` unchanged for non-rivalry games, otherwise the scaled delta.
        """
        if not rivalry.is_rivalry_game:
            return delta
        return int(round(delta * self.rivalry_multiplier(rivalry)))
