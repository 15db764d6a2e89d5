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
"""Orchestrator that routes gameplay events into team momentum."""

from __future__ import annotations

from typing import Dict, Literal, Optional

from momentum.engine.config import MOMENTUM_CONFIG, MomentumConfig
from momentum.engine.crowd import CrowdNoiseController
from momentum.engine.events import MomentumEvent
from momentum.engine.meter import MomentumMeter
from momentum.engine.modifiers import GameplayModifierService
from momentum.engine.rules import MomentumRuleEngine
from momentum.models.game_state import GameState, RivalryProfile
from momentum.models.team import Team
from momentum.utils.debug import MomentumDebugger

Side = Literal["home", "away"]


class MomentumSystem:
    """Per-match momentum state for two competing teams.

    The system is driven from the host simulation thread: the event dispatcher
    calls :meth:`on_event` as plays happen and the tick loop calls
    :meth:`update` once per frame. Neither call blocks, and the two are never
    interleaved, so no locking is needed.

    Teams are referenced by ``team_id`` handle; a rebuilt ``Team`` object with
    the same id keeps resolving to the same meter.

    Parameters
    ----------
    config : MomentumConfig | None, optional
        Tuning for every component; the shared default when omitted.
    debugger : MomentumDebugger | None, optional
        Optional telemetry sink.
    home_meter : MomentumMeter | None, optional
        Custom meter for the home side, for example with difficulty-specific bounds.
    away_meter : MomentumMeter | None, optional
        Custom meter for the away side.
    """

    def __init__(
        self,
        config: Optional[MomentumConfig] = None,
        debugger: Optional[MomentumDebugger] = None,
        home_meter: Optional[MomentumMeter] = None,
        away_meter: Optional[MomentumMeter] = None,
    ) -> None:
        """Create neutral meters and the owned collaborators.

        Parameters
        ----------
        config : MomentumConfig | None, optional
            Tuning for every component.
        debugger : MomentumDebugger | None, optional
            Optional telemetry sink.
        home_meter : MomentumMeter | None, optional
            Custom meter for the home side.
        away_meter : MomentumMeter | None, optional
            Custom meter for the away side.
        """
        self.config = config or MOMENTUM_CONFIG
        self.debugger = debugger
        self.rules = MomentumRuleEngine(self.config.rules)
        self.meters: Dict[Side, MomentumMeter] = {
            "home": home_meter or MomentumMeter(config=self.config.meter),
            "away": away_meter or MomentumMeter(config=self.config.meter),
        }
        self.modifier_service = GameplayModifierService(self.config.modifiers, self.config.rules, debugger)
        self.crowd = CrowdNoiseController(self.config.crowd)
        self.match_time = 0.0
        self._teams: Dict[Side, Team] = {}
        self._rivalry_profile: Optional[RivalryProfile] = None
        self._game_state = GameState()

    @property
    def home_team(self) -> Optional[Team]:
        """Team registered as the home side."""
        return self._teams.get("home")

    @property
    def away_team(self) -> Optional[Team]:
        """Team registered as the away side."""
        return self._teams.get("away")

    @property
    def game_state(self) -> GameState:
        """Most recent snapshot received by :meth:`update`."""
        return self._game_state

    def set_teams(self, home_team: Team, away_team: Team) -> None:
        """Register the two teams; takes effect from the next event or tick.

        Parameters
        ----------
        home_team : Team
            Home side.
        away_team : Team
            Away side.

        Raises
        ------
        ValueError
            If both teams share a ``team_id``.
        """
        if home_team.team_id == away_team.team_id:
            raise ValueError(f"home and away teams share team_id {home_team.team_id}")
        self._teams = {"home": home_team, "away": away_team}

    def set_rivalry_profile(self, profile: RivalryProfile) -> None:
        """Set the rivalry used to weight subsequent events.

        Parameters
        ----------
        profile : RivalryProfile
            Matchup context for the rest of the match.
        """
        self._rivalry_profile = profile

    @property
    def rivalry_profile(self) -> RivalryProfile:
        """Rivalry in force: the configured profile, else the snapshot's."""
        if self._rivalry_profile is not None:
            return self._rivalry_profile
        return self._game_state.rivalry

    def on_event(self, event: MomentumEvent) -> int:
        """Score an event and credit the delta to the right team's meter.

        Possession-flipping plays (turnovers, sacks and the like) are credited
        to the opponent of the team that committed them. Events arriving before
        :meth:`set_teams`, or from a team that is not playing, are dropped.

        Parameters
        ----------
        event : MomentumEvent
            Event reported by the gameplay dispatcher.

        Returns
        -------
        int
            Delta added to the credited meter; ``0`` when the event was dropped.
        """
        source_side = self._side_for(event.source_team)
        if source_side is None:
            if self.debugger:
                self.debugger.log_error(
                    "dropped_event",
                    f"{event.event_type.value} at {event.timestamp:.1f}s has no registered source team",
                )
            return 0

        credited_side = self._opponent(source_side) if event.flips_possession else source_side
        delta = self.rules.calculate_delta(event, self._game_state)
        delta = self.rules.apply_rivalry_multiplier(delta, self.rivalry_profile)
        self.meters[credited_side].add(delta)

        if event.is_high_impact and event.effective_severity > 0:
            self.crowd.pulse_on_big_play(event.effective_severity)
            if self.debugger:
                self.debugger.log_crowd_state(event.timestamp, self.crowd.get_intensity(), "pulse")

        if self.debugger:
            self.debugger.log_momentum_event(
                event.timestamp,
                event.event_type.value,
                self._teams[source_side].name,
                self._teams[credited_side].name,
                delta,
            )
        return delta

    def update(self, game_state: GameState, delta_time: float) -> None:
        """Advance one simulation tick.

        Meters decay and clamp before modifiers are re-evaluated, so modifier
        decisions always see post-decay momentum.

        Parameters
        ----------
        game_state : GameState
            Fresh snapshot from the host simulation.
        delta_time : float
            Seconds since the previous tick; negative values count as zero.
        """
        dt = max(0.0, delta_time)
        self._game_state = game_state
        self.match_time += dt

        for meter in self.meters.values():
            meter.decay(dt)
            meter.clamp()
        self.crowd.decay(dt)

        self.modifier_service.remove_expired(dt)
        for side, team in self._teams.items():
            self.modifier_service.apply(team, self.meters[side].get_value(), game_state)

        home_meter = self.meters["home"]
        edge = home_meter.get_value() - self.meters["away"].get_value()
        if self._teams and edge > 0 and home_meter.max_value > 0:
            self.crowd.apply_home_field_advantage(edge / home_meter.max_value)

        if self.debugger:
            self.debugger.log_meter_state(
                self.match_time, self.meters["home"].get_value(), self.meters["away"].get_value()
            )

    def get_momentum(self, team: Team) -> int:
        """Return the current momentum for ``team``.

        Parameters
        ----------
        team : Team
            Team to query; matched by ``team_id``.

        Returns
        -------
        int
            Clamped meter value, ``0`` for teams not in this match.
        """
        side = self._side_for(team)
        if side is None:
            return 0
        return self.meters[side].get_value()

    def get_crowd_intensity(self) -> float:
        """Return the crowd intensity for audio and visual consumers.

        Returns
        -------
        float
            Intensity in ``[0, 1]``.
        """
        return self.crowd.get_intensity()

    def reset(self) -> None:
        """Return meters, modifiers and crowd to their pre-match state."""
        for meter in self.meters.values():
            meter.reset()
        self.modifier_service.clear_modifiers()
        for team in self._teams.values():
            team.effects.reset()
        self.crowd.reset()
        self.match_time = 0.0
        self._game_state = GameState()

    def _side_for(self, team: Optional[Team]) -> Optional[Side]:
        """Resolve a team to the side it plays for.

        Parameters
        ----------
        team : Team | None
            Team to resolve.

        Returns
        -------
        Optional[Side]
            ``"home"`` or ``"away"``, or ``None`` when unknown or teams are unset.
        """
        if team is None:
            return None
        for side, registered in self._teams.items():
            if registered.same_team(team):
                return side
        return None

    @staticmethod
    def _opponent(side: Side) -> Side:
        """Return the other side.

        Parameters
        ----------
        side : Side
            ``"home"`` or ``"away"``.

        Returns
        -------
        Side
            The opposing side.
        """
        return "away" if side == "home" else "home"
