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
"""Timed gameplay modifiers and the service that drives their lifecycle.

A modifier is a plain record tagged with a :class:`ModifierKind`; the effect it
has on a team is decided by :func:`apply_modifier` and undone by
:func:`expire_modifier`, both of which switch on the kind. Keeping modifiers as
data lets the active set be written to a save file or replay stream with
:meth:`GameplayModifierService.snapshot` and read back with
:meth:`GameplayModifierService.restore`.

Lifecycle::

    CREATED --apply--> ACTIVE --duration <= 0--> EXPIRED (removed)

``EXPIRED`` is terminal. A later momentum swing creates a new instance with a
fresh ``instance_id`` rather than reviving the old one.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterable, Iterator, List, Optional, Tuple

from momentum.engine.config import MOMENTUM_CONFIG, ModifierConfig, RuleConfig
from momentum.models.game_state import GameState
from momentum.models.team import Team

if TYPE_CHECKING:
    from momentum.utils.debug import MomentumDebugger

ACCURACY_MODIFIER_ID = "accuracy"
PENALTY_RISK_MODIFIER_ID = "penalty_risk"

_instance_ids = itertools.count(1)


class ModifierKind(Enum):
    """Effect variants a modifier can carry."""

    ACCURACY = "accuracy"
    PENALTY_RISK = "penalty_risk"


class ModifierState(Enum):
    """Lifecycle stage of a modifier instance."""

    CREATED = "created"
    ACTIVE = "active"
    EXPIRED = "expired"


def _next_instance_id() -> int:
    """Return a process-unique modifier instance number.

    Returns
    -------
    int
        Monotonically increasing identifier.
    """
    return next(_instance_ids)


def _reserve_instance_id(instance_id: int) -> None:
    """Move the instance counter past an id restored from a save.

    Parameters
    ----------
    instance_id : int
        Identifier carried by a restored modifier.
    """
    global _instance_ids
    upcoming = next(_instance_ids)
    _instance_ids = itertools.count(max(upcoming, instance_id + 1))


@dataclass
class Modifier:
    """Team-scoped gameplay effect with a finite lifetime.

    Parameters
    ----------
    modifier_id : str
        Identifier shared by all instances of the same effect, for example
        ``"accuracy"``. At most one instance per id is active for a team.
    kind : ModifierKind
        Effect variant that decides how the modifier changes a team.
    strength : float
        Magnitude of the effect on the 0-1 team effect scale.
    duration : float
        Remaining lifetime in seconds.
    team_id : int | None, optional
        Handle of the team affected. ``None`` applies the effect to both teams.
    instance_id : int, optional
        Unique number for this instance; assigned automatically.
    state : ModifierState, optional
        Lifecycle stage, ``CREATED`` for new modifiers.
    """

    modifier_id: str
    kind: ModifierKind
    strength: float
    duration: float
    team_id: Optional[int] = None
    instance_id: int = field(default_factory=_next_instance_id)
    state: ModifierState = ModifierState.CREATED

    @property
    def is_expired(self) -> bool:
        """Return ``True`` once the lifetime has run out or expiry has run."""
        return self.state is ModifierState.EXPIRED or self.duration <= 0

    @property
    def key(self) -> Tuple[Optional[int], str]:
        """Identity of the modifier slot within the service."""
        return (self.team_id, self.modifier_id)

    def applies_to(self, team: Team) -> bool:
        """Return ``True`` when the modifier targets ``team``.

        Parameters
        ----------
        team : Team
            Team being evaluated.

        Returns
        -------
        bool
            ``True`` for modifiers scoped to the team or to both teams.
        """
        return self.team_id is None or self.team_id == team.team_id

    def tick(self, delta_time: float) -> None:
        """Consume lifetime.

        Parameters
        ----------
        delta_time : float
            Elapsed seconds; negative values count as zero.
        """
        self.duration -= max(0.0, delta_time)

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the modifier to plain data for saves and replays.

        Returns
        -------
        Dict[str, Any]
            JSON-compatible mapping of every field.
        """
        return {
            "id": self.modifier_id,
            "kind": self.kind.value,
            "strength": self.strength,
            "duration": self.duration,
            "team_id": self.team_id,
            "instance_id": self.instance_id,
            "state": self.state.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Modifier":
        """Rebuild a modifier from :meth:`to_dict` output.

        Parameters
        ----------
        data : Dict[str, Any]
            Serialised modifier.

        Returns
        -------
        Modifier
            Restored instance. A fresh ``instance_id`` is issued when the
            payload does not carry one; a carried id is never reissued later.
        """
        modifier = cls(
            modifier_id=data["id"],
            kind=ModifierKind(data["kind"]),
            strength=float(data["strength"]),
            duration=float(data["duration"]),
            team_id=data.get("team_id"),
            state=ModifierState(data.get("state", ModifierState.CREATED.value)),
        )
        if data.get("instance_id") is not None:
            modifier.instance_id = int(data["instance_id"])
            _reserve_instance_id(modifier.instance_id)
        return modifier


def accuracy_modifier(
    strength: float,
    duration: float,
    team_id: Optional[int] = None,
    modifier_id: str = ACCURACY_MODIFIER_ID,
) -> Modifier:
    """Create a modifier that sharpens a team's accuracy.

    Parameters
    ----------
    strength : float
        Accuracy bonus granted while active.
    duration : float
        Lifetime in seconds.
    team_id : int | None, optional
        Team handle, ``None`` for both teams.
    modifier_id : str, optional
        Slot identifier; defaults to the momentum-driven accuracy slot.

    Returns
    -------
    Modifier
        New modifier in the ``CREATED`` state.
    """
    return Modifier(modifier_id, ModifierKind.ACCURACY, strength, duration, team_id)


def penalty_risk_modifier(
    strength: float,
    duration: float,
    team_id: Optional[int] = None,
    modifier_id: str = PENALTY_RISK_MODIFIER_ID,
) -> Modifier:
    """Create a modifier that makes a team more penalty prone.

    Parameters
    ----------
    strength : float
        Penalty-risk increase while active.
    duration : float
        Lifetime in seconds.
    team_id : int | None, optional
        Team handle, ``None`` for both teams.
    modifier_id : str, optional
        Slot identifier; defaults to the momentum-driven penalty slot.

    Returns
    -------
    Modifier
        New modifier in the ``CREATED`` state.
    """
    return Modifier(modifier_id, ModifierKind.PENALTY_RISK, strength, duration, team_id)


def apply_modifier(modifier: Modifier, team: Team) -> bool:
    """Write a modifier's effect into the team's transient state.

    Applying the same modifier repeatedly leaves the team unchanged after the
    first call; effects of one kind never stack beyond the strongest.

    Parameters
    ----------
    modifier : Modifier
        Modifier to apply.
    team : Team
        Team receiving the effect.

    Returns
    -------
    bool
        ``False`` when the modifier has expired or does not target ``team``.
    """
    if modifier.is_expired or not modifier.applies_to(team):
        return False

    effects = team.effects
    if modifier.kind is ModifierKind.ACCURACY:
        effects.accuracy_bonus = max(effects.accuracy_bonus, modifier.strength)
    elif modifier.kind is ModifierKind.PENALTY_RISK:
        effects.penalty_risk = max(effects.penalty_risk, modifier.strength)
    modifier.state = ModifierState.ACTIVE
    return True


def expire_modifier(modifier: Modifier, teams: Iterable[Team] = ()) -> bool:
    """Run a modifier's expiry hook.

    Parameters
    ----------
    modifier : Modifier
        Modifier reaching the end of its life.
    teams : Iterable[Team], optional
        Teams whose transient effect should be cleared.

    Returns
    -------
    bool
        ``True`` the first time, ``False`` if the modifier had already expired.
    """
    if modifier.state is ModifierState.EXPIRED:
        return False

    modifier.state = ModifierState.EXPIRED
    for team in teams:
        if not modifier.applies_to(team):
            continue
        if modifier.kind is ModifierKind.ACCURACY:
            team.effects.accuracy_bonus = 0.0
        elif modifier.kind is ModifierKind.PENALTY_RISK:
            team.effects.penalty_risk = 0.0
    return True


class GameplayModifierService:
    """Owns the active modifiers and turns momentum into timed effects.

    Parameters
    ----------
    config : ModifierConfig | None, optional
        Thresholds and durations; the shared default when omitted.
    rules : RuleConfig | None, optional
        Supplies the late-and-close window used to extend durations.
    debugger : MomentumDebugger | None, optional
        Optional telemetry sink for lifecycle transitions.
    """

    def __init__(
        self,
        config: Optional[ModifierConfig] = None,
        rules: Optional[RuleConfig] = None,
        debugger: Optional["MomentumDebugger"] = None,
    ) -> None:
        """Create an empty service.

        Parameters
        ----------
        config : ModifierConfig | None, optional
            Thresholds and durations.
        rules : RuleConfig | None, optional
            Late-game window configuration.
        debugger : MomentumDebugger | None, optional
            Optional telemetry sink.
        """
        self.config = config or MOMENTUM_CONFIG.modifiers
        self.rules = rules or MOMENTUM_CONFIG.rules
        self.debugger = debugger
        self.match_time = 0.0
        self._active: Dict[Tuple[Optional[int], str], Modifier] = {}
        self._teams: Dict[int, Team] = {}

    def __len__(self) -> int:
        """Return the number of active modifiers.

        Returns
        -------
        int
            Count of modifiers still alive.
        """
        return len(self._active)

    def __iter__(self) -> Iterator[Modifier]:
        """Iterate over active modifiers in creation order.

        Returns
        -------
        Iterator[Modifier]
            Iterator over a copy of the active set.
        """
        return iter(list(self._active.values()))

    def active_modifiers(self, team: Optional[Team] = None) -> List[Modifier]:
        """Return active modifiers, optionally limited to one team.

        Parameters
        ----------
        team : Team | None, optional
            Team filter; ``None`` returns every active modifier.

        Returns
        -------
        List[Modifier]
            Modifiers in creation order.
        """
        if team is None:
            return list(self._active.values())
        return [m for m in self._active.values() if m.applies_to(team)]

    def has_modifier(self, team: Team, modifier_id: str) -> bool:
        """Return ``True`` if ``modifier_id`` is active for ``team``.

        Parameters
        ----------
        team : Team
            Team to check.
        modifier_id : str
            Slot identifier to look for.

        Returns
        -------
        bool
            ``True`` when a team-scoped or unscoped instance is active.
        """
        return (team.team_id, modifier_id) in self._active or (None, modifier_id) in self._active

    def apply(self, team: Team, momentum: int, game_state: GameState) -> List[Modifier]:
        """Create threshold-driven modifiers and apply the team's active set.

        Parameters
        ----------
        team : Team
            Team being evaluated this tick.
        momentum : int
            The team's clamped, post-decay momentum.
        game_state : GameState
            Current snapshot; late, close games create longer-lived modifiers.

        Returns
        -------
        List[Modifier]
            Modifiers newly created by this call.
        """
        self._teams[team.team_id] = team
        cfg = self.config
        rules = self.rules
        duration_scale = 1.0
        if game_state.is_late_and_close(rules.late_game_quarter, rules.late_game_seconds, rules.close_score_margin):
            duration_scale = cfg.clutch_duration_multiplier

        magnitude = abs(momentum) / cfg.momentum_scale
        created: List[Modifier] = []

        if momentum >= cfg.accuracy_threshold and not self.has_modifier(team, ACCURACY_MODIFIER_ID):
            modifier = accuracy_modifier(
                cfg.accuracy_max_strength * magnitude,
                cfg.accuracy_duration * duration_scale,
                team_id=team.team_id,
            )
            self._insert(modifier, team.name)
            created.append(modifier)

        if momentum <= cfg.penalty_threshold and not self.has_modifier(team, PENALTY_RISK_MODIFIER_ID):
            # Average ratings (50) leave the base strength and duration untouched.
            discipline_scale = 1.0 + cfg.discipline_weight * (50 - team.discipline_rating) / 50
            composure_scale = 1.0 + cfg.composure_weight * (50 - team.composure_rating) / 50
            modifier = penalty_risk_modifier(
                cfg.penalty_max_strength * magnitude * discipline_scale,
                cfg.penalty_duration * duration_scale * composure_scale,
                team_id=team.team_id,
            )
            self._insert(modifier, team.name)
            created.append(modifier)

        team.effects.reset()
        for modifier in self.active_modifiers(team):
            apply_modifier(modifier, team)
        return created

    def remove_expired(self, delta_time: float) -> List[Modifier]:
        """Age every modifier and retire those whose lifetime ran out.

        Parameters
        ----------
        delta_time : float
            Elapsed seconds since the previous call; negative values count as zero.

        Returns
        -------
        List[Modifier]
            Modifiers expired and removed by this call.
        """
        elapsed = max(0.0, delta_time)
        self.match_time += elapsed
        expired: List[Modifier] = []
        for modifier in list(self._active.values()):
            modifier.tick(elapsed)
            if modifier.duration <= 0:
                self._retire(modifier)
                expired.append(modifier)
        return expired

    def add_modifier(self, modifier: Modifier) -> bool:
        """Inject a modifier outside the momentum-driven path.

        Parameters
        ----------
        modifier : Modifier
            Modifier to add, typically from a scripted scenario.

        Returns
        -------
        bool
            ``False`` when the modifier is already expired or its slot is taken.
        """
        if modifier.is_expired or self._slot_taken(modifier):
            return False
        self._insert(modifier, self._team_label(modifier.team_id))
        return True

    def clear_modifiers(self) -> None:
        """Expire and drop every active modifier."""
        for modifier in list(self._active.values()):
            self._retire(modifier)

    def snapshot(self) -> List[Dict[str, Any]]:
        """Serialise the active set.

        Returns
        -------
        List[Dict[str, Any]]
            One mapping per active modifier, in creation order.
        """
        return [modifier.to_dict() for modifier in self._active.values()]

    def restore(self, payload: Iterable[Dict[str, Any]]) -> None:
        """Replace the active set with serialised modifiers.

        Parameters
        ----------
        payload : Iterable[Dict[str, Any]]
            Output of :meth:`snapshot`. Entries already expired are skipped.
        """
        self.clear_modifiers()
        for data in payload:
            self.add_modifier(Modifier.from_dict(data))

    def _insert(self, modifier: Modifier, team_label: str) -> None:
        """Store a modifier and record its creation.

        Parameters
        ----------
        modifier : Modifier
            Modifier to store.
        team_label : str
            Team name used in telemetry.
        """
        self._active[modifier.key] = modifier
        if self.debugger:
            self.debugger.log_modifier_event(
                self.match_time,
                "created",
                modifier.modifier_id,
                team_label,
                strength=f"{modifier.strength:.3f}",
                duration=f"{modifier.duration:.1f}",
            )

    def _retire(self, modifier: Modifier) -> None:
        """Expire a modifier once and remove it from the active set.

        Parameters
        ----------
        modifier : Modifier
            Modifier to retire.
        """
        self._active.pop(modifier.key, None)
        if modifier.team_id is None:
            targets = list(self._teams.values())
        else:
            targets = [self._teams[modifier.team_id]] if modifier.team_id in self._teams else []
        if expire_modifier(modifier, targets) and self.debugger:
            self.debugger.log_modifier_event(
                self.match_time, "expired", modifier.modifier_id, self._team_label(modifier.team_id)
            )
        # Another modifier of the same kind may still be active for the team.
        for team in targets:
            self._refresh_effects(team)

    def _refresh_effects(self, team: Team) -> None:
        """Rebuild a team's effects from the modifiers still active for it.

        Parameters
        ----------
        team : Team
            Team whose transient effects are recomputed.
        """
        team.effects.reset()
        for modifier in self.active_modifiers(team):
            apply_modifier(modifier, team)

    def _slot_taken(self, modifier: Modifier) -> bool:
        """Return ``True`` when ``modifier`` would duplicate an active id.

        Parameters
        ----------
        modifier : Modifier
            Candidate modifier.

        Returns
        -------
        bool
            For a team-scoped modifier, ``True`` if the same id is active for
            that team or for both teams. For an unscoped modifier, ``True`` if
            the id is active for any team.
        """
        if modifier.team_id is None:
            return any(modifier_id == modifier.modifier_id for _, modifier_id in self._active)
        return modifier.key in self._active or (None, modifier.modifier_id) in self._active

    def _team_label(self, team_id: Optional[int]) -> str:
        """Return a readable label for a team handle.

        Parameters
        ----------
        team_id : int | None
            Team handle, ``None`` for unscoped modifiers.

        Returns
        -------
        str
            Team name when known, otherwise a placeholder.
        """
        if team_id is None:
            return "all"
        team = self._teams.get(team_id)
        return team.name if team else f"team_{team_id}"
