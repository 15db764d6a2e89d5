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
"""Event domain models for the momentum engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet

from momentum.models.team import Team


class EventType(Enum):
    """Closed set of gameplay occurrences that can swing momentum."""

    TURNOVER = "turnover"
    SACK = "sack"
    BIG_PLAY = "big_play"
    THIRD_DOWN_CONVERSION = "third_down_conversion"
    FOURTH_DOWN_CONVERSION = "fourth_down_conversion"
    MISSED_KICK = "missed_kick"
    TOUCHDOWN = "touchdown"
    INTERCEPTION = "interception"
    FUMBLE = "fumble"
    STOP = "stop"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str) -> "EventType":
        """Resolve a serialized event label, falling back to ``OTHER``.

        Parameters
        ----------
        value : str
            Label such as ``"touchdown"`` or ``"TOUCHDOWN"``.

        Returns
        -------
        EventType
            Matching member, or ``OTHER`` for unrecognised labels.
        """
        try:
            return cls(value.lower())
        except ValueError:
            return cls.OTHER


# Events committed by the source team that hand the swing to the opponent.
POSSESSION_FLIPPING_EVENTS: FrozenSet[EventType] = frozenset(
    {
        EventType.TURNOVER,
        EventType.INTERCEPTION,
        EventType.FUMBLE,
        EventType.SACK,
    }
)

HIGH_IMPACT_EVENTS: FrozenSet[EventType] = frozenset(
    {
        EventType.BIG_PLAY,
        EventType.TOUCHDOWN,
        EventType.TURNOVER,
        EventType.INTERCEPTION,
        EventType.FUMBLE,
    }
)


@dataclass(frozen=True)
class MomentumEvent:
    """Single discrete occurrence reported by the gameplay dispatcher.

    Parameters
    ----------
    event_type : EventType
        Category of the occurrence.
    source_team : Team | None
        Team that performed (or committed) the play. ``None`` when the
        dispatcher could not attribute it.
    severity : int, default=1
        Magnitude of the play; scales the base points linearly.
    timestamp : float, default=0.0
        Seconds elapsed since kickoff when the event happened.
    """

    event_type: EventType
    source_team: Team | None
    severity: int = 1
    timestamp: float = 0.0

    @property
    def effective_severity(self) -> int:
        """Return the severity clamped to zero."""
        return max(0, self.severity)

    @property
    def flips_possession(self) -> bool:
        """Return ``True`` when the swing belongs to the opponent of the source team."""
        return self.event_type in POSSESSION_FLIPPING_EVENTS

    @property
    def is_high_impact(self) -> bool:
        """Return ``True`` for plays that should make the crowd erupt."""
        return self.event_type in HIGH_IMPACT_EVENTS
