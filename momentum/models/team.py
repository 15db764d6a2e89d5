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
"""Team domain models consumed by the momentum engine."""
from dataclasses import dataclass, field


@dataclass
class TeamEffects:
    """Transient in-match adjustments written by active gameplay modifiers.

    These values describe how the team currently plays, not who the team is;
    they are recomputed every tick and never feed back into the ratings.

    Parameters
    ----------
    accuracy_bonus : float, default=0.0
        Additive boost to effective throwing and kicking accuracy (0-1 scale).
    penalty_risk : float, default=0.0
        Additive increase in the likelihood of committing a penalty (0-1 scale).
    """

    accuracy_bonus: float = 0.0
    penalty_risk: float = 0.0

    def reset(self) -> None:
        """Clear every transient adjustment."""
        self.accuracy_bonus = 0.0
        self.penalty_risk = 0.0


@dataclass
class Team:
    """Aggregate team identity plus the two behavioural ratings momentum reads.

    Parameters
    ----------
    team_id : int
        Stable identifier used as the team's handle inside the engine.
    name : str
        Display name for the team.
    is_home : bool, default=False
        Whether the team is playing at home.
    discipline_rating : int, default=50
        Resistance to penalties on a 1-100 style scale (0-100 accepted).
    composure_rating : int, default=50
        Ability to stay calm under pressure on a 0-100 scale.
    effects : TeamEffects, default=TeamEffects()
        Transient modifier effects applied during the current match.
    """

    team_id: int
    name: str
    is_home: bool = False
    discipline_rating: int = 50
    composure_rating: int = 50
    effects: TeamEffects = field(default_factory=TeamEffects)

    def __post_init__(self) -> None:
        """Validate that both ratings fall within the 0-100 scale."""
        for attr in ("discipline_rating", "composure_rating"):
            value = getattr(self, attr)
            if not 0 <= value <= 100:
                raise ValueError(f"{attr} must be between 0 and 100")

    def same_team(self, other: "Team") -> bool:
        """Return ``True`` when ``other`` carries the same team handle.

        Parameters
        ----------
        other : Team
            Team to compare against, possibly a rebuilt copy of this one.

        Returns
        -------
        bool
            ``True`` if both objects refer to the same ``team_id``.
        """
        return self.team_id == other.team_id
