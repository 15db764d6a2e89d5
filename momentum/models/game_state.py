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
"""Read-only context snapshots handed to the momentum engine each tick."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class RivalryProfile:
    """Static description of the matchup being played.

    Parameters
    ----------
    name : str, default=""
        Label for the rivalry, for example ``"Battle of the Bay"``.
    tier : int, default=0
        Ordinal intensity of the rivalry; higher tiers swing harder.
    hostility_factor : float, default=1.0
        Multiplier applied to momentum swings in rivalry games.
    is_rivalry_game : bool, default=False
        Whether rivalry weighting applies at all.
    """

    name: str = ""
    tier: int = 0
    hostility_factor: float = 1.0
    is_rivalry_game: bool = False

    def __post_init__(self) -> None:
        """Reject negative tiers and hostility factors."""
        if self.tier < 0:
            raise ValueError("tier must be non-negative")
        if self.hostility_factor < 0:
            raise ValueError("hostility_factor must be non-negative")


@dataclass(frozen=True, slots=True)
class GameState:
    """Per-tick snapshot of the clock, score and matchup.

    Parameters
    ----------
    quarter : int, default=1
        Current quarter; values above four denote overtime periods.
    time_remaining : int, default=900
        Seconds left on the game clock in the current quarter.
    score_diff : int, default=0
        Home score minus away score.
    is_online_competitive : bool, default=False
        Whether the match is a ranked online game.
    rivalry : RivalryProfile, default=RivalryProfile()
        Matchup context embedded in the snapshot.
    """

    quarter: int = 1
    time_remaining: int = 900  # 15 minute quarters
    score_diff: int = 0
    is_online_competitive: bool = False
    rivalry: RivalryProfile = field(default_factory=RivalryProfile)

    def __post_init__(self) -> None:
        """Validate the clock fields."""
        if self.quarter < 1:
            raise ValueError("quarter must be at least 1")
        if self.time_remaining < 0:
            raise ValueError("time_remaining must be non-negative")

    def is_late_and_close(self, late_quarter: int, late_seconds: int, close_margin: int) -> bool:
        """Return ``True`` when a swing now could decide the game.

        Parameters
        ----------
        late_quarter : int
            First quarter that can count as late.
        late_seconds : int
            Remaining clock at or below which the quarter counts as late.
        close_margin : int
            Largest absolute score differential still treated as close.

        Returns
        -------
        bool
            ``True`` for a late clock in a one-score game.
        """
        return (
            self.quarter >= late_quarter
            and self.time_remaining <= late_seconds
            and abs(self.score_diff) <= close_margin
        )
