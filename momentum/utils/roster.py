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
"""Utilities for constructing match setups from serialized data sources.

The helpers in this module translate plain dictionaries or JSON payloads into
the domain objects the momentum engine understands: the two teams, the rivalry
profile and any base-point overrides for the rule engine. They are used by the
demo entrypoint and test fixtures so a match can be configured without
hand-coding every object. Missing values fall back to neutral defaults so that
partial documents stay usable.
"""
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Tuple

from momentum.engine.config import MomentumConfig, RuleConfig
from momentum.engine.events import EventType
from momentum.models.game_state import RivalryProfile
from momentum.models.team import Team


@dataclass
class MatchSetup:
    """Everything needed to prepare a momentum system for one match.

    Parameters
    ----------
    home : Team
        Home side.
    away : Team
        Away side.
    rivalry : RivalryProfile
        Matchup context.
    base_points : Dict[EventType, int]
        Base-point overrides; event types not listed keep their defaults.
    """

    home: Team
    away: Team
    rivalry: RivalryProfile = field(default_factory=RivalryProfile)
    base_points: Dict[EventType, int] = field(default_factory=dict)

    def build_config(self) -> MomentumConfig:
        """Return a configuration with this setup's base points applied.

        Returns
        -------
        MomentumConfig
            Default tuning with the overrides merged into the rule table.
        """
        rules = RuleConfig()
        rules.base_points.update(self.base_points)
        return MomentumConfig(rules=rules)


def team_from_dict(d: dict, is_home: bool = False) -> Team:
    """Build a ``Team`` from a plain dictionary payload.

    Parameters
    ----------
    d
        Mapping with ``id``, ``name`` and optional ``discipline`` and
        ``composure`` ratings (either bare or under a ``ratings`` mapping).
    is_home
        Whether the team is the home side.

    Returns
    -------
    Team
        Team with neutral ratings for any missing value.
    """
    ratings = d.get("ratings", {}) or {}
    return Team(
        team_id=d.get("id", 0),
        name=d.get("name", f"team_{d.get('id', 0)}"),
        is_home=is_home,
        discipline_rating=ratings.get("discipline", d.get("discipline", 50)),
        composure_rating=ratings.get("composure", d.get("composure", 50)),
    )


def rivalry_from_dict(d: dict) -> RivalryProfile:
    """Build a ``RivalryProfile`` from a plain dictionary payload.

    Parameters
    ----------
    d
        Mapping with optional ``name``, ``tier``, ``hostility`` and
        ``is_rivalry`` keys. An empty mapping means no rivalry.

    Returns
    -------
    RivalryProfile
        Parsed profile.
    """
    return RivalryProfile(
        name=d.get("name", ""),
        tier=int(d.get("tier", 0)),
        hostility_factor=float(d.get("hostility", 1.0)),
        is_rivalry_game=bool(d.get("is_rivalry", bool(d))),
    )


def base_points_from_dict(d: dict) -> Dict[EventType, int]:
    """Parse base-point overrides keyed by event label.

    Parameters
    ----------
    d
        Mapping such as ``{"touchdown": 25, "sack": 8}``. Unknown labels are
        ignored rather than folded into ``OTHER``.

    Returns
    -------
    Dict[EventType, int]
        Overrides keyed by event type.
    """
    points: Dict[EventType, int] = {}
    known = {member.value for member in EventType}
    for label, value in d.items():
        if label.lower() in known:
            points[EventType(label.lower())] = int(value)
    return points


def load_match_setup(path: str) -> MatchSetup:
    """Load a match setup from the repository's JSON schema.

    Parameters
    ----------
    path
        The filesystem path to a JSON document following the
        ``data/sample_match.json`` schema.

    Returns
    -------
    MatchSetup
        Teams, rivalry and rule overrides ready to hand to a momentum system.

    Raises
    ------
    FileNotFoundError
        Raised when ``path`` does not exist.
    KeyError
        Raised when the JSON payload is missing the ``home`` or ``away`` section.

    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Match setup JSON not found: {path}")

    with p.open("r", encoding="utf-8") as fh:
        data = json.load(fh)

    home = team_from_dict(data["home"], is_home=True)
    away = team_from_dict(data["away"], is_home=False)
    return MatchSetup(
        home=home,
        away=away,
        rivalry=rivalry_from_dict(data.get("rivalry", {}) or {}),
        base_points=base_points_from_dict(data.get("base_points", {}) or {}),
    )


def load_teams_from_json(path: str) -> Tuple[Team, Team]:
    """Load only the home and away teams from a match setup document.

    Parameters
    ----------
    path
        Path to a match setup JSON document.

    Returns
    -------
    tuple[Team, Team]
        ``(home, away)`` teams.
    """
    setup = load_match_setup(path)
    return setup.home, setup.away
