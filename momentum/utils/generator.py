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
"""Utilities that synthesise teams and event streams for quick simulations."""
import random
from typing import List, Optional

from momentum.engine.events import EventType, MomentumEvent
from momentum.models.team import Team

# Relative frequency of each event type in a generated stream.
EVENT_WEIGHTS = {
    EventType.THIRD_DOWN_CONVERSION: 10,
    EventType.STOP: 8,
    EventType.BIG_PLAY: 6,
    EventType.SACK: 5,
    EventType.TOUCHDOWN: 4,
    EventType.FOURTH_DOWN_CONVERSION: 2,
    EventType.INTERCEPTION: 2,
    EventType.FUMBLE: 2,
    EventType.TURNOVER: 1,
    EventType.MISSED_KICK: 1,
    EventType.OTHER: 3,
}

TEAM_NAMES = ["Harbor Hawks", "Iron Valley Miners", "Capital Comets", "Prairie Storm", "Bayou Gators"]


def generate_team(
    id: int,
    name: Optional[str] = None,
    is_home: bool = False,
    rng: Optional[random.Random] = None,
) -> Team:
    """Generate a team with random behavioural ratings.

    Parameters
    ----------
    id : int
        Unique identifier assigned to the generated team.
    name : Optional[str]
        Team name to apply; picked at random when ``None``.
    is_home : bool
        Whether the team is the home side.
    rng : Optional[random.Random]
        Random source; a fresh generator when ``None``.

    Returns
    -------
    Team
        Team with discipline and composure ratings between 30 and 90.
    """
    rng = rng or random.Random()
    if name is None:
        name = rng.choice(TEAM_NAMES)
    return Team(
        team_id=id,
        name=name,
        is_home=is_home,
        discipline_rating=rng.randint(30, 90),
        composure_rating=rng.randint(30, 90),
    )


def generate_random_event(
    home: Team,
    away: Team,
    timestamp: float,
    rng: Optional[random.Random] = None,
) -> MomentumEvent:
    """Generate a single plausible gameplay event.

    Parameters
    ----------
    home : Team
        Home side.
    away : Team
        Away side.
    timestamp : float
        Seconds since kickoff to stamp on the event.
    rng : Optional[random.Random]
        Random source; a fresh generator when ``None``.

    Returns
    -------
    MomentumEvent
        Event sourced from either team with severity 1-3.
    """
    rng = rng or random.Random()
    event_types = list(EVENT_WEIGHTS)
    event_type = rng.choices(event_types, weights=[EVENT_WEIGHTS[t] for t in event_types])[0]
    source = home if rng.random() < 0.5 else away
    # Most plays are routine; severe swings are rare.
    severity = rng.choices([1, 2, 3], weights=[6, 3, 1])[0]
    return MomentumEvent(event_type, source, severity, timestamp)


def generate_event_stream(
    home: Team,
    away: Team,
    duration: float,
    mean_interval: float = 40.0,
    seed: Optional[int] = None,
) -> List[MomentumEvent]:
    """Generate a time-ordered stream of events covering ``duration`` seconds.

    Parameters
    ----------
    home : Team
        Home side.
    away : Team
        Away side.
    duration : float
        Length of simulated game time in seconds.
    mean_interval : float
        Average number of seconds between events.
    seed : Optional[int]
        Seed for reproducible streams.

    Returns
    -------
    List[MomentumEvent]
        Events sorted by timestamp, all within ``[0, duration)``.
    """
    if mean_interval <= 0:
        raise ValueError("mean_interval must be positive")
    rng = random.Random(seed)
    events: List[MomentumEvent] = []
    t = rng.expovariate(1.0 / mean_interval)
    while t < duration:
        events.append(generate_random_event(home, away, t, rng))
        t += rng.expovariate(1.0 / mean_interval)
    return events
