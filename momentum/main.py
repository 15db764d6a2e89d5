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
"""Entry point for manual momentum simulations."""
from pathlib import Path
from typing import Callable, List, Optional

from momentum.engine.events import EventType, MomentumEvent
from momentum.engine.momentum_system import MomentumSystem
from momentum.models.game_state import GameState, RivalryProfile
from momentum.models.team import Team
from momentum.utils.debug import MomentumDebugger
from momentum.utils.generator import generate_event_stream, generate_team  # Fallback if no setup file
from momentum.utils.roster import load_match_setup  # For loading saved match setups

QUARTER_LENGTH = 15 * 60  # seconds
QUARTERS = 4
TOUCHDOWN_POINTS = 7


def run_match(
    system: MomentumSystem,
    events: List[MomentumEvent],
    timestep: float = 1.0,
    rivalry: Optional[RivalryProfile] = None,
    on_tick: Optional[Callable[[GameState, MomentumSystem], None]] = None,
) -> GameState:
    """Drive a momentum system through a full game with a fixed timestep.

    Events whose timestamp falls inside a tick are dispatched before that
    tick's update, mirroring how a host drains its event queue.

    Parameters
    ----------
    system : MomentumSystem
        System with both teams already registered.
    events : List[MomentumEvent]
        Time-ordered events, timestamps in seconds since kickoff.
    timestep : float
        Simulated seconds per tick.
    rivalry : Optional[RivalryProfile]
        Rivalry embedded in every snapshot; none when omitted.
    on_tick : Optional[Callable[[GameState, MomentumSystem], None]]
        Callback invoked after every update.

    Returns
    -------
    GameState
        Snapshot at the final whistle.
    """
    if timestep <= 0:
        raise ValueError("timestep must be positive")
    home = system.home_team
    rivalry = rivalry or RivalryProfile()
    pending = sorted(events, key=lambda e: e.timestamp)
    index = 0
    score_diff = 0
    elapsed = 0.0
    total = QUARTERS * QUARTER_LENGTH
    state = GameState(rivalry=rivalry)

    while elapsed < total:
        elapsed = min(total, elapsed + timestep)
        while index < len(pending) and pending[index].timestamp < elapsed:
            event = pending[index]
            index += 1
            system.on_event(event)
            if event.event_type is EventType.TOUCHDOWN and event.source_team is not None and home is not None:
                score_diff += TOUCHDOWN_POINTS if event.source_team.same_team(home) else -TOUCHDOWN_POINTS

        quarter = min(QUARTERS, int(elapsed // QUARTER_LENGTH) + 1)
        remaining = max(0, int(quarter * QUARTER_LENGTH - elapsed))
        state = GameState(
            quarter=quarter,
            time_remaining=remaining,
            score_diff=score_diff,
            rivalry=rivalry,
        )
        system.update(state, timestep)
        if on_tick:
            on_tick(state, system)

    return state


def print_match_status(state: GameState, system: MomentumSystem) -> None:
    """Print momentum and crowd status at the top of every fifth minute.

    Parameters
    ----------
    state : GameState
        Snapshot from the tick just processed.
    system : MomentumSystem
        System being driven.
    """
    if state.time_remaining % 300 != 0:
        return
    home, away = system.home_team, system.away_team
    if home is None or away is None:
        return
    clock = f"Q{state.quarter} {state.time_remaining // 60:02d}:00"
    active = ", ".join(f"{m.modifier_id}@{m.team_id}" for m in system.modifier_service.active_modifiers()) or "none"
    print(
        f"{clock} | {home.name} {system.get_momentum(home):+4d} | {away.name} {system.get_momentum(away):+4d} "
        f"| crowd {system.get_crowd_intensity():.2f} | modifiers: {active}"
    )


def main() -> None:
    """Simulate a demo game and print how momentum swings."""
    # Try to load a match setup, fall back to generated teams if not found
    setup_file = Path("data/sample_match.json")
    rivalry = None
    config = None
    if setup_file.exists():
        try:
            setup = load_match_setup(str(setup_file))
            home_team, away_team = setup.home, setup.away
            rivalry = setup.rivalry
            config = setup.build_config()
        except (KeyError, ValueError) as e:
            print(f"Error loading match setup from {setup_file}: {e}")
            print("Falling back to generated teams...")
            home_team = generate_team(1, "Harbor Hawks", is_home=True)
            away_team = generate_team(2, "Iron Valley Miners")
    else:
        print(f"No match setup found at {setup_file}")
        print("Using generated teams...")
        home_team = generate_team(1, "Harbor Hawks", is_home=True)
        away_team = generate_team(2, "Iron Valley Miners")

    debugger = MomentumDebugger()
    system = MomentumSystem(config=config, debugger=debugger)
    system.set_teams(home_team, away_team)
    if rivalry is not None:
        system.set_rivalry_profile(rivalry)

    events = generate_event_stream(home_team, away_team, QUARTERS * QUARTER_LENGTH)
    final_state = run_match(system, events, rivalry=rivalry, on_tick=print_match_status)
    debugger.close()

    print(f"\nFinal margin (home): {final_state.score_diff:+d}")
    print(f"{home_team.name}: momentum {system.get_momentum(home_team):+d}")
    print(f"{away_team.name}: momentum {system.get_momentum(away_team):+d}")
    print(f"Events processed: {len(events)}")


if __name__ == "__main__":
    main()
