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
"""Run a short headless momentum simulation using the sample match setup."""
from pathlib import Path

from momentum.engine.momentum_system import MomentumSystem
from momentum.main import run_match
from momentum.utils.debug import MomentumDebugger
from momentum.utils.generator import generate_event_stream
from momentum.utils.roster import load_match_setup


def run_short_simulation(timestep: float = 0.5, seed: int = 7) -> None:
    """Run a full game with a fixed event stream and report the final meters.

    Parameters
    ----------
    timestep : float
        Simulated seconds per tick (default 0.5).
    seed : int
        Seed for the generated event stream so runs are repeatable.
    """
    # Load teams from sample_match.json
    data_path = Path(__file__).parent.parent / "data" / "sample_match.json"
    setup = load_match_setup(str(data_path))

    debugger = MomentumDebugger()
    system = MomentumSystem(config=setup.build_config(), debugger=debugger)
    system.set_teams(setup.home, setup.away)
    system.set_rivalry_profile(setup.rivalry)

    events = generate_event_stream(setup.home, setup.away, 60 * 60, seed=seed)
    final_state = run_match(system, events, timestep=timestep, rivalry=setup.rivalry)

    debugger.close()
    print(f"Done: {len(events)} events, final margin {final_state.score_diff:+d}")
    print(f"{setup.home.name}: {system.get_momentum(setup.home):+d}")
    print(f"{setup.away.name}: {system.get_momentum(setup.away):+d}")
    print(f"Log written to {debugger.log_path}")


if __name__ == "__main__":
    run_short_simulation()
