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
"""Tests for the momentum rule engine."""

from momentum.engine.config import RuleConfig
from momentum.engine.events import EventType, MomentumEvent
from momentum.engine.rules import MomentumRuleEngine
from momentum.models.game_state import GameState, RivalryProfile
from momentum.models.team import Team

TEAM = Team(team_id=1, name="Harbor Hawks", is_home=True)


def _event(event_type: EventType, severity: int = 1) -> MomentumEvent:
    """Build an event sourced from the shared test team."""
    return MomentumEvent(event_type, TEAM, severity, timestamp=10.0)


class TestCalculateDelta:
    """Base points, severity scaling and game-context weighting."""

    def test_touchdown_scales_linearly_with_severity(self) -> None:
        """Touchdown worth 25 at severity 2 yields 50."""
        engine = MomentumRuleEngine()
        engine.set_base_points(EventType.TOUCHDOWN, 25)
        assert engine.calculate_delta(_event(EventType.TOUCHDOWN, 2), GameState()) == 50

    def test_zero_severity_yields_zero(self) -> None:
        """Severity 0 scores nothing regardless of type."""
        engine = MomentumRuleEngine()
        for event_type in EventType:
            assert engine.calculate_delta(_event(event_type, 0), GameState()) == 0

    def test_negative_severity_is_clamped(self) -> None:
        """Negative severity behaves like zero."""
        engine = MomentumRuleEngine()
        assert engine.calculate_delta(_event(EventType.TOUCHDOWN, -3), GameState()) == 0

    def test_unconfigured_type_yields_zero(self) -> None:
        """Event types missing from the table score zero even in clutch time."""
        engine = MomentumRuleEngine(RuleConfig(base_points={}))
        clutch = GameState(quarter=4, time_remaining=30, score_diff=0, is_online_competitive=True)
        assert engine.calculate_delta(_event(EventType.TOUCHDOWN, 3), clutch) == 0
        assert engine.base_points(EventType.TOUCHDOWN) == 0

    def test_other_defaults_to_zero(self) -> None:
        """The catch-all event type carries no momentum by default."""
        engine = MomentumRuleEngine()
        assert engine.calculate_delta(_event(EventType.OTHER, 2), GameState()) == 0

    def test_set_base_points_does_not_touch_config(self) -> None:
        """Tuning the engine leaves its source configuration intact."""
        config = RuleConfig()
        engine = MomentumRuleEngine(config)
        engine.set_base_points(EventType.SACK, 40)
        assert engine.base_points(EventType.SACK) == 40
        assert config.base_points[EventType.SACK] == 8

    def test_late_close_game_amplifies(self) -> None:
        """A sack in the final minutes of a one-score game counts 1.5x."""
        engine = MomentumRuleEngine()
        clutch = GameState(quarter=4, time_remaining=120, score_diff=3)
        assert engine.calculate_delta(_event(EventType.SACK), clutch) == 12

    def test_blowout_is_not_amplified(self) -> None:
        """Late swings in a lopsided game keep their base value."""
        engine = MomentumRuleEngine()
        blowout = GameState(quarter=4, time_remaining=120, score_diff=-21)
        assert engine.calculate_delta(_event(EventType.SACK), blowout) == 8

    def test_early_close_game_is_not_amplified(self) -> None:
        """A tight score early in the game is not clutch time."""
        engine = MomentumRuleEngine()
        early = GameState(quarter=2, time_remaining=60, score_diff=0)
        assert engine.calculate_delta(_event(EventType.SACK), early) == 8

    def test_online_competitive_multiplier_when_configured(self) -> None:
        """Ranked online play amplifies swings only when configured to."""
        online = GameState(is_online_competitive=True)
        assert MomentumRuleEngine().calculate_delta(_event(EventType.SACK), online) == 8
        tuned = MomentumRuleEngine(RuleConfig(online_competitive_multiplier=2.0))
        assert tuned.calculate_delta(_event(EventType.SACK), online) == 16

    def test_missed_kick_is_negative(self) -> None:
        """A missed kick costs the kicking team momentum."""
        engine = MomentumRuleEngine()
        assert engine.calculate_delta(_event(EventType.MISSED_KICK, 2), GameState()) == -12

    def test_calculate_delta_is_pure(self) -> None:
        """Repeated calls with the same input return the same result."""
        engine = MomentumRuleEngine()
        event = _event(EventType.BIG_PLAY, 3)
        state = GameState(quarter=4, time_remaining=10, score_diff=1)
        first = engine.calculate_delta(event, state)
        assert engine.calculate_delta(event, state) == first
        assert engine.base_points(EventType.BIG_PLAY) == 10


class TestRivalryMultiplier:
    """Rivalry weighting of deltas."""

    def test_non_rivalry_returns_delta_unchanged(self) -> None:
        """Without the rivalry flag hostility and tier are ignored."""
        engine = MomentumRuleEngine()
        profile = RivalryProfile("Not Yet", tier=5, hostility_factor=3.0, is_rivalry_game=False)
        for delta in (-40, -1, 0, 1, 15, 99):
            assert engine.apply_rivalry_multiplier(delta, profile) == delta

    def test_interception_rivalry_scenario(self) -> None:
        """Tier 2 with hostility 1.5 triples a 15-point swing."""
        engine = MomentumRuleEngine()
        profile = RivalryProfile("Coastline Cup", tier=2, hostility_factor=1.5, is_rivalry_game=True)
        assert engine.apply_rivalry_multiplier(15, profile) == 45

    def test_low_tier_uses_hostility_only(self) -> None:
        """Tiers below one still apply the hostility factor."""
        engine = MomentumRuleEngine()
        profile = RivalryProfile("New Feud", tier=0, hostility_factor=2.0, is_rivalry_game=True)
        assert engine.apply_rivalry_multiplier(10, profile) == 20

    def test_multiplier_monotonic_in_hostility_and_tier(self) -> None:
        """Raising hostility or tier never shrinks a positive swing."""
        engine = MomentumRuleEngine()
        hostilities = [0.0, 0.5, 1.0, 1.25, 1.5, 2.0, 3.0]
        tiers = [0, 1, 2, 3, 4, 5]
        for hostility in hostilities:
            previous = None
            for tier in tiers:
                profile = RivalryProfile("x", tier=tier, hostility_factor=hostility, is_rivalry_game=True)
                value = engine.apply_rivalry_multiplier(15, profile)
                if previous is not None:
                    assert value >= previous
                previous = value
        for tier in tiers:
            previous = None
            for hostility in hostilities:
                profile = RivalryProfile("x", tier=tier, hostility_factor=hostility, is_rivalry_game=True)
                value = engine.apply_rivalry_multiplier(15, profile)
                if previous is not None:
                    assert value >= previous
                previous = value

    def test_rivalry_multiplier_factor(self) -> None:
        """The raw factor is 1.0 outside rivalry games."""
        engine = MomentumRuleEngine()
        assert engine.rivalry_multiplier(RivalryProfile()) == 1.0
        profile = RivalryProfile("x", tier=3, hostility_factor=1.2, is_rivalry_game=True)
        assert abs(engine.rivalry_multiplier(profile) - 3.6) < 1e-9
