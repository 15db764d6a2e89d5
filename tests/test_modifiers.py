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
"""Tests for modifier variants and the gameplay modifier service."""

import pytest

from momentum.engine.config import ModifierConfig
from momentum.engine.modifiers import (
    ACCURACY_MODIFIER_ID,
    PENALTY_RISK_MODIFIER_ID,
    GameplayModifierService,
    Modifier,
    ModifierKind,
    ModifierState,
    accuracy_modifier,
    apply_modifier,
    expire_modifier,
    penalty_risk_modifier,
)
from momentum.models.game_state import GameState
from momentum.models.team import Team


def _teams() -> tuple[Team, Team]:
    """Create a fresh home/away pair with average ratings."""
    return Team(1, "Harbor Hawks", is_home=True), Team(2, "Iron Valley Miners")


class TestModifierVariants:
    """Tagged-variant dispatch for apply and expire."""

    def test_factories_tag_kinds(self) -> None:
        """Each factory produces the matching kind and slot id."""
        acc = accuracy_modifier(0.1, 5.0, team_id=1)
        pen = penalty_risk_modifier(0.2, 5.0, team_id=1)
        assert acc.kind is ModifierKind.ACCURACY and acc.modifier_id == ACCURACY_MODIFIER_ID
        assert pen.kind is ModifierKind.PENALTY_RISK and pen.modifier_id == PENALTY_RISK_MODIFIER_ID
        assert acc.state is ModifierState.CREATED
        assert acc.instance_id != pen.instance_id

    def test_apply_is_idempotent(self) -> None:
        """Applying the same modifier twice does not compound the effect."""
        team, _ = _teams()
        modifier = accuracy_modifier(0.1, 5.0, team_id=1)
        assert apply_modifier(modifier, team)
        assert apply_modifier(modifier, team)
        assert team.effects.accuracy_bonus == pytest.approx(0.1)
        assert modifier.state is ModifierState.ACTIVE

    def test_apply_skips_other_team(self) -> None:
        """A team-scoped modifier leaves other teams untouched."""
        home, away = _teams()
        modifier = penalty_risk_modifier(0.2, 5.0, team_id=home.team_id)
        assert not apply_modifier(modifier, away)
        assert away.effects.penalty_risk == 0.0

    def test_expire_runs_once_and_clears_effect(self) -> None:
        """Expiry clears the team effect and is terminal."""
        team, _ = _teams()
        modifier = penalty_risk_modifier(0.2, 5.0, team_id=1)
        apply_modifier(modifier, team)
        assert expire_modifier(modifier, [team])
        assert team.effects.penalty_risk == 0.0
        assert not expire_modifier(modifier, [team])
        assert not apply_modifier(modifier, team)
        assert team.effects.penalty_risk == 0.0

    def test_round_trip_serialisation_keeps_identity(self) -> None:
        """A serialised modifier restores with the same slot and instance."""
        modifier = accuracy_modifier(0.12, 3.5, team_id=2)
        restored = Modifier.from_dict(modifier.to_dict())
        assert restored == modifier

    def test_restored_ids_are_not_reissued(self) -> None:
        """New modifiers never reuse an instance id loaded from a save."""
        saved = accuracy_modifier(0.1, 5.0, team_id=1).to_dict()
        saved["instance_id"] = 1_000_000
        Modifier.from_dict(saved)
        assert accuracy_modifier(0.1, 5.0, team_id=1).instance_id > 1_000_000


class TestModifierService:
    """Threshold-driven creation, ticking and expiry."""

    def test_penalty_modifier_expires_on_third_tick(self) -> None:
        """Duration 5.0 ticked by 2.0 is removed when it first reaches -1.0."""
        service = GameplayModifierService()
        modifier = penalty_risk_modifier(0.1, 5.0, team_id=1)
        assert service.add_modifier(modifier)

        assert service.remove_expired(2.0) == []
        assert modifier.duration == pytest.approx(3.0)
        assert service.remove_expired(2.0) == []
        assert modifier.duration == pytest.approx(1.0)
        assert service.remove_expired(2.0) == [modifier]
        assert modifier.duration == pytest.approx(-1.0)
        assert modifier.state is ModifierState.EXPIRED
        assert len(service) == 0
        assert service.remove_expired(2.0) == []

    def test_duration_strictly_decreases(self) -> None:
        """Each positive tick shortens the remaining lifetime."""
        service = GameplayModifierService()
        modifier = accuracy_modifier(0.1, 10.0, team_id=1)
        service.add_modifier(modifier)
        durations = [modifier.duration]
        for _ in range(4):
            service.remove_expired(0.5)
            durations.append(modifier.duration)
        assert all(later < earlier for earlier, later in zip(durations, durations[1:]))

    def test_negative_tick_does_not_extend(self) -> None:
        """Negative elapsed time neither extends nor shortens a modifier."""
        service = GameplayModifierService()
        modifier = accuracy_modifier(0.1, 4.0, team_id=1)
        service.add_modifier(modifier)
        service.remove_expired(-3.0)
        assert modifier.duration == pytest.approx(4.0)

    def test_high_momentum_creates_single_accuracy_modifier(self) -> None:
        """Applying twice in one tick keeps one accuracy modifier per team."""
        team, _ = _teams()
        service = GameplayModifierService()
        created = service.apply(team, 80, GameState())
        again = service.apply(team, 80, GameState())
        assert len(created) == 1 and again == []
        assert [m.modifier_id for m in service.active_modifiers(team)] == [ACCURACY_MODIFIER_ID]
        assert team.effects.accuracy_bonus == pytest.approx(0.15 * 0.8)
        assert created[0].duration == pytest.approx(8.0)

    def test_strength_proportional_to_momentum(self) -> None:
        """Stronger momentum produces a stronger accuracy boost."""
        home, away = _teams()
        service = GameplayModifierService()
        weaker = service.apply(home, 60, GameState())[0]
        stronger = service.apply(away, 90, GameState())[0]
        assert stronger.strength > weaker.strength
        assert stronger.strength / weaker.strength == pytest.approx(90 / 60)

    def test_negative_momentum_creates_penalty_risk(self) -> None:
        """Momentum at or below the penalty threshold raises penalty risk."""
        team, _ = _teams()
        service = GameplayModifierService()
        created = service.apply(team, -60, GameState())
        assert [m.kind for m in created] == [ModifierKind.PENALTY_RISK]
        assert created[0].strength == pytest.approx(0.2 * 0.6)
        assert created[0].duration == pytest.approx(6.0)
        assert team.effects.penalty_risk == pytest.approx(0.12)
        assert team.effects.accuracy_bonus == 0.0

    def test_ratings_shape_penalty_risk(self) -> None:
        """Poor discipline raises strength and high composure shortens the spell."""
        reckless = Team(3, "Reckless", discipline_rating=0, composure_rating=100)
        service = GameplayModifierService()
        created = service.apply(reckless, -60, GameState())[0]
        assert created.strength == pytest.approx(0.2 * 0.6 * 1.5)
        assert created.duration == pytest.approx(3.0)

    def test_neutral_momentum_creates_nothing(self) -> None:
        """Momentum between thresholds leaves the team unmodified."""
        team, _ = _teams()
        service = GameplayModifierService()
        assert service.apply(team, 20, GameState()) == []
        assert service.apply(team, -49, GameState()) == []
        assert team.effects.accuracy_bonus == 0.0 and team.effects.penalty_risk == 0.0

    def test_clutch_time_extends_duration(self) -> None:
        """Modifiers created late in a close game last longer."""
        team, _ = _teams()
        service = GameplayModifierService()
        clutch = GameState(quarter=4, time_remaining=60, score_diff=0)
        created = service.apply(team, 70, clutch)[0]
        assert created.duration == pytest.approx(12.0)

    def test_modifiers_are_per_team(self) -> None:
        """Both teams can hold their own accuracy modifier."""
        home, away = _teams()
        service = GameplayModifierService()
        service.apply(home, 75, GameState())
        service.apply(away, 75, GameState())
        assert len(service) == 2
        assert service.has_modifier(home, ACCURACY_MODIFIER_ID)
        assert service.has_modifier(away, ACCURACY_MODIFIER_ID)

    def test_expiry_clears_effect_and_new_instance_is_fresh(self) -> None:
        """An expired modifier is never revived; a new swing creates a new instance."""
        team, _ = _teams()
        service = GameplayModifierService()
        first = service.apply(team, 80, GameState())[0]
        service.remove_expired(8.0)
        assert first.state is ModifierState.EXPIRED
        assert team.effects.accuracy_bonus == 0.0

        service.apply(team, 10, GameState())
        assert team.effects.accuracy_bonus == 0.0

        second = service.apply(team, 80, GameState())[0]
        assert second is not first
        assert second.instance_id != first.instance_id
        assert first.state is ModifierState.EXPIRED

    def test_add_modifier_refuses_duplicates_and_expired(self) -> None:
        """External injection cannot stack a slot or revive a dead modifier."""
        service = GameplayModifierService()
        assert service.add_modifier(accuracy_modifier(0.1, 5.0, team_id=1))
        assert not service.add_modifier(accuracy_modifier(0.3, 5.0, team_id=1))
        assert not service.add_modifier(accuracy_modifier(0.1, 0.0, team_id=2))
        assert len(service) == 1

    def test_add_modifier_refuses_overlap_with_unscoped(self) -> None:
        """A scoped and an unscoped instance of one id never coexist."""
        service = GameplayModifierService()
        assert service.add_modifier(accuracy_modifier(0.05, 5.0))
        assert not service.add_modifier(accuracy_modifier(0.3, 5.0, team_id=1))

        other = GameplayModifierService()
        assert other.add_modifier(penalty_risk_modifier(0.1, 5.0, team_id=2))
        assert not other.add_modifier(penalty_risk_modifier(0.2, 5.0))
        assert [m.modifier_id for m in other] == [PENALTY_RISK_MODIFIER_ID]

    def test_scripted_modifier_outlives_momentum_modifier(self) -> None:
        """Expiring one accuracy modifier keeps the effect of another still active."""
        team, _ = _teams()
        service = GameplayModifierService()
        scripted = accuracy_modifier(0.3, 20.0, team_id=team.team_id, modifier_id="scripted_focus")
        assert service.add_modifier(scripted)
        service.apply(team, 80, GameState())
        assert team.effects.accuracy_bonus == pytest.approx(0.3)

        expired = service.remove_expired(8.0)
        assert [m.modifier_id for m in expired] == [ACCURACY_MODIFIER_ID]
        assert [m.modifier_id for m in service] == ["scripted_focus"]
        assert team.effects.accuracy_bonus == pytest.approx(0.3)

    def test_composed_team_gets_positive_penalty_spell(self) -> None:
        """Even with a heavy composure weight the penalty spell has a real length."""
        calm = Team(4, "Calm", composure_rating=100)
        service = GameplayModifierService(ModifierConfig(composure_weight=0.9))
        created = service.apply(calm, -80, GameState())[0]
        assert created.duration == pytest.approx(6.0 * 0.1)
        assert created.state is ModifierState.ACTIVE
        assert calm.effects.penalty_risk > 0

    @pytest.mark.parametrize(
        "overrides",
        [{"composure_weight": 1.0}, {"clutch_duration_multiplier": 0.0}, {"clutch_duration_multiplier": -1.5}],
    )
    def test_zero_length_spells_rejected(self, overrides) -> None:
        """Tuning that could create zero-length modifiers is a configuration error."""
        with pytest.raises(ValueError):
            ModifierConfig(**overrides)

    def test_unscoped_modifier_applies_to_both_teams(self) -> None:
        """A modifier without a team handle affects everyone and blocks duplicates."""
        home, away = _teams()
        service = GameplayModifierService()
        service.add_modifier(accuracy_modifier(0.05, 5.0))
        assert service.apply(home, 90, GameState()) == []
        service.apply(away, 0, GameState())
        assert home.effects.accuracy_bonus == pytest.approx(0.05)
        assert away.effects.accuracy_bonus == pytest.approx(0.05)

    def test_clear_modifiers_expires_everything(self) -> None:
        """Clearing expires each modifier and wipes team effects."""
        team, _ = _teams()
        service = GameplayModifierService()
        modifier = service.apply(team, 80, GameState())[0]
        assert team.effects.accuracy_bonus > 0
        service.clear_modifiers()
        assert len(service) == 0
        assert modifier.state is ModifierState.EXPIRED
        assert team.effects.accuracy_bonus == 0.0

    def test_snapshot_and_restore(self) -> None:
        """The active set survives a save and load."""
        home, away = _teams()
        service = GameplayModifierService()
        service.apply(home, 80, GameState())
        service.apply(away, -70, GameState())
        payload = service.snapshot()

        restored = GameplayModifierService()
        restored.restore(payload)
        assert [m.to_dict() for m in restored] == payload
