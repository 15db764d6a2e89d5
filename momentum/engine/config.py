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
"""Central configuration for momentum tuning parameters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from momentum.engine.events import EventType


def _default_base_points() -> Dict[EventType, int]:
    """Return the stock base-point table used by a fresh rule engine.

    Returns
    -------
    Dict[EventType, int]
        Points awarded per unit of severity for each event type.
    """
    return {
        EventType.TURNOVER: 15,
        EventType.SACK: 8,
        EventType.BIG_PLAY: 10,
        EventType.THIRD_DOWN_CONVERSION: 5,
        EventType.FOURTH_DOWN_CONVERSION: 10,
        EventType.MISSED_KICK: -6,
        EventType.TOUCHDOWN: 25,
        EventType.INTERCEPTION: 15,
        EventType.FUMBLE: 15,
        EventType.STOP: 6,
        EventType.OTHER: 0,
    }


@dataclass(slots=True)
class MeterConfig:
    """Bounds and decay applied to each team's momentum meter.

    Parameters
    ----------
    min_value : int, default=-100
        Lowest value the meter may hold.
    max_value : int, default=100
        Highest value the meter may hold.
    decay_rate : float, default=0.25
        Momentum points shed per second while drifting back toward zero.
    """

    min_value: int = -100
    max_value: int = 100
    decay_rate: float = 0.25

    def __post_init__(self) -> None:
        """Reject inverted bounds and negative decay."""
        if self.min_value > self.max_value:
            raise ValueError(f"min_value ({self.min_value}) must not exceed max_value ({self.max_value})")
        if self.decay_rate < 0:
            raise ValueError("decay_rate must be non-negative")


@dataclass(slots=True)
class RuleConfig:
    """Weights used when turning an event into a momentum delta.

    Parameters
    ----------
    base_points : Dict[EventType, int]
        Points per unit of severity for every event type.
    late_game_quarter : int, default=4
        First quarter in which late-game weighting can apply.
    late_game_seconds : int, default=300
        Remaining clock (seconds) at or below which the game counts as late.
    close_score_margin : int, default=8
        Largest absolute score differential still considered a close game.
    clutch_multiplier : float, default=1.5
        Amplification applied to deltas in late, close games.
    online_competitive_multiplier : float, default=1.0
        Amplification applied under online-competitive play. ``1.0`` disables it.
    """

    base_points: Dict[EventType, int] = field(default_factory=_default_base_points)
    late_game_quarter: int = 4
    late_game_seconds: int = 300  # final five minutes
    close_score_margin: int = 8  # one score
    clutch_multiplier: float = 1.5
    online_competitive_multiplier: float = 1.0

    def __post_init__(self) -> None:
        """Reject multipliers that would flip or erase momentum swings."""
        if self.clutch_multiplier < 0 or self.online_competitive_multiplier < 0:
            raise ValueError("context multipliers must be non-negative")
        if self.late_game_seconds < 0 or self.close_score_margin < 0:
            raise ValueError("late-game thresholds must be non-negative")


@dataclass(slots=True)
class ModifierConfig:
    """Thresholds and lifetimes for momentum-driven gameplay modifiers.

    Parameters
    ----------
    accuracy_threshold : int, default=50
        Momentum at or above which an accuracy boost is granted.
    penalty_threshold : int, default=-50
        Momentum at or below which penalty risk rises.
    momentum_scale : float, default=100.0
        Momentum magnitude that maps to a full-strength modifier.
    accuracy_max_strength : float, default=0.15
        Accuracy bonus granted at ``momentum_scale`` momentum.
    penalty_max_strength : float, default=0.2
        Penalty-risk increase applied at ``momentum_scale`` momentum.
    discipline_weight : float, default=0.5
        How strongly a team's discipline rating dampens penalty risk.
    composure_weight : float, default=0.5
        How strongly a team's composure rating shortens penalty-risk spells.
        Must stay below ``1`` so a perfectly composed team still gets a
        spell of positive length.
    accuracy_duration : float, default=8.0
        Seconds an accuracy modifier stays active.
    penalty_duration : float, default=6.0
        Seconds a penalty-risk modifier stays active.
    clutch_duration_multiplier : float, default=1.5
        Duration multiplier for modifiers created in late, close games.
    """

    accuracy_threshold: int = 50
    penalty_threshold: int = -50
    momentum_scale: float = 100.0
    accuracy_max_strength: float = 0.15
    penalty_max_strength: float = 0.2
    discipline_weight: float = 0.5
    composure_weight: float = 0.5
    accuracy_duration: float = 8.0
    penalty_duration: float = 6.0
    clutch_duration_multiplier: float = 1.5

    def __post_init__(self) -> None:
        """Ensure thresholds sit on the correct side of neutral momentum."""
        if self.accuracy_threshold <= 0:
            raise ValueError("accuracy_threshold must be positive")
        if self.penalty_threshold >= 0:
            raise ValueError("penalty_threshold must be negative")
        if self.momentum_scale <= 0:
            raise ValueError("momentum_scale must be positive")
        if self.accuracy_duration <= 0 or self.penalty_duration <= 0:
            raise ValueError("modifier durations must be positive")
        if self.clutch_duration_multiplier <= 0:
            raise ValueError("clutch_duration_multiplier must be positive")
        if not 0.0 <= self.discipline_weight <= 1.0:
            raise ValueError("discipline_weight must lie within [0, 1]")
        # composure 100 scales the duration by (1 - composure_weight)
        if not 0.0 <= self.composure_weight < 1.0:
            raise ValueError("composure_weight must lie within [0, 1)")


@dataclass(slots=True)
class CrowdConfig:
    """Tuning for the ambient crowd-noise scalar.

    Parameters
    ----------
    baseline_intensity : float, default=0.3
        Resting crowd intensity that decay relaxes toward.
    pulse_amount : float, default=0.25
        Intensity added per severity step by a big play.
    max_pulse : float, default=0.6
        Largest single spike a big play can produce.
    decay_rate : float, default=0.05
        Intensity shed per second while returning to the baseline.
    home_field_bonus : float, default=0.2
        Floor lift applied when the home side owns the momentum.
    """

    baseline_intensity: float = 0.3
    pulse_amount: float = 0.25
    max_pulse: float = 0.6
    decay_rate: float = 0.05
    home_field_bonus: float = 0.2

    def __post_init__(self) -> None:
        """Keep the crowd tuning inside the unit intensity range."""
        if not 0.0 <= self.baseline_intensity <= 1.0:
            raise ValueError("baseline_intensity must lie within [0, 1]")
        if self.pulse_amount < 0 or self.max_pulse < 0 or self.decay_rate < 0 or self.home_field_bonus < 0:
            raise ValueError("crowd tuning values must be non-negative")


@dataclass(slots=True)
class MomentumConfig:
    """Top-level container for all momentum tuning structures.

    Parameters
    ----------
    meter : MeterConfig, default=MeterConfig()
        Meter bounds and decay shared by both teams.
    rules : RuleConfig, default=RuleConfig()
        Event scoring weights.
    modifiers : ModifierConfig, default=ModifierConfig()
        Modifier thresholds and durations.
    crowd : CrowdConfig, default=CrowdConfig()
        Crowd noise tuning.
    """

    meter: MeterConfig = field(default_factory=MeterConfig)
    rules: RuleConfig = field(default_factory=RuleConfig)
    modifiers: ModifierConfig = field(default_factory=ModifierConfig)
    crowd: CrowdConfig = field(default_factory=CrowdConfig)


MOMENTUM_CONFIG = MomentumConfig()
"""Singleton-style access to the default momentum configuration."""
