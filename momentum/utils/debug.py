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
"""Structured logging utilities used to trace momentum swings."""
import time
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from threading import Lock
from typing import Deque, List, Optional, TextIO, Tuple


@dataclass
class DebugEvent:
    """Immutable record representing a single logged event.

    Parameters
    ----------
    timestamp : float
        Simulation time (in seconds) when the event was recorded.
    event_type : str
        Category label describing the event, for example ``"MOMENTUM_EVENT"``.
    details : str
        Human-readable description providing additional context.
    """

    timestamp: float
    event_type: str
    details: str

    def format(self) -> str:
        """Render the record the same way the session log does.

        Returns
        -------
        str
            Single log line body.
        """
        return f"{self.event_type}: {self.body()}"

    def body(self) -> str:
        """Render the record without its type prefix.

        Returns
        -------
        str
            Timestamp and details, as written after ``TYPE:`` in the log.
        """
        return f"Time: {self.timestamp:.1f}s | {self.details}"


class MomentumDebugger:
    """Helper object that streams structured momentum telemetry to disk.

    Parameters
    ----------
    output_dir : str, default="debug_logs"
        Directory where new session logs are created; created automatically when missing.
    """

    def __init__(self, output_dir: str = "debug_logs") -> None:
        """Initialise the debugger and start the first logging session.

        Parameters
        ----------
        output_dir : str
            Filesystem directory where log files are created or appended.
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.log_file: Optional[TextIO] = None
        self.log_path: Optional[Path] = None
        self.session_start = time.strftime("%Y%m%d_%H%M%S")
        self._lock = Lock()
        self._line_number = 1
        self._recent_events: Deque[Tuple[int, str]] = deque(maxlen=200)
        self.start_new_session()

    def start_new_session(self) -> None:
        """Start a new debug logging session."""
        if self.log_file:
            self.log_file.close()

        filename = f"momentum_debug_{self.session_start}.txt"
        self.log_path = self.output_dir / filename
        self.log_file = open(self.log_path, "w", encoding="utf-8")
        self.log_file.write(f"=== Momentum Debug Session: {time.strftime('%Y-%m-%d %H:%M:%S')} ===\n\n")

    def log_momentum_event(
        self,
        match_time: float,
        event_type: str,
        source_team: str,
        credited_team: str,
        delta: int,
    ) -> None:
        """Log a scored gameplay event and where its momentum went.

        Parameters
        ----------
        match_time : float
            Seconds since kickoff.
        event_type : str
            Event label, for example ``"interception"``.
        source_team : str
            Name of the team that made or committed the play.
        credited_team : str
            Name of the team whose meter received the delta.
        delta : int
            Momentum points applied after all multipliers.
        """
        self._write(
            DebugEvent(
                match_time,
                "MOMENTUM_EVENT",
                f"Event: {event_type} | Source: {source_team} | Credited: {credited_team} | Delta: {delta:+d}",
            )
        )

    def log_meter_state(self, match_time: float, home_value: int, away_value: int) -> None:
        """Log both meters after a tick.

        Parameters
        ----------
        match_time : float
            Seconds since kickoff.
        home_value : int
            Home meter reading.
        away_value : int
            Away meter reading.
        """
        self._write(DebugEvent(match_time, "METER_STATE", f"Home: {home_value:+d} | Away: {away_value:+d}"))

    def log_modifier_event(
        self,
        match_time: float,
        action: str,
        modifier_id: str,
        team_name: str,
        **context: object,
    ) -> None:
        """Log a modifier lifecycle transition.

        Parameters
        ----------
        match_time : float
            Seconds since kickoff.
        action : str
            Lifecycle verb such as ``"created"`` or ``"expired"``.
        modifier_id : str
            Identifier of the modifier.
        team_name : str
            Team the modifier targets (``"all"`` for unscoped modifiers).
        **context : object
            Extra key-value pairs appended to the line.
        """
        detail = f"Modifier: {modifier_id} | Team: {team_name} | Action: {action}"
        if context:
            detail += " | " + " ".join(f"{key}={value}" for key, value in context.items())
        self._write(DebugEvent(match_time, "MODIFIER", detail))

    def log_crowd_state(self, match_time: float, intensity: float, reason: str) -> None:
        """Log a notable change in crowd intensity.

        Parameters
        ----------
        match_time : float
            Seconds since kickoff.
        intensity : float
            Crowd intensity after the change.
        reason : str
            What caused the change, for example ``"pulse"``.
        """
        self._write(DebugEvent(match_time, "CROWD", f"Intensity: {intensity:.2f} | Reason: {reason}"))

    def log_error(self, error_type: str, description: str) -> None:
        """Log an error or warning.

        Parameters
        ----------
        error_type : str
            Label describing the error classification.
        description : str
            Human-readable explanation of the issue.
        """
        self._write_log("ERROR", f"Type: {error_type} | Details: {description}")

    def _write(self, event: DebugEvent) -> None:
        """Persist a structured record.

        Parameters
        ----------
        event : DebugEvent
            Record to format and write.
        """
        self._write_log(event.event_type, event.body())

    def _write_log(self, event_type: str, details: str) -> None:
        """Write a log entry to the file.

        Parameters
        ----------
        event_type : str
            Category label for the log entry.
        details : str
            Formatted message body to persist.
        """
        timestamp = time.strftime("%H:%M:%S")
        log_entry = f"[{timestamp}] {event_type}: {details}"

        with self._lock:
            line_no = self._line_number
            self._line_number += 1
            self._recent_events.append((line_no, log_entry))

            if self.log_file:
                self.log_file.write(f"{log_entry}\n")
                self.log_file.flush()

    def get_recent_events(self, limit: int = 20) -> List[str]:
        """Return the latest debug entries with line numbers for live displays.

        Parameters
        ----------
        limit : int
            Maximum number of entries to return.

        Returns
        -------
        List[str]
            Up to ``limit`` most recent log lines with prefixed line numbers.
        """
        with self._lock:
            selected = list(self._recent_events)[-limit:]
        return [f"{line_no:05d} {entry}" for line_no, entry in selected]

    def close(self) -> None:
        """Close the log file."""
        if self.log_file:
            self.log_file.close()
            self.log_file = None
