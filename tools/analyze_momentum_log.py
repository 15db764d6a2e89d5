#!/usr/bin/env python3
"""Analyze momentum debug logs to spot tuning problems."""

import re
import sys
from collections import Counter, defaultdict
from pathlib import Path


def parse_log_file(log_path):
    """Parse the debug log and extract momentum metrics."""

    event_types = Counter()
    credited_totals = defaultdict(int)
    flipped = 0
    modifiers_created = Counter()
    modifiers_expired = Counter()
    meter_readings = []
    dropped = 0

    with open(log_path, 'r', encoding='utf-8') as f:
        for line in f:
            match = re.search(
                r'MOMENTUM_EVENT: Time: ([\d.]+)s \| Event: (\w+) \| Source: (.+?) \| Credited: (.+?) \| Delta: ([+-]\d+)',
                line,
            )
            if match:
                _, event_type, source, credited, delta = match.groups()
                event_types[event_type] += 1
                credited_totals[credited] += int(delta)
                if source != credited:
                    flipped += 1
                continue

            match = re.search(r'MODIFIER: .*Modifier: (\w+) \| Team: (.+?) \| Action: (\w+)', line)
            if match:
                modifier_id, team, action = match.groups()
                if action == 'created':
                    modifiers_created[(team, modifier_id)] += 1
                elif action == 'expired':
                    modifiers_expired[(team, modifier_id)] += 1
                continue

            match = re.search(r'METER_STATE: Time: ([\d.]+)s \| Home: ([+-]\d+) \| Away: ([+-]\d+)', line)
            if match:
                time, home, away = match.groups()
                meter_readings.append((float(time), int(home), int(away)))
                continue

            if 'dropped_event' in line:
                dropped += 1

    return {
        'event_types': event_types,
        'credited_totals': credited_totals,
        'flipped': flipped,
        'modifiers_created': modifiers_created,
        'modifiers_expired': modifiers_expired,
        'meter_readings': meter_readings,
        'dropped': dropped,
    }


def analyze_meters(meter_readings):
    """Summarise how far and how often the meters swing."""
    print("\n=== METER ANALYSIS ===")
    if not meter_readings:
        print("  ⚠️  No meter readings found - was the debugger attached to update()?")
        return

    home_values = [home for _, home, _ in meter_readings]
    away_values = [away for _, _, away in meter_readings]
    print(f"  Home range: {min(home_values):+d} .. {max(home_values):+d}")
    print(f"  Away range: {min(away_values):+d} .. {max(away_values):+d}")

    pinned = sum(1 for _, home, away in meter_readings if abs(home) >= 100 or abs(away) >= 100)
    share = pinned / len(meter_readings) * 100
    print(f"  Ticks with a meter pinned at its bound: {share:.1f}%")
    if share > 25:
        print("  ⚠️  Meters sit at their bounds too often - base points may be too high or decay too slow")

    neutral = sum(1 for _, home, away in meter_readings if home == 0 and away == 0)
    if neutral / len(meter_readings) > 0.8:
        print("  ⚠️  Meters are almost always neutral - decay may be too aggressive")


def analyze_modifiers(created, expired):
    """Check that every created modifier eventually expires."""
    print("\n=== MODIFIER ANALYSIS ===")
    print(f"  Modifiers created: {sum(created.values())}")
    print(f"  Modifiers expired: {sum(expired.values())}")
    for key, count in sorted(created.items()):
        team, modifier_id = key
        print(f"    {team} {modifier_id}: {count} created, {expired.get(key, 0)} expired")
        if count - expired.get(key, 0) > 1:
            print("    ⚠️  More than one instance outstanding - check for stacking")


def main():
    if len(sys.argv) < 2:
        print("Usage: python tools/analyze_momentum_log.py <log_file_path>")
        print("\nExample:")
        print("  python tools/analyze_momentum_log.py debug_logs/momentum_debug_20251117_222236.txt")
        sys.exit(1)

    log_path = Path(sys.argv[1])

    if not log_path.exists():
        print(f"Error: Log file not found: {log_path}")
        sys.exit(1)

    print(f"Analyzing: {log_path.name}")
    print("=" * 60)

    data = parse_log_file(log_path)

    print("\n=== EVENT SUMMARY ===")
    for event_type, count in data['event_types'].most_common(15):
        print(f"  {event_type}: {count}")
    print(f"  Possession-flipping credits: {data['flipped']}")
    if data['dropped']:
        print(f"  ⚠️  Dropped events: {data['dropped']} - teams may not have been registered in time")

    print("\n=== CREDITED MOMENTUM ===")
    for team, total in sorted(data['credited_totals'].items()):
        print(f"  {team}: {total:+d}")

    analyze_meters(data['meter_readings'])
    analyze_modifiers(data['modifiers_created'], data['modifiers_expired'])

    print("\n" + "=" * 60)
    print("Analysis complete!")


if __name__ == '__main__':
    main()
