"""
Pytest configuration for test discovery and imports.

Provides fixtures for testing including:
- Full-roster team factories
- Prepared home/away teams
- Seeded RNG streams
"""

import sys
from pathlib import Path
import pytest


# Determine paths
project_root = Path(__file__).parent.parent
src_path = project_root / "src"
tests_path = project_root / "tests"


def pytest_configure(config):
    """Configure pytest - runs very early in startup.

    src/ MUST come before tests/ so test directories named after packages
    (tests/shared, tests/plays, ...) never shadow the real packages.
    """
    # Filter out tests directory and any duplicates, keeping first occurrence
    seen = set()
    new_path = []
    for p in sys.path:
        if p not in seen and p != str(tests_path):
            seen.add(p)
            new_path.append(p)

    for path in [str(src_path), str(project_root)]:
        if path in new_path:
            new_path.remove(path)

    # Insert at front: project_root, then src
    new_path.insert(0, str(src_path))
    new_path.insert(0, str(project_root))

    sys.path[:] = new_path


# ============================================================================
# ROSTER FIXTURES
# ============================================================================

# position -> how many players the factory puts on the roster
ROSTER_TEMPLATE = [
    ("QB", 2), ("RB", 2), ("FB", 1), ("WR", 4), ("TE", 2),
    ("LT", 1), ("LG", 1), ("C", 1), ("RG", 1), ("RT", 1),
    ("DT", 2), ("EDGE", 2), ("LB", 3), ("CB", 3), ("S", 2),
    ("K", 1), ("P", 1),
]


def roster_rows(team_id, overall=70, raw_ratings=None, skip_positions=()):
    """Plain roster rows for a full team, every player at the same overall"""
    rows = []
    for position, count in ROSTER_TEMPLATE:
        if position in skip_positions:
            continue
        for depth in range(1, count + 1):
            rows.append({
                "player_id": f"{team_id}-{position}{depth}",
                "name": f"{team_id} {position}{depth}",
                "position": position,
                "depth": depth,
                "rating_overall": overall,
                "raw_ratings": dict(raw_ratings or {}),
            })
    return rows


@pytest.fixture
def make_team():
    """
    Factory fixture building a full roster.

    Usage:
        team = make_team("HOU", "Houston", overall=80)
    """
    from team_management.roster_builder import build_team

    def _make(team_id="HOM", team_name=None, overall=70, raw_ratings=None, skip_positions=()):
        rows = roster_rows(team_id, overall, raw_ratings, skip_positions)
        return build_team(team_id, team_name or team_id, rows)

    return _make


@pytest.fixture
def home_team(make_team):
    return make_team("HOM", "Home", overall=72)


@pytest.fixture
def away_team(make_team):
    return make_team("AWY", "Away", overall=68)


@pytest.fixture
def prepared_teams(home_team, away_team):
    """Home and away teams with latent profiles and unit profiles attached"""
    from team_management.unit_profiles import prepare_team_for_simulation

    prepare_team_for_simulation(home_team)
    prepare_team_for_simulation(away_team)
    return home_team, away_team


@pytest.fixture
def rng_streams():
    from shared.rng import build_rng_streams

    return build_rng_streams(42)
