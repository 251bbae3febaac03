"""
Tests for latent profile derivation.

Validates:
- Raw rating scaling (0-100 and 0-10000 inputs)
- Composite components
- Fallback profile for players without raw data
- Game-day form sampling bounds
"""

import pytest

from shared.rng import Rng
from team_management.latent_deriver import (GAME_FORM_RANGE, assign_latent_profile,
                                            build_fallback_profile, derive_latent_profile,
                                            ensure_latent_profile, sample_player_game_form,
                                            scale_raw_rating)
from team_management.latent_profile import LatentGroup, LatentProfile, LatentSubVector
from team_management.player import Player


# ==================== Scaling Tests ====================

class TestScaleRawRating:
    """Tests for scale_raw_rating."""

    @pytest.mark.parametrize("value, expected", [
        (70, 0.70),
        (100, 1.0),
        (0, 0.0),
        (8500, 0.85),
        (1000, 1.0),
        (150, 1.0),
    ])
    def test_scaling(self, value, expected):
        """Values above 1000 are on the 0-10000 scale, others on 0-100."""
        assert scale_raw_rating(value) == pytest.approx(expected)

    @pytest.mark.parametrize("value", [None, float("nan"), "88", True])
    def test_unusable_values_are_absent(self, value):
        assert scale_raw_rating(value) is None


# ==================== Latent Profile Tests ====================

class TestLatentProfile:
    """Tests for the LatentProfile container."""

    def test_missing_component_returns_fallback(self):
        vector = LatentSubVector({"agility": 0.8})
        assert vector.get("agility") == 0.8
        assert vector.get("unknown") == 0.5
        assert vector.get("unknown", 0.3) == 0.3

    def test_group_lookup_by_letter(self):
        profile = LatentProfile({"power": 0.7}, {}, {}, {}, {})
        assert profile.group("A").get("power") == 0.7
        assert profile.group(LatentGroup.ATHLETIC) is profile.A
        assert profile.get("A", "power") == 0.7

    def test_sub_vector_is_read_only(self):
        vector = LatentSubVector({"agility": 0.8})
        with pytest.raises(TypeError):
            vector._values["agility"] = 0.1


# ==================== Derivation Tests ====================

class TestDeriveLatentProfile:
    """Tests for derive_latent_profile."""

    def test_composites_from_raw(self):
        """Agility, speed and coverage composites average their inputs."""
        player = Player("rb", "Runner", "RB", raw_ratings={
            "change_of_direction": 80,
            "short_area_quickness": 60,
            "top_speed": 9000,
            "long_speed_reserve": 7000,
            "zone_coverage": 40,
            "man_coverage": 50,
            "ball_skills_db": 60,
        })
        profile = derive_latent_profile(player)
        assert profile.A.get("agility") == pytest.approx(0.70)
        assert profile.A.get("speed_long") == pytest.approx(0.80)
        assert profile.C.get("coverage_awareness") == pytest.approx(0.50)

    def test_qb_processing_prefers_read_progression(self):
        player = Player("qb", "Passer", "QB", raw_ratings={
            "read_progression_speed": 90, "decision_speed": 40})
        assert derive_latent_profile(player).C.get("qb_processing") == pytest.approx(0.90)

    def test_missing_inputs_default_to_neutral(self):
        """Components with no raw input read 0.5."""
        player = Player("wr", "Wideout", "WR", raw_ratings={"top_speed": 95})
        profile = derive_latent_profile(player)
        assert profile.T.get("hands") == 0.5
        assert profile.P.get("aggression") == 0.5

    def test_volatility_terms(self):
        """High chaos and low stability mean a volatile player with a wider form sigma."""
        steady = derive_latent_profile(Player("a", "A", "LB", raw_ratings={
            "chaos_seed": 10, "stability_seed": 90}))
        wild = derive_latent_profile(Player("b", "B", "LB", raw_ratings={
            "chaos_seed": 90, "stability_seed": 10}))
        assert wild.V.get("volatility") > steady.V.get("volatility")
        assert wild.V.get("game_sigma") > steady.V.get("game_sigma")
        assert steady.V.get("game_sigma") == pytest.approx(0.04 + 0.08 * steady.V.get("volatility"))

    def test_missing_variance_seeds_are_neutral(self):
        """Rated players without chaos/stability seeds read 0.5 for both."""
        profile = derive_latent_profile(Player("a", "A", "CB", raw_ratings={"top_speed": 90}))
        assert profile.V.get("chaos") == 0.5
        assert profile.V.get("stability") == 0.5
        assert profile.V.get("volatility") == pytest.approx(0.5)

    def test_all_components_in_unit_interval(self):
        player = Player("x", "X", "TE", raw_ratings={
            "explosiveness": 140, "play_strength": -20, "aggression": 9999})
        profile = derive_latent_profile(player)
        for group in profile.to_dict().values():
            for value in group.values():
                assert 0.0 <= value <= 1.0

    def test_player_not_modified(self):
        player = Player("x", "X", "TE", raw_ratings={"explosiveness": 70})
        derive_latent_profile(player)
        assert player.latent is None


# ==================== Fallback Tests ====================

class TestFallbackProfile:
    """Tests for players with no raw ratings at all."""

    def test_fallback_uses_overall(self):
        """Every skill component equals overall / 100."""
        profile = build_fallback_profile(Player("x", "X", "CB", rating_overall=80))
        assert profile.A.get("agility") == pytest.approx(0.80)
        assert profile.C.get("coverage_awareness") == pytest.approx(0.80)
        assert profile.T.get("tackling") == pytest.approx(0.80)
        assert profile.P.get("discipline") == 0.55

    def test_fallback_without_overall(self):
        """No overall either means the 60 default."""
        profile = build_fallback_profile(Player("x", "X", "CB"))
        assert profile.T.get("hands") == pytest.approx(0.60)

    def test_derive_falls_back_when_raw_is_unusable(self):
        player = Player("x", "X", "S", raw_ratings={"note": None}, rating_overall=75)
        assert derive_latent_profile(player) == build_fallback_profile(player)


# ==================== Assignment Tests ====================

class TestProfileAssignment:
    """Tests for assign/ensure."""

    def test_assign_attaches(self):
        player = Player("x", "X", "QB", rating_overall=70)
        profile = assign_latent_profile(player)
        assert player.latent is profile

    def test_ensure_keeps_existing_profile(self):
        player = Player("x", "X", "QB", rating_overall=70)
        first = ensure_latent_profile(player)
        assert ensure_latent_profile(player) is first


# ==================== Game Form Tests ====================

class TestGameForm:
    """Tests for per-game form sampling."""

    def test_form_stays_in_bounds(self):
        profile = build_fallback_profile(Player("x", "X", "QB"))
        rng = Rng(99)
        low, high = GAME_FORM_RANGE
        for _ in range(500):
            assert low <= sample_player_game_form(profile, rng) <= high

    def test_form_is_deterministic(self):
        profile = build_fallback_profile(Player("x", "X", "QB"))
        assert sample_player_game_form(profile, Rng(5)) == sample_player_game_form(profile, Rng(5))
