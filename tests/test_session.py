"""
Tests for the in-progress session transitions and the model settings.

Tests:
- Session transitions return new states and never mutate their input
- finish_exercise stores the e1RM estimate and raises one_rm on a PR
- model.yaml overrides and their validation
"""

import pytest

from gymtrack.core.models import BlockPosition, ExerciseConfig, LoggedSet


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point the per-user config directory at an empty temp dir."""
    monkeypatch.setenv("GYMTRACK_HOME", str(tmp_path))
    return tmp_path


def _config(**overrides) -> ExerciseConfig:
    params = dict(
        name="Squat",
        one_rm=100.0,
        min_rep_range=0.8,
        max_rep_range=0.85,
        max_weight_stack=180.0,
        rounding=2.5,
        exercise_id="squat",
    )
    params.update(overrides)
    return ExerciseConfig(**params)


# ===========================================================================
# session.py
# ===========================================================================

class TestSessionTransitions:

    def test_start_session_at_position(self):
        from gymtrack.core.session import start_session
        state = start_session(BlockPosition(block=2, week=3), date="2026-03-02")
        assert (state.date, state.block, state.week) == ("2026-03-02", 2, 3)
        assert state.entries == ()
        assert state.current_exercise_id is None

    def test_start_session_defaults_to_today(self):
        from datetime import date

        from gymtrack.core.session import start_session
        assert start_session(BlockPosition()).date == date.today().isoformat()

    def test_ensure_exercise_adds_entry_once(self):
        from gymtrack.core.session import add_set, ensure_exercise, start_session
        state = start_session(BlockPosition(), date="2026-03-02")
        state = ensure_exercise(state, "squat", 80.0)
        state = add_set(state, "squat", 8)
        state = ensure_exercise(state, "squat", 60.0)

        assert len(state.entries) == 1
        assert state.current_exercise_id == "squat"
        assert state.entry_for("squat").weight == 80.0
        assert len(state.entry_for("squat").sets) == 1

    def test_add_set_uses_working_weight(self):
        from gymtrack.core.session import add_set, ensure_exercise, start_session
        state = ensure_exercise(start_session(BlockPosition(), "2026-03-02"), "squat", 80.0)
        state = add_set(state, "squat", 8)
        state = add_set(state, "squat", 6, weight=75.0)
        assert state.entry_for("squat").sets == (LoggedSet(8, 80.0), LoggedSet(6, 75.0))

    def test_transitions_do_not_mutate_input(self):
        from gymtrack.core.session import add_set, ensure_exercise, start_session
        before = ensure_exercise(start_session(BlockPosition(), "2026-03-02"), "squat", 80.0)
        after = add_set(before, "squat", 8)
        assert before.entry_for("squat").sets == ()
        assert after is not before

    def test_add_set_unknown_exercise(self):
        from gymtrack.core.session import add_set, start_session
        with pytest.raises(KeyError):
            add_set(start_session(BlockPosition(), "2026-03-02"), "squat", 8)

    def test_add_set_negative_reps(self):
        from gymtrack.core.session import add_set, ensure_exercise, start_session
        state = ensure_exercise(start_session(BlockPosition(), "2026-03-02"), "squat", 80.0)
        with pytest.raises(ValueError):
            add_set(state, "squat", -1)

    def test_remove_set(self):
        from gymtrack.core.session import add_set, ensure_exercise, remove_set, start_session
        state = ensure_exercise(start_session(BlockPosition(), "2026-03-02"), "squat", 80.0)
        for reps in (8, 7, 6):
            state = add_set(state, "squat", reps)

        trimmed = remove_set(state, "squat", 1)
        assert [s.reps for s in trimmed.entry_for("squat").sets] == [8, 6]
        assert remove_set(state, "squat", 5) is state
        assert remove_set(state, "bench", 0) is state

    def test_set_weight_clamps_at_zero(self):
        from gymtrack.core.session import ensure_exercise, set_weight, start_session
        state = ensure_exercise(start_session(BlockPosition(), "2026-03-02"), "squat", 80.0)
        assert set_weight(state, "squat", 85.0).entry_for("squat").weight == 85.0
        assert set_weight(state, "squat", -5.0).entry_for("squat").weight == 0.0


class TestFinishExercise:

    def _logged(self, weight: float, *reps: int):
        from gymtrack.core.session import add_set, ensure_exercise, start_session
        state = ensure_exercise(start_session(BlockPosition(2, 1), "2026-03-02"), "squat", weight)
        for r in reps:
            state = add_set(state, "squat", r)
        return state

    def test_personal_best_raises_one_rm(self):
        # 5 reps at 100 → 112.5
        from gymtrack.core.session import finish_exercise
        state, record, config = finish_exercise(self._logged(100.0, 5, 4), _config())
        assert state.current_exercise_id is None
        assert record.entry_for("squat").estimated_1rm == pytest.approx(112.5)
        assert record.block == 2
        assert config.one_rm == pytest.approx(112.5)

    def test_no_personal_best_keeps_config(self):
        from gymtrack.core.session import finish_exercise
        original = _config(one_rm=130.0)
        _, record, config = finish_exercise(self._logged(100.0, 5), original)
        assert config is original
        assert record.entry_for("squat").estimated_1rm == pytest.approx(112.5)

    def test_bodyweight_entry_has_no_estimate(self):
        from gymtrack.core.session import finish_exercise
        _, record, config = finish_exercise(self._logged(0.0, 12), _config())
        assert record.entry_for("squat").estimated_1rm is None
        assert config.one_rm == 100.0

    def test_per_set_weight_without_working_weight(self):
        # 5 reps at 120 → 135
        from gymtrack.core.session import add_set, finish_exercise
        state = add_set(self._logged(0.0), "squat", 5, weight=120.0)
        _, record, config = finish_exercise(state, _config())
        assert record.entry_for("squat").estimated_1rm == pytest.approx(135.0)
        assert config.one_rm == pytest.approx(135.0)

    def test_requires_a_counted_first_set(self):
        from gymtrack.core.session import finish_exercise
        with pytest.raises(ValueError):
            finish_exercise(self._logged(100.0), _config())
        with pytest.raises(ValueError):
            finish_exercise(self._logged(100.0, 0, 8), _config())


# ===========================================================================
# config.py: model settings
# ===========================================================================

class TestModelSettings:

    def test_defaults_from_empty_config(self):
        from gymtrack.core.config import ModelSettings, model_settings_from_dict
        assert model_settings_from_dict({}) == ModelSettings()

    def test_overrides(self):
        from gymtrack.core.config import model_settings_from_dict
        settings = model_settings_from_dict({
            "periodization": {"DELOAD_FREQUENCY": 0},
            "volume": {"GOAL_LOW": 15},
            "progress": {"PROGRESS_WINDOW": 4},
        })
        assert settings.deload_frequency == 0
        assert settings.effective_rep_targets == {"Low": 15.0, "Moderate": 28.74}
        assert settings.progress_window == 4

    @pytest.mark.parametrize("cfg", [
        {"periodization": {"DELOAD_FREQUENCY": -1}},
        {"periodization": {"WEEKS_PER_BLOCK": 0}},
        {"volume": {"GOAL_MODERATE": 0}},
        {"volume": {"MAX_SETS_CAP": 11}},
        {"volume": {"GOAL_LOW": "lots"}},
        {"progress": {"PROGRESS_WINDOW": 1}},
    ])
    def test_invalid_values(self, cfg):
        from gymtrack.core.config import model_settings_from_dict
        with pytest.raises(ValueError):
            model_settings_from_dict(cfg)

    def test_bundled_defaults(self):
        from gymtrack.core.config import ModelSettings, load_model_settings
        assert load_model_settings() == ModelSettings()

    def test_user_override_file(self, isolated_home):
        from gymtrack.core.config import load_model_settings
        (isolated_home / "model.yaml").write_text("periodization:\n  DELOAD_FREQUENCY: 3\n")
        settings = load_model_settings()
        assert settings.deload_frequency == 3
        assert settings.weeks_per_block == 4

    def test_malformed_user_file_is_ignored(self, isolated_home):
        from gymtrack.core.config import ModelSettings, load_model_settings
        (isolated_home / "model.yaml").write_text("periodization: [unclosed\n")
        with pytest.warns(UserWarning):
            settings = load_model_settings()
        assert settings == ModelSettings()

    def test_invalid_user_value_falls_back(self, isolated_home):
        from gymtrack.core.config import ModelSettings, load_model_settings
        (isolated_home / "model.yaml").write_text("volume:\n  MAX_SETS_CAP: 50\n")
        with pytest.warns(UserWarning):
            settings = load_model_settings()
        assert settings == ModelSettings()
