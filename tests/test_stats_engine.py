from datetime import datetime, timedelta

import pytest

from app.extensions import db
from auth.models import level_for, progress_for
from journal import stats


NOW = datetime(2024, 5, 10, 18, 30)


class TestLevels:
    @pytest.mark.parametrize('points, level', [(0, 1), (99, 1), (100, 2), (105, 2), (250, 3), (-5, 1)])
    def test_level_is_floor_of_hundreds_plus_one(self, points, level):
        assert level_for(points) == level

    @pytest.mark.parametrize('points, progress', [(0, 0), (50, 50), (105, 5), (199, 99), (300, 0)])
    def test_progress_to_next_level(self, points, progress):
        assert progress_for(points) == progress


class TestNextStreak:
    def test_first_activity_starts_streak(self):
        assert stats.next_streak(0, None, NOW) == 1

    def test_consecutive_day_extends(self):
        assert stats.next_streak(3, NOW - timedelta(days=1), NOW) == 4

    def test_same_day_leaves_unchanged(self):
        assert stats.next_streak(3, NOW.replace(hour=1), NOW) == 3

    def test_gap_resets(self):
        assert stats.next_streak(9, NOW - timedelta(days=3), NOW) == 1

    def test_day_boundary_not_24_hours(self):
        late = datetime(2024, 5, 9, 23, 59)
        early = datetime(2024, 5, 10, 0, 1)
        assert stats.next_streak(2, late, early) == 3

    def test_backdated_activity_leaves_unchanged(self):
        assert stats.next_streak(5, NOW + timedelta(days=2), NOW) == 5


class TestCounters:
    def test_apply_new_entry_increments_counters(self, user):
        stats.apply_new_entry(user, 'happy', 15)

        assert user.total_entries == 1
        assert user.points == 15
        assert user.mood_happy == 1

    def test_apply_new_entry_ignores_untracked_moods(self, user):
        stats.apply_new_entry(user, 'neutral', 10)
        stats.apply_new_entry(user, 'bewildered', 10)

        assert user.total_entries == 2
        assert user.points == 20
        assert sum(user.mood_stats.values()) == 0

    def test_revise_entry_points(self, make_user):
        user = make_user(points=100)
        stats.revise_entry_points(user, 20, 35)
        assert user.points == 115

    def test_revise_entry_points_floors_at_zero(self, make_user):
        user = make_user(points=5)
        stats.revise_entry_points(user, 40, 10)
        assert user.points == 0

    def test_revise_and_revert_restores_points(self, make_user):
        user = make_user(points=70)
        stats.revise_entry_points(user, 20, 45)
        stats.revise_entry_points(user, 45, 20)
        assert user.points == 70

    def test_remove_entry_floors_at_zero(self, make_user):
        user = make_user(points=10, total_entries=0)
        stats.remove_entry(user, 25)

        assert user.points == 0
        assert user.total_entries == 0

    def test_add_then_remove_restores_counters(self, make_user):
        user = make_user(points=40, total_entries=3)
        stats.apply_new_entry(user, 'calm', 20)
        stats.remove_entry(user, 20)

        assert user.points == 40
        assert user.total_entries == 3

    def test_changes_are_committed(self, user):
        stats.apply_new_entry(user, 'sad', 12)
        db.session.expire_all()

        reloaded = db.session.get(type(user), user.id)
        assert reloaded.points == 12
        assert reloaded.mood_sad == 1


class TestEvaluateStreak:
    def test_first_entry(self, user):
        assert stats.evaluate_streak(user, NOW) == 1
        assert user.last_active_date == NOW
        assert user.longest_streak == 1

    def test_twice_same_day_is_idempotent(self, user):
        stats.evaluate_streak(user, NOW - timedelta(days=1))
        stats.evaluate_streak(user, NOW)
        stats.evaluate_streak(user, NOW + timedelta(minutes=5))
        assert user.streak == 2

    def test_reset_keeps_longest_streak(self, make_user):
        user = make_user(streak=6, longest_streak=6, last_active_date=NOW - timedelta(days=4))
        stats.evaluate_streak(user, NOW)

        assert user.streak == 1
        assert user.longest_streak == 6
        assert user.last_active_date == NOW


def test_longest_daily_run():
    moments = [NOW, NOW - timedelta(days=1), NOW - timedelta(days=2), NOW - timedelta(days=7),
               NOW - timedelta(days=2, hours=3)]
    assert stats.longest_daily_run(moments) == 3
    assert stats.longest_daily_run([]) == 0
