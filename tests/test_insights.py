from datetime import datetime

from journal import aggregations as agg

from conftest import days_ago

# 2024-05-05 is a Sunday
SUNDAY = datetime(2024, 5, 5, 21, 15)


def entry(created_at, **fields):
    data = {'created_at': created_at, 'mood_primary': 'calm', 'word_count': 50, 'reading_time': 1,
            'tags': [], 'points_earned': 10, 'sentiment_score': 0.0}
    data.update(fields)
    return data


class TestReducers:
    def test_mood_histogram(self):
        entries = [entry(SUNDAY, mood_primary='happy'), entry(SUNDAY, mood_primary='happy'), entry(SUNDAY)]
        assert agg.mood_histogram(entries) == {'happy': 2, 'calm': 1}

    def test_weekday_histogram_starts_on_sunday(self):
        histogram = agg.weekday_histogram([entry(SUNDAY), entry(datetime(2024, 5, 6, 8))])
        assert histogram == {0: 1, 1: 1, 2: 0, 3: 0, 4: 0, 5: 0, 6: 0}
        assert agg.DAY_NAMES[agg.most_common_key(histogram)] == 'Sunday'

    def test_entries_by_day_and_hour(self):
        entries = [entry(SUNDAY), entry(SUNDAY.replace(hour=8)), entry(datetime(2024, 5, 6, 8))]
        assert agg.entries_by_day(entries) == {'2024-05-05': 2, '2024-05-06': 1}
        assert agg.entries_by_hour(entries) == {8: 2, 21: 1}

    def test_word_and_reading_buckets(self):
        entries = [entry(SUNDAY, word_count=99, reading_time=1),
                   entry(SUNDAY, word_count=100, reading_time=2),
                   entry(SUNDAY, word_count=500, reading_time=5)]
        assert agg.word_count_buckets(entries) == {'short': 1, 'medium': 1, 'long': 1}
        assert agg.reading_time_buckets(entries) == {'quick': 1, 'moderate': 1, 'detailed': 1}

    def test_top_counts(self):
        values = ['work', 'sleep', 'work', 'family', 'work', 'sleep']
        assert agg.top_counts(values, 2, 'keyword') == [
            {'keyword': 'work', 'count': 3},
            {'keyword': 'sleep', 'count': 2},
        ]

    def test_current_daily_run(self):
        now = datetime(2024, 5, 10, 12)
        days = [datetime(2024, 5, 10, 7), datetime(2024, 5, 9, 23), datetime(2024, 5, 8, 1), datetime(2024, 5, 5)]
        assert agg.current_daily_run(days, now) == 3
        assert agg.current_daily_run([datetime(2024, 5, 9)], now) == 0

    def test_weekly_mood_trends_keyed_by_sunday(self):
        entries = [entry(datetime(2024, 5, 7), mood_primary='sad'), entry(SUNDAY, mood_primary='happy'),
                   entry(datetime(2024, 5, 12), mood_primary='neutral')]
        trends = agg.weekly_mood_trends(entries)

        assert list(trends) == ['2024-05-05', '2024-05-12']
        assert trends['2024-05-05']['sad'] == 1
        assert trends['2024-05-05']['happy'] == 1
        assert trends['2024-05-12']['neutral'] == 1

    def test_achievements(self):
        titles = [a['title'] for a in agg.achievements(7, 7, 120, 17)]
        assert titles == ['First Steps', 'Week Warrior', 'Streak Master', 'Century Club']
        assert agg.achievements(0, 0, 0, 0) == []

    def test_monthly_progress_covers_six_months(self):
        now = datetime(2024, 2, 15)
        entries = [entry(datetime(2024, 2, 1), word_count=30, points_earned=20),
                   entry(datetime(2023, 12, 24), word_count=10)]
        progress = agg.monthly_progress(entries, now)

        assert [p['month'] for p in progress] == ['Sep 2023', 'Oct 2023', 'Nov 2023', 'Dec 2023', 'Jan 2024', 'Feb 2024']
        assert progress[-1] == {'month': 'Feb 2024', 'entries': 1, 'words': 30, 'points': 20, 'avgSentiment': 0}
        assert progress[3]['entries'] == 1

    def test_word_growth(self):
        entries = [entry(SUNDAY, word_count=150)] * 10 + [entry(SUNDAY, word_count=100)] * 10
        assert agg.word_growth(entries) == {'wordGrowthRate': 50.0, 'recentAvgWords': 150, 'olderAvgWords': 100}
        assert agg.word_growth([])['wordGrowthRate'] == 0


class TestRoutes:
    def test_overview(self, client, user, auth_headers, make_entry, fake_dispatcher):
        make_entry(user, mood_primary='happy', keywords=['sun'], themes=['joy'], sentiment_score=0.5)
        make_entry(user, mood_primary='sad', keywords=['sun', 'rain'], created_at=days_ago(1), sentiment_score=-0.1)

        data = client.get('/api/insights?period=30', headers=auth_headers).get_json()['data']

        assert data['overview']['totalEntries'] == 2
        assert data['overview']['averageSentiment'] == 0.2
        assert data['moodTrends'] == {'happy': 1, 'sad': 1}
        assert data['content']['topKeywords'][0] == {'keyword': 'sun', 'count': 2}
        assert 'emotionalPatterns' in data['aiInsights']

    def test_comprehensive_without_entries(self, client, auth_headers, fake_dispatcher):
        data = client.get('/api/insights/comprehensive', headers=auth_headers).get_json()['data']

        assert data['totalEntries'] == 0
        assert data['aiInsights']['growthAreas'] == 'Start journaling to see your insights!'
        assert fake_dispatcher.calls == []

    def test_comprehensive(self, client, user, auth_headers, make_entry, fake_dispatcher):
        make_entry(user, points_earned=30)
        make_entry(user, points_earned=20, created_at=days_ago(1))

        data = client.get('/api/insights/comprehensive?days=10', headers=auth_headers).get_json()['data']

        assert data['totalPoints'] == 50
        assert data['currentStreak'] == 2
        assert data['completionRate'] == 20
        assert data['bestDayScore'] == 30
        assert data['pointsTrend'] == [20, 30]
        assert data['weeklySummary'] == 'A gentle week of reflection.'
        assert [a['title'] for a in data['achievements']] == ['First Steps']

    def test_mood_and_patterns(self, client, user, auth_headers, make_entry):
        make_entry(user, mood_primary='tired', tags=['work'], created_at=days_ago(2))
        make_entry(user, mood_primary='tired', tags=['work', 'gym'], created_at=days_ago(1))

        mood = client.get('/api/insights/mood', headers=auth_headers).get_json()['data']
        assert mood['moodStats'] == {'tired': 2}
        assert mood['totalMoodEntries'] == 2
        assert len(mood['intensityTrends']) == 2

        patterns = client.get('/api/insights/patterns', headers=auth_headers).get_json()['data']
        assert patterns['patterns']['tagUsage'] == {'work': 2, 'gym': 1}
        assert patterns['insights']['topTags'][0] == {'tag': 'work', 'count': 2}
        assert patterns['insights']['mostActiveHour'] == 9

    def test_progress(self, client, make_user):
        user = make_user(points=150, total_entries=3)
        headers = {'Authorization': f'Bearer {user.generate_auth_token()}'}

        data = client.get('/api/insights/progress', headers=headers).get_json()['data']

        assert data['overview']['currentLevel'] == 2
        assert data['overview']['progressToNextLevel'] == 50
        assert len(data['monthlyProgress']) == 6
        assert data['growth']['wordGrowthRate'] == 0
