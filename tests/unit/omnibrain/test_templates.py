"""Tests for omnitrace/omnibrain/templates.py

Fact generators must produce exactly the same sentences for the same data;
these tests pin the wording and the arithmetic behind each sentence.
"""

from omnitrace.models import EventContext
from omnitrace.omnibrain import templates


DAY = 24 * 60 * 60_000


class TestDistractionFacts:
    """Tests for generate_distraction_facts."""

    def test_no_distractions(self, manual, at, now):
        payload = templates.generate_distraction_facts([manual(at(9), "Thesis", minutes=30)], now=now)

        assert payload.facts == ["No significant distractions detected in this period."]
        assert payload.confidence == "high"

    def test_distraction_summary(self, manual, at, now):
        events = [
            manual(at(14), "Phone", "distraction", minutes=10),
            manual(at(14, 30), "Feed", "distraction", minutes=20),
        ]

        payload = templates.generate_distraction_facts(events, now=now)

        assert payload.facts == [
            "You had 2 distraction periods totaling 30 minutes.",
            "Most distractions occurred around 14:00.",
            "Average distraction duration was 15 minutes.",
            "Distribution: 0 morning, 2 afternoon, 0 evening.",
        ]


class TestFocusDropFacts:
    """Tests for generate_focus_drop_facts."""

    def test_activity_after_time(self, manual, make_event, at, now):
        events = [
            manual(at(10), "Earlier", "distraction", minutes=30),
            manual(at(15, 10), "Thesis", "study", minutes=30),
            manual(at(16), "Phone", "distraction", minutes=10),
            make_event("idle_start", at(17)),
            make_event("navigation", at(17, 30)),
        ]

        payload = templates.generate_focus_drop_facts(events, at(15), now=now)

        assert payload.facts == [
            "After 03:00 PM, you had 1 distraction periods totaling 10 minutes.",
            "There were 1 idle periods detected.",
            "You maintained 30 minutes of focus work after that time.",
            "Session fragmentation: 1 screen changes detected.",
        ]
        assert payload.confidence == "high"

    def test_nothing_after_time(self, manual, at, now):
        payload = templates.generate_focus_drop_facts([manual(at(9), "Thesis", minutes=30)], at(15), now=now)

        assert payload.confidence == "low"
        assert payload.facts[0].startswith("Insufficient data after the specified time.")

    def test_stable_activity(self, make_event, at, now):
        """Only unremarkable events after the time give the stable sentence."""
        events = [make_event("button_click", at(16))]

        payload = templates.generate_focus_drop_facts(events, at(15), now=now)

        assert payload.facts == ["Activity after 03:00 PM appears stable with no major focus drops."]
        assert payload.confidence == "medium"


class TestBestFocusTimeFacts:
    """Tests for generate_best_focus_time_facts."""

    def test_peak_hour(self, manual, at, now):
        events = [
            manual(at(9), "Thesis", "study", minutes=40),
            manual(at(14), "Report", "work", minutes=20),
        ]

        payload = templates.generate_best_focus_time_facts(events, now=now)

        assert payload.facts == [
            "Your best focus time is around 9:00 - 10:00.",
            "You spent 40 minutes in focused work during this hour.",
            "This represents 67% of your total focus time.",
            "Second-best focus window: 14:00 with 20 minutes.",
        ]

    def test_no_focus(self, now):
        payload = templates.generate_best_focus_time_facts([], now=now)

        assert payload.confidence == "low"


class TestImprovementFacts:
    """Tests for the week-over-week comparison."""

    def test_needs_both_weeks(self, make_event, now):
        events = [make_event("navigation", now - DAY)]

        payload = templates.generate_improvement_facts(events, now=now)

        assert payload.confidence == "low"
        assert payload.facts[0].startswith("Not enough data to compare weekly progress.")

    def test_density_decrease(self, make_event, now):
        this_week = now - 2 * DAY
        last_week = now - 9 * DAY
        events = [
            make_event("idle_end", this_week),
            make_event("idle_start", this_week + 60 * 60_000),
            make_event("idle_end", last_week),
            make_event("navigation", last_week + 10 * 60_000),
            make_event("idle_start", last_week + 60 * 60_000),
        ]

        payload = templates.generate_improvement_facts(events, now=now)

        assert payload.facts == ["Your focus density decreased by 36% this week."]
        assert payload.confidence == "medium"

    def test_fewer_context_switches(self, make_event, now):
        def nav(ts, screen):
            return make_event("navigation", ts, context=EventContext(to_screen=screen))

        this_week = now - DAY
        last_week = now - 8 * DAY
        events = [
            nav(this_week, "a"),
            nav(last_week, "a"),
            nav(last_week + 1000, "b"),
            nav(last_week + 2000, "a"),
        ]

        payload = templates.generate_improvement_facts(events, now=now)

        assert payload.facts == [
            "Your focus density remained stable this week.",
            "You reduced context switches by 2.",
        ]


class TestDailySummaryFacts:
    """Tests for generate_daily_summary_facts."""

    def test_empty(self, now):
        assert templates.generate_daily_summary_facts([], now=now).facts == ["No activity recorded today."]

    def test_summary(self, manual, at, now):
        events = [
            manual(at(9), "Thesis", "study", minutes=30),
            manual(at(10), "Report", "work", minutes=10),
        ]

        payload = templates.generate_daily_summary_facts(events, now=now)

        assert payload.facts == [
            "You were active for 0 minutes with 0 minutes of idle time.",
            "Most time spent on study (30 minutes).",
            "You had 0 context switches today.",
            "Category breakdown: study: 30min, work: 10min.",
        ]


class TestLongestFocusFacts:
    """Tests for generate_longest_focus_facts."""

    def test_hours_and_minutes(self, manual, at, now):
        events = [
            manual(at(9), "Thesis", "study", minutes=90),
            manual(at(14), "Report", "work", minutes=30),
        ]

        payload = templates.generate_longest_focus_facts(events, now=now)

        assert payload.facts == [
            "Your longest focus session was 1 hour and 30 minutes.",
            "It occurred at 09:00 AM on 3/10/2026.",
            "Your average focus session is 60 minutes.",
            "Total focus sessions recorded: 2.",
        ]

    def test_plural_hours(self, manual, at, now):
        payload = templates.generate_longest_focus_facts([manual(at(9), "Thesis", minutes=120)], now=now)

        assert payload.facts[0] == "Your longest focus session was 2 hours and 0 minutes."

    def test_minutes_only(self, manual, at, now):
        payload = templates.generate_longest_focus_facts([manual(at(9), "Thesis", minutes=45)], now=now)

        assert payload.facts[0] == "Your longest focus session was 45 minutes."

    def test_no_focus(self, now):
        assert templates.generate_longest_focus_facts([], now=now).confidence == "low"


class TestMainDistractionsFacts:
    """Tests for generate_main_distractions_facts."""

    def test_ranked_hours(self, manual, at, now):
        events = [
            manual(at(14), "Phone", "distraction", minutes=10),
            manual(at(14, 30), "Feed", "distraction", minutes=20),
            manual(at(16), "News", "distraction", minutes=5),
        ]

        payload = templates.generate_main_distractions_facts(events, now=now)

        assert payload.facts == [
            "Main distraction window: 14:00 - 15:00 with 30 minutes.",
            "Total distraction time: 35 minutes across 3 periods.",
            "Average distraction length: 12 minutes.",
            "Top distraction hours: 14:00 (30min), 16:00 (5min).",
        ]

    def test_none(self, now):
        assert templates.generate_main_distractions_facts([], now=now).facts == [
            "No distractions detected in this period."
        ]


class TestMostProductiveFacts:
    """Tests for generate_most_productive_facts."""

    def test_single_day(self, manual, at, now):
        events = [
            manual(at(9), "Thesis", "study", minutes=40),
            manual(at(14), "Report", "work", minutes=20),
        ]

        payload = templates.generate_most_productive_facts(events, now=now)

        assert payload.facts == [
            "Most productive time: 9:00 - 10:00 with 40 minutes of focused work.",
            "Total productive time: 60 minutes across 2 sessions.",
            "Top productive hours: 9:00 (40min), 14:00 (20min).",
        ]

    def test_most_productive_day(self, manual, at, now):
        events = [
            manual(at(9, day_offset=-1), "Thesis", "study", minutes=90),
            manual(at(14), "Report", "work", minutes=20),
        ]

        payload = templates.generate_most_productive_facts(events, now=now)

        assert "Most productive day: 3/9/2026 with 90 minutes." in payload.facts
