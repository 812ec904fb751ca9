"""
Tests for slot generation.
"""

import pendulum

from bookingslots.domain.models import BusyInterval, WeeklyAvailability
from bookingslots.domain.slot_generator import SlotGenerator, generate_slots, merge_busy_intervals

TZ = "Europe/Berlin"
MONDAY = pendulum.date(2024, 11, 25)
SATURDAY = pendulum.date(2024, 11, 23)


def _busy(start: str, end: str, day: str = "2024-11-25") -> BusyInterval:
    return BusyInterval(
        start=pendulum.parse(f"{day} {start}", tz=TZ),
        end=pendulum.parse(f"{day} {end}", tz=TZ),
    )


def _starts(slots):
    return [slot.start.format("HH:mm") for slot in slots]


class TestSlotGenerator:
    """Tests for SlotGenerator."""

    def setup_method(self):
        self.weekly = WeeklyAvailability.from_template_fields(
            days_of_week=[1, 2, 3, 4, 5],
            start_time="09:00",
            end_time="17:00",
            duration=30,
        )
        self.generator = SlotGenerator(self.weekly, timezone=TZ)

    def test_no_busy_times_fills_window(self):
        """Test that an empty busy list yields every aligned slot."""
        slots = self.generator.generate(MONDAY, [])

        assert len(slots) == 16
        assert slots[0].start == pendulum.datetime(2024, 11, 25, 9, 0, tz=TZ)
        assert slots[-1].end == pendulum.datetime(2024, 11, 25, 17, 0, tz=TZ)
        for previous, current in zip(slots, slots[1:]):
            assert (current.start - previous.start).in_minutes() == 30

    def test_every_slot_has_duration_and_stays_in_window(self):
        window_start = pendulum.datetime(2024, 11, 25, 9, 0, tz=TZ)
        window_end = pendulum.datetime(2024, 11, 25, 17, 0, tz=TZ)

        for slot in self.generator.generate(MONDAY, [_busy("12:10", "13:05")]):
            assert slot.duration_minutes() == 30
            assert window_start <= slot.start
            assert slot.end <= window_end

    def test_busy_slot_is_removed(self):
        """A half-hour busy block removes exactly one slot."""
        slots = self.generator.generate(MONDAY, [_busy("09:30", "10:00")])

        starts = _starts(slots)
        assert len(slots) == 15
        assert "09:30" not in starts
        assert starts[:3] == ["09:00", "10:00", "10:30"]
        assert starts[-1] == "16:30"

    def test_back_to_back_slots_stay_free(self):
        """Slots touching a busy interval at a boundary are kept."""
        slots = self.generator.generate(MONDAY, [_busy("10:00", "10:30")])

        starts = _starts(slots)
        assert "09:30" in starts
        assert "10:30" in starts
        assert "10:00" not in starts

    def test_partial_overlap_removes_both_neighbours(self):
        slots = self.generator.generate(MONDAY, [_busy("10:15", "10:45")])

        starts = _starts(slots)
        assert "10:00" not in starts
        assert "10:30" not in starts
        assert len(slots) == 14

    def test_overlapping_busy_intervals(self):
        """Busy intervals that overlap each other need no merging."""
        busy = [_busy("11:00", "12:00"), _busy("11:30", "12:30"), _busy("11:00", "12:00")]

        starts = _starts(self.generator.generate(MONDAY, busy))

        assert "11:00" not in starts
        assert "11:30" not in starts
        assert "12:00" not in starts
        assert "10:30" in starts
        assert "12:30" in starts

    def test_busy_interval_covering_whole_day(self):
        busy = [BusyInterval(
            start=pendulum.datetime(2024, 11, 24, 20, 0, tz=TZ),
            end=pendulum.datetime(2024, 11, 26, 8, 0, tz=TZ),
        )]

        assert self.generator.generate(MONDAY, busy) == []

    def test_busy_on_other_day_is_ignored(self):
        busy = [_busy("09:00", "17:00", day="2024-11-26")]

        assert len(self.generator.generate(MONDAY, busy)) == 16

    def test_excluded_weekday_returns_nothing(self):
        """Test that weekends are excluded regardless of busy times."""
        assert self.generator.generate(SATURDAY, []) == []
        assert self.generator.generate(SATURDAY, [_busy("09:00", "10:00", day="2024-11-23")]) == []

    def test_sunday_maps_to_seven(self):
        weekly = WeeklyAvailability.from_template_fields([7], "09:00", "10:00", 30)

        slots = generate_slots(pendulum.date(2024, 11, 24), weekly, timezone=TZ)

        assert _starts(slots) == ["09:00", "09:30"]

    def test_trailing_partial_slot_is_dropped(self):
        """A 45 minute meeting fits once into a one hour window."""
        weekly = WeeklyAvailability.from_template_fields([1], "09:00", "10:00", 45)

        slots = generate_slots(MONDAY, weekly, timezone=TZ)

        assert _starts(slots) == ["09:00"]
        assert slots[0].end == pendulum.datetime(2024, 11, 25, 9, 45, tz=TZ)

    def test_slot_count_is_window_divided_by_duration(self):
        for duration, expected in [(15, 32), (25, 19), (60, 8), (90, 5), (480, 1), (481, 0)]:
            weekly = WeeklyAvailability.from_template_fields([1], "09:00", "17:00", duration)
            assert len(generate_slots(MONDAY, weekly, timezone=TZ)) == expected

    def test_inverted_window_yields_nothing(self):
        """Malformed windows degrade to an empty result instead of raising."""
        inverted = WeeklyAvailability.from_template_fields([1], "17:00", "09:00", 30)
        empty = WeeklyAvailability.from_template_fields([1], "09:00", "09:00", 30)

        assert generate_slots(MONDAY, inverted, timezone=TZ) == []
        assert generate_slots(MONDAY, empty, timezone=TZ) == []

    def test_generation_is_repeatable(self):
        busy = [_busy("13:00", "14:00")]

        first = self.generator.generate(MONDAY, busy)
        second = self.generator.generate(MONDAY, busy)

        assert first == second

    def test_slots_are_in_host_timezone(self):
        slots = self.generator.generate(MONDAY, [])

        assert slots[0].start.timezone_name == TZ


def test_merge_busy_intervals_concatenates_sources():
    bookings = [_busy("09:00", "09:30")]
    events = [_busy("09:00", "09:30"), _busy("12:00", "13:00")]

    merged = merge_busy_intervals(bookings, events)

    assert len(merged) == 3
    assert merged[0] is bookings[0]
