from datetime import date

from tourdesk.services.recurrence import expand_dates, sunday_based_weekday


def test_sunday_based_weekday_numbers_sunday_as_zero():
    assert sunday_based_weekday(date(2031, 3, 2)) == 0  # domingo
    assert sunday_based_weekday(date(2031, 3, 3)) == 1  # lunes
    assert sunday_based_weekday(date(2031, 3, 8)) == 6  # sábado


def test_expand_dates_keeps_only_selected_weekdays_inside_horizon():
    dates = expand_dates(date(2031, 3, 3), [1, 3], horizon_days=14)

    assert dates == [
        date(2031, 3, 3),
        date(2031, 3, 5),
        date(2031, 3, 10),
        date(2031, 3, 12),
    ]


def test_expand_dates_horizon_end_is_exclusive():
    dates = expand_dates(date(2031, 3, 3), [1], horizon_days=7)

    assert dates == [date(2031, 3, 3)]


def test_expand_dates_skips_days_before_not_before():
    dates = expand_dates(
        date(2031, 3, 1), list(range(7)), horizon_days=7, not_before=date(2031, 3, 5)
    )

    assert dates[0] == date(2031, 3, 5)
    assert dates[-1] == date(2031, 3, 7)
    assert len(dates) == 3


def test_expand_dates_returns_nothing_when_horizon_already_passed():
    assert expand_dates(
        date(2031, 1, 1), list(range(7)), horizon_days=10, not_before=date(2031, 3, 3)
    ) == []
