"""
Time Windows - Wall-clock helpers

Time slots, preferred times, best-performing times and teacher availability
all share the same shape: a day_of_week plus HH:MM start/end strings. The
helpers here accept any object carrying those three attributes.
"""

MINUTES_IN_A_DAY = 1440


def time_to_minutes(time_str):
    """
    Convert an "HH:MM" string to minutes since midnight.

    Raises:
        ValueError: if the string is not a valid wall-clock time
    """
    try:
        hours_str, minutes_str = str(time_str).strip().split(':')
        hours, minutes = int(hours_str), int(minutes_str)
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid time '{time_str}', expected HH:MM")

    total = hours * 60 + minutes
    if not (0 <= hours <= 24 and 0 <= minutes < 60) or total > MINUTES_IN_A_DAY:
        raise ValueError(f"Invalid time '{time_str}', expected HH:MM")
    return total


def minutes_to_time(total_minutes):
    """Inverse of time_to_minutes ("HH:MM", 24h clock)."""
    hours = total_minutes // 60
    minutes = total_minutes % 60
    return f"{hours:02d}:{minutes:02d}"


def window_bounds(window):
    """
    Return (start_minutes, end_minutes) for a window, validating it.

    Raises:
        ValueError: if the day is outside 0-6 or the window does not end after it starts
    """
    if not 0 <= window.day_of_week <= 6:
        raise ValueError(f"Invalid day_of_week {window.day_of_week}, expected 0-6 (Sunday=0)")
    start = time_to_minutes(window.start_time)
    end = time_to_minutes(window.end_time)
    if end <= start:
        raise ValueError(f"Time window {window.start_time}-{window.end_time} must end after it starts")
    return start, end


def windows_overlap(window1, window2):
    """Two windows overlap iff they share a day and start1 < end2 and start2 < end1."""
    if window1.day_of_week != window2.day_of_week:
        return False

    start1, end1 = window_bounds(window1)
    start2, end2 = window_bounds(window2)
    return start1 < end2 and start2 < end1


def window_contains(outer, inner):
    """True when inner lies entirely inside outer on the same day."""
    if outer.day_of_week != inner.day_of_week:
        return False

    outer_start, outer_end = window_bounds(outer)
    inner_start, inner_end = window_bounds(inner)
    return outer_start <= inner_start and inner_end <= outer_end


def start_hour(window):
    """Start of the window as fractional hours (10:30 -> 10.5)."""
    return time_to_minutes(window.start_time) / 60
