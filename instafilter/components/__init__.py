"""Filter specification components."""
