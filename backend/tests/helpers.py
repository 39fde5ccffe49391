class ScriptedRandom:
    """Random source that replays fixed values and records every draw."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = []

    def randrange(self, stop):
        if not self.values:
            raise AssertionError("ScriptedRandom ran out of values")
        value = self.values.pop(0)
        assert 0 <= value < stop, f"scripted value {value} outside range({stop})"
        self.calls.append(stop)
        return value


class CyclingRandom:
    """Always returns the same slot, so every draw after the first collides."""

    def __init__(self, day=0, period=0):
        self.day = day
        self.period = period
        self.draws = 0
        self._next_is_day = True

    def randrange(self, stop):
        self.draws += 1
        value = self.day if self._next_is_day else self.period
        self._next_is_day = not self._next_is_day
        return value


def slots(*pairs):
    """Flatten (day, period) pairs into the draw order used by the engine."""
    values = []
    for day, period in pairs:
        values.extend([day, period])
    return values
