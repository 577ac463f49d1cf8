"""Two-slot selection of versions to compare."""


class ComparisonSelector:
    """Tracks at most two selected version numbers with toggle semantics.

    Toggling a selected version deselects it. Toggling a new version fills
    the first empty slot, or replaces the second slot when both are taken,
    so the first pick always stays put.
    """

    def __init__(self) -> None:
        """Start with both slots empty."""
        self._first: int | None = None
        self._second: int | None = None

    def toggle(self, version_number: int) -> tuple[int, ...]:
        """Select or deselect a version and return the current selection."""
        if version_number == self._first:
            self._first, self._second = self._second, None
        elif version_number == self._second:
            self._second = None
        elif self._first is None:
            self._first = version_number
        else:
            self._second = version_number
        return self.current()

    def current(self) -> tuple[int, ...]:
        """Selected version numbers in slot order."""
        return tuple(v for v in (self._first, self._second) if v is not None)

    def is_complete(self) -> bool:
        """True when exactly two distinct versions are selected."""
        return (
            self._first is not None
            and self._second is not None
            and self._first != self._second
        )

    def clear(self) -> None:
        """Deselect everything."""
        self._first = None
        self._second = None

    def __contains__(self, version_number: object) -> bool:
        return version_number is not None and version_number in (self._first, self._second)
