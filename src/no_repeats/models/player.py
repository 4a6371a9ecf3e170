"""Player slot model."""

from enum import IntEnum


class PlayerSlot(IntEnum):
    """Position of a player within a 3-player roster."""

    ONE = 1
    TWO = 2
    THREE = 3

    def __str__(self) -> str:
        return f"Player{self.value}"

    @classmethod
    def iter(cls) -> list["PlayerSlot"]:
        """Slots in player order."""
        return list(cls)

    @property
    def index(self) -> int:
        """Zero-based position, for list access."""
        return self.value - 1

    def cycle_next(self) -> "PlayerSlot":
        """The following slot, wrapping from THREE back to ONE."""
        return PlayerSlot(self.value % 3 + 1)
