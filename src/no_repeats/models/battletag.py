"""Player identifier model."""

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class BattleTag:
    """Normalized player identifier.

    Names are stripped and lowercased so equality and ordering follow the
    normalized form.
    """

    name: str

    def __post_init__(self):
        normalized = self.name.strip().lower()
        if not normalized:
            raise ValueError("battletag must not be empty")
        object.__setattr__(self, "name", normalized)

    def __str__(self) -> str:
        return self.name
