"""Hero catalog.

The enum values are the names used for asset lookup and for database
entries. Never change them once data exists.
"""

from enum import Enum


class ParseHeroError(ValueError):
    """Raised when text does not name a hero in the catalog."""

    def __init__(self, text: str):
        super().__init__(f"could not parse hero from '{text}'")
        self.text = text


class Role(str, Enum):
    """Hero roles."""

    TANK = "tank"
    DPS = "dps"
    SUPPORT = "support"

    def heroes(self) -> list["Hero"]:
        """Heroes with this role, in catalog order."""
        return [hero for hero in Hero if hero.role == self]


class Hero(str, Enum):
    """The 31 playable heroes."""

    ANA = "ana"
    ASHE = "ashe"
    BAPTISTE = "baptiste"
    BASTION = "bastion"
    BRIGITTE = "brigitte"
    DVA = "dva"
    DOOMFIST = "doomfist"
    GENJI = "genji"
    HANZO = "hanzo"
    JUNKRAT = "junkrat"
    LUCIO = "lucio"
    MCCREE = "mccree"
    MEI = "mei"
    MERCY = "mercy"
    MOIRA = "moira"
    ORISA = "orisa"
    PHARAH = "pharah"
    REAPER = "reaper"
    REINHARDT = "reinhardt"
    ROADHOG = "roadhog"
    SIGMA = "sigma"
    SOLDIER76 = "soldier-76"
    SOMBRA = "sombra"
    SYMMETRA = "symmetra"
    TORBJORN = "torbjorn"
    TRACER = "tracer"
    WIDOWMAKER = "widowmaker"
    WINSTON = "winston"
    WRECKING_BALL = "wrecking-ball"
    ZARYA = "zarya"
    ZENYATTA = "zenyatta"

    def __str__(self) -> str:
        return self.value

    @property
    def role(self) -> Role:
        return HERO_ROLES[self]

    @property
    def display_name(self) -> str:
        """Human readable name, e.g. "Soldier76"."""
        return _DISPLAY_NAMES.get(self, self.name.capitalize())

    @classmethod
    def parse(cls, text: str) -> "Hero":
        """Parse the stable encoding back into a hero.

        Raises:
            ParseHeroError: If text is not a catalog encoding
        """
        try:
            return cls(text)
        except ValueError:
            raise ParseHeroError(text) from None


HERO_ROLES: dict[Hero, Role] = {
    Hero.ANA: Role.SUPPORT,
    Hero.ASHE: Role.DPS,
    Hero.BAPTISTE: Role.SUPPORT,
    Hero.BASTION: Role.DPS,
    Hero.BRIGITTE: Role.SUPPORT,
    Hero.DVA: Role.TANK,
    Hero.DOOMFIST: Role.DPS,
    Hero.GENJI: Role.DPS,
    Hero.HANZO: Role.DPS,
    Hero.JUNKRAT: Role.DPS,
    Hero.LUCIO: Role.SUPPORT,
    Hero.MCCREE: Role.DPS,
    Hero.MEI: Role.DPS,
    Hero.MERCY: Role.SUPPORT,
    Hero.MOIRA: Role.SUPPORT,
    Hero.ORISA: Role.TANK,
    Hero.PHARAH: Role.DPS,
    Hero.REAPER: Role.DPS,
    Hero.REINHARDT: Role.TANK,
    Hero.ROADHOG: Role.TANK,
    Hero.SIGMA: Role.TANK,
    Hero.SOLDIER76: Role.DPS,
    Hero.SOMBRA: Role.DPS,
    Hero.SYMMETRA: Role.DPS,
    Hero.TORBJORN: Role.DPS,
    Hero.TRACER: Role.DPS,
    Hero.WIDOWMAKER: Role.DPS,
    Hero.WINSTON: Role.TANK,
    Hero.WRECKING_BALL: Role.TANK,
    Hero.ZARYA: Role.TANK,
    Hero.ZENYATTA: Role.SUPPORT,
}

_DISPLAY_NAMES: dict[Hero, str] = {
    Hero.DVA: "D.Va",
    Hero.SOLDIER76: "Soldier76",
    Hero.WRECKING_BALL: "WreckingBall",
}

NUM_HEROES = 31

# All heroes, for availability checks
HERO_POOL: frozenset[Hero] = frozenset(Hero)
