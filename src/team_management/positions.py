"""Football position codes and their side of the ball."""

from enum import Enum


class SideOfBall(Enum):
    OFFENSE = "offense"
    DEFENSE = "defense"
    SPECIAL_TEAMS = "special_teams"


class Position:
    """Position codes used by depth charts and roster rows"""

    # Offense
    QB = "QB"
    RB = "RB"
    FB = "FB"
    WR = "WR"
    TE = "TE"
    LT = "LT"
    LG = "LG"
    C = "C"
    RG = "RG"
    RT = "RT"

    # Defense
    DT = "DT"
    EDGE = "EDGE"
    LB = "LB"
    CB = "CB"
    S = "S"

    # Special teams
    K = "K"
    P = "P"

    @classmethod
    def get_offensive_positions(cls):
        return [cls.QB, cls.RB, cls.FB, cls.WR, cls.TE, cls.LT, cls.LG, cls.C, cls.RG, cls.RT]

    @classmethod
    def get_defensive_positions(cls):
        return [cls.DT, cls.EDGE, cls.LB, cls.CB, cls.S]

    @classmethod
    def get_offensive_line_positions(cls):
        return [cls.LT, cls.LG, cls.C, cls.RG, cls.RT]

    @classmethod
    def get_skill_positions(cls):
        return [cls.QB, cls.RB, cls.WR, cls.TE]

    @classmethod
    def get_secondary_positions(cls):
        return [cls.CB, cls.S]

    @classmethod
    def get_front_seven_positions(cls):
        return [cls.DT, cls.EDGE, cls.LB]


POSITION_SIDE = {
    **{pos: SideOfBall.OFFENSE for pos in Position.get_offensive_positions()},
    **{pos: SideOfBall.DEFENSE for pos in Position.get_defensive_positions()},
    Position.K: SideOfBall.SPECIAL_TEAMS,
    Position.P: SideOfBall.SPECIAL_TEAMS,
}

# Common roster spellings folded onto the codes above
POSITION_ALIASES = {
    "HB": Position.RB,
    "OT": Position.LT,
    "OG": Position.LG,
    "DE": Position.EDGE,
    "OLB": Position.LB,
    "ILB": Position.LB,
    "MLB": Position.LB,
    "FS": Position.S,
    "SS": Position.S,
    "NT": Position.DT,
    "PK": Position.K,
}


def normalize_position(position: str) -> str:
    code = (position or "").strip().upper()
    return POSITION_ALIASES.get(code, code)


def side_of_ball(position: str) -> SideOfBall:
    """Side of ball for a position; unknown codes count as offense."""
    return POSITION_SIDE.get(normalize_position(position), SideOfBall.OFFENSE)
