from enum import Enum


class PlayType(Enum):
    """Offensive play families the micro-simulator can resolve"""

    RUN = "run"
    PASS = "pass"
    FIELD_GOAL = "field_goal"
    PUNT = "punt"
    KNEEL = "kneel"
    SPIKE = "spike"

    @classmethod
    def get_all_types(cls):
        """Get a list of all available play types"""
        return list(cls)

    @classmethod
    def get_scrimmage_types(cls):
        """Play types whose yardage counts toward drive and team totals"""
        return [cls.RUN, cls.PASS]

    @classmethod
    def get_kicking_types(cls):
        return [cls.FIELD_GOAL, cls.PUNT]


class PassDepth(Enum):
    SHORT = "short"
    INTERMEDIATE = "intermediate"
    DEEP = "deep"


class RunDirection(Enum):
    INSIDE = "inside"
    OUTSIDE = "outside"


class PassConcept(Enum):
    """Pass concept layered on top of the depth; affects the pressure clock"""

    STANDARD = "standard"
    PLAY_ACTION = "play_action"
    SCREEN = "screen"
