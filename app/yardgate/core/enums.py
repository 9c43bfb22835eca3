from enum import Enum


class MovementType(str, Enum):
    IN = "IN"
    OUT = "OUT"
    INSPECTION = "INSPECTION"


class TrailerStatus(str, Enum):
    IN = "IN"
    OUT = "OUT"


class TrailerLoadState(str, Enum):
    EMPTY = "EMPTY"
    LOADED = "LOADED"
    UNKNOWN = "UNKNOWN"


class TrailerCondition(str, Enum):
    ACTIVE = "ACTIVE"
    OUT_OF_SERVICE = "OUT_OF_SERVICE"
    DAMAGED = "DAMAGED"


class TrailerType(str, Enum):
    DRY_VAN = "DRY_VAN"
    FLATBED = "FLATBED"
    FLATBED_ROLL_TITE = "FLATBED_ROLL_TITE"
    STEP_DECK = "STEP_DECK"
    STEP_DECK_ROLL_TITE = "STEP_DECK_ROLL_TITE"


class TrailerBound(str, Enum):
    SOUTH_BOUND = "SOUTH_BOUND"
    NORTH_BOUND = "NORTH_BOUND"
    LOCAL = "LOCAL"


class AxleType(str, Enum):
    SINGLE = "SINGLE"
    DUAL = "DUAL"


class TireCondition(str, Enum):
    ORI = "ORI"
    RE = "RE"


class AngleKey(str, Enum):
    FRONT = "FRONT"
    LEFT_FRONT = "LEFT_FRONT"
    LEFT_REAR = "LEFT_REAR"
    REAR = "REAR"
    RIGHT_REAR = "RIGHT_REAR"
    RIGHT_FRONT = "RIGHT_FRONT"
    TRAILER_NUMBER_VIN = "TRAILER_NUMBER_VIN"
    LANDING_GEAR_UNDERCARRIAGE = "LANDING_GEAR_UNDERCARRIAGE"


class DamageLocation(str, Enum):
    FRONT_WALL = "FRONT_WALL"
    FRONT_CORNER_LEFT = "FRONT_CORNER_LEFT"
    FRONT_CORNER_RIGHT = "FRONT_CORNER_RIGHT"
    LANDING_GEAR = "LANDING_GEAR"
    LEFT_WALL = "LEFT_WALL"
    LEFT_FRONT_CORNER = "LEFT_FRONT_CORNER"
    LEFT_REAR_CORNER = "LEFT_REAR_CORNER"
    LEFT_DOOR = "LEFT_DOOR"
    RIGHT_WALL = "RIGHT_WALL"
    RIGHT_FRONT_CORNER = "RIGHT_FRONT_CORNER"
    RIGHT_REAR_CORNER = "RIGHT_REAR_CORNER"
    RIGHT_DOOR = "RIGHT_DOOR"
    REAR_WALL_DOORS = "REAR_WALL_DOORS"
    BUMPER_ICC_BAR = "BUMPER_ICC_BAR"
    TAILLIGHTS = "TAILLIGHTS"
    ROOF = "ROOF"
    FRAME = "FRAME"
    SUSPENSION = "SUSPENSION"
    AXLES = "AXLES"
    TIRE_LEFT_INNER = "TIRE_LEFT_INNER"
    TIRE_LEFT_OUTER = "TIRE_LEFT_OUTER"
    TIRE_RIGHT_INNER = "TIRE_RIGHT_INNER"
    TIRE_RIGHT_OUTER = "TIRE_RIGHT_OUTER"
    INTERIOR_FLOOR = "INTERIOR_FLOOR"
    INTERIOR_WALLS = "INTERIOR_WALLS"
    INTERIOR_ROOF = "INTERIOR_ROOF"
    E_TRACK_RAILS = "E_TRACK_RAILS"


class DamageType(str, Enum):
    SCRATCH = "SCRATCH"
    DENT = "DENT"
    CRACK = "CRACK"
    HOLE_PUNCTURE = "HOLE_PUNCTURE"
    TEAR = "TEAR"
    RUST_CORROSION = "RUST_CORROSION"
    BURN_SCORCH = "BURN_SCORCH"
    BENT = "BENT"
    BROKEN = "BROKEN"
    LOOSE_OR_MISSING = "LOOSE_OR_MISSING"
    LEAK_WATER_DAMAGE = "LEAK_WATER_DAMAGE"
    PAINT_DAMAGE = "PAINT_DAMAGE"
    STRUCTURAL_DAMAGE = "STRUCTURAL_DAMAGE"
    TIRE_DAMAGE_FLAT = "TIRE_DAMAGE_FLAT"
    ELECTRICAL_LIGHTS = "ELECTRICAL_LIGHTS"
    DOOR_ISSUE = "DOOR_ISSUE"
    LANDING_GEAR_ISSUE = "LANDING_GEAR_ISSUE"


DAMAGE_CHECKLIST_ITEMS = (
    "CRANK_SHAFT",
    "MUD_FLAPS",
    "CLEARANCE_LIGHTS_1",
    "MARKERS",
    "REFLECTORS",
    "CLEARANCE_LIGHTS_2",
    "CLEARANCE_LIGHTS_3",
    "LUG_NUTS",
    "UNDER_CARRIAGE",
    "SEA_ATA_7_WAY_PLUG",
    "WIRING",
    "REAR_END_PROTECTION",
    "AIR_OR_V_LOSS",
    "CONNECTIONS",
    "HOSE",
    "TUBING",
)

CTPAT_ITEMS = (
    "TRACTOR_BUMPER",
    "TRAILER_TIRES",
    "MOTOR",
    "TRAILER_BUMPER",
    "TRACTOR_TIRE",
    "TRAILER_DOORS",
    "TRACTOR_FLOOR",
    "SECURITY_SEALS",
    "FUEL_TANKS",
    "TRAILER_WALLS_SIDE",
    "CABINS_AND_COMPARTMENTS",
    "TRAILER_FRONT_WALL",
    "AIR_TANKS",
    "TRAILER_CEILING",
    "TRACTOR_CHASSIS",
    "TRAILER_MUFFLER",
    "QUINTA",
    "INTERIOR_FLOOR_TRAILER",
    "TRAILER_CHASSIS",
    "INTERNAL_TRACTOR_WALLS",
    "AGRICULTURE",
)
