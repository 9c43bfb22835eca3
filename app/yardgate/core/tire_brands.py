import re

TIRE_BRAND_NAMES = (
    "Alliance",
    "BFGoodrich",
    "Bridgestone",
    "Continental",
    "Cooper",
    "Double Coin",
    "Dunlop",
    "Dynatrac",
    "Falken",
    "Firestone",
    "General",
    "Goodyear",
    "Hankook",
    "Kelly",
    "Kumho",
    "Linglong",
    "Michelin",
    "Nexen",
    "Nitto",
    "Pirelli",
    "Roadmaster",
    "Sailun",
    "Sumitomo",
    "Toyo",
    "Triangle",
    "Uniroyal",
    "Westlake",
    "Yokohama",
)

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_brand_key(value: str) -> str:
    return _NON_ALNUM.sub("", value.lower())


_BRAND_LOOKUP = {normalize_brand_key(name): name for name in TIRE_BRAND_NAMES}


def canonical_tire_brand(value: str) -> str | None:
    """Map user input such as ``"good-year"`` to ``"Goodyear"``."""
    return _BRAND_LOOKUP.get(normalize_brand_key(value))
