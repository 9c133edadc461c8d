"""Static reference data shared by the catalog and the program records."""

PROGRAM_TYPES = [
    "Family mortgage",
    "Standard mortgage",
    "Military mortgage",
    "IT mortgage",
    "State-supported mortgage",
    "Commercial property",
    "Far East mortgage",
    "Arctic mortgage",
]

DEFAULT_LAYOUT = {"section_heights": [12, 16, 10, 14, 8, 11], "units_per_floor": 4}


def development_ids(count=15):
    return [f"dev-{i}" for i in range(1, count + 1)]


DEVELOPMENTS = {dev_id: f"Project {dev_id.split('-')[1]}" for dev_id in development_ids()}

# Early program records targeted a single building, stored as a flat unit list
LEGACY_DEVELOPMENT = "dev-1"
