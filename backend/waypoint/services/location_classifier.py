"""Indoor/outdoor classification for a place, from its types or its name."""

from waypoint.schemas.intervention import LocationClassification

OUTDOOR_TYPES = {"park", "zoo", "beach", "hiking_area", "viewpoint", "garden", "campground", "natural_feature"}
INDOOR_TYPES = {"museum", "shopping_mall", "restaurant", "movie_theater", "spa", "gym", "cafe", "bar"}

OUTDOOR_KEYWORDS = ("outdoor", "hiking", "trail", "beach", "park", "garden", "nature")
INDOOR_KEYWORDS = ("mall", "museum", "cinema", "theater", "gallery")

TYPE_CONFIDENCE = 0.9
KEYWORD_CONFIDENCE = 0.7
UNKNOWN_CONFIDENCE = 0.5


def classify_location(types: list[str], name: str = "") -> LocationClassification:
    # Indoor types win over outdoor ones (a cafe inside a park is indoor)
    if INDOOR_TYPES.intersection(types):
        is_outdoor, confidence = False, TYPE_CONFIDENCE
    elif OUTDOOR_TYPES.intersection(types):
        is_outdoor, confidence = True, TYPE_CONFIDENCE
    else:
        lower_name = name.lower()
        if any(kw in lower_name for kw in OUTDOOR_KEYWORDS):
            is_outdoor, confidence = True, KEYWORD_CONFIDENCE
        elif any(kw in lower_name for kw in INDOOR_KEYWORDS):
            is_outdoor, confidence = False, KEYWORD_CONFIDENCE
        else:
            is_outdoor, confidence = False, UNKNOWN_CONFIDENCE

    return LocationClassification(is_outdoor=is_outdoor, confidence=confidence, types=types)
