"""Weather scorer — turns a snapshot into normalized suitability scores."""

from waypoint.schemas.weather import WeatherAlert, WeatherScores, WeatherSnapshot

WEIGHT_PRECIPITATION = 0.4
WEIGHT_VISIBILITY = 0.3
WEIGHT_TEMPERATURE = 0.2
WEIGHT_WIND = 0.1

# Insight alert thresholds
ALERT_RAIN_PCT = 50
ALERT_WIND_KMH = 40
ALERT_VISIBILITY_KM = 5


def score_precipitation(probability: float) -> float:
    if probability <= 10:
        return 1.0
    if probability <= 30:
        return 0.8
    if probability <= 50:
        return 0.5
    if probability <= 70:
        return 0.2
    return 0.0


def score_visibility(km: float) -> float:
    if km >= 10:
        return 1.0
    if km >= 5:
        return 0.8
    if km >= 2:
        return 0.5
    if km >= 1:
        return 0.2
    return 0.0


def score_temperature(celsius: float) -> float:
    if 18 <= celsius <= 26:
        return 1.0
    if 14 <= celsius <= 30:
        return 0.8
    if 8 <= celsius <= 35:
        return 0.5
    return 0.3


def score_wind(kmh: float) -> float:
    if kmh <= 15:
        return 1.0
    if kmh <= 30:
        return 0.7
    if kmh <= 50:
        return 0.4
    return 0.2


def score_weather(weather: WeatherSnapshot) -> WeatherScores:
    """
    Score a snapshot on four axes and blend them.

    Each sub-score is a step lookup in [0, 1]; overall is the weighted sum
    (precipitation 0.4, visibility 0.3, temperature 0.2, wind 0.1).
    """
    precipitation = score_precipitation(weather.precipitation_probability)
    visibility = score_visibility(weather.visibility)
    temperature = score_temperature(weather.temperature)
    wind = score_wind(weather.wind_speed)

    overall = (
        WEIGHT_PRECIPITATION * precipitation
        + WEIGHT_VISIBILITY * visibility
        + WEIGHT_TEMPERATURE * temperature
        + WEIGHT_WIND * wind
    )

    return WeatherScores(
        precipitation=precipitation,
        visibility=visibility,
        temperature=temperature,
        wind=wind,
        overall=min(1.0, max(0.0, overall)),
    )


def weather_alerts(weather: WeatherSnapshot) -> list[WeatherAlert]:
    alerts = []
    if weather.precipitation_probability > ALERT_RAIN_PCT:
        alerts.append(WeatherAlert(type="rain", message=f"{weather.precipitation_probability:g}% chance of rain"))
    if weather.wind_speed > ALERT_WIND_KMH:
        alerts.append(WeatherAlert(type="wind", message=f"Strong winds: {weather.wind_speed:g}km/h"))
    if weather.visibility < ALERT_VISIBILITY_KM:
        alerts.append(WeatherAlert(type="visibility", message=f"Low visibility: {weather.visibility:g}km"))
    return alerts
