"""
Static payloads for widgets that have no backing telemetry.

Weather and generator temperature are not measured by any meter, so the
dashboard serves fixed values for them. The alert and forecast rows are what
mock mode returns in place of the ``alerts`` and ``forecast_days`` tables.

CHANGELOG:
- 2026-10-19: Initial creation
"""

from datetime import datetime, timedelta

from solar_dashboard.models import AlertOut, ForecastDayOut

WEATHER = {
    "id": "w1",
    "location": "Austin, TX",
    "temperature": 25,
    "condition": "Sunny",
    "humidity": 65,
    "windSpeed": 12,
}

WEATHER_FORECAST = [
    {"time": "Now", "temp": 25, "condition": "Sunny"},
    {"time": "1PM", "temp": 27, "condition": "Partly Cloudy"},
    {"time": "2PM", "temp": 26, "condition": "Cloudy"},
]

GENERATOR_TEMPERATURE = {"current": 42, "max": 80, "min": 20}

FORECAST_DAYS = [
    ForecastDayOut(date="Today", weather="Sunny", forecast="45.2 kWh", comparison=8),
    ForecastDayOut(
        date="Tomorrow", weather="Partly Cloudy", forecast="39.8 kWh", comparison=-5
    ),
    ForecastDayOut(date="Wednesday", weather="Cloudy", forecast="32.5 kWh", comparison=-18),
    ForecastDayOut(date="Thursday", weather="Sunny", forecast="44.7 kWh", comparison=6),
]

# (status, description, component, hours before now)
_ALERT_TEMPLATES = (
    ("Alert", "Ground array shading detected", "Ground Array", 30),
    ("Info", "Battery charging completed", "Battery Storage", 5),
    ("Warning", "Inverter temperature high", "Inverter 1", 2),
)


def mock_alerts(now: datetime) -> list[AlertOut]:
    """Return the sample alerts timestamped relative to *now*, oldest first."""
    alerts = []
    for idx, (status, description, component, hours_ago) in enumerate(
        _ALERT_TEMPLATES, start=1
    ):
        raised = now - timedelta(hours=hours_ago)
        alerts.append(
            AlertOut(
                id=idx,
                status=status,
                description=description,
                component=component,
                time=raised.strftime("%I:%M %p"),
                timestamp=raised,
            )
        )
    return alerts
