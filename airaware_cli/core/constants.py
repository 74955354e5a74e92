"""Static constants and lookup tables for AirAware CLI."""

from __future__ import annotations

GEO_API_URL = "https://geocoding-api.open-meteo.com/v1/search"
AQI_API_URL = "https://air-quality-api.open-meteo.com/v1/air-quality"

CURRENT_VARIABLES = ("us_aqi", "pm10", "pm2_5")

DEFAULT_CITY = "London"
DEFAULT_CATEGORY = "weight-loss"
DAILY_GOAL = 5

STORAGE_KEY = "airaware_v2"

LOAD_ERROR_MESSAGE = "Could not load data. Please try another city."
RANKING_ERROR_MESSAGE = "Failed to load rankings."
GEOLOCATION_LABEL = "Your Location"

RANKING_CITIES = [
    {"name": "New York", "latitude": 40.71, "longitude": -74.00},
    {"name": "London", "latitude": 51.50, "longitude": -0.12},
    {"name": "Beijing", "latitude": 39.90, "longitude": 116.40},
    {"name": "Delhi", "latitude": 28.61, "longitude": 77.20},
    {"name": "Tokyo", "latitude": 35.68, "longitude": 139.69},
    {"name": "Paris", "latitude": 48.85, "longitude": 2.35},
    {"name": "Dubai", "latitude": 25.20, "longitude": 55.27},
    {"name": "Los Angeles", "latitude": 34.05, "longitude": -118.24},
]

# (upper bound inclusive, tier key); the last band is open-ended.
TIER_BANDS = [
    (50, "good"),
    (100, "moderate"),
    (150, "unhealthy_sensitive"),
    (200, "unhealthy"),
]

TIER_LABELS = {
    "good": "Good",
    "moderate": "Moderate",
    "unhealthy_sensitive": "Unhealthy for Sensitive",
    "unhealthy": "Unhealthy",
    "severe": "Severe",
}

TIER_COLORS = {
    "good": "#10B981",
    "moderate": "#F59E0B",
    "unhealthy_sensitive": "#F97316",
    "unhealthy": "#F97316",
    "severe": "#EF4444",
}

GUIDANCE_TABLE = {
    "good": {
        "recommended": ["Ventilate indoor spaces", "Outdoor physical activities"],
        "avoid": ["No restrictions"],
    },
    "moderate": {
        "recommended": ["Monitor sensitive individuals"],
        "avoid": ["Burning waste outdoors"],
    },
    "unhealthy_sensitive": {
        "recommended": ["Wear N95 masks outdoors", "Run air purifiers"],
        "avoid": ["Prolonged outdoor exertion", "High traffic zones"],
    },
    "unhealthy": {
        "recommended": ["Wear N95 masks outdoors", "Run air purifiers"],
        "avoid": ["Prolonged outdoor exertion", "High traffic zones"],
    },
    "severe": {
        "recommended": ["Remain indoors", "Seal windows", "Use air filtration"],
        "avoid": ["All outdoor activities"],
    },
}

EXERCISE_DB = {
    "weight-loss": [
        {"id": "wl1", "name": "Jumping Jacks", "duration": "2 mins", "icon": "🏃"},
        {"id": "wl2", "name": "High Knees", "duration": "3 mins", "icon": "🦵"},
        {"id": "wl3", "name": "Burpees", "duration": "1 min", "icon": "🔥"},
        {"id": "wl4", "name": "Squats", "duration": "2 mins", "icon": "🏋️"},
    ],
    "breathing": [
        {"id": "br1", "name": "Deep Belly", "duration": "5 mins", "icon": "🧘"},
        {"id": "br2", "name": "4-7-8 Rhythm", "duration": "4 mins", "icon": "🌬️"},
        {"id": "br3", "name": "Box Breathing", "duration": "3 mins", "icon": "⬜"},
    ],
    "yoga": [
        {"id": "yg1", "name": "Sun Salutation", "duration": "5 mins", "icon": "☀️"},
        {"id": "yg2", "name": "Tree Pose", "duration": "2 mins", "icon": "🌳"},
        {"id": "yg3", "name": "Child Pose", "duration": "3 mins", "icon": "👶"},
    ],
    "indoor": [
        {"id": "in1", "name": "Push-ups", "duration": "3 sets", "icon": "💪"},
        {"id": "in2", "name": "Plank", "duration": "60 sec", "icon": "📏"},
        {"id": "in3", "name": "Wall Sit", "duration": "60 sec", "icon": "🧱"},
    ],
}
