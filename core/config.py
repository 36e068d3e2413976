"""
Configuration constants for the coffee processing monitor.

This module contains all tunable parameters for sensor fusion, quality classification,
completion estimation, weather risk evaluation and alert dispatch.
"""

# ============================================================================
# Sensor Fusion Configuration
# ============================================================================

# Maximum temperature delta between the redundant probes before flagging
SENSOR_DISCREPANCY_TOLERANCE = 3.0  # °C

# ============================================================================
# Quality Classification Configuration
# ============================================================================

# Editable defaults (drying)
DEFAULT_DRY_MAX_TEMP = 40.0  # °C
DEFAULT_DRY_MAX_HUMI = 65.0  # % RH
DEFAULT_DRY_TARGET_MOISTURE = 12.0  # % MC

# Editable defaults (roasting)
DEFAULT_ROAST_MIN_TEMP = 196.0  # °C
DEFAULT_ROAST_MAX_TEMP = 224.0  # °C

# Fixed, non-configurable limits
FERMENTATION_MOISTURE_FLOOR = 20.0  # % MC
OVER_DRIED_MOISTURE_CEILING = 10.0  # % MC
BURNT_TEMPERATURE_CEILING = 225.0  # °C

# Load cell reading below which the tray is considered empty
EMPTY_TRAY_WEIGHT = 0.1  # kg

# ============================================================================
# History Buffers
# ============================================================================

DRYING_HISTORY_SIZE = 100
ROASTING_HISTORY_SIZE = 20

# ============================================================================
# Completion Estimation Configuration
# ============================================================================

ESTIMATOR_MIN_SAMPLES = 10
ESTIMATOR_WINDOW = 60
ESTIMATOR_MIN_ELAPSED_HOURS = 0.05  # 3 minutes
ESTIMATOR_OUTLIER_HOURS = 240.0  # 10 days
ESTIMATOR_DAYS_THRESHOLD_HOURS = 24.0

# ============================================================================
# Weather Risk Configuration
# ============================================================================

OUTDOOR_HUMIDITY_CRITICAL = 75.0  # % RH
OUTDOOR_HUMIDITY_WARNING = 65.0  # % RH, also the compounded-risk trigger
OUTDOOR_HEAT_WARNING = 35.0  # °C
SEVERE_WEATHER_CODE = 80  # WMO codes >= 80 are showers / thunderstorms

# 7-day outlook: a day counts as rainy above either limit
RAINY_DAY_PRECIPITATION_SUM = 1.0  # mm
RAINY_DAY_PROBABILITY = 50  # %

# Auto-refresh interval for the weather provider
WEATHER_REFRESH_INTERVAL_SECONDS = 10 * 60

# ============================================================================
# Notification Configuration
# ============================================================================

# Severity -> (title, tag); unmapped severities use the "info" entry
NOTIFICATION_MAP = {
    "critical": ("🚨 CRITICAL Alert", "ai-critical"),
    "warning": ("⚠️ Warning", "ai-warning"),
    "success": ("✅ Status Update", "ai-success"),
    "info": ("ℹ️ Info", "ai-info"),
}

SENSOR_DISCREPANCY_TAG = "sensor-discrepancy"
SENSOR_FAILURE_TAG = "sensor-failure"
WEATHER_ALERT_TAG = "coffee-weather-alert"

# ============================================================================
# Known Growing Locations
# ============================================================================

LOCATIONS = [
    {"name": "Amadeo, Cavite", "lat": 14.1736, "lon": 120.9189},
    {"name": "Imus, Cavite", "lat": 14.4297, "lon": 120.9367},
    {"name": "Kawit, Cavite", "lat": 14.4352, "lon": 120.8994},
    {"name": "Tagaytay City", "lat": 14.1153, "lon": 120.9621},
    {"name": "Lipa City, Batangas", "lat": 13.9411, "lon": 121.1631},
    {"name": "Benguet (La Trinidad)", "lat": 16.4623, "lon": 120.5877},
    {"name": "Sagada, Mountain Province", "lat": 17.0847, "lon": 120.9001},
    {"name": "Davao City", "lat": 7.1907, "lon": 125.4553},
    {"name": "Mount Apo, Davao", "lat": 6.9876, "lon": 125.2707},
    {"name": "Bukidnon (Malaybalay)", "lat": 8.1575, "lon": 125.1278},
    {"name": "Cordillera (Baguio)", "lat": 16.4023, "lon": 120.5960},
    {"name": "Cebu City", "lat": 10.3157, "lon": 123.8854},
]
