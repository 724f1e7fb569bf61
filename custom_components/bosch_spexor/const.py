"""Constants for the Bosch spexor integration."""

from __future__ import annotations

from typing import Final

# Domain
DOMAIN: Final = "bosch_spexor"

# Integration metadata
NAME: Final = "Bosch spexor"
MANUFACTURER: Final = "Bosch"

# Configuration
CONF_CLIENT_ID: Final = "client_id"
CONF_SCAN_INTERVAL: Final = "scan_interval"

# Defaults
DEFAULT_CLIENT_ID: Final = "openhab-spexor-binding"
DEFAULT_SCAN_INTERVAL: Final = 300
MIN_SCAN_INTERVAL: Final = 60
MAX_SCAN_INTERVAL: Final = 3600

# spexor cloud API
API_BASE: Final = "https://api.spexor-bosch.com/api/public"
ENDPOINT_SPEXORS: Final = "/spexors"
ENDPOINT_SPEXOR: Final = "/spexor/{spexor_id}"
ENDPOINT_SENSOR_VALUE: Final = "/spexor/{spexor_id}/sensor/{keys}"
ENDPOINT_OBSERVATION: Final = "/spexor/{spexor_id}/observation"
REQUEST_TIMEOUT: Final = 30

# OAuth2 device code flow
OAUTH2_DEVICE_CODE_URL: Final = "https://api.spexor-bosch.com/oauth2/devicecode"
OAUTH2_TOKEN_URL: Final = "https://api.spexor-bosch.com/oauth2/token"
OAUTH2_SCOPES: Final = ["offline_access", "spexor.read", "spexor.write"]
GRANT_TYPE_DEVICE_CODE: Final = "urn:ietf:params:oauth:grant-type:device_code"
GRANT_TYPE_REFRESH_TOKEN: Final = "refresh_token"
DEFAULT_POLL_INTERVAL: Final = 5
SLOW_DOWN_INCREMENT: Final = 5
TOKEN_EXPIRY_MARGIN: Final = 60

# Storage
STORAGE_VERSION: Final = 1
STORAGE_KEY: Final = f"{DOMAIN}.auth"

# Status page
AUTH_VIEW_PATH: Final = f"/api/{DOMAIN}/auth"
STATUS_PAGE_FILE: Final = "status.html"

# Sensor keys reported by the cloud
SENSOR_AIR_QUALITY: Final = "AirQuality"
SENSOR_AIR_QUALITY_LEVEL: Final = "AirQualityLevel"
SENSOR_TEMPERATURE: Final = "Temperature"
SENSOR_HUMIDITY: Final = "Humidity"
SENSOR_PRESSURE: Final = "Pressure"
SENSOR_GAS: Final = "Gas"
SENSOR_LIGHT: Final = "Light"
SENSOR_ACOUSTIC: Final = "Acoustic"

SENSOR_KEYS: Final = [
    SENSOR_AIR_QUALITY,
    SENSOR_AIR_QUALITY_LEVEL,
    SENSOR_TEMPERATURE,
    SENSOR_HUMIDITY,
    SENSOR_PRESSURE,
    SENSOR_GAS,
    SENSOR_LIGHT,
    SENSOR_ACOUSTIC,
]

# Entity attributes
ATTR_ENERGY_MODE: Final = "energy_mode"
ATTR_AVAILABLE_VERSION: Final = "available_version"
ATTR_FIRMWARE_STATE: Final = "firmware_state"
ATTR_LAST_CONNECTED: Final = "last_connected"
ATTR_SENSOR_MODE: Final = "sensor_mode"
ATTR_TIMESTAMP: Final = "timestamp"
