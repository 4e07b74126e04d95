# config.py
import os

# Default values
DEFAULT_BIRTHDATE = "1990-01-01"
DEFAULT_COUNTRY_CODE = "USA"
DEFAULT_LIFE_EXPECTANCY = 78.5
DEFAULT_ACTIVITIES = [
    {"name": "Sleep", "hours": 8.0, "days_per_week": 7},
    {"name": "Work", "hours": 8.0, "days_per_week": 5},
    {"name": "Commute", "hours": 1.0, "days_per_week": 5},
    {"name": "Exercise", "hours": 0.5, "days_per_week": 7},
]

# Input validation ranges
HOURS_RANGE = (0.0, 24.0)
DAYS_PER_WEEK_RANGE = (1, 7)
LIFE_EXPECTANCY_RANGE = (1.0, 130.0)
MAX_DAILY_HOURS = 24.0
MIN_BIRTH_YEAR = 1900

# Time conversions
HOURS_PER_YEAR = 8760  # 365 * 24, leap years ignored
DAYS_PER_YEAR = 365
WEEKS_PER_YEAR = 52
MS_PER_DAY = 86_400_000

# Trend analysis defaults
DEFAULT_CHANGE_IN_HOURS = 0.5
CHANGE_IN_HOURS_RANGE = (-4.0, 4.0)
CHANGE_STEP = 0.25
DEFAULT_REALLOCATE_HOURS = 1.0

# World Bank API
WORLD_BANK_API_BASE = "https://api.worldbank.org/v2"
LIFE_EXPECTANCY_INDICATOR = "SP.DYN.LE00.IN"  # life expectancy at birth, total (years)
COUNTRIES_PER_PAGE = 300
REQUEST_TIMEOUT = 5  # seconds
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY = 1.0

# Used when the World Bank has no value for a country code
FALLBACK_LIFE_EXPECTANCY = {
    "USA": 78.5,
    "GBR": 81.2,
    "CAN": 82.3,
    "AUS": 83.4,
    "DEU": 80.9,
    "FRA": 82.5,
    "JPN": 84.3,
    "CHN": 76.9,
    "IND": 69.7,
    "BRA": 75.5,
}
GLOBAL_AVERAGE_LIFE_EXPECTANCY = 72.0
FALLBACK_COUNTRY_NAMES = {
    "USA": "United States",
    "GBR": "United Kingdom",
    "CAN": "Canada",
    "AUS": "Australia",
    "DEU": "Germany",
    "FRA": "France",
    "JPN": "Japan",
    "CHN": "China",
    "IND": "India",
    "BRA": "Brazil",
}

# Caching
COUNTRY_CACHE_TTL = 24 * 60 * 60  # seconds
LIFE_EXPECTANCY_CACHE_TTL = 24 * 60 * 60  # seconds

# Persistence
DATABASE_URL = os.environ.get("LIFETIME_DATABASE_URL", "sqlite:///lifetime.db")

# Public site, used by robots.txt and sitemap.xml
SITE_URL = "https://lifetime-visualizer.replit.app"
SITEMAP_LASTMOD = "2025-04-10"

# Chart colours, assigned to activities without one
COLOR_PALETTE = [
    "#D6293B",
    "#F7893B",
    "#FBBF24",
    "#34D399",
    "#60A5FA",
    "#A78BFA",
    "#F472B6",
    "#FB923C",
    "#4ADE80",
    "#38BDF8",
]
FREE_TIME_COLOR = "#9CA3AF"
