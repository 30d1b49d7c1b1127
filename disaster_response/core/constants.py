"""
India Disaster Response - Constants and Reference Data
Static values used throughout the application.
"""

from typing import Dict, List, Tuple

# =============================================================================
# REPORT ENUMERATIONS
# =============================================================================

DISASTER_TYPES: List[str] = [
    "flood",
    "earthquake",
    "wildfire",
    "cyclone",
    "hurricane",
    "tornado",
    "landslide",
    "tsunami",
    "industrial accident",
    "other",
]

SEVERITY_LEVELS: Dict[str, str] = {
    "low": "Minor damage, no immediate danger",
    "medium": "Significant damage, potential danger",
    "high": "Severe damage, immediate danger",
    "critical": "Life-threatening emergency",
}

# Default severity for reports that arrive by SMS
SMS_DEFAULT_SEVERITY: str = "high"

# Web submissions may target between 1 and 5 rescue numbers
MAX_WEB_RECIPIENTS: int = 5

# =============================================================================
# GEOGRAPHY
# =============================================================================

# Map center of India (lat, lon)
INDIA_CENTER: Tuple[float, float] = (20.5937, 78.9629)

INDIAN_STATES: List[str] = [
    "Andhra Pradesh", "Arunachal Pradesh", "Assam", "Bihar", "Chhattisgarh",
    "Goa", "Gujarat", "Haryana", "Himachal Pradesh", "Jharkhand", "Karnataka",
    "Kerala", "Madhya Pradesh", "Maharashtra", "Manipur", "Meghalaya",
    "Mizoram", "Nagaland", "Odisha", "Punjab", "Rajasthan", "Sikkim",
    "Tamil Nadu", "Telangana", "Tripura", "Uttar Pradesh", "Uttarakhand",
    "West Bengal", "Andaman and Nicobar Islands", "Chandigarh",
    "Dadra and Nagar Haveli and Daman and Diu", "Delhi", "Jammu and Kashmir",
    "Ladakh", "Lakshadweep", "Puducherry",
]

# =============================================================================
# MAP STYLING
# =============================================================================

SEVERITY_COLORS: Dict[str, str] = {
    "critical": "#ef4444",
    "high": "#f97316",
    "medium": "#eab308",
    "low": "#22c55e",
}

# =============================================================================
# EMERGENCY CONTACTS
# =============================================================================

NATIONAL_EMERGENCY_NUMBER: str = "112"

EMERGENCY_CONTACTS: List[Dict[str, str]] = [
    {"name": "National Emergency Number", "number": "112",
     "description": "Police, Fire, Ambulance - Single emergency number"},
    {"name": "NDRF Control Room", "number": "011-24363260",
     "description": "National Disaster Response Force"},
]

GOVERNMENT_HELPLINES: List[Dict[str, str]] = [
    {"name": "Police", "number": "100", "description": "Police emergency helpline"},
    {"name": "Fire Service", "number": "101", "description": "Fire emergency helpline"},
    {"name": "Ambulance", "number": "102", "description": "Medical emergency ambulance"},
    {"name": "Women Helpline", "number": "1091", "description": "Women in distress helpline"},
    {"name": "Child Helpline", "number": "1098", "description": "Child protection helpline"},
    {"name": "Road Accident", "number": "1073", "description": "Road accident emergency"},
]

DISASTER_MANAGEMENT_CONTACTS: List[Dict[str, str]] = [
    {"name": "NDMA (National Disaster Management)", "number": "1078",
     "description": "National Disaster Management Authority toll-free",
     "website": "https://ndma.gov.in"},
    {"name": "Indian Meteorological Department", "number": "1800-180-1717",
     "description": "Weather warnings and cyclone alerts",
     "website": "https://mausam.imd.gov.in"},
    {"name": "Central Water Commission", "number": "011-26109590",
     "description": "Flood forecasting and warnings",
     "website": "https://cwc.gov.in"},
    {"name": "Earthquake Helpline", "number": "011-24619943",
     "description": "Indian National Center for Seismology",
     "website": "https://seismo.gov.in"},
]

STATE_DISASTER_NUMBERS: Dict[str, str] = {
    "Maharashtra": "1916",
    "Kerala": "1070",
    "Tamil Nadu": "1070",
    "Karnataka": "1070",
    "Andhra Pradesh": "1070",
    "Gujarat": "1070",
    "Rajasthan": "1070",
    "West Bengal": "1070",
    "Uttar Pradesh": "1070",
    "Delhi": "1077",
}
