"""
Sheet layout and unit conversion constants.

Single source of truth for the column layout of the metadata sheet
and of the per-athlete activity sheets.
"""

# Metadata sheet: one row per linked athlete
METADATA_HEADERS = ["Display Name", "Strava ID", "RefreshToken"]
METADATA_HEADER_RANGE = "A1:C1"
METADATA_DATA_RANGE = "A2:C"
METADATA_TOKEN_COLUMN = "C"

# Activity sheets: columns A..Q
ACTIVITY_HEADERS = [
    "Activity ID", "Name", "Type", "Distance (km)", "Time (min)", "Date",
    "Description", "Elevation Gain (m)", "Avg Speed (km/h)", "Max Speed (km/h)",
    "Avg HR (bpm)", "Max HR (bpm)", "Avg Cadence", "Avg Watts", "Max Watts",
    "Suffer Score", "Kilojoules",
]
ACTIVITY_HEADER_RANGE = "A1:Q1"
ACTIVITY_ID_RANGE = "A2:A"
ACTIVITY_DATE_RANGE = "A2:F"
ACTIVITY_DATE_COLUMN_INDEX = ACTIVITY_HEADERS.index("Date")

# Unit conversion (Strava reports SI units)
METERS_PER_KM = 1000
SECONDS_PER_MINUTE = 60
MPS_TO_KMH = 3.6

SECONDS_PER_DAY = 86400

# Strava caps a single activities page at 200; one page is requested per sync
DEFAULT_ACTIVITIES_PER_PAGE = 50
MAX_ACTIVITIES_PER_PAGE = 200
