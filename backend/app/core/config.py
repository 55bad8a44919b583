"""
Application configuration read from the environment.
"""

import os

ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

# Database
DATABASE_URL = os.getenv(
    "DATABASE_URL", "postgresql://postgres:postgres@db:5432/playlists"
)
SQL_ECHO = os.getenv("SQL_ECHO", "False") == "True"

# HTTP
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Playlist limits
MAX_TRACKS_PER_PLAYLIST = 100
MAX_PLAYLISTS_PER_USER = 50

# Pagination
DEFAULT_TRACK_PAGE_SIZE = 50
DEFAULT_PLAYLIST_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
MAX_PAGINATION_WINDOW = 5000
