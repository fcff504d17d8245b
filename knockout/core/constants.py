"""Global constants for the knockout application."""

import datetime

# Firestore collections
TOURNAMENTS_COLLECTION = "tournaments"
MATCHES_COLLECTION = "matches"

# Standings
POINTS_PER_WIN = 3

# Pagination
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

# Newly synthesized matches are scheduled this far after advancement
NEXT_ROUND_DELAY = datetime.timedelta(days=1)
