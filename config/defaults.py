"""Default configuration constants for the Spot Share allocation service."""

# Requester identity format
REQUESTER_ID_LENGTH = 9               # IDs are exactly this many digits
CONTACT_DOMAIN_SUFFIX = "@school.edu"  # Contact must end with this suffix

# Admission policy: status a freshly admitted claim starts in
SOLO_REQUIRES_APPROVAL = True     # Solo removes a spot's sharing capacity
SHARED_REQUIRES_APPROVAL = False  # Both partners co-consented off-system

# Halves of a spot
HALF_LABELS = ("A", "B")
WHOLE_SPOT_LABEL = "Solo"

# Sync / polling (seconds)
POLL_INTERVAL_SECONDS = 3.0
MIN_POLL_INTERVAL_SECONDS = 0.5

# Storage locations (None = in-memory claim log)
CATALOG_PATH = None
CLAIM_LOG_PATH = None

# Sample catalog: lot id -> (display name, spot count)
SAMPLE_LOTS = {
    "A": ("The Hill", 133),
    "B": ("The Valley", 158),
}

# Logging
LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
