"""
Configuration settings for SNAFLEShub Reviews.

Centralized configuration for the review core, storage and CLI.
"""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_ROOT = Path(os.getenv("SNAFLES_DATA_ROOT", str(PROJECT_ROOT / "data")))
OUTPUT_ROOT = Path(os.getenv("SNAFLES_OUTPUT_ROOT", str(PROJECT_ROOT / "output")))

# Storage
REVIEWS_FILE = "reviews.json"
STORE_VERSION = "1.0.0"

# Listing
DEFAULT_SORT_KEY = "newest"
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 50  # Matches the marketplace API's limit validation

# Stats panel
RECENT_ACTIVITY_COUNT = 3

# Review content limits
TITLE_MAX_LENGTH = 100
COMMENT_MAX_LENGTH = 1000

# Logging
LOG_LEVEL = os.getenv("SNAFLES_LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = os.getenv("SNAFLES_LOG_FILE", "snafles_reviews.log")


# Design Rationale and Trade-offs:
#
# 1. Why environment variables for paths and logging?
#    - Same code runs against a dev data dir and a deployed one
#    - Tests point DATA_ROOT and OUTPUT_ROOT at temp dirs
#    - Trade-off: Values are read once at import
#
# 2. Why limits here instead of in the models?
#    - Page size and content limits mirror the marketplace API validators
#    - Tuned in one place when the API changes
#
# 3. Why no config file?
#    - Handful of values, all with working defaults
#    - Trade-off: No per-deployment overrides beyond env vars
