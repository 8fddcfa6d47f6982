"""
Configuration settings for ReviewLDA.

Centralized configuration for every pipeline stage. Stages never read this
module directly; the orchestrator passes these values into each stage.
"""

import os
from pathlib import Path

# Project paths (working directory unless REVIEWLDA_HOME is set)
PROJECT_ROOT = Path(os.getenv("REVIEWLDA_HOME") or Path.cwd())
DATA_ROOT = PROJECT_ROOT / "data"
OUTPUT_ROOT = PROJECT_ROOT / "output"

# Dataset acquisition
DATASET_URL = os.getenv("REVIEWLDA_DATASET_URL", "")
DATASET_FILENAME = "reviews_data.csv"
DOWNLOAD_TIMEOUT_SECONDS = 60

# API Configuration (optional, enables LLM topic labels)
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY", "")
LABELING_MODEL = "gemini-1.5-flash"
LLM_TEMPERATURE = 0.0
LABELING_MAX_RETRIES = 3

# Record Loader
MIN_REVIEW_LENGTH = 14  # Characters; shorter reviews are dropped
NO_IMAGE_SENTINEL = "['No Images']"
MISSING_TEXT_SENTINELS = ("No Review Text Present",)

# Vocabulary Filter
RARE_TERM_THRESHOLD = 5  # Corpus-wide count must exceed this
MIN_TERM_LENGTH = 3
EXTRA_STOP_WORDS = frozenset()  # Added to the built-in English list
EXCLUDED_TERMS = frozenset({
    "starbucks",
    "starbuck",
    "starbucks's",
    "starbuck's",
    "sbux",
})

# TF-IDF Pruner
IDF_LOWER_PERCENTILE = 5.0
IDF_UPPER_PERCENTILE = 95.0

# Matrix Builder
EMPTY_DOCUMENT_POLICY = "drop"  # "drop", "keep", or "error"

# Topic model
DEFAULT_TOPIC_COUNT = 4
RANDOM_SEED = 1234
LDA_MAX_ITER = 50
TOP_TERMS_PER_TOPIC = 10

# Logging
LOG_LEVEL = "INFO"  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = "reviewlda.log"
