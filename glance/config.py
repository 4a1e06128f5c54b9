"""Configuration settings for the Glance speed reader."""

import os
from platformdirs import user_data_dir

# Reading rate settings (words per minute)
DEFAULT_WPM = 300
MIN_WPM = 100
MAX_WPM = 1500
SPEED_STEP = 50  # Used by the speed up/down commands

# Unit granularity settings (words per displayed unit)
DEFAULT_WORDS_PER_UNIT = 3
MIN_WORDS_PER_UNIT = 1
MAX_WORDS_PER_UNIT = 6

# Smart timing multipliers
LONG_WORD_THRESHOLD = 6  # Mean characters per word above which a unit is "long"
LONG_WORD_MULTIPLIER = 1.2
PUNCTUATION_MULTIPLIER = 1.3
PAUSE_PUNCTUATION = ",;.!?:"

# Comprehension mode settings
COMPREHENSION_MULTIPLIER = 1.2
COMPREHENSION_MAX_WPM = 350  # Applied once when the mode is switched on
COMPREHENSION_MAX_WORDS_PER_UNIT = 3

# Playback settings
HISTORY_LIMIT = 20
MIN_UNIT_DELAY_MS = 10  # Floor for a scheduled advance so empty units never spin

# Display preferences (persisted only)
DEFAULT_DARK_MODE = True
DEFAULT_FONT_SIZE_LEVEL = 2  # 0=small, 1=medium, 2=large

# Persistence settings
DATA_DIR = user_data_dir("glance")
os.makedirs(DATA_DIR, exist_ok=True)
STORE_FILE = os.path.join(DATA_DIR, "store.json")
