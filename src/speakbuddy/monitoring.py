"""Monitoring configuration for the progress engine."""
from prometheus_client import Counter

# Attendance metrics
check_ins = Counter(
    "speakbuddy_check_ins_total",
    "Total number of check-in attempts",
    ["result"],  # ok, already_checked_in_today
)

snacks_awarded = Counter(
    "speakbuddy_snacks_awarded_total",
    "Total number of snacks awarded by check-ins, bonuses included",
)

snacks_given = Counter(
    "speakbuddy_snacks_given_total",
    "Total number of snacks fed to the buddy",
)

# Vocabulary metrics
words_imported = Counter(
    "speakbuddy_words_imported_total",
    "Total number of words added to the deck by bulk import",
)

answers_recorded = Counter(
    "speakbuddy_answers_recorded_total",
    "Total number of quiz answers recorded",
    ["correct"],
)

words_graduated = Counter(
    "speakbuddy_words_graduated_total",
    "Total number of words removed from the deck after mastery",
)

# Error metrics
storage_errors = Counter(
    "speakbuddy_storage_errors_total",
    "Total number of storage errors recovered from",
    ["operation"],  # load, save
)
