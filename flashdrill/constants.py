"""
Game constants.

Static defaults for a round and the built-in example deck. Runtime
overrides live in flashdrill.settings.AppConfig.
"""
from typing import Tuple

# Length of a round in seconds.
ROUND_DURATION_SECONDS: int = 100

# Horizontal displacement a swipe must exceed to count as a judgement.
DRAG_JUDGE_THRESHOLD: float = 100.0

CARDS_FILENAME: str = "cards.json"
SETTINGS_FILENAME: str = "settings.json"

# (prompt, answer) pairs used when no saved deck can be loaded.
# Order is bottom to top: the last pair is shown first.
EXAMPLE_CARDS: Tuple[Tuple[str, str], ...] = (
    (
        "Who was the first captain of the original Enterprise, NCC 1701?",
        "Robert April",
    ),
    ("Who played the 13th Doctor in Doctor Who?", "Jodie Whittaker"),
    (
        "Who played Wesley Crusher on Star Trek: The Next Generation?",
        "Wil Wheaton",
    ),
    (
        "Who played Starbuck in the Battlestar Galactica remake?",
        "Katee Sackhoff",
    ),
)
