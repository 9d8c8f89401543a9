"""Constants for the golf society admin core."""

# Data files in the society repository
PLAYERS_PATH = 'data/players.json'
EVENTS_PATH = 'data/events.json'
LEDGER_PATH = 'data/ledger.json'

DATA_FILES = (PLAYERS_PATH, EVENTS_PATH, LEDGER_PATH)

# Handicap categories: (max handicap inclusive, buffer score, cut factor)
HANDICAP_CATEGORIES = [
    (3.0, 19, 0.1),
    (7.0, 18, 0.2),
    (10.0, 17, 0.3),
]
# Anything above the last bound
DEFAULT_CATEGORY = (16, 0.4)

TARGET_SCORE = 20
HANDICAP_INCREASE = 0.1

# Money, in pounds
ENTRY_FEE = 5.00
FINE_PER_SNAKE = 1.00
FINE_PER_CAMEL = 1.00
PRIZE_PER_PLAYER = 1.50

# Ledger transaction types
ENTRY_FEE_TYPE = 'entry_fee'
FINE_TYPE = 'fine'
PAYOUT_TYPE = 'payout'

TRANSACTION_TYPES = {ENTRY_FEE_TYPE, FINE_TYPE, PAYOUT_TYPE}

INITIAL_HANDICAP_REASON = 'Initial Handicap'
