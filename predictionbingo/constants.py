"""Global constants for the predictionbingo application."""

# Collection names
USERS_COLLECTION = "users"
GROUPS_COLLECTION = "groups"
MEMBERS_COLLECTION = "group_members"
PREDICTIONS_COLLECTION = "predictions"
COMPLETED_MARKS_COLLECTION = "completed_marks"
COMMENTS_COLLECTION = "comments"

# Group limits
MAX_GROUP_MEMBERS = 15
MAX_GROUP_NAME_LENGTH = 100
MAX_USERNAME_LENGTH = 50

# Prediction limits
MAX_PREDICTIONS_PER_USER = 5
MAX_PREDICTION_LENGTH = 280

# Session-related constants
RECENT_GROUPS_LIMIT = 5

# Bingo card layout
GRID_SIZE = 5
GRID_CELL_COUNT = GRID_SIZE * GRID_SIZE
FREE_CELL_INDEX = GRID_CELL_COUNT // 2
PLACEHOLDER_CONTENT = "TBD"
FREE_CONTENT = "FREE"

COLOR_PALETTE = (
    "indigo",
    "emerald",
    "amber",
    "rose",
    "violet",
    "cyan",
    "fuchsia",
    "lime",
    "orange",
    "teal",
    "blue",
    "green",
    "yellow",
    "red",
    "purple",
    "sky",
    "pink",
    "slate",
    "stone",
    "neutral",
)
