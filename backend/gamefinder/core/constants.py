"""Shared constants for sessions, titles and the suggestion payload."""

# Used when the title completion fails or comes back empty.
FALLBACK_TITLE = "Game Recommendations"

# Used when the model leaves the summary out.
FALLBACK_SUMMARY = "Here are some great game recommendations for you!"

# Number of most recent messages sent to the model as conversation context.
DEFAULT_CONTEXT_WINDOW = 10

ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"
ROLES = (ROLE_USER, ROLE_ASSISTANT)

SESSION_DELETED_MESSAGE = "Session deleted successfully"
SESSION_NOT_FOUND_MESSAGE = "Session not found"
