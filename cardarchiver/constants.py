# Entrius 2025
# =============================================================================
# GitHub API
# =============================================================================
BASE_GITHUB_API_URL = "https://api.github.com"
GRAPHQL_TIMEOUT_SECONDS = 30  # bound on every remote call
TOKEN_CHECK_TIMEOUT_SECONDS = 15

# =============================================================================
# Project Board Query Shape
# =============================================================================
PROJECT_COLUMNS_PAGE_SIZE = 20  # columns requested per project
PROJECT_CARDS_PAGE_SIZE = 50  # cards requested per page

# =============================================================================
# Archiving
# =============================================================================
DEFAULT_CLOSING_MESSAGE = "Issue automatically closed due to inactivity in project board."

# =============================================================================
# Configuration Inputs
# =============================================================================
INPUT_ACCESS_TOKEN = "access-token"
INPUT_COLUMN_TO_ARCHIVE = "column-to-archive"
INPUT_REPOSITORY_OWNER = "repository-owner"
INPUT_REPOSITORY = "repository"
INPUT_PROJECT_NAME = "project-name"
INPUT_DAYS_OLD = "days-old"
INPUT_CLOSING_MESSAGE = "closing-message"

REQUIRED_INPUTS = (
    INPUT_ACCESS_TOKEN,
    INPUT_COLUMN_TO_ARCHIVE,
    INPUT_REPOSITORY_OWNER,
    INPUT_REPOSITORY,
    INPUT_PROJECT_NAME,
    INPUT_DAYS_OLD,
)

# =============================================================================
# Logging
# =============================================================================
EVENTS_LOG_RETENTION_BYTES = 5 * 1024 * 1024
