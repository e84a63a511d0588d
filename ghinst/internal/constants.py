# ---------------------------------------------------------------------
# GitHub API
# ---------------------------------------------------------------------

GITHUB_API_URL = "https://api.github.com"
GITHUB_ACCEPT = "application/vnd.github+json"
GITHUB_API_VERSION = "2022-11-28"

REQUEST_TIMEOUT = 30
DOWNLOAD_TIMEOUT = 300
DOWNLOAD_CHUNK_SIZE = 1024 * 1024

# ---------------------------------------------------------------------
# Environment variables
# ---------------------------------------------------------------------

ENV_INSTALL_ROOT = "GHINST_ROOT"
ENV_TOKEN = "GITHUB_TOKEN"
ENV_LOG_LEVEL = "GHINST_LOG_LEVEL"
ENV_API_URL = "GHINST_API_URL"
ENV_LOG_FILE = "GHINST_LOG_FILE"

# ---------------------------------------------------------------------
# Install layout
# ---------------------------------------------------------------------

BIN_DIR_NAME = "bin"
VERSION_SEPARATOR = "@"
