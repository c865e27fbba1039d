"""Shared constants for git-worktree-keeper."""

# Branches that are never deleted, regardless of --force
PROTECTED_BRANCHES = ("main", "master")

REMOTE_NAME = "origin"
BRANCH_REF_PREFIX = "refs/heads/"

# Characters that cannot appear in a worktree directory suffix
PATH_HOSTILE_CHARS = ("/", "\\", ":")

# Persisted user configuration
CONFIG_DIR_NAME = "gw"
CONFIG_FILE_NAME = "config.yaml"

# Per-repository configuration, read from the main worktree
PROJECT_CONFIG_FILE = "gw.yaml"

# Environment passed to hook commands
ENV_WORKTREE_PATH = "GW_WORKTREE_PATH"
ENV_BRANCH = "GW_BRANCH"
ENV_REPO_ROOT = "GW_REPO_ROOT"

# Symbol constants
SYMBOL_OK = "✓"
SYMBOL_WARNING = "⚠"
SYMBOL_INFO = "ℹ"
SYMBOL_FAILED = "✗"
