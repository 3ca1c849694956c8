"""
Central configuration for ignore file processing
"""

# Single source of truth for the rule file name
IGNORE_FILENAME = ".dropIgnore"

# Marker the Dropbox client reads to decide whether to skip a file
ATTRIBUTE_NAME = "com.dropbox.ignored"
ATTRIBUTE_VALUE = b"1"

# Linux only exposes unprivileged extended attributes in the user namespace
XATTR_LINUX_PREFIX = "user."

# Sidecar state file used when no OS-level attribute mechanism is available
SIDECAR_FILENAME = ".dropignore-state.json"

# Pattern syntax handed to pathspec
PATTERN_SYNTAX = "gitwildmatch"

COMMENT_PREFIX = "#"

# Limits for security and performance
MAX_IGNORE_FILE_SIZE = 1024 * 1024  # 1MB
MAX_PATTERNS_PER_FILE = 10000

# Attribute services selectable from configuration
SERVICE_AUTO = "auto"
SERVICE_XATTR = "xattr"
SERVICE_STREAM = "stream"
SERVICE_SIDECAR = "sidecar"
SERVICE_MEMORY = "memory"

SERVICE_CHOICES = [
    SERVICE_AUTO,
    SERVICE_XATTR,
    SERVICE_STREAM,
    SERVICE_SIDECAR,
    SERVICE_MEMORY,
]

# Patterns written by `dropignore init --minimal`
MINIMAL_PATTERNS = [
    # Dependency and build output
    "node_modules/",
    ".venv/",
    "venv/",
    "__pycache__/",
    "build/",
    "dist/",
    "target/",
    # Caches
    ".cache/",
    ".pytest_cache/",
    ".mypy_cache/",
    # Temporary files
    "*.tmp",
    "*.temp",
    "*.swp",
]

# Patterns written by `dropignore init`, grouped by category
DEFAULT_PATTERNS = {
    "Python": [
        ".venv/",
        "venv/",
        "env/",
        "__pycache__/",
        "*.py[cod]",
        ".mypy_cache/",
        ".pytest_cache/",
        ".tox/",
        "*.egg-info/",
    ],
    "JavaScript/TypeScript/Node.js": [
        "node_modules/",
        ".npm/",
        ".yarn/cache/",
        ".next/",
        ".nuxt/",
        ".parcel-cache/",
    ],
    "Build output": [
        "build/",
        "dist/",
        "out/",
        "target/",
        "bin/",
        "obj/",
        "cmake-build-*/",
    ],
    "IDE and editors": [
        ".idea/",
        ".vs/",
        "*.swp",
        "*.swo",
        "*~",
    ],
    "Temporary files": [
        "*.tmp",
        "*.temp",
        "*.bak",
        ".cache/",
    ],
}
