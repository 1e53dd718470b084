"""Build and release version information."""

VERSION = "unknown"
GIT_VERSION = "unknown"
GIT_COMMIT = "unknown"
KUBERNETES_VERSION = "unknown"

# Version used for the operator binaries and images referenced by generated projects.
IMAGE_VERSION = "v1.35.0"