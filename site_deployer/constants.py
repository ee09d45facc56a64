"""Global constants for site-deployer"""

import re

APP_NAME = "site-deployer"
LOG_FORMAT = "%(message)s"

# Repository the deployment policy is configured for
DEFAULT_REPO_SLUG = "angular/angular"
DEFAULT_REMOTE_URL = f"https://github.com/{DEFAULT_REPO_SLUG}.git"
DEFAULT_TRUNK_BRANCH = "master"

# Project configuration
PROJECT_CONFIG_FILE = ".site-deployer.yaml"
CONFIG_VERSION = "1.0"

# Git related
COMMIT_ID_LENGTH = 40
REMOTE_REF_PREFIX = "refs/heads/"
MINOR_BRANCH_PATTERN = re.compile(r"(?P<major>\d+)\.(?P<minor>\d+)\.x")
MINOR_BRANCH_GLOB = "refs/heads/{major}.*.x"

# Target names
TARGET_NEXT = "next"
TARGET_RC = "rc"
TARGET_STABLE = "stable"
TARGET_ARCHIVE = "archive"
TARGET_STABLE_AS_RC = "stable-redeployed-as-rc"
TARGET_SKIPPED = "skipped"

REGISTRY_TARGETS = [
    TARGET_NEXT,
    TARGET_RC,
    TARGET_STABLE,
    TARGET_ARCHIVE,
    TARGET_STABLE_AS_RC,
]

# Firebase hosting defaults
DEFAULT_FIREBASE_PROJECT = "angular-io"
DEFAULT_HOSTING_TARGET = "aio"
DEFAULT_TARGET_SITES = {
    TARGET_NEXT: {
        "site_id": "next-angular-io-site",
        "deployed_url": "https://next.angular.io/",
    },
    TARGET_RC: {
        "site_id": "rc-angular-io-site",
        "deployed_url": "https://rc.angular.io/",
    },
    TARGET_STABLE: {
        "site_id": "v{major}-angular-io-site",
        "deployed_url": "https://angular.io/",
    },
    TARGET_ARCHIVE: {
        "site_id": "v{major}-angular-io-site",
        "deployed_url": "https://v{major}.angular.io/",
    },
    TARGET_STABLE_AS_RC: {
        "site_id": "rc-angular-io-site",
        "deployed_url": "https://rc.angular.io/",
    },
}

# Build artifacts
DIST_DIR = "dist"
EXTRA_FILES_DIR = "src/extra-files"
FIREBASE_CONFIG_FILE = "firebase.json"
SERVICE_WORKER_MANIFEST = "ngsw.json"
SERVICE_WORKER_BACKUP_SUFFIX = ".bak"
HTTP_TIMEOUT = 30  # seconds

# Redirect every non-file request (no dot in the last path segment) to the stable site.
REDIRECT_RULE_TEMPLATE = (
    '{{"type": 302, "regex": "^(.*/[^./]*)$", "destination": "{origin}:1"}}'
)

# Action names
ACTION_BUILD = "build"
ACTION_CHECK_PAYLOAD_SIZE = "check-payload-size"
ACTION_TEST_PWA_SCORE = "test-pwa-score"
ACTION_REMOVE_SERVICE_WORKER = "remove-service-worker"
ACTION_REDIRECT_TO_STABLE = "redirect-to-stable"
ACTION_VERIFY_NO_ACTIVE_RC = "verify-no-active-rc"


# Error codes
class ErrorCode:
    CONFIG_FORMAT_ERROR = "SD001"
    RESOLUTION_FAILED = "SD002"
    POLICY_AMBIGUOUS = "SD003"
    PLAN_VALIDATION_FAILED = "SD004"
    ACTION_FAILED = "SD005"
    DEPLOY_FAILED = "SD006"


# Plan invariants reported by the validator
class Invariant:
    KNOWN_KIND = "known-kind"
    REQUIRED_FIELDS = "required-fields"
    EXCLUSIVE_SKIP = "exclusive-skip"
    SINGLE_PRIMARY = "single-primary"
    PRIMARY_FIRST = "primary-first"
    SECONDARY_ENV = "secondary-env"


# CI environment variables
ENV_BRANCH = "CI_BRANCH"
ENV_COMMIT = "CI_COMMIT"
ENV_STABLE_BRANCH = "CI_STABLE_BRANCH"
ENV_PULL_REQUEST = "CI_PULL_REQUEST"
ENV_REPO_OWNER = "CI_REPO_OWNER"
ENV_REPO_NAME = "CI_REPO_NAME"
ENV_FIREBASE_TOKEN = "CI_SECRET_AIO_DEPLOY_FIREBASE_TOKEN"
ENV_MIN_PWA_SCORE = "CI_AIO_MIN_PWA_SCORE"

# Tool environment variables
ENV_CONFIG_PATH = "SITE_DEPLOYER_CONFIG"
ENV_LOG_LEVEL = "SITE_DEPLOYER_LOG_LEVEL"

# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"

SECRET_MASK = "***"
