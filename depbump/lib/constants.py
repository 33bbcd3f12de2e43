"""Shared constants for depbump."""

import re

# Package spec validation
PACKAGE_NAME_PATTERN = re.compile(r'^@?[a-z0-9-]+/[a-z0-9-]+$', re.IGNORECASE)
PACKAGE_VERSION_PATTERN = re.compile(r'^\d+\.\d+\.\d+(-[0-9A-Za-z.-]+)?$')
EXAMPLE_PACKAGE_NAME = "@zz-common/zz-ui"
EXAMPLE_PACKAGE_VERSION = "6.3.56"

# Project name is the branch-name prefix before this separator
BRANCH_SEPARATOR = "-"

# Toolchain
VERSION_PIN_FILE = ".nvmrc"
DEFAULT_NODE_VERSION = "14"

# Package managers, in detection precedence order
LOCKFILES = (
    ("pnpm", "pnpm-lock.yaml"),
    ("yarn", "yarn.lock"),
)
FALLBACK_PACKAGE_MANAGER = "npm"
DEFAULT_REGISTRY = "https://rcnpm.zhuanspirit.com/"

# Status history entries kept per project
DEFAULT_HISTORY_LIMIT = 5

# Login
LOGIN_MAX_ATTEMPTS = 3
LOGIN_RETRY_DELAY = 3.0

# Branch mismatch handling
BRANCH_POLICY_AUTO = "auto"
BRANCH_POLICY_PROMPT = "prompt"
BRANCH_POLICY_REJECT = "reject"
VALID_BRANCH_POLICIES = (BRANCH_POLICY_AUTO, BRANCH_POLICY_PROMPT, BRANCH_POLICY_REJECT)
