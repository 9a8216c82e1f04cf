"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import Role

LOGIN_PATH = "/login"
CHANGE_PASSWORD_PATH = "/change-password"

ROLE_HOME_PATHS = {
    Role.HR: "/hr/dashboard",
    Role.EMPLOYEE: "/employee/dashboard",
}

DEFAULT_SIGNUP_SETTLE_SECONDS = 0.5
DEFAULT_BACKEND_TIMEOUT_SECONDS = 15.0
STANDARD_WORK_HOURS = 8.0
PASSWORD_MIN_LENGTH = 8
PLACEHOLDER_NAME = "User"

ALREADY_REGISTERED_MESSAGE = "An account with this email already exists"
