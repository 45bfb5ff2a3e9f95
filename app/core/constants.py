"""Application-wide constants.

Magic numbers and label tables shared across modules. For environment
specific configuration, see config.py.
"""

# =============================================================================
# Pagination Defaults
# =============================================================================

# Course catalog page size
DEFAULT_COURSE_PAGE_SIZE: int = 12

# Default page size for other list endpoints
DEFAULT_PAGE_SIZE: int = 20

# Maximum page size to prevent abuse
MAX_PAGE_SIZE: int = 100

# Notification lists are capped lower than the rest
MAX_NOTIFICATION_PAGE_SIZE: int = 50

# Popular / recommended course rails
DEFAULT_RAIL_LIMIT: int = 6

# Recent items on dashboards
DASHBOARD_RECENT_LIMIT: int = 5

# Top courses on the admin dashboard
ADMIN_TOP_COURSES_LIMIT: int = 5

# =============================================================================
# Activity windows (days)
# =============================================================================

ACTIVE_STUDENT_WINDOW_DAYS: int = 7
REVENUE_RECENT_WINDOW_DAYS: int = 30

# =============================================================================
# Catalog labels
# =============================================================================

# Course level display labels, keyed by CourseLevel value
LEVEL_LABELS: dict[str, str] = {
    "BEGINNER": "초급",
    "INTERMEDIATE": "중급",
    "ADVANCED": "고급",
}

# Category names recommended per user type; unknown types use TRAINER
RECOMMENDED_CATEGORIES: dict[str, tuple[str, ...]] = {
    "TRAINER": ("기초 지식", "전문 기술", "자격증"),
    "OPERATOR": ("경영 관리", "마케팅", "운영"),
    "MANAGER": ("리더십", "고객 관리", "운영 효율화"),
    "FREELANCER": ("개인 브랜딩", "마케팅", "비즈니스"),
    "ENTREPRENEUR": ("창업", "경영 관리", "브랜딩"),
}

# =============================================================================
# Identifiers
# =============================================================================

ORDER_NUMBER_PREFIX: str = "LVUP"
CERTIFICATE_NUMBER_PREFIX: str = "LVUP"
RANDOM_SUFFIX_LENGTH: int = 6

# =============================================================================
# Reviews
# =============================================================================

# Progress an enrolled student needs before writing a review
REVIEW_MIN_PROGRESS: int = 20
