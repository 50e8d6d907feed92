"""
Constants for roles, the feature catalog and navigation
"""

SERVICE_NAME = "backoffice-backend"

# Role constants
ROLE_ADMIN = "admin"
ROLE_MANAGER = "manager"
ROLE_ACCOUNTANT = "accountant"
ROLE_PURCHASER = "purchaser"
ROLE_WORKER = "worker"

ALL_ROLES = (ROLE_ADMIN, ROLE_MANAGER, ROLE_ACCOUNTANT, ROLE_PURCHASER, ROLE_WORKER)
DEFAULT_ROLE = ROLE_WORKER

# Roles that see every project without an access row
PROJECT_BYPASS_ROLES = (ROLE_ADMIN, ROLE_MANAGER)

# Stands in for "every feature" in an admin's visible set
ALL_FEATURES = "all"

# Feature codes: <area>.<action>
FEATURE_CODE_PATTERN = r"^[a-z][a-z0-9_]*(\.[a-z][a-z0-9_]*)*$"

# (code, name, category) seeded into the feature catalog
DEFAULT_FEATURES = (
    ("dashboard.view", "Dashboard", "general"),
    ("mywork.view", "My work", "general"),
    ("attendance.view", "Check-in / check-out", "hr"),
    ("chat.view", "Company chat", "general"),
    ("projects.view", "Projects", "projects"),
    ("approvals.view", "Approvals", "accounting"),
    ("accounting.view", "Material accounting", "accounting"),
    ("labor_accounting.view", "Labor accounting", "accounting"),
    ("payroll.view", "Payroll", "accounting"),
    ("daily_payments.view", "Daily payments", "accounting"),
    ("tax_documents.view", "Tax documents", "accounting"),
    ("tax_planning.view", "Tax planning", "accounting"),
    ("leave.view", "Leave", "hr"),
    ("purchase_requests.view", "Purchase requests", "purchasing"),
    ("purchase_requests.create", "Create purchase request", "purchasing"),
    ("hr_management.view", "HR management", "hr"),
    ("foreign_workers.view", "Foreign workers", "hr"),
    ("visibility.manage", "Feature visibility", "admin"),
    ("project_access.manage", "Project access", "admin"),
    ("settings.view", "Settings", "admin"),
)

# Sidebar entries: (feature code, title, url). Entries with no feature code
# are visible to every signed-in user.
NAVIGATION_MENU = (
    (None, "Home", "/"),
    ("dashboard.view", "Dashboard", "/dashboard"),
    ("mywork.view", "My work", "/mywork"),
    ("attendance.view", "Check-in / check-out", "/attendance"),
    ("chat.view", "Company chat", "/chat"),
    ("projects.view", "Projects", "/projects"),
    ("approvals.view", "Approvals", "/approvals"),
    ("accounting.view", "Material accounting", "/accounting"),
    ("labor_accounting.view", "Labor accounting", "/labor-accounting"),
    ("payroll.view", "Payroll", "/payroll"),
    ("daily_payments.view", "Daily payments", "/daily-payments"),
    ("tax_documents.view", "Tax documents", "/tax-documents"),
    ("tax_planning.view", "Tax planning", "/tax-planning"),
    ("leave.view", "Leave", "/leave"),
    ("purchase_requests.view", "Purchase requests", "/purchase-requests"),
    ("visibility.manage", "Feature visibility", "/visibility"),
    ("project_access.manage", "Project access", "/project-access"),
    ("hr_management.view", "HR management", "/hr-management"),
    ("foreign_workers.view", "Foreign workers", "/foreign-workers"),
    (None, "Profile", "/profile"),
    ("settings.view", "Settings", "/settings"),
)
