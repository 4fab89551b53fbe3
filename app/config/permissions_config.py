"""
Permissions and Roles Configuration
Maps each profile role to the permissions it grants. Authorization checks in
app.core.dependencies read from this matrix; row-level-security policies in
the database enforce the same split for direct SDK access.
"""

# Define modules and their actions
MODULES = {
    "weeks": {
        "resource": "weeks",
        "actions": ["create", "update", "delete"],
        "description": "Weekly program content"
    },
    "week_files": {
        "resource": "week_files",
        "actions": ["delete"],
        "description": "Photos, videos and PDFs attached to a week"
    },
    "admin_requests": {
        "resource": "admin_requests",
        "actions": ["create", "read", "review"],
        "description": "Requests for elevated access"
    },
    "groups": {
        "resource": "groups",
        "actions": ["read", "join"],
        "description": "Discussion groups"
    },
    "messages": {
        "resource": "messages",
        "actions": ["read", "create", "moderate"],
        "description": "Group chat messages"
    },
    "profiles": {
        "resource": "profiles",
        "actions": ["manage"],
        "description": "User profiles and roles"
    },
    "career_resources": {
        "resource": "career_resources",
        "actions": ["manage"],
        "description": "Career guidance resources and their files"
    },
    "schools": {
        "resource": "schools",
        "actions": ["manage"],
        "description": "Visited schools"
    },
    "team": {
        "resource": "team",
        "actions": ["manage"],
        "description": "Program team members"
    },
    "stats": {
        "resource": "stats",
        "actions": ["read_own", "read_all"],
        "description": "Dashboard statistics"
    },
    "ai_chat": {
        "resource": "ai_chat",
        "actions": ["use"],
        "description": "AI career assistant"
    }
}

ROLE_STUDENT = "student"
ROLE_PENDING_ADMIN = "pending_admin"
ROLE_ADMIN = "admin"

ROLES = [ROLE_STUDENT, ROLE_PENDING_ADMIN, ROLE_ADMIN]

# Permissions every signed-in user gets
_MEMBER_PERMISSIONS = [
    "admin_requests:create",
    "admin_requests:read",
    "groups:read",
    "groups:join",
    "messages:read",
    "messages:create",
    "stats:read_own",
    "ai_chat:use",
]


def _all_permissions():
    return [
        f"{config['resource']}:{action}"
        for config in MODULES.values()
        for action in config["actions"]
    ]


ROLE_PERMISSIONS = {
    ROLE_STUDENT: sorted(_MEMBER_PERMISSIONS),
    # pending_admin keeps student access until a request is approved
    ROLE_PENDING_ADMIN: sorted(_MEMBER_PERMISSIONS),
    ROLE_ADMIN: sorted(_all_permissions()),
}


def get_role_permissions(role: str):
    """Return the permission names granted to a role (empty for unknown roles)."""
    return ROLE_PERMISSIONS.get(role, [])
