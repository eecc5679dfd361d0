"""
Groups and Permissions Configuration
This config defines the permission catalogue for every module and the default
permission set of each user group. Used by the seed script and by /me for the
ADM group.
"""

# Define modules and their actions
MODULES = {
    "dashboard": {
        "category": "general",
        "actions": ["view"],
        "description": "Student dashboard"
    },
    "materials": {
        "category": "content",
        "actions": ["view", "view_restricted", "manage"],
        "description": "Course materials"
    },
    "templates": {
        "category": "content",
        "actions": ["view", "manage"],
        "description": "Message templates"
    },
    "ai_prompts": {
        "category": "content",
        "actions": ["view", "manage"],
        "description": "AI prompt library"
    },
    "ai_agents": {
        "category": "ai",
        "actions": ["use", "buy_credits"],
        "description": "AI agents and credit purchases"
    },
    "partners": {
        "category": "directory",
        "actions": ["view", "comment", "review", "manage"],
        "description": "Partner directory"
    },
    "suppliers": {
        "category": "directory",
        "actions": ["view", "manage"],
        "description": "Supplier directory"
    },
    "my_suppliers": {
        "category": "crm",
        "actions": ["manage"],
        "description": "Personal supplier CRM"
    },
    "products": {
        "category": "crm",
        "actions": ["manage"],
        "description": "Personal product catalogue"
    },
    "tickets": {
        "category": "support",
        "actions": ["create", "respond", "manage"],
        "description": "Support tickets"
    },
    "admin": {
        "category": "admin",
        "actions": ["manage_users", "manage_groups", "manage_cadastros", "view_activity"],
        "description": "Administration console"
    },
}

# Human readable names for module-specific actions
ACTION_NAMES = {
    "view": "View",
    "view_restricted": "View restricted",
    "manage": "Manage",
    "comment": "Comment on",
    "review": "Review",
    "use": "Use",
    "buy_credits": "Buy credits for",
    "create": "Create",
    "respond": "Respond to",
    "manage_users": "Manage users in",
    "manage_groups": "Manage groups in",
    "manage_cadastros": "Manage lookup tables in",
    "view_activity": "View activity log in",
}

_STUDENT_BASE = [
    "dashboard.view",
    "materials.view",
    "templates.view",
    "ai_prompts.view",
    "partners.view",
    "partners.comment",
    "partners.review",
    "suppliers.view",
    "my_suppliers.manage",
    "products.manage",
    "tickets.create",
    "ai_agents.use",
    "ai_agents.buy_credits",
]

# Default groups. The group name is also the role string used by require_role.
GROUPS = {
    "BASIC": {
        "display_name": "Basic",
        "color": "#6b7280",
        "description": "Registered user without a course",
        "permissions": ["dashboard.view", "partners.view", "suppliers.view", "tickets.create", "ai_agents.buy_credits"],
    },
    "ALUNO": {
        "display_name": "Student",
        "color": "#2563eb",
        "description": "Course student",
        "permissions": _STUDENT_BASE,
    },
    "ALUNO_PRO": {
        "display_name": "Student Pro",
        "color": "#7c3aed",
        "description": "Premium course student",
        "permissions": _STUDENT_BASE + ["materials.view_restricted"],
    },
    "SUPORTE": {
        "display_name": "Support",
        "color": "#059669",
        "description": "Support staff",
        "permissions": _STUDENT_BASE + [
            "materials.view_restricted",
            "materials.manage",
            "templates.manage",
            "ai_prompts.manage",
            "partners.manage",
            "tickets.respond",
            "tickets.manage",
        ],
    },
    "ADM": {
        "display_name": "Administrators",
        "color": "#dc2626",
        "description": "Full administrative access",
        "permissions": None,  # None means every permission in the catalogue
    },
}

DEFAULT_GROUP = "BASIC"
ADMIN_GROUP = "ADM"
SUPPORT_ROLES = ["SUPORTE", "ADM"]
STUDENT_ROLES = ["ALUNO", "ALUNO_PRO", "SUPORTE", "ADM"]
PREMIUM_ROLES = ["ALUNO_PRO", "SUPORTE", "ADM"]


def all_permission_keys():
    return [f"{module}.{action}" for module, config in MODULES.items() for action in config["actions"]]


# Generate permission matrix
def get_permission_matrix():
    """
    Returns a dictionary with all permissions and the default groups
    Format: {
        "permissions": [
            {"key": "materials.view", "name": "View materials", "module": "materials", "category": "content", ...},
            ...
        ],
        "groups": [
            {"name": "ALUNO", "display_name": "Student", "permissions": ["materials.view", ...]},
            ...
        ]
    }
    """
    permissions = []
    groups = []

    for module_name, module_config in MODULES.items():
        for action in module_config["actions"]:
            permissions.append({
                "key": f"{module_name}.{action}",
                "name": f"{ACTION_NAMES.get(action, action.capitalize())} {module_config['description'].lower()}",
                "description": None,
                "module": module_name,
                "category": module_config["category"],
            })

    every_key = all_permission_keys()
    for group_name, group_config in GROUPS.items():
        keys = group_config["permissions"]
        groups.append({
            "name": group_name,
            "display_name": group_config["display_name"],
            "description": group_config["description"],
            "color": group_config["color"],
            "permissions": sorted(set(every_key if keys is None else keys)),
        })

    return {
        "permissions": permissions,
        "groups": groups
    }


# Export the matrix for use in seed scripts
PERMISSION_MATRIX = get_permission_matrix()
