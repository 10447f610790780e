"""
Church and Ministry Roles Configuration
Defines the role catalog served to admin screens and used to validate role assignments.
"""

# Church membership roles, highest privilege first
CHURCH_ROLES = {
    "admin": {
        "label": "Admin",
        "description": "Manage members, invitations and ministry leadership"
    },
    "leader": {
        "label": "Leader",
        "description": "Lead studies and groups within the church"
    },
    "member": {
        "label": "Member",
        "description": "Access the church's shared study content"
    }
}

# Invitations can never grant admin directly
INVITABLE_ROLES = ["member", "leader"]

MINISTRY_ROLES = {
    "site_admin": {
        "label": "Site Admin",
        "description": "Full access to all Living Manna features"
    },
    "small_group_leader": {
        "label": "Small Group Leader",
        "description": "Lead a small group and generate studies",
        "requires_group": True
    },
    "evangelism_lead": {
        "label": "Evangelism Lead",
        "description": "Manage evangelism campaigns and interests"
    },
    "prayer_lead": {
        "label": "Prayer Ministry Lead",
        "description": "Coordinate prayer teams and requests"
    },
    "sabbath_school_lead": {
        "label": "Sabbath School Lead",
        "description": "Manage Sabbath School classes and materials"
    },
    "youth_lead": {
        "label": "Youth Ministry Lead",
        "description": "Oversee youth programs and activities"
    }
}


def role_requires_group(role: str) -> bool:
    return MINISTRY_ROLES.get(role, {}).get("requires_group", False)


def get_role_catalog() -> dict:
    """Flatten both role maps into lists for API responses"""
    def _as_list(roles: dict) -> list:
        return [
            {
                "name": name,
                "label": config["label"],
                "description": config["description"],
                "requires_group": config.get("requires_group", False),
            }
            for name, config in roles.items()
        ]

    return {
        "church_roles": _as_list(CHURCH_ROLES),
        "invitable_roles": list(INVITABLE_ROLES),
        "ministry_roles": _as_list(MINISTRY_ROLES),
    }
