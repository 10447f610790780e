"""Sermon categories and current-event lenses offered by the sermon starter."""

CATEGORY_RULES = {
    "end-time": {
        "name": "End-Time Discernment",
        "rules": [
            "Must include Time Room OR Three Heavens Room",
            "Include present deception warning",
            "Christ as refuge (never fear-bait)",
            "No date-setting or speculation",
        ],
        "mandatory_rooms": ["Three Heavens Room", "Time Room", "Beasts Room"],
    },
    "current-events": {
        "name": "Current Events (Non-Reactionary)",
        "rules": [
            "NO headline chasing or naming specific events",
            "Event interpreted through prophetic PATTERN",
            "Focus on moral shift, war, religious pressure, economic tightening, or technological imitation",
            "Must keep sermon timeless",
        ],
        "mandatory_rooms": ["Pattern Room", "Cycle Room", "False Center Room"],
    },
    "righteousness-by-faith": {
        "name": "Righteousness by Faith",
        "rules": [
            "Must expose false righteousness systems",
            "Expose self-generated obedience traps",
            "Christ as both substitute AND source",
            "Balance imputed and imparted righteousness",
        ],
        "mandatory_rooms": ["Sanctuary – Altar", "Sanctuary – Laver", "Veil Room"],
    },
    "prophecy": {
        "name": "Prophecy (Daniel & Revelation)",
        "rules": [
            "Must include timeline anchoring",
            "Apply Repeat & Enlarge logic",
            "Christological fulfillment required",
            "No speculation beyond Scripture",
        ],
        "mandatory_rooms": ["Time Room", "Math Room", "Beasts Room", "Christ Resolution Room"],
    },
    "sanctuary": {
        "name": "Sanctuary Theology",
        "rules": [
            "Must move: Outer Court → Holy Place → Most Holy Place",
            "Connect articles of furniture to Christ's ministry",
            "Day of Atonement as present reality",
        ],
        "mandatory_rooms": ["Articles Room", "Veil Room", "Day of Atonement Room"],
    },
    "everlasting-gospel": {
        "name": "Everlasting Gospel",
        "rules": [
            "Must include: Cross, Judgment, Creation, Worship",
            "Rev 14 gospel, not Romans-only gospel",
            "Three Angels' Message framework",
        ],
        "mandatory_rooms": ["Creation Room", "Cross Room", "Judgment Room", "Sabbath Room"],
    },
    "series-builder": {
        "name": "Series Builder",
        "rules": [
            "Must generate 3-7 sermon paths",
            "Each sermon uses different Palace room",
            "Advances same thesis throughout",
            "Climaxes Christologically",
        ],
        "mandatory_rooms": ["Cycle Room", "Pattern Room", "Dimension Room"],
    },
}

CURRENT_EVENT_TYPES = {
    "moral-shift": {"label": "Moral Shift", "pattern": "Judges cycle of moral decline"},
    "war": {"label": "War/Conflict", "pattern": "Daniel's metal kingdoms in conflict"},
    "religious-pressure": {"label": "Religious Pressure", "pattern": "Revelation's church-state union"},
    "economic": {"label": "Economic Tightening", "pattern": "Revelation 13's buying and selling"},
    "technology": {"label": "Technological Imitation", "pattern": "Image of the Beast dynamics"},
}
