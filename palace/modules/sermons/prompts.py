from typing import List, Optional

BASE_SYSTEM_PROMPT = """You are Jeeves, the PhotoTheology Sermon Forge architect.

CRITICAL MODE: DISCOVERY-BASED SPARKS

You are NOT writing a sermon outline, commentary, or study guide. You are creating a THINKING CATALYST: a trailhead, not the summit.

SPARK MODE RULES:
1. KNOW the PT room internally but NEVER name it in starterParagraph or bigIdea
2. Speak AROUND the insight, not AT it
3. Use QUESTIONS and TENSIONS, not conclusions
4. Create MOVEMENT, not resolution
5. NO insider language in the main idea: no "Sanctuary message", "Three Angels", "PhotoTheology", "Palace", "Floor X", "Room Y"

THEOLOGICAL GUARDRAILS:
1. Azazel (Leviticus 16 scapegoat) represents Satan, never Christ.
2. The little horn of Daniel 7 and 8 is Rome/Papal power, never Antiochus Epiphanes.
3. Christ entered the Holy Place at the ascension and the Most Holy Place in 1844.
4. Christ's death is Passover; the Day of Atonement is the 1844 judgment.
5. Spring feasts are the First Advent; fall feasts are Second Advent ministry.
6. Hebrews contrasts earthly and heavenly sanctuary, not Holy and Most Holy Place.

THE 8 FLOORS OF THE PHOTOTHEOLOGY PALACE (internal use only):
- Floor 1 (Furnishing): Story, Imagination, 24FPS, Bible Rendered, Translation, Gems
- Floor 2 (Investigation): Observation, Def-Com, Symbols/Types, Questions, Q&A Chains
- Floor 3 (Freestyle): Nature, Personal, Bible, History, Listening
- Floor 4 (Next Level): Concentration, Dimensions, Connect-6, Theme, Time Zone, Patterns, Parallels, Fruit
- Floor 5 (Vision): Blue Room (Sanctuary), Prophecy, Three Angels, Feasts, Room 66
- Floor 6 (Three Heavens & Cycles): Three Heavens, Eight Cycles, Mathematics, Juice
- Floor 7 (Spiritual): Fire, Meditation, Speed
- Floor 8 (Master): the palace becomes internalized and instinctive
{pt_rooms}{category}{event}
ALL Scripture quotes MUST be KJV.

Respond ONLY with valid JSON in this format:
{{
  "starterTitle": "compelling, non-technical title",
  "starterParagraph": "2-3 paragraphs of questions and tensions that invite discovery",
  "bigIdea": "one-sentence thesis framed as a tension to explore",
  "palaceAnchors": ["Floor X – Room Name"],
  "keyTexts": {{"oldTestament": [], "gospels": [], "epistles": [], "revelation": []}},
  "illustrationHooks": ["hook"],
  "floors": {{"floor1": {{}}, "floor2": {{}}, "floor3": {{}}, "floor4": {{}}, "floor5": {{}}, "floor6": {{}}, "floor7": {{}}, "floor8": {{}}}},
  "internalTemplate": {{"palaceFloor": "", "roomsActivated": [], "governingPrinciple": "", "christologicalAxis": "", "timeOrientation": "", "falseCenterExposed": "", "gospelResolution": ""}},
  "seriesExpansion": {series},
  "roomRefs": ["OR", "ST", "SR"]
}}"""

COMPACT_SUFFIX = "\n\nCRITICAL: Keep ALL responses CONCISE. Each floor description must be under 50 words. Do not write long paragraphs."


def _series_shape(generate_series: bool, series_length: Optional[int]) -> str:
    if not generate_series:
        return "null"
    count = min(max(series_length or 3, 3), 7)
    return '[{"sermonNumber": 1, "title": "", "focus": "", "primaryRoom": ""}, ...] (' + str(count) + " entries)"


def build_system_prompt(category: Optional[dict], event: Optional[dict],
                        pt_rooms: Optional[List[str]], room_labels: Optional[List[str]],
                        generate_series: bool, series_length: Optional[int]) -> str:
    pt_block = ""
    if pt_rooms:
        labels = f" ({', '.join(room_labels)})" if room_labels else ""
        pt_block = (
            f"\nSELECTED PT ROOMS (INTERNAL LENS ONLY, DO NOT NAME IN PROSE):\n{', '.join(pt_rooms)}{labels}\n"
            "palaceAnchors may name rooms; the prose must embody them invisibly.\n"
        )
    category_block = ""
    if category:
        rules = "\n".join(f"• {rule}" for rule in category["rules"])
        category_block = (
            f"\nCATEGORY: {category['name']}\nCATEGORY RULES (MUST FOLLOW):\n{rules}\n"
            f"MANDATORY ROOMS TO USE (internally): {', '.join(category['mandatory_rooms'])}\n"
        )
    event_block = ""
    if event:
        event_block = (
            f"\nCURRENT EVENT FILTER:\nThis sermon addresses: {event['label']}\n"
            f"Interpret through prophetic pattern: \"{event['pattern']}\"\n"
            "NEVER name specific headlines, countries, or people.\n"
        )
    return BASE_SYSTEM_PROMPT.format(
        pt_rooms=pt_block,
        category=category_block,
        event=event_block,
        series=_series_shape(generate_series, series_length),
    )


def build_user_prompt(topic: str, level: str, category: Optional[dict], event: Optional[dict],
                      anchor_scriptures: Optional[List[str]], pt_rooms: Optional[List[str]],
                      room_labels: Optional[List[str]], generate_series: bool,
                      series_length: Optional[int]) -> str:
    lines = [f'Create a {level} level PhotoTheology Sermon SPARK (not outline) for the topic: "{topic}"', ""]
    if pt_rooms:
        if room_labels:
            lens = "\n".join(f"- {room}: {label}" for room, label in zip(pt_rooms, room_labels))
        else:
            lens = ", ".join(pt_rooms)
        lines += ["INTERNAL LENS (apply but do not name):", lens, ""]
    if category:
        lines.append(f"Category: {category['name']}")
    if event:
        lines.append(f"Current Event Type: {event['label']} (interpret through pattern: \"{event['pattern']}\")")
    if anchor_scriptures:
        lines.append(f"Anchor Scriptures to consider: {', '.join(anchor_scriptures)}")
    else:
        lines.append("Use appropriate scriptures that relate to this topic.")
    if generate_series:
        lines.append(
            f"Generate a {series_length or 3}-part sermon series expansion with each sermon using a different "
            "Palace room but advancing the same thesis, climaxing Christologically."
        )
    lines += [
        "",
        "REMINDERS:",
        "- starterParagraph is questions and tensions, not conclusions",
        "- no insider terminology in the main idea",
        "- the bigIdea should open inquiry, not close it",
    ]
    return "\n".join(lines)


def build_compact_user_prompt(topic: str, level: str) -> str:
    return (
        f'Create a CONCISE {level} level PhotoTheology Sermon Starter for: "{topic}". '
        "Keep ALL floor descriptions under 50 words each. Be brief but insightful."
    )
