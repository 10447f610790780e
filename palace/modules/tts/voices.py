"""Cloud voice catalog and voice -> provider resolution."""

from typing import Dict, List, Optional

OPENAI_VOICES = [
    {"id": "alloy", "name": "Alloy", "description": "Neutral and balanced voice"},
    {"id": "echo", "name": "Echo", "description": "Warm male voice"},
    {"id": "fable", "name": "Fable", "description": "Expressive British storyteller"},
    {"id": "onyx", "name": "Onyx", "description": "Deep and authoritative male voice"},
    {"id": "nova", "name": "Nova", "description": "Bright and friendly female voice"},
    {"id": "shimmer", "name": "Shimmer", "description": "Soft and gentle female voice"},
]

# Friendly ids mapped to ElevenLabs premade voice ids
ELEVENLABS_VOICE_IDS = {
    "aria": "9BWtsMINqrJLrRacOk9x",
    "roger": "CwhRBWXzGAHq8TQ4Fs17",
    "sarah": "EXAVITQu4vr4xnSDxMaL",
    "laura": "FGY2WhTYpPnrIDTdsKH5",
    "charlie": "IKne3meq5aSn9XLyUdCD",
    "george": "JBFqnCBsd6RMkjVDRZzb",
    "callum": "N2lVS1w4EtoT3dr4eOWO",
    "river": "SAz9YHcvj6GT2YYXdXww",
    "liam": "TX3LPaxmHKxFdv7VOQHJ",
    "charlotte": "XB0fDUnXU5powFXDhCwa",
    "alice": "Xb7hH8MSUJpSbSDYk0k2",
    "matilda": "XrExE9yKIg1WjnnlVkGX",
    "will": "bIHbv24MWmeRgasZH58o",
    "jessica": "cgSgspJ2msm6clMCkdW9",
    "eric": "cjVigY5qzO86Huf0OWal",
    "chris": "iP95p4xoKVk53GoZ742B",
    "brian": "nPczCjzI2devNBz1zQrb",
    "daniel": "onwK4e9ZLuTAKqWW03F9",
    "lily": "pFZP5JQG7iQjIQuC4Bku",
    "bill": "pqHfZKP75CvOlQylNhV4",
}

ELEVENLABS_VOICES = [
    {"id": "aria", "name": "Aria", "description": "Warm and expressive female voice"},
    {"id": "roger", "name": "Roger", "description": "Deep and authoritative male voice"},
    {"id": "sarah", "name": "Sarah", "description": "Clear and professional female voice"},
    {"id": "laura", "name": "Laura", "description": "Gentle and soothing female voice"},
    {"id": "charlie", "name": "Charlie", "description": "Friendly and casual male voice"},
    {"id": "george", "name": "George", "description": "Distinguished British male voice"},
    {"id": "callum", "name": "Callum", "description": "Young and energetic male voice"},
    {"id": "river", "name": "River", "description": "Calm and meditative voice"},
    {"id": "liam", "name": "Liam", "description": "Strong and confident male voice"},
    {"id": "charlotte", "name": "Charlotte", "description": "Elegant and refined female voice"},
    {"id": "alice", "name": "Alice", "description": "Bright and cheerful female voice"},
    {"id": "matilda", "name": "Matilda", "description": "Warm Australian female voice"},
    {"id": "will", "name": "Will", "description": "Casual American male voice"},
    {"id": "jessica", "name": "Jessica", "description": "Articulate and clear female voice"},
    {"id": "eric", "name": "Eric", "description": "Mature and wise male voice"},
    {"id": "chris", "name": "Chris", "description": "Versatile and natural male voice"},
    {"id": "brian", "name": "Brian", "description": "Deep and resonant male voice"},
    {"id": "daniel", "name": "Daniel", "description": "British narrator voice"},
    {"id": "lily", "name": "Lily", "description": "Sweet and youthful female voice"},
    {"id": "bill", "name": "Bill", "description": "Gravelly and distinctive male voice"},
]

SPEECHIFY_VOICES = [
    {"id": "henry", "name": "Henry", "description": "Steady American narrator"},
    {"id": "carly", "name": "Carly", "description": "Upbeat female voice"},
    {"id": "kristy", "name": "Kristy", "description": "Warm conversational female voice"},
    {"id": "oliver", "name": "Oliver", "description": "Crisp British male voice"},
    {"id": "russell", "name": "Russell", "description": "Relaxed Australian male voice"},
    {"id": "cliff", "name": "Cliff", "description": "Rich baritone storyteller"},
]

PROVIDERS = ("openai", "elevenlabs", "speechify")

_OPENAI_IDS = {v["id"] for v in OPENAI_VOICES}
_SPEECHIFY_IDS = {v["id"] for v in SPEECHIFY_VOICES}


def resolve_provider(voice: str, provider: Optional[str] = None) -> str:
    """Explicit provider wins; otherwise OpenAI and Speechify voices are recognised by id,
    and anything else is sent to ElevenLabs."""
    if provider:
        return provider
    key = (voice or "").lower()
    if key in _OPENAI_IDS:
        return "openai"
    if key in _SPEECHIFY_IDS:
        return "speechify"
    return "elevenlabs"


def elevenlabs_voice_id(voice: str) -> str:
    """Map a friendly name to its ElevenLabs id; raw ids pass through."""
    return ELEVENLABS_VOICE_IDS.get((voice or "").lower(), voice)


def list_voices() -> Dict[str, List[dict]]:
    return {
        "openai": list(OPENAI_VOICES),
        "elevenlabs": list(ELEVENLABS_VOICES),
        "speechify": list(SPEECHIFY_VOICES),
    }
