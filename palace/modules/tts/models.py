# Supabase table: tts_audio_cache; storage bucket: settings.audio_bucket

"""
tts_audio_cache:
- cache_key: text (primary key) - "{provider}:{voice}:{book}:{chapter}:{verse}"
- provider: text (not null) - openai, elevenlabs, speechify
- voice: text (not null)
- book: text (not null)
- chapter: integer (not null)
- verse: integer (not null)
- audio_url: text (not null) - public URL of the stored mp3
- created_at: timestamp (default: now())

Storage objects live under tts/{provider}/{voice}/{book}/{chapter}/{verse}.mp3
"""
