# Supabase table: bible_commentaries; audio in the settings.audio_bucket bucket

"""
bible_commentaries:
- book: text (not null)
- chapter: integer (not null)
- verse: integer (not null)
- tier: text (not null) - surface, intermediate, scholarly
- commentary_text: text (not null)
- audio_url: text (nullable) - commentary/{book}/{chapter}/{verse}_{tier}.mp3
- updated_at: timestamp
- unique constraint on (book, chapter, verse, tier)
"""
