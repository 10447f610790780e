# Supabase table: sermon_starters (written with the service role key)

"""
sermon_starters:
- id: uuid (primary key)
- topic_id: uuid (foreign key to sermon_topics.id, not null)
- starter_title: text
- level: text - beginner, intermediate, master
- floors: jsonb - the full generated starter
- room_refs: text[]
- quality_status: text - published, draft
- created_at: timestamp (default: now())
"""
