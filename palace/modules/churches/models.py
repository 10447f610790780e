# Supabase tables: churches, church_members, church_invitations, profiles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

churches:
- id: uuid (primary key)
- name: text (not null)
- seat_limit: integer (not null) - members plus pending invitations may not exceed it
- created_by: uuid (foreign key to auth.users.id)
- created_at: timestamp (default: now())

church_members:
- id: uuid (primary key)
- church_id: uuid (foreign key to churches.id, not null)
- user_id: uuid (foreign key to auth.users.id, not null)
- role: text (not null, default: 'member') - values: admin, leader, member
- joined_at: timestamp (default: now())
- unique constraint on (church_id, user_id)

church_invitations:
- id: uuid (primary key)
- church_id: uuid (foreign key to churches.id, not null)
- invited_email: text (not null)
- invitation_code: text (not null, unique) - format CHURCH-XXXXXXXX
- role: text (not null) - values: member, leader
- invited_by: uuid (foreign key to auth.users.id)
- status: text (default: 'pending') - values: pending, accepted, expired
- expires_at: timestamp (not null)
- created_at: timestamp (default: now())
- unique constraint on (church_id, invited_email)

profiles:
- id: uuid (primary key, same as auth.users.id)
- display_name: text
- username: text
- avatar_url: text
"""
