# Supabase tables: ministry_leaders, small_groups

"""
ministry_leaders:
- id: uuid (primary key)
- church_id: uuid (foreign key to churches.id, not null)
- user_id: uuid (foreign key to auth.users.id, not null)
- role: text (not null) - see palace.config.roles_config.MINISTRY_ROLES
- assigned_group_id: uuid (foreign key to small_groups.id, nullable) - required for small_group_leader
- assigned_by: uuid (foreign key to auth.users.id)
- is_active: boolean (default: true)
- created_at: timestamp (default: now())
- unique constraint on (church_id, user_id, role)

small_groups:
- id: uuid (primary key)
- church_id: uuid (foreign key to churches.id, not null)
- name: text (not null)
- is_active: boolean (default: true)
"""
