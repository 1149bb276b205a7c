# Supabase table: qm_people
# This file documents the expected database schema

"""
Expected Supabase table structure:

qm_people:
- id: text (primary key)
- group_id: text (not null)
- name: text (not null)
- user_id: text (default '') - empty for placeholders
- is_placeholder: boolean (not null)
- created_at: timestamptz (not null)
- created_by: uuid (not null)
- permissions: text[] (not null, default '{}')
"""
