# Supabase table: qm_invites
# This file documents the expected database schema

"""
Expected Supabase table structure:

qm_invites:
- id: text (primary key)
- group_id: text (not null)
- group_name: text (not null)
- name: text - label, defaults to 'General'
- code: text (not null) - 8 characters from ABCDEFGHJKLMNPQRSTUVWXYZ23456789
- created_at: timestamptz (not null)
- created_by: uuid (not null)
- permissions: text[] (not null, default '{}')
- unique constraint on (code)
"""
