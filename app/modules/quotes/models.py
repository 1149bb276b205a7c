# Supabase table: qm_quotes
# This file documents the expected database schema

"""
Expected Supabase table structure:

qm_quotes:
- id: text (primary key)
- group_id: text (not null)
- person_id: text (not null) - person of the same group
- text: text (not null)
- created_at: timestamptz (not null)
- created_by: uuid (not null)
- created_by_name: text
- source_placeholder_id: text (nullable) - set when a claim moved the quote
- permissions: text[] (not null, default '{}')
"""
