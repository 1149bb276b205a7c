# Supabase table: qm_memberships
# This file documents the expected database schema

"""
Expected Supabase table structure:

qm_memberships:
- id: text (primary key)
- group_id: text (not null)
- group_name: text - copy of the group name for the user's group list
- user_id: uuid (not null)
- role: text (not null) - values: owner, admin, member
- display_name: text (not null)
- person_id: text - the member's own person
- claimed_placeholder_id: text (default '') - placeholder taken over by this member
- claimed_placeholder_name: text (default '')
- created_at: timestamptz (not null)
- permissions: text[] (not null, default '{}')
- unique constraint on (group_id, user_id)
"""
