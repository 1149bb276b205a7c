# Supabase table: qm_groups (name configurable via COLLECTION_GROUPS)
# This file documents the expected database schema
# Actual operations are handled via the DocumentStore in service.py

"""
Expected Supabase table structure:

qm_groups:
- id: text (primary key)
- name: text (not null)
- owner_id: uuid (not null) - changed only by ownership transfer
- created_at: timestamptz (not null)
- permissions: text[] (not null, default '{}') - document ACL, e.g. 'read("user:<id>")'

Every managed table carries the same permissions column and the same row
level security policies, with the action name substituted:

create policy "acl read" on qm_groups for select
    using ('read("users")' = any(permissions)
           or format('read("user:%s")', auth.uid()) = any(permissions));
create policy "acl update" on qm_groups for update
    using (format('update("user:%s")', auth.uid()) = any(permissions));
create policy "acl delete" on qm_groups for delete
    using (format('delete("user:%s")', auth.uid()) = any(permissions));
"""
