# Supabase tables: groups, group_members, group_messages
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

groups:
- id: uuid (primary key)
- name: text (not null)
- description: text (nullable)
- created_by: uuid (foreign key to profiles.id, nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

group_members:
- id: uuid (primary key)
- group_id: uuid (foreign key to groups.id, not null)
- user_id: uuid (foreign key to profiles.id, not null)
- joined_at: timestamp (default: now())
- unique constraint on (group_id, user_id)

group_messages:
- id: uuid (primary key)
- group_id: uuid (foreign key to groups.id, not null)
- sender_id: uuid (foreign key to profiles.id, not null)
- message: text (not null)
- created_at: timestamp (default: now())

Messages are append-only from the API's point of view apart from deletion by
their sender or an admin. Clients receive new rows through Supabase Realtime
by subscribing to INSERTs on group_messages filtered by group_id; no custom
transport exists here.
"""
