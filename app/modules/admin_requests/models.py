# Supabase table: admin_requests
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

admin_requests:
- id: uuid (primary key)
- user_id: uuid (foreign key to profiles.id, not null)
- reason: text (not null)
- status: text (not null, default: 'pending') - values: pending, approved, denied
- reviewed_by: uuid (foreign key to profiles.id, nullable)
- reviewed_at: timestamp (nullable)
- created_at: timestamp (default: now())

Status moves pending -> approved or pending -> denied exactly once. The
service performs the move as an UPDATE filtered on status = 'pending', so of
two concurrent reviews only one matches a row.

"One pending request per user" is checked by the service before insert. A
partial unique index on (user_id) WHERE status = 'pending' makes the database
enforce it too; without the index two simultaneous submissions can both pass
the check.
"""
