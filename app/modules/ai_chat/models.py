# Supabase table: ai_chats
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

ai_chats:
- id: uuid (primary key)
- user_id: uuid (foreign key to profiles.id, not null)
- message: text (not null) - the user's question
- response: text (not null) - the assistant's answer
- created_at: timestamp (default: now())
- expires_at: timestamp (not null) - created_at + retention window

History queries only return rows whose expires_at is in the future; a
scheduled database job may purge expired rows.
"""
