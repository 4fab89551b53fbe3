# Supabase table: team_members
# This file documents the expected database schema

"""
Expected Supabase table structure:

team_members:
- id: uuid (primary key)
- name: text (not null)
- position: text (nullable)
- bio: text (nullable)
- image_url: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""
