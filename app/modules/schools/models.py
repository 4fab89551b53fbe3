# Supabase table: schools
# This file documents the expected database schema

"""
Expected Supabase table structure:

schools:
- id: uuid (primary key)
- name: text (not null)
- location: text (nullable)
- visit_date: date (nullable) - when the program visited
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""
