# Supabase tables: weeks, week_files
# Storage bucket: week-files (settings.week_files_bucket), public read
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

weeks:
- id: uuid (primary key)
- week_number: integer (unique, not null, >= 1)
- title: text (not null)
- description: text (nullable)
- created_by: uuid (foreign key to profiles.id)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

week_files:
- id: uuid (primary key)
- week_id: uuid (foreign key to weeks.id, not null)
- file_name: text (not null) - original upload name
- file_type: text (not null) - values: photo, video, pdf
- file_url: text (not null) - public URL in the week-files bucket
- file_size: bigint (nullable)
- uploaded_by: uuid (foreign key to profiles.id)
- created_at: timestamp (default: now())

Storage objects are stored under week-{week_number}/{epoch_ms}-{random8}-{file_name}.

The "at least one photo and one PDF" rule is checked by the API when a week
is created; the database does not enforce it. RLS policies allow reads for
everyone and writes for profiles with role 'admin'.
"""
