# Supabase tables: career_resources, career_resource_files
# Storage buckets: career-photos, career-pdfs, career-ppts (one per file type), public read
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

career_resources:
- id: uuid (primary key)
- title: text (not null)
- description: text (nullable)
- resource_type: text (not null) - values: photo, pdf, ppt, text
- content_text: text (nullable) - body for text resources
- display_order: integer (default: 0)
- is_featured: boolean (default: false)
- created_by: uuid (foreign key to profiles.id)
- updated_by: uuid (foreign key to profiles.id)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

career_resource_files:
- id: uuid (primary key)
- career_resource_id: uuid (foreign key to career_resources.id, on delete cascade)
- file_name: text (not null) - original upload name
- file_type: text (not null) - values: photo, pdf, ppt
- file_url: text (not null) - public URL in the bucket for its file type
- file_size: bigint (nullable)
- uploaded_by: uuid (foreign key to profiles.id)
- created_at: timestamp (default: now())

Objects are stored at the bucket root as {uuid}.{extension}.
"""
