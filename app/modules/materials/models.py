# Table: materials
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected table structure:

materials:
- id: bigint identity (primary key)
- title: text (not null)
- description: text (nullable)
- type: text (not null) - e.g. artigo_texto, documento_pdf, embed_iframe, video_youtube, audio, link_pasta
- content: text (nullable) - HTML body, embed code or URL depending on type
- file_path, url, embed_code, file_name, mime_type: text (nullable)
- file_size: integer (nullable)
- access_level: text (not null, default: 'Public') - Public, Restricted
- category: text (nullable)
- tags: text[] (nullable)
- download_count: integer (not null, default: 0)
- view_count: integer (not null, default: 0)
- is_active: boolean (not null, default: true)
- is_featured: boolean (not null, default: false)
- created_at: timestamp (default: now())

Restricted materials need the materials.view_restricted permission.
"""
