# Table: ai_prompts
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected table structure:

ai_prompts:
- id: bigint identity (primary key)
- title: text (not null)
- category: text (not null) - name of an ai_prompt_categories row
- description: text (not null)
- content: text (not null) - prompt body with placeholders
- instructions: text (nullable)
- placeholders: jsonb (nullable) - list of placeholder descriptions
- tags: text[] (nullable)
- use_count: integer (not null, default: 0)
- is_active: boolean (not null, default: true)
- is_featured: boolean (not null, default: false)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())
"""
