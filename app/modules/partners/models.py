# Tables: partners, partner_contacts, partner_reviews, partner_comments,
#         partner_comment_likes, partner_files
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected table structure:

partners:
- id: bigint identity (primary key)
- name: text (not null)
- description: text (not null)
- category_id: bigint (not null, references partner_categories.id)
- website, email, phone, logo: text (nullable)
- is_verified: boolean (not null, default: false)
- discount_info: text (nullable)
- average_rating: numeric(2,1) (default: 0.0) - recomputed on every review change
- review_count: integer (default: 0)
- status: text (not null, default: 'published') - published, draft
- created_at: timestamp (default: now())

partner_contacts:
- id, partner_id (references partners.id), name (not null), position, email, phone, created_at

partner_reviews:
- id, partner_id, user_id (references users.id)
- rating: integer (not null, 1..5)
- comment: text (not null)
- created_at
- unique (partner_id, user_id)

partner_comments:
- id: bigint identity (primary key)
- partner_id: bigint (not null, references partners.id)
- user_id: bigint (not null, references users.id)
- content: text (not null)
- parent_id: bigint (nullable, references partner_comments.id) - null for top-level comments
- likes: integer (not null, default: 0) - count of partner_comment_likes rows
- created_at: timestamp (default: now())

partner_comment_likes:
- id, comment_id (references partner_comments.id), user_id, created_at
- unique (comment_id, user_id)

partner_files (metadata only; bytes live in external storage):
- id, partner_id, name (not null), description, file_path (not null),
  file_type (not null), file_size (not null), created_at

SQL function partner_comment_tree(p_partner_id bigint): recursive CTE returning
every comment of the partner with its depth ("level") and author name ("user_name").
"""
