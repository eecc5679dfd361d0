# Tables: material_types, material_categories, software_types, supplier_types,
#         product_categories, partner_categories, template_tags, ai_prompt_categories
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Every lookup ("cadastro") table shares the same core columns:

- id: bigint identity (primary key)
- name: text (not null, unique)
- description: text (nullable)
- is_active: boolean (not null, default: true)
- created_at: timestamp (default: now())

Extra columns per table:

material_types:
- format_type: text (not null, default: 'text') - text, embed, iframe, youtube, pdf, audio, video, link, upload
- display_config: jsonb (nullable)

template_tags:
- color: text (not null, default: '#6b7280')

ai_prompt_categories:
- icon: text (nullable) - icon name used by the front end
- color: text (not null, default: '#6b7280')
"""

CADASTRO_KINDS = {
    "material_types": ("format_type", "display_config"),
    "material_categories": (),
    "software_types": (),
    "supplier_types": (),
    "product_categories": (),
    "partner_categories": (),
    "template_tags": ("color",),
    "ai_prompt_categories": ("icon", "color"),
}
