# Tables: users.ai_credits, ai_usage_history
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected table structure:

ai_usage_history:
- id: bigint identity (primary key)
- user_id: bigint (not null, references users.id)
- agent_type: text (not null) - listing_generator, image_generator, expert_amazon, expert_import, expert_action_plan
- credits_used: integer (not null)
- input_data: jsonb (nullable)
- output_data: jsonb (nullable)
- created_at: timestamp (default: now())

SQL functions:
- deduct_ai_credits(p_user_id bigint, p_amount int) returns table(ai_credits int):
  UPDATE users SET ai_credits = ai_credits - p_amount
  WHERE id = p_user_id AND ai_credits >= p_amount RETURNING ai_credits
  No row back means the balance was too low; nothing was changed.
- add_ai_credits(p_user_id bigint, p_amount int) returns table(ai_credits int)
"""
