# Stats are derived; no table of their own
# This file documents which tables feed the dashboard counts

"""
Counted Supabase tables:

- profiles: total_users, total_students (role = student), total_admins (role = admin)
- groups: total_groups
- schools: total_schools
- weeks: total_weeks
- group_members: students_in_groups (distinct user_id), groups_joined (per user)
- group_messages: messages_posted (per sender_id)
"""
