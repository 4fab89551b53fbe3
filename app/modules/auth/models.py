# Supabase Auth
# This module uses Supabase's built-in authentication system.
# Supabase Auth handles:
# - User registration (auth.users table)
# - User login and session management
# - JWT token generation and validation
# - Password hashing and security

"""
Supabase Auth provides:
- auth.sign_up() - Register new users
- auth.sign_in_with_password() - Authenticate users
- auth.get_user() - Get current user from JWT token
- auth.sign_out() - Logout users

Application data for a user lives in the public.profiles table (see
app/modules/profiles/models.py). Its role column (student, pending_admin,
admin) drives every authorization decision. A profile is created at
registration with role 'student'; a database trigger on auth.users is
expected to create it as well, so the insert here is an upsert.
"""
