from pydantic import BaseModel


class AdminStats(BaseModel):
    total_users: int = 0
    total_students: int = 0
    total_admins: int = 0
    total_groups: int = 0
    total_schools: int = 0
    total_weeks: int = 0
    students_in_groups: int = 0


class StudentStats(BaseModel):
    groups_joined: int = 0
    total_groups: int = 0
    total_weeks: int = 0
    total_schools: int = 0
    messages_posted: int = 0
