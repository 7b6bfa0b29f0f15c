# API endpoints
from . import auth, teams, projects, reviews, schedules, logs, staff, diary, health

__all__ = ["auth", "teams", "projects", "reviews", "schedules", "logs", "staff", "diary", "health"]
