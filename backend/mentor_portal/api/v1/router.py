from fastapi import APIRouter
from mentor_portal.api.v1.endpoints import auth, teams, projects, reviews, schedules, logs, staff, diary, health

api_router = APIRouter()

# Health checks (no session required)
api_router.include_router(health.router)

# Authentication
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])

# Teams and projects
api_router.include_router(teams.router, prefix="/teams", tags=["Teams"])
api_router.include_router(projects.router, prefix="/projects", tags=["Projects"])

# Review calendar
api_router.include_router(reviews.router, prefix="/reviews", tags=["Reviews"])
api_router.include_router(schedules.router, prefix="/schedules", tags=["Schedules"])

# Student activity logs
api_router.include_router(logs.router, prefix="/logs", tags=["Logs"])

# Staff accounts
api_router.include_router(staff.router, prefix="/staff", tags=["Staff"])

# Project diary
api_router.include_router(diary.router, prefix="/diary", tags=["Diary"])
