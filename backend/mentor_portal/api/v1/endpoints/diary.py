"""
Project diary endpoints

- POST /diary/generate  aggregated diary data plus the built document (JSON)
- POST /diary/pdf       the same document rendered to PDF
"""
from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from mentor_portal.core.database import get_db
from mentor_portal.core.logging_config import logger
from mentor_portal.modules.auth import Principal, get_current_principal
from mentor_portal.schemas.diary import (
    DiaryDocumentSchema,
    DiaryLogEntry,
    DiaryRequest,
    DiaryResponse,
)
from mentor_portal.schemas.project import ProjectResponse
from mentor_portal.schemas.review import ReviewResponse
from mentor_portal.schemas.staff import StaffSummary
from mentor_portal.schemas.team import StudentResponse, TeamResponse
from mentor_portal.services.aggregation import DiaryData, diary_data
from mentor_portal.services.diary_builder import build_diary
from mentor_portal.services.diary_pdf import diary_pdf_generator


router = APIRouter()


def _diary_response(data: DiaryData, document) -> DiaryResponse:
    logs = []
    for log in data.logs:
        student = data.log_students.get(log.student_id)
        logs.append(DiaryLogEntry.model_validate(log).model_copy(update={
            "student": StudentResponse.model_validate(student) if student else None,
        }))

    return DiaryResponse(
        team=TeamResponse.model_validate(data.team),
        students=[StudentResponse.model_validate(s) for s in data.students],
        team_lead=StudentResponse.model_validate(data.team_lead) if data.team_lead else None,
        mentor=StaffSummary.model_validate(data.mentor) if data.mentor else None,
        logs=logs,
        reviews=[ReviewResponse.model_validate(r) for r in data.reviews],
        project=ProjectResponse.model_validate(data.project) if data.project else None,
        document=DiaryDocumentSchema.model_validate(document),
    )


@router.post("/generate", response_model=DiaryResponse)
async def generate_diary(
    body: DiaryRequest,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """Everything needed to render a team's project diary"""
    data = await diary_data(db, principal, body.team_id)
    document = build_diary(data)

    logger.info(
        f"[Diary] Built diary for team {body.team_id}: "
        f"{len(data.logs)} logs, {len(data.reviews)} reviews"
    )
    return _diary_response(data, document)


@router.post("/pdf")
async def download_diary_pdf(
    body: DiaryRequest,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """Render a team's project diary as a PDF download"""
    data = await diary_data(db, principal, body.team_id)
    document = build_diary(data)
    pdf = await diary_pdf_generator.generate(document)

    filename = f"project_diary_{data.team.code or data.team.team_id}.pdf"
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
