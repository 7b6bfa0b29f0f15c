from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from mentor_portal.core.database import get_db
from mentor_portal.models.review import ReviewStage
from mentor_portal.modules.auth import Principal, get_current_principal
from mentor_portal.schemas.review import (
    AttachmentCreate,
    AttachmentCreateResponse,
    AttachmentResponse,
    ReviewListResponse,
    ReviewMutationResponse,
    ReviewResponse,
    ReviewUpdate,
    TemplateCreate,
    TemplateCreateResponse,
    TemplateListResponse,
    TemplateResponse,
)
from mentor_portal.services import aggregation, workflow


router = APIRouter()


@router.get("", response_model=ReviewListResponse)
async def list_reviews(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """Reviews of the teams visible to the caller, with attachments"""
    reviews = await aggregation.list_reviews(db, principal)
    return ReviewListResponse(reviews=reviews)


@router.patch("/update", response_model=ReviewMutationResponse)
async def update_review(
    body: ReviewUpdate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """Record result, marks and completion for a review"""
    review = await workflow.evaluate_review(db, principal, body)
    return ReviewMutationResponse(
        message="Review updated successfully",
        review=ReviewResponse.model_validate(review),
    )


@router.post("/attachments", response_model=AttachmentCreateResponse, status_code=status.HTTP_201_CREATED)
async def add_attachment(
    body: AttachmentCreate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    attachment = await workflow.add_review_attachment(db, principal, body)
    return AttachmentCreateResponse(
        message="Attachment added successfully",
        attachment=AttachmentResponse.model_validate(attachment),
    )


@router.get("/templates", response_model=TemplateListResponse)
async def list_templates(
    review: Optional[ReviewStage] = Query(None),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """Review templates, optionally for one stage"""
    templates = await aggregation.list_templates(db, principal, review.value if review else None)
    return TemplateListResponse(templates=templates)


@router.post("/templates", response_model=TemplateCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_template(
    body: TemplateCreate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """Save a review template (HOD or project mentor)"""
    template = await workflow.create_review_template(db, principal, body)
    return TemplateCreateResponse(
        message="Template saved successfully",
        template=TemplateResponse.model_validate(template),
    )
