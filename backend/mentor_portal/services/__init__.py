from mentor_portal.services import aggregation, workflow
from mentor_portal.services.diary_builder import DiaryDocument, DiaryLayout, DiaryTable, build_diary
from mentor_portal.services.diary_pdf import DiaryPDFGenerator, diary_pdf_generator

__all__ = [
    # Read side
    "aggregation",
    # State transitions
    "workflow",
    # Project diary
    "DiaryDocument",
    "DiaryLayout",
    "DiaryTable",
    "build_diary",
    "DiaryPDFGenerator",
    "diary_pdf_generator",
]
