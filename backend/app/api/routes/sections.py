from fastapi import APIRouter, Query

from app.schemas.generator import SectionCatalogueOut
from app.services.sections import DAY_NAMES, MAX_CLASS_COUNT, PERIOD_LABELS, section_catalogue

router = APIRouter()


@router.get("/sections", response_model=SectionCatalogueOut)
def list_sections(classes: int = Query(default=6, ge=1, le=MAX_CLASS_COUNT)) -> SectionCatalogueOut:
    return SectionCatalogueOut(
        classes=classes,
        days=list(DAY_NAMES),
        periods=list(PERIOD_LABELS),
        year_groups=section_catalogue(classes),
    )
