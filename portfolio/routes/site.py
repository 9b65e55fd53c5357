"""
Public site endpoints: profile content, page-view tracking, GitHub stats and lead capture.
"""
from fastapi import APIRouter, Depends, Request

from portfolio.config import settings
from portfolio.data.profile import EDUCATION, EXPERIENCES, PERSONAL_INFO, PROJECTS, SKILLS
from portfolio.deps import get_analytics_store, get_email_service, get_github_service, get_lead_store
from portfolio.errors import APIError, ValidationFailed
from portfolio.prompts.templates import SERVICE_INQUIRY_TEMPLATE
from portfolio.routes.common import parse_model, read_json
from portfolio.schemas.leads import ContactForm, ServiceInquiry
from portfolio.services.analytics import AnalyticsStore
from portfolio.services.email_service import EmailService
from portfolio.services.github_stats import GitHubStatsService
from portfolio.services.leads import (
    LeadStore,
    ResumeRequest,
    extract_domain,
    is_business_email,
    is_valid_email,
)
from portfolio.utils.logger import logger

router = APIRouter(prefix="/api", tags=["site"])


@router.get("/profile")
async def profile():
    return {
        "personalInfo": PERSONAL_INFO,
        "experiences": EXPERIENCES,
        "education": EDUCATION,
        "skills": SKILLS,
        "projects": PROJECTS,
    }


@router.post("/analytics/track")
async def track_page_view(request: Request, store: AnalyticsStore = Depends(get_analytics_store)):
    """Records a page view. Never fails the page: errors come back as success=false."""
    try:
        body = await request.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        return {"success": False}

    result = await store.track_page_view(
        page_path=body.get("pagePath"),
        referrer=body.get("referrer"),
        session_id=body.get("sessionId"),
        user_agent=request.headers.get("user-agent"),
    )
    return {"success": result.available}


@router.get("/github")
async def github_stats(service: GitHubStatsService = Depends(get_github_service)):
    return await service.get_stats()


@router.post("/resume-request")
async def resume_request(request: Request, store: LeadStore = Depends(get_lead_store)):
    body = await read_json(request)
    email = body.get("email") if isinstance(body, dict) else None

    if not email or not isinstance(email, str):
        raise ValidationFailed("Email is required")

    email = email.strip().lower()
    if not is_valid_email(email):
        raise ValidationFailed("Please enter a valid email address")

    if not is_business_email(email):
        raise ValidationFailed(
            "Please use your work email. This resume is intended for professional/recruitment purposes only.",
            code="PERSONAL_EMAIL",
        )

    forwarded_for = request.headers.get("x-forwarded-for")
    result = await store.record_resume_download(ResumeRequest(
        email=email,
        domain=extract_domain(email),
        ip_address=forwarded_for.split(",")[0].strip() if forwarded_for else None,
        user_agent=request.headers.get("user-agent"),
    ))
    if not result.available:
        raise APIError()

    return {"success": True, "downloadUrl": settings.RESUME_DOWNLOAD_URL}


@router.post("/contact")
async def contact(request: Request, email_service: EmailService = Depends(get_email_service)):
    form = parse_model(ContactForm, await read_json(request))

    sent = await email_service.send_contact({
        "from_name": form.name,
        "from_email": form.email,
        "subject": form.subject or f"Portfolio contact from {form.name}",
        "message": form.message,
    })
    if not sent:
        raise APIError("Failed to send message. Please try again or email directly.")
    return {"success": True}


@router.post("/service-inquiry")
async def service_inquiry(request: Request, email_service: EmailService = Depends(get_email_service)):
    inquiry = parse_model(ServiceInquiry, await read_json(request))
    fields = {key: value or "-" for key, value in inquiry.model_dump().items()}

    sent = await email_service.send_inquiry({
        "from_name": inquiry.name,
        "from_email": inquiry.email,
        "subject": f"Service inquiry: {inquiry.service or 'General'}",
        "message": SERVICE_INQUIRY_TEMPLATE.format(**fields),
    })
    if not sent:
        raise APIError("Failed to send your inquiry. Please try again or email directly.")

    logger.info(f"Service inquiry forwarded ({inquiry.service or 'General'})")
    return {"success": True}
