from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import RedirectResponse
from app.config import settings
from app.config.permissions_config import ADMIN_GROUP, SUPPORT_ROLES, STUDENT_ROLES
from app.core.dependencies import (
    Principal, get_current_principal, require_role,
    read_session_id, start_session, end_session, client_ip
)
from app.core.rate_limit import limiter
from app.core.sessions import SessionStore, get_session_store
from app.database.supabase_client import get_supabase
from app.modules.activity.service import ActivityService
from app.modules.activity.routes import get_activity_service
from app.modules.auth.google_oauth import GoogleOAuthClient
from app.modules.auth.schemas import (
    LoginRequest, RegisterRequest, AuthResponse, MeResponse,
    ForgotPasswordRequest, ResetPasswordRequest, RoleCheckResponse
)
from app.modules.auth.service import AuthService
from supabase import Client
from typing import Optional
import hmac
import logging
import secrets
import requests

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_google_client() -> GoogleOAuthClient:
    if not settings.google_oauth_enabled:
        raise HTTPException(status_code=404, detail="Google login is not configured")
    return GoogleOAuthClient(settings.google_client_id, settings.google_client_secret)


def _google_redirect_uri(request: Request) -> str:
    if settings.google_callback_url.startswith("http"):
        return settings.google_callback_url
    return str(request.url_for("google_callback"))


@router.post("/register", response_model=AuthResponse, status_code=201)
@limiter.limit(settings.auth_rate_limit)
async def register(
    request: Request,
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
    activity: ActivityService = Depends(get_activity_service)
):
    """Register a new local account"""
    user = service.register(register_data)
    activity.log(user["id"], "register", ip_address=client_ip(request), user_agent=request.headers.get("user-agent"))
    return AuthResponse(user=service.to_auth_user(user))


@router.post("/login", response_model=AuthResponse)
@limiter.limit(settings.auth_rate_limit)
async def login(
    request: Request,
    response: Response,
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service),
    store: SessionStore = Depends(get_session_store),
    activity: ActivityService = Depends(get_activity_service)
):
    """Login with email and password and start a session"""
    user = service.authenticate(login_data)
    previous_session = read_session_id(request)
    if previous_session:
        store.delete(previous_session)
    start_session(response, store, {"user_id": user["id"]})
    activity.log(user["id"], "login", ip_address=client_ip(request), user_agent=request.headers.get("user-agent"))
    logger.info(f"User {user['id']} logged in")
    return AuthResponse(user=service.to_auth_user(user))


@router.post("/logout", status_code=200)
async def logout(
    request: Request,
    response: Response,
    store: SessionStore = Depends(get_session_store)
):
    """Destroy the server-side session and clear the cookie"""
    user_id = end_session(request, response, store)
    if user_id is not None:
        logger.info(f"User {user_id} logged out")
    return {"success": True, "message": "Logged out successfully"}


@router.get("/me", response_model=MeResponse)
async def get_current_user(principal: Principal = Depends(get_current_principal)):
    """Get current authenticated user and their permissions (for frontend UI)."""
    user = principal.user
    return MeResponse(
        id=user["id"],
        email=user["email"],
        full_name=user["full_name"],
        role=principal.role,
        is_active=user.get("is_active", True),
        ai_credits=user.get("ai_credits") or 0,
        profile_image=user.get("profile_image"),
        permissions=sorted(principal.permissions)
    )


@router.post("/forgot-password", status_code=200)
@limiter.limit(settings.auth_rate_limit)
async def forgot_password(
    request: Request,
    data: ForgotPasswordRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Create a reset token. The answer is the same whether or not the email exists."""
    service.create_reset_token(str(data.email))
    return {"message": "If the email exists, reset instructions were sent"}


@router.post("/reset-password", status_code=200)
async def reset_password(
    data: ResetPasswordRequest,
    service: AuthService = Depends(get_auth_service),
    store: SessionStore = Depends(get_session_store)
):
    user_id = service.reset_password(data)
    store.delete_for_user(user_id)
    return {"success": True, "message": "Password updated"}


@router.get("/google")
async def google_login(
    request: Request,
    store: SessionStore = Depends(get_session_store),
    google: GoogleOAuthClient = Depends(get_google_client)
):
    """Redirect to Google's consent screen"""
    state = secrets.token_urlsafe(16)
    response = RedirectResponse(google.authorization_url(state, _google_redirect_uri(request)), status_code=302)
    session_id = read_session_id(request)
    session = store.get(session_id) if session_id else None
    if session is not None:
        session["oauth_state"] = state
        store.update(session_id, session)
    else:
        start_session(response, store, {"oauth_state": state})
    return response


@router.get("/google/callback", name="google_callback")
async def google_callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    store: SessionStore = Depends(get_session_store),
    service: AuthService = Depends(get_auth_service),
    google: GoogleOAuthClient = Depends(get_google_client),
    activity: ActivityService = Depends(get_activity_service)
):
    """Finish the Google login and redirect to the dashboard"""
    failure = RedirectResponse("/login", status_code=302)
    session_id = read_session_id(request)
    session = (store.get(session_id) if session_id else None) or {}
    expected_state = session.get("oauth_state")
    if error or not code or not expected_state or not hmac.compare_digest(state or "", expected_state):
        logger.warning(f"Google callback rejected (error={error})")
        return failure

    try:
        profile = google.fetch_profile(code, _google_redirect_uri(request))
        user = service.login_with_google(profile)
    except requests.RequestException as e:
        logger.error(f"Google token exchange failed: {e}")
        return failure
    except HTTPException as e:
        logger.warning(f"Google login refused: {e.detail}")
        return failure

    response = RedirectResponse("/dashboard", status_code=302)
    if session_id:
        store.delete(session_id)
    start_session(response, store, {"user_id": user["id"]})
    activity.log(user["id"], "login", {"provider": "google"}, client_ip(request), request.headers.get("user-agent"))
    return response


@router.get("/admin-only", response_model=RoleCheckResponse)
async def admin_only(principal: Principal = Depends(require_role([ADMIN_GROUP]))):
    return RoleCheckResponse(message="Admin access granted", user=principal.role)


@router.get("/support-or-admin", response_model=RoleCheckResponse)
async def support_or_admin(principal: Principal = Depends(require_role(SUPPORT_ROLES))):
    return RoleCheckResponse(message="Support/Admin access granted", user=principal.role)


@router.get("/students-only", response_model=RoleCheckResponse)
async def students_only(principal: Principal = Depends(require_role(STUDENT_ROLES))):
    return RoleCheckResponse(message="Student access granted", user=principal.role)
