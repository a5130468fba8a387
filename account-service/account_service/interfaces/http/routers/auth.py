from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status
from fastapi.responses import JSONResponse
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session
from supabase import Client

from ....application.dto import ImageUpload, InstructorSignUpInput, LogInInput, StudentSignUpInput
from ....application.ports import IIdentityProvider, IImageStorage, ILayoutInvalidator, IProfileRepository
from ....application.use_cases.log_in import InstructorLogIn, StudentLogIn
from ....application.use_cases.sign_up import InstructorSignUp, StudentSignUp
from ....config import settings
from ....domain.entities import ProvisioningResult, resolve_role
from ....infrastructure.cache import CacheLayoutInvalidator
from ....infrastructure.db import get_db
from ....infrastructure.metrics import account_operations_total
from ....infrastructure.rate_limit import LOG_IN_LIMIT, SIGN_UP_LIMIT, limiter
from ....infrastructure.repositories import ProfileRepository
from ....infrastructure.security import decode_access_token
from ....infrastructure.supabase_gateway import SupabaseIdentityProvider, SupabaseImageStorage, get_supabase
from ..schemas import MeResp, ResultResp

router = APIRouter(prefix="/api/auth", tags=["auth"])
bearer = HTTPBearer(auto_error=False)

# --- Wiring (one Supabase client per request):

def get_identity_provider(client: Client = Depends(get_supabase)) -> IIdentityProvider:
    return SupabaseIdentityProvider(client)

def get_image_storage(client: Client = Depends(get_supabase)) -> IImageStorage:
    return SupabaseImageStorage(client, settings.HEADSHOTS_BUCKET)

def get_profiles(db: Session = Depends(get_db)) -> IProfileRepository:
    return ProfileRepository(db)

def get_invalidator() -> ILayoutInvalidator:
    return CacheLayoutInvalidator()

def _respond(operation: str, result: ProvisioningResult, with_session: bool = False) -> JSONResponse:
    account_operations_total.labels(operation=operation, status=str(result.status)).inc()
    response = JSONResponse(
        status_code=result.status,
        content=ResultResp.from_result(result).model_dump(),
    )
    if with_session and result.user is not None and result.user.access_token:
        response.set_cookie(**settings.get_cookie_settings(), value=result.user.access_token)
    return response

@router.get("/health")
def health():
    return {"status": "ok"}

# --- Students:

@router.post("/students/signup", response_model=ResultResp)
@limiter.limit(SIGN_UP_LIMIT)
def student_sign_up(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    interest: str = Form(...),
    name: str = Form(...),
    provider: IIdentityProvider = Depends(get_identity_provider),
    invalidator: ILayoutInvalidator = Depends(get_invalidator),
):
    uc = StudentSignUp(provider=provider, invalidator=invalidator)
    result = uc.execute(StudentSignUpInput(email=email, password=password, interest=interest, name=name))
    return _respond("student_sign_up", result)

@router.post("/students/login", response_model=ResultResp)
@limiter.limit(LOG_IN_LIMIT)
def student_log_in(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    provider: IIdentityProvider = Depends(get_identity_provider),
    profiles: IProfileRepository = Depends(get_profiles),
    invalidator: ILayoutInvalidator = Depends(get_invalidator),
):
    uc = StudentLogIn(provider=provider, profiles=profiles, invalidator=invalidator)
    result = uc.execute(LogInInput(email=email, password=password))
    return _respond("student_log_in", result, with_session=True)

# --- Instructors:

@router.post("/instructors/signup", response_model=ResultResp)
@limiter.limit(SIGN_UP_LIMIT)
def instructor_sign_up(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    interest: str = Form(...),
    name: str = Form(...),
    occupation: str = Form(...),
    bio: str = Form(...),
    url: str = Form(...),
    image: UploadFile = File(...),
    provider: IIdentityProvider = Depends(get_identity_provider),
    storage: IImageStorage = Depends(get_image_storage),
    invalidator: ILayoutInvalidator = Depends(get_invalidator),
):
    headshot = ImageUpload(
        content=image.file.read(),
        content_type=image.content_type or "application/octet-stream",
    )
    uc = InstructorSignUp(
        provider=provider,
        storage=storage,
        invalidator=invalidator,
        storage_url=settings.STORAGE_URL,
    )
    result = uc.execute(InstructorSignUpInput(
        email=email, password=password, interest=interest, name=name,
        occupation=occupation, bio=bio, url=url, image=headshot,
    ))
    return _respond("instructor_sign_up", result)

@router.post("/instructors/login", response_model=ResultResp)
@limiter.limit(LOG_IN_LIMIT)
def instructor_log_in(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    provider: IIdentityProvider = Depends(get_identity_provider),
    profiles: IProfileRepository = Depends(get_profiles),
    invalidator: ILayoutInvalidator = Depends(get_invalidator),
):
    uc = InstructorLogIn(provider=provider, profiles=profiles, invalidator=invalidator)
    result = uc.execute(LogInInput(email=email, password=password))
    return _respond("instructor_log_in", result, with_session=True)

# --- Session:

@router.get("/me", response_model=MeResp)
def me(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
):
    # cookie first, bearer header for API clients
    token = request.cookies.get(settings.COOKIE_NAME) or (creds.credentials if creds else None)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    try:
        claims = decode_access_token(token)
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    role = resolve_role(claims.get("user_metadata") or {})
    return MeResp(id=claims["sub"], email=claims.get("email", ""), role=role.value)
