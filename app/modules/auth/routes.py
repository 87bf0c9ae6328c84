from fastapi import APIRouter, Depends
from app.config.settings import Settings
from app.core.dependencies import get_settings, get_store
from app.database.store import StoragePort
from app.modules.auth.schemas import SignupRequest, SigninRequest, SignupResponse, SigninResponse
from app.modules.auth.service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_service(
    store: StoragePort = Depends(get_store),
    settings: Settings = Depends(get_settings)
) -> AuthService:
    return AuthService(store, settings)


@router.post("/signup", response_model=SignupResponse)
def signup(
    signup_data: SignupRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Create an account and return a session token"""
    return service.signup(signup_data.email, signup_data.password)


@router.post("/signin", response_model=SigninResponse)
def signin(
    signin_data: SigninRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Sign in with email and password"""
    return service.signin(signin_data.email, signin_data.password)
