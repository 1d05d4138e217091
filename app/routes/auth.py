"""Connexion, inscription et connexion de démonstration (relayées au backend)."""
from fastapi import APIRouter, Depends, HTTPException, status

from app.backend.api import LaundromatApi
from app.dependencies import get_api
from app.errors import BackendError
from app.models import DemoLoginRequest, LoginForm, RegisterForm

router = APIRouter(prefix="/api/auth", tags=["auth"])


def auth_failure(error: BackendError, title: str) -> HTTPException:
    code = error.status_code if error.status_code and error.status_code < 500 else status.HTTP_502_BAD_GATEWAY
    return HTTPException(
        status_code=code,
        detail={"notification": {
            "title": title,
            "description": error.message,
            "variant": "destructive",
        }},
    )


@router.post("/login")
async def login(form: LoginForm, api: LaundromatApi = Depends(get_api)):
    try:
        user = await api.login(form.model_dump())
    except BackendError as e:
        raise auth_failure(e, "Login Failed") from e
    return {
        "user": user,
        "notification": {
            "title": "Login Successful",
            "description": "You have been logged in successfully.",
            "variant": "default",
        },
    }


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(form: RegisterForm, api: LaundromatApi = Depends(get_api)):
    """Le formulaire est validé (mots de passe identiques) avant tout appel au backend."""
    try:
        user = await api.register(form.to_backend())
    except BackendError as e:
        raise auth_failure(e, "Registration Failed") from e
    return {
        "user": user,
        "notification": {
            "title": "Registration Successful",
            "description": "Your account has been created. Please log in.",
            "variant": "default",
        },
        "tab": "login",
    }


@router.post("/demo-login")
async def demo_login(req: DemoLoginRequest = DemoLoginRequest(), api: LaundromatApi = Depends(get_api)):
    try:
        user = await api.demo_login(req.role)
    except BackendError as e:
        raise auth_failure(e, "Demo Login Failed") from e
    return {
        "user": user,
        "notification": {
            "title": "Demo Login Successful",
            "description": "You are now logged in as a business owner.",
            "variant": "default",
        },
    }
