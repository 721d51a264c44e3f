"""Login route: exchanges a username/password for a session credential."""
import logging

from fastapi import APIRouter

from xtrack.deps import SettingsDep, UserServiceDep
from xtrack.schemas import Envelope, LoginData, LoginRequest, UserSummary
from xtrack.security import issue_session

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=Envelope[LoginData])
def login(
    body: LoginRequest,
    users: UserServiceDep,
    settings: SettingsDep,
) -> Envelope[LoginData]:
    """Authenticate and return a signed session token.

    Wrong username and wrong password produce the same 401.
    """
    user = users.authenticate(body.username, body.password)
    token = issue_session(
        user.id,
        user.username,
        user.role,
        settings.JWT_SECRET,
        settings.JWT_EXPIRATION_HOURS,
    )
    logger.info("User %s logged in", user.id)
    return Envelope(
        message="Login successful",
        data=LoginData(token=token, user=UserSummary.model_validate(user)),
    )
