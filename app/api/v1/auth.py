from datetime import datetime
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from app.config.database import get_db
from app.core.auth.service import AuthService
from app.core.auth.schemas import TokenRequest, TokenResponse
from app.shared.database.models import User

logger = logging.getLogger(__name__)

router = APIRouter(tags=["authentication"])

@router.post("/jwt", response_model=TokenResponse)
async def issue_token(
    token_request: TokenRequest,
    db: Session = Depends(get_db)
):
    """
    Exchange a signed-in email for a service token

    **Body:**
    ```json
        {
            "email": "user@example.com"
        }
    ```

    **Returns:**
    - Bearer token carrying the email claim, valid for 90 days
    """
    user = db.query(User).filter(User.email == token_request.email).first()
    if user:
        user.last_login_at = datetime.utcnow()
        db.commit()

    logger.info(f"Token issued for {token_request.email}")
    return TokenResponse(token=AuthService.create_access_token({"email": token_request.email}))
