from fastapi import APIRouter
from pydantic import BaseModel, Field
from typing import List
import logging
from fillblank.core.auth import Role, create_token

logger = logging.getLogger(__name__)
router = APIRouter()

class MockLogin(BaseModel):
    user_id: str = Field(min_length=1)
    roles: List[Role] = Field(min_length=1)

@router.post("/mock-login")
def mock_login(payload: MockLogin):
    """Issue a bearer token for local authoring and quiz sessions."""
    roles = sorted(set(payload.roles))
    logger.info("Mock login for %s as %s", payload.user_id, ",".join(roles))
    return {"access_token": create_token(payload.user_id, roles), "token_type": "bearer", "roles": roles}
