"""
Authentication API routes
"""
from fastapi import APIRouter, Depends

from postboard.core.auth import get_current_user_required
from postboard.models.user import User

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.get("/me", response_model=User)
async def get_current_user_info(user: User = Depends(get_current_user_required)):
    """Get current user information"""
    return user
