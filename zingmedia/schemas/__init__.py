from zingmedia.schemas.accounts import BrandingUpdate, UserCreate
from zingmedia.schemas.auth import LoginRequest
from zingmedia.schemas.content import (
    ApprovalRequest,
    BriefingCreate,
    CampaignCreate,
    CommentCreate,
    GenerateImageRequest,
    GenerateVideoRequest,
    GenerateWithAgentsRequest,
    TransitionRequest,
)
