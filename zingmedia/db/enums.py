from enum import Enum


class TenantTypeEnum(str, Enum):
    platform = "platform"
    agency = "agency"
    client = "client"


class UserRoleEnum(str, Enum):
    platform_admin = "platform_admin"
    agency_admin = "agency_admin"
    content_manager = "content_manager"
    client_approver = "client_approver"
    viewer = "viewer"


class BriefingStatusEnum(str, Enum):
    active = "active"
    archived = "archived"


class SessionStatusEnum(str, Enum):
    processing = "processing"
    completed = "completed"
    failed = "failed"
    cancelled = "cancelled"


class WorkflowStateEnum(str, Enum):
    generation = "generation"
    adjustments = "adjustments"
    approval = "approval"
    ready_for_download = "ready_for_download"


class AssetTypeEnum(str, Enum):
    image = "image"
    video = "video"


class AssetStatusEnum(str, Enum):
    processing = "processing"
    generated = "generated"
    completed = "completed"
    failed = "failed"
    cancelled = "cancelled"


class CampaignStatusEnum(str, Enum):
    draft = "draft"
    active = "active"
    completed = "completed"


class TaskKindEnum(str, Enum):
    generation_session = "generation_session"
    video_render = "video_render"


class TaskStatusEnum(str, Enum):
    pending = "pending"
    completed = "completed"
    failed = "failed"
    cancelled = "cancelled"
