# Pydantic Schemas for the Seeding Workflow
# Domain entities handled by the lifecycle and milestone engines

from pydantic import BaseModel, Field, validator
from typing import Optional, List
from datetime import datetime
from enum import Enum
import uuid

from config.app_config import DEFAULT_CURRENCY


def generate_id() -> str:
    return str(uuid.uuid4())


# ============================================================================
# ENUMS
# ============================================================================

class InfluencerStatus(str, Enum):
    """Pipeline stage of a creator. Declaration order is the pipeline order."""
    DISCOVERY = "Discovery"
    CONTACTED = "Contacted"
    NEGOTIATING = "Negotiating"
    APPROVED = "Approved"
    CONTRACTED = "Contracted"
    SHIPPED = "Shipped"
    CONTENT_LIVE = "Content Live"
    PAYMENT_PENDING = "Payment Pending"
    PAID = "Paid"

    @property
    def rank(self) -> int:
        return STATUS_ORDER.index(self)


STATUS_ORDER = list(InfluencerStatus)


class PaymentStatus(str, Enum):
    UNPAID = "Unpaid"
    PROCESSING = "Processing"
    PAID = "Paid"


class ContractStatus(str, Enum):
    DRAFT = "Draft"
    SENT = "Sent"
    SIGNED = "Signed"


class PaymentMethod(str, Enum):
    WISE = "Wise"
    PAYPAL = "PayPal"
    BANK_TRANSFER = "Bank Transfer"
    UNSELECTED = "Unselected"


class PaymentSchedule(str, Enum):
    UPON_COMPLETION = "Upon Completion"
    WEEKLY = "Weekly"
    NET30 = "Net30"
    CUSTOM_MILESTONES = "Custom (Milestones)"
    PERFORMANCE_BATCHES = "Performance Batches"


class Platform(str, Enum):
    TIKTOK = "TikTok"
    INSTAGRAM = "Instagram"
    YOUTUBE = "YouTube"
    X = "X (Twitter)"


class MilestoneStatus(str, Enum):
    PENDING = "Pending"
    ELIGIBLE = "Eligible"
    PAID = "Paid"


class LogisticsStatus(str, Enum):
    PENDING = "Pending"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"


class ContentStage(str, Enum):
    WAITING_FOR_DRAFT = "Waiting for Draft"
    DRAFT_REVIEW = "Draft Review"
    APPROVED = "Approved"
    LIVE = "Live"


class MessageType(str, Enum):
    MACRO = "macro"
    TEXT = "text"
    APPROVAL_REQUEST = "approval_request"


class ProjectStatus(str, Enum):
    ACTIVE = "Active"
    COMPLETED = "Completed"
    DRAFT = "Draft"


# ============================================================================
# CONTRACT
# ============================================================================

class PacingConfig(BaseModel):
    """Parameters a milestone list was generated from."""
    videos_per_batch: int = Field(..., gt=0)
    amount_per_batch: float = Field(..., gt=0)
    frequency_label: Optional[str] = None


class PaymentMilestone(BaseModel):
    """A cumulative deliverable threshold that unlocks one payment tranche."""
    id: str = Field(default_factory=generate_id)
    label: str = "New Milestone"
    amount: float = Field(0, ge=0)
    video_requirement: int = Field(0, ge=0)
    due_date: Optional[str] = None
    status: MilestoneStatus = MilestoneStatus.PENDING


class ContractDetails(BaseModel):
    total_amount: float = Field(0, ge=0)
    currency: str = DEFAULT_CURRENCY
    video_count: int = Field(1, ge=0)
    payment_method: PaymentMethod = PaymentMethod.UNSELECTED
    payment_schedule: PaymentSchedule = PaymentSchedule.UPON_COMPLETION
    pacing_config: Optional[PacingConfig] = None
    milestones: List[PaymentMilestone] = Field(default_factory=list)
    status: ContractStatus = ContractStatus.DRAFT
    signed_date: Optional[str] = None
    contract_file_name: Optional[str] = None

    start_date: Optional[str] = None
    end_date: Optional[str] = None
    platform: Platform = Platform.TIKTOK
    tiktok_shop_fee: Optional[float] = None

    # Payout details, depending on payment_method
    paypal_email: Optional[str] = None
    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    swift_code: Optional[str] = None

    @validator("tiktok_shop_fee", always=True)
    def shop_fee_only_on_tiktok(cls, v, values):
        if values.get("platform") not in (None, Platform.TIKTOK):
            return None
        return v


# ============================================================================
# LOGISTICS & CONTENT
# ============================================================================

class Logistics(BaseModel):
    status: LogisticsStatus = LogisticsStatus.PENDING
    shipping_address: Optional[str] = None
    carrier: Optional[str] = None
    tracking_number: Optional[str] = None
    shipped_date: Optional[str] = None


class PostedVideo(BaseModel):
    id: str
    link: str
    date: str
    is_manual: bool = False


class ContentStatus(BaseModel):
    status: ContentStage = ContentStage.WAITING_FOR_DRAFT
    draft_link: Optional[str] = None
    is_approved: bool = False
    posted_videos: List[PostedVideo] = Field(default_factory=list)
    last_detected_at: Optional[str] = None


# ============================================================================
# MESSAGES & PAYMENTS
# ============================================================================

class ChatMessage(BaseModel):
    id: str = Field(default_factory=generate_id)
    sender: str
    content: str
    timestamp: str
    is_internal: bool = False
    type: MessageType = MessageType.TEXT


class PaymentRecord(BaseModel):
    amount_paid: float = Field(..., ge=0)
    date: str
    proof_file_name: Optional[str] = None
    screenshot_file_name: Optional[str] = None


class CreatorMetrics(BaseModel):
    views: int = 0
    likes: int = 0
    comments: int = 0
    shares: int = 0
    engagement_rate: float = 0.0
    avg_views_per_video: Optional[float] = None


# ============================================================================
# INFLUENCER
# ============================================================================

class Influencer(BaseModel):
    """A creator taking part in a seeding campaign."""
    id: str = Field(default_factory=generate_id)
    project_id: Optional[str] = None
    handle: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    email: str = ""
    country: str = ""
    categories: List[str] = Field(default_factory=list)
    follower_count: int = Field(0, ge=0)
    status: InfluencerStatus = InfluencerStatus.DISCOVERY

    contract: ContractDetails = Field(default_factory=ContractDetails)
    logistics: Logistics = Field(default_factory=Logistics)
    content: ContentStatus = Field(default_factory=ContentStatus)

    metrics: Optional[CreatorMetrics] = None
    payment_record: Optional[PaymentRecord] = None
    history: List[ChatMessage] = Field(default_factory=list)
    notes: str = ""

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @validator("categories", pre=True, always=True)
    def normalize_categories(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [v] if v else []
        return v

    @property
    def payment_status(self) -> PaymentStatus:
        """Legacy payment field, derived from status."""
        if self.status == InfluencerStatus.PAID:
            return PaymentStatus.PAID
        if self.status == InfluencerStatus.PAYMENT_PENDING:
            return PaymentStatus.PROCESSING
        return PaymentStatus.UNPAID

    @property
    def category(self) -> Optional[str]:
        return self.categories[0] if self.categories else None

    @property
    def posted_count(self) -> int:
        return len(self.content.posted_videos)


# ============================================================================
# PROJECT & TEMPLATES
# ============================================================================

class Project(BaseModel):
    id: str = Field(default_factory=generate_id)
    title: str = Field(..., min_length=1)
    brand: str = ""
    status: ProjectStatus = ProjectStatus.ACTIVE
    budget: float = Field(0, ge=0)
    spent: float = Field(0, ge=0)
    description: str = ""
    start_date: Optional[str] = None
    managers: List[str] = Field(default_factory=list)


class MessageTemplate(BaseModel):
    id: str = Field(default_factory=generate_id)
    title: str = Field(..., min_length=1)
    subject: str = ""
    body: str = ""
