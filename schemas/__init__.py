# Schemas module for the Seeding Dashboard
# Pydantic models for the seeding workflow entities

from schemas.seeding import (
    # Enums
    InfluencerStatus,
    STATUS_ORDER,
    PaymentStatus,
    ContractStatus,
    PaymentMethod,
    PaymentSchedule,
    Platform,
    MilestoneStatus,
    LogisticsStatus,
    ContentStage,
    MessageType,
    ProjectStatus,

    # Contract
    PacingConfig,
    PaymentMilestone,
    ContractDetails,

    # Logistics & content
    Logistics,
    PostedVideo,
    ContentStatus,

    # Messages & payments
    ChatMessage,
    PaymentRecord,
    CreatorMetrics,

    # Entities
    Influencer,
    Project,
    MessageTemplate,
    generate_id,
)

__all__ = [
    'InfluencerStatus',
    'STATUS_ORDER',
    'PaymentStatus',
    'ContractStatus',
    'PaymentMethod',
    'PaymentSchedule',
    'Platform',
    'MilestoneStatus',
    'LogisticsStatus',
    'ContentStage',
    'MessageType',
    'ProjectStatus',
    'PacingConfig',
    'PaymentMilestone',
    'ContractDetails',
    'Logistics',
    'PostedVideo',
    'ContentStatus',
    'ChatMessage',
    'PaymentRecord',
    'CreatorMetrics',
    'Influencer',
    'Project',
    'MessageTemplate',
    'generate_id',
]
