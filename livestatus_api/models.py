"""Pydantic models for the records served by the gateway.

Each model is an immutable snapshot of one Livestatus row. Field order
follows the column contract in :mod:`livestatus_api.columns`.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class Record(BaseModel):
    """Base for all decoded Livestatus rows."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class Comment(Record):
    """A host or service comment."""

    id: int = Field(description="Comment id")
    author: str = Field(description="Author of the comment")
    comment: str = Field(description="Comment text")
    entry_time: int = Field(description="Time the comment was entered (epoch seconds)")
    entry_type: int = Field(description="Entry type code")
    expire_time: int = Field(description="Expiry time (epoch seconds)")
    expires: bool = Field(description="Whether the comment expires")
    type: int = Field(description="Comment type code (host or service)")
    host_name: str = Field(description="Host the comment is attached to")
    service_description: str = Field(
        description="Service the comment is attached to, empty for host comments"
    )


class Contact(Record):
    """A notification contact."""

    id: int = Field(description="Contact id")
    name: str = Field(description="Contact name")
    alias: str = Field(description="Contact alias")
    email: str = Field(description="Email address")
    pager: str = Field(description="Pager number")
    host_notification_period: str = Field(description="Time period for host notifications")
    host_notifications_enabled: bool = Field(description="Whether host notifications are enabled")
    service_notification_period: str = Field(description="Time period for service notifications")
    service_notifications_enabled: bool = Field(
        description="Whether service notifications are enabled"
    )


class Downtime(Record):
    """A scheduled host or service downtime."""

    id: int = Field(description="Downtime id")
    author: str = Field(description="Author of the downtime")
    comment: str = Field(description="Downtime comment")
    duration: int = Field(description="Duration in seconds (flexible downtimes)")
    start_time: int = Field(description="Start time (epoch seconds)")
    end_time: int = Field(description="End time (epoch seconds)")
    entry_time: int = Field(description="Time the downtime was entered (epoch seconds)")
    fixed: bool = Field(description="Whether the downtime is fixed")
    type: int = Field(description="Downtime type code (host or service)")
    host_name: str = Field(description="Host the downtime is attached to")
    service_description: str = Field(
        description="Service the downtime is attached to, empty for host downtimes"
    )


class Host(Record):
    """State of a monitored host."""

    id: int
    name: str
    alias: str
    acknowledged: bool
    address: str
    check_period: str
    check_source: str
    checks_enabled: bool
    comments: List[int] = Field(description="Ids of comments attached to the host")
    contacts: List[str] = Field(description="Names of the host's contacts")
    downtimes: List[int] = Field(description="Ids of downtimes attached to the host")
    event_handler: str
    event_handler_enabled: bool
    execution_time: int
    flap_detection_enabled: bool
    groups: List[str] = Field(description="Host groups the host belongs to")
    hard_state: int
    has_been_checked: bool
    in_check_period: bool
    in_notification_period: bool
    is_flapping: bool
    last_check: int
    last_notification: int
    last_state_change: int
    last_time_down: int
    last_time_unreachable: int
    last_time_up: int
    latency: int
    next_check: int
    next_notification: int
    notification_period: str
    notifications_enabled: bool
    number_of_services: int
    number_of_services_hard_critical: int
    number_of_services_hard_ok: int
    number_of_services_hard_unknown: int
    number_of_services_hard_warning: int
    number_of_services_pending: int
    state: int
    state_type: int
    services: List[str] = Field(description="Descriptions of the host's services")


class Service(Record):
    """State of a monitored service."""

    id: int
    acknowledged: bool
    check_period: str
    check_source: str
    check_type: int
    checks_enabled: bool
    comments: List[int] = Field(description="Ids of comments attached to the service")
    contacts: List[str] = Field(description="Names of the service's contacts")
    description: str
    downtimes: List[int] = Field(description="Ids of downtimes attached to the service")
    event_handler: str
    event_handler_enabled: bool
    execution_time: int
    flap_detection_enabled: bool
    groups: List[str] = Field(description="Service groups the service belongs to")
    has_been_checked: bool
    in_check_period: bool
    in_notification_period: bool
    is_flapping: bool
    last_check: int
    last_notification: int
    last_state_change: int
    last_time_critical: int
    last_time_ok: int
    last_time_unknown: int
    last_time_warning: int
    latency: int
    next_check: int
    next_notification: int
    notification_period: str
    notifications_enabled: bool
    state: int
    state_type: int
    host_id: int
    host_name: str


class Status(Record):
    """Version information of the monitoring core, used for connection checks."""

    program_version: str
    livestatus_version: str
