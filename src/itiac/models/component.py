"""Infrastructure component model (node in the dependency graph)."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field

from itiac.models.base import Criticality, SnapshotModel


class ComponentType(str, Enum):
    """Types of infrastructure components."""

    SERVER = "server"
    DATABASE = "database"
    API = "api"
    LOAD_BALANCER = "load-balancer"
    NETWORK = "network"
    APPLICATION = "application"
    SERVICE = "service"
    STORAGE = "storage"
    ENDPOINT = "endpoint"
    VIRTUAL_MACHINE = "virtual-machine"
    FIREWALL = "firewall"
    ROUTER = "router"
    SWITCH = "switch"
    CLOUD_INSTANCE = "cloud-instance"
    LICENSE = "license"
    BACKUP = "backup"
    DOMAIN = "domain"
    CERTIFICATE = "certificate"
    USER_ACCOUNT = "user-account"
    MODUL = "modul"


class ComponentStatus(str, Enum):
    """Operational status of a component."""

    ONLINE = "online"
    OFFLINE = "offline"
    WARNING = "warning"
    MAINTENANCE = "maintenance"


class Component(SnapshotModel):
    """IT component.

    Identity is the id; everything else is mutable in storage but read
    here as a snapshot. Metadata is passed through untouched.
    """

    id: str = Field(..., min_length=1)
    name: str
    type: ComponentType
    status: ComponentStatus
    criticality: Criticality

    description: str | None = None
    location: str | None = None
    owner: str | None = None
    vendor: str | None = None
    helpdesk_email: str | None = None
    last_updated: datetime | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
