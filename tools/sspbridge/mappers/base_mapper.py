"""
Base mapper class for OSCAL conversions

Provides the OSCAL object constructors shared by the flat -> OSCAL builder.
"""

import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..model.oscal import OSCAL_VERSION


def utc_timestamp() -> str:
    """Current time as an OSCAL date-time-with-timezone"""
    return datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


class BaseMapper(ABC):
    """Base class for mappers that produce OSCAL structures"""

    OSCAL_VERSION = OSCAL_VERSION

    def __init__(self):
        self.timestamp = utc_timestamp()

    def generate_uuid(self) -> str:
        """Generate UUID for OSCAL objects"""
        return str(uuid.uuid4())

    def create_oscal_metadata(self, title: str, **kwargs) -> Dict[str, Any]:
        """Create OSCAL metadata section"""
        metadata = {
            "title": title,
            "last-modified": self.timestamp,
            "version": kwargs.get("version") or "1.0",
            "oscal-version": self.OSCAL_VERSION
        }

        if kwargs.get("roles"):
            metadata["roles"] = kwargs["roles"]

        # OSCAL forbids empty arrays, so parties only appear when present
        if kwargs.get("parties"):
            metadata["parties"] = kwargs["parties"]

        if kwargs.get("responsible_parties"):
            metadata["responsible-parties"] = kwargs["responsible_parties"]

        return metadata

    def create_party(self, name: str, party_type: str = "organization",
                    uuid_val: Optional[str] = None, **kwargs) -> Dict[str, Any]:
        """Create OSCAL party object"""
        party = {
            "uuid": uuid_val or self.generate_uuid(),
            "type": party_type,
            "name": name
        }

        if kwargs.get("short_name"):
            party["short-name"] = kwargs["short_name"]

        if kwargs.get("props"):
            party["props"] = kwargs["props"]

        if kwargs.get("email"):
            party["email-addresses"] = [kwargs["email"]]

        if kwargs.get("phone"):
            party["telephone-numbers"] = [{"number": kwargs["phone"]}]

        return party

    def create_property(self, name: str, value: str, **kwargs) -> Dict[str, Any]:
        """Create OSCAL property object"""
        prop = {
            "name": name,
            "value": value
        }

        if "ns" in kwargs:
            prop["ns"] = kwargs["ns"]

        if "class" in kwargs:
            prop["class"] = kwargs["class"]

        return prop

    def create_responsible_party(self, role_id: str, party_uuids: List[str]) -> Dict[str, Any]:
        """Bind a role to the parties that fill it"""
        return {
            "role-id": role_id,
            "party-uuids": list(party_uuids)
        }

    def map_fips199_impact_level(self, cia_levels: Dict[str, str]) -> Dict[str, Any]:
        """Map FIPS-199 CIA levels to OSCAL security-impact-level"""
        return {
            "security-impact-level": {
                "security-objective-confidentiality": cia_levels["confidentiality"],
                "security-objective-integrity": cia_levels["integrity"],
                "security-objective-availability": cia_levels["availability"]
            }
        }

    @abstractmethod
    def map(self, data: Dict[str, Any], **options) -> Dict[str, Any]:
        """Map source data to OSCAL format"""
        pass
