"""Shared fixtures: flat models and OSCAL documents."""

import copy

import pytest

from sspbridge.validation import OSCALValidator

MINIMAL_FLAT = {
    "sysName": "Test System",
    "sysAcronym": "TSYS",
    "sysDesc": "A test system for unit testing",
    "conf": "moderate",
    "integ": "moderate",
    "avail": "low",
}

COMPLETE_FLAT = {
    "sysName": "Enterprise Resource Planning System",
    "sysAcronym": "ERPS",
    "sysDesc": "Enterprise resource planning system for agency operations",
    "fismaId": "FISMA-2024-001",
    "fedrampId": "FR-2024-0001",
    "owningAgency": "Department of Testing",
    "agencyComp": "DOT",
    "conf": "moderate",
    "integ": "moderate",
    "avail": "moderate",
    "authType": "ATO",
    "authDuration": "3 years",
    "cloudModel": "IaaS",
    "deployModel": "hybrid",
    "opDate": "2024-01-15",
    "ctrlBaseline": "moderate",
    "soName": "Jane Smith",
    "soEmail": "jane.smith@example.gov",
    "aoName": "John Doe",
    "aoEmail": "john.doe@example.gov",
    "issoName": "Bob Wilson",
    "issoEmail": "bob.wilson@example.gov",
    "bndNarr": "The system boundary includes all cloud infrastructure and on-premise servers.",
    "netNarr": "Three-tier architecture with DMZ, application, and database tiers.",
    "dfNarr": "Data flows from users through load balancers to application servers.",
    "infoTypes": [
        {"name": "PII", "nistId": "C.3.5.1", "c": "moderate", "i": "moderate", "a": "low"},
        {"name": "Financial Data", "nistId": "D.4.1", "c": "high", "i": "moderate", "a": "moderate"},
    ],
    "bndComps": [
        {"name": "Web Server", "type": "software", "purpose": "Serves web application", "zone": "DMZ"},
        {"name": "Database Server", "type": "software", "purpose": "Stores application data", "zone": "Internal"},
    ],
    "sepDutyMatrix": [
        {"role": "System Administrator", "access": "Full system access",
         "justification": "Required for system maintenance"},
        {"role": "Database Administrator", "access": "Database access only",
         "justification": "Required for database management"},
    ],
    "addContacts": [
        {"name": "Alice Jones", "role": "Help Desk Lead", "email": "alice.jones@example.gov",
         "phone": "555-0100"},
    ],
    "cryptoMods": [
        {"mod": "OpenSSL FIPS Provider", "cert": "4282", "level": "1",
         "usage": "TLS termination", "where": "Load balancer"},
    ],
    "ppsRows": [
        {"port": "443", "proto": "TCP", "svc": "HTTPS"},
        {"port": "53", "proto": "UDP", "svc": "DNS"},
        {"port": "8000-8080", "proto": "TCP", "svc": "Application API"},
    ],
    "ctrlData": {
        "AC": {
            "AC-1": {"status": "implemented",
                     "narrative": "Access control policy is documented and reviewed annually."},
            "AC-2": {"status": "partial", "narrative": "Account management procedures are in place."},
            "AC-2(1)": {"status": "planned", "narrative": "Automated account management is scheduled."},
        },
        "AU": {
            "AU-1": {"status": "planned", "narrative": "Audit policy will be implemented in Q2."},
        },
        "PE": {
            "PE-1": {"status": "na", "narrative": "Physical protection is provided by the cloud provider."},
        },
        "SC": {
            "SC-7": {"status": "inherited", "narrative": "Boundary protection is inherited from the IaaS."},
        },
    },
}

SAMPLE_OSCAL_JSON = {
    "system-security-plan": {
        "uuid": "12345678-1234-4123-8123-123456789012",
        "metadata": {
            "title": "Test System SSP",
            "last-modified": "2024-01-15T10:00:00Z",
            "version": "1.0",
            "oscal-version": "1.1.2",
            "roles": [
                {"id": "system-owner", "title": "System Owner"},
                {"id": "authorizing-official", "title": "Authorizing Official"},
            ],
            "parties": [
                {"uuid": "party-001", "type": "person", "name": "Jane Smith",
                 "email-addresses": ["jane.smith@example.gov"]},
                {"uuid": "party-002", "type": "person", "name": "John Doe",
                 "email-addresses": ["john.doe@example.gov"]},
            ],
            "responsible-parties": [
                {"role-id": "system-owner", "party-uuids": ["party-001"]},
                {"role-id": "authorizing-official", "party-uuids": ["party-002"]},
            ],
        },
        "import-profile": {"href": "#nist-sp-800-53-rev5-moderate"},
        "system-characteristics": {
            "system-ids": [{"id": "FISMA-2024-001"}],
            "system-name": "Enterprise Test System",
            "system-name-short": "ETS",
            "description": "An enterprise test system for compliance testing.",
            "props": [
                {"name": "cloud-service-model", "value": "SaaS"},
                {"name": "cloud-deployment-model", "value": "public"},
            ],
            "security-sensitivity-level": "moderate",
            "system-information": {
                "information-types": [
                    {
                        "uuid": "info-001",
                        "title": "Personnel Information",
                        "description": "Employee personal information",
                        "categorizations": [
                            {"system": "https://doi.org/10.6028/NIST.SP.800-60v2r1",
                             "information-type-ids": ["C.3.5.1"]},
                        ],
                        "confidentiality-impact": {"base": "moderate"},
                        "integrity-impact": {"base": "moderate"},
                        "availability-impact": {"base": "low"},
                    },
                ],
            },
            "security-impact-level": {
                "security-objective-confidentiality": "moderate",
                "security-objective-integrity": "moderate",
                "security-objective-availability": "low",
            },
            "status": {"state": "operational"},
            "authorization-boundary": {"description": "The system boundary includes all cloud infrastructure."},
            "network-architecture": {"description": "Three-tier network architecture."},
            "data-flow": {"description": "Data flows from users to application to database."},
        },
        "system-implementation": {
            "users": [
                {
                    "uuid": "user-001",
                    "title": "System Administrator",
                    "description": "Manages system configuration",
                    "authorized-privileges": [
                        {"title": "Admin Access",
                         "functions-performed": ["System configuration", "User management"]},
                    ],
                },
            ],
            "components": [
                {"uuid": "comp-001", "type": "this-system", "title": "Enterprise Test System",
                 "description": "The primary system", "status": {"state": "operational"}},
                {"uuid": "comp-002", "type": "software", "title": "Web Application",
                 "description": "Frontend web application", "status": {"state": "operational"},
                 "props": [{"name": "security-zone", "value": "DMZ"}]},
            ],
        },
        "control-implementation": {
            "description": "Control implementation for the system",
            "implemented-requirements": [
                {
                    "uuid": "req-001",
                    "control-id": "ac-1",
                    "by-components": [
                        {"component-uuid": "comp-001", "uuid": "bc-001",
                         "description": "Access control policy is documented.",
                         "implementation-status": {"state": "implemented"}},
                    ],
                },
                {
                    "uuid": "req-002",
                    "control-id": "ac-2",
                    "by-components": [
                        {"component-uuid": "comp-001", "uuid": "bc-002",
                         "description": "Account management procedures.",
                         "implementation-status": {"state": "partial"}},
                    ],
                },
            ],
        },
    }
}

SAMPLE_XML = """<?xml version="1.0" encoding="UTF-8"?>
<system-security-plan xmlns="http://csrc.nist.gov/ns/oscal/1.0" uuid="12345678-1234-4123-8123-123456789012">
  <metadata>
    <title>XML Import Test</title>
    <last-modified>2024-01-15T10:00:00Z</last-modified>
    <version>1.0</version>
    <oscal-version>1.1.2</oscal-version>
  </metadata>
  <import-profile href="#profile"/>
  <system-characteristics>
    <system-id>XML-FISMA-001</system-id>
    <system-name>XML Import System</system-name>
    <system-name-short>XIS</system-name-short>
    <description>A system imported from XML format</description>
    <security-impact-level>
      <security-objective-confidentiality>high</security-objective-confidentiality>
      <security-objective-integrity>moderate</security-objective-integrity>
      <security-objective-availability>moderate</security-objective-availability>
    </security-impact-level>
    <status state="operational"/>
    <authorization-boundary>
      <description>The boundary includes all cloud resources.</description>
    </authorization-boundary>
  </system-characteristics>
  <system-implementation>
    <user uuid="u1"><title>Admin</title></user>
    <component uuid="c1" type="this-system">
      <title>Main System</title>
      <description>The system</description>
      <status state="operational"/>
    </component>
  </system-implementation>
  <control-implementation>
    <description>Controls</description>
    <implemented-requirement uuid="r1" control-id="ac-1"/>
  </control-implementation>
</system-security-plan>
"""


@pytest.fixture
def minimal_flat():
    return copy.deepcopy(MINIMAL_FLAT)


@pytest.fixture
def complete_flat():
    return copy.deepcopy(COMPLETE_FLAT)


@pytest.fixture
def sample_oscal():
    return copy.deepcopy(SAMPLE_OSCAL_JSON)


@pytest.fixture
def sample_xml():
    return SAMPLE_XML


@pytest.fixture
def validator():
    return OSCALValidator()
