"""Curated seed dataset for demos and tests.

Provides the static side of the merge: hand-assigned entity ids, curated
connections and a dated case timeline. Records carry a ``case_id`` so the
dataset can be scoped to the active case; records without one are shared
reference data (e.g. national agencies) that appear in every case.

**All people, organisations and events are entirely fictional.**
"""

from __future__ import annotations

import datetime as dt

from casegraph.graph.models import (
    Connection,
    ConnectionType,
    Entity,
    EntityCategory,
    EntityType,
    TimelineEvent,
)

# ---------------------------------------------------------------------------
# Fictional case "case-harbor": retaliation against a whistleblowing CEO
#
#   Amara Vos (CEO, Harborline Verification) reports data misuse
#     -> her former manager's family files complaints against her
#     -> the Bureau of Digital Crimes raids Harborline
#     -> the registry agency terminates Harborline's data contract
#     -> Judge Ilse Brandt later acquits Vos
#
# A second, smaller case "case-quarry" shares the two agencies.
# ---------------------------------------------------------------------------

HARBOR = "case-harbor"
QUARRY = "case-quarry"

_ENTITIES: list[Entity] = [
    Entity("amara-vos", "Amara Vos", EntityType.PERSON,
           category=EntityCategory.PROTAGONIST, case_id=HARBOR,
           role="CEO, Harborline Verification",
           description="Founder targeted after reporting misuse of registry data. Acquitted."),
    Entity("lena-okafor", "Lena Okafor", EntityType.PERSON,
           category=EntityCategory.NEUTRAL, case_id=HARBOR,
           role="Former general manager at Harborline",
           description="Employee caught between her employer and her family."),
    Entity("pieter-okafor", "Pieter Okafor", EntityType.PERSON,
           category=EntityCategory.ANTAGONIST, case_id=HARBOR,
           role="Primary complainant",
           description="Lena's father; filed several complaints later found unsupported."),
    Entity("ruben-okafor", "Ruben Okafor", EntityType.PERSON,
           category=EntityCategory.ANTAGONIST, case_id=HARBOR,
           role="Retired intelligence officer",
           description="Pieter's brother; alleged to have organised surveillance."),
    Entity("milan-dekker", "Milan Dekker", EntityType.PERSON,
           category=EntityCategory.ANTAGONIST, case_id=HARBOR,
           role="Lena's husband",
           description="Recorded discussing plans to intimidate Vos."),
    Entity("harborline", "Harborline Verification", EntityType.ORGANIZATION,
           category=EntityCategory.PROTAGONIST, case_id=HARBOR,
           role="Identity verification company",
           description="Lost most of its revenue after the registry contract was terminated."),
    Entity("bdc", "Bureau of Digital Crimes", EntityType.AGENCY,
           category=EntityCategory.OFFICIAL,
           role="Federal cybercrime agency"),
    Entity("registry", "National Registry Authority", EntityType.AGENCY,
           category=EntityCategory.OFFICIAL,
           role="Citizen data registry"),
    Entity("tomas-reyes", "Tomas Reyes", EntityType.PERSON,
           category=EntityCategory.OFFICIAL, case_id=HARBOR,
           role="Investigating officer, BDC"),
    Entity("ilse-brandt", "Ilse Brandt", EntityType.PERSON,
           category=EntityCategory.OFFICIAL, case_id=HARBOR,
           role="Trial judge",
           description="Granted the acquittal."),
    Entity("seizure-memo", "Seizure memo 14/B", EntityType.EVIDENCE_ARTIFACT,
           case_id=HARBOR,
           role="Raid inventory",
           description="Inventory of devices seized; lacks witness signatures."),
    Entity("quarry-coop", "Westfield Quarry Cooperative", EntityType.ORGANIZATION,
           category=EntityCategory.PROTAGONIST, case_id=QUARRY,
           role="Workers' cooperative"),
    Entity("jonas-hale", "Jonas Hale", EntityType.PERSON,
           category=EntityCategory.PROTAGONIST, case_id=QUARRY,
           role="Cooperative organiser"),
]

_CONNECTIONS: list[Connection] = [
    # Family
    Connection("pieter-okafor", "lena-okafor", ConnectionType.FAMILY, "Father-Daughter", 1.0, case_id=HARBOR),
    Connection("milan-dekker", "lena-okafor", ConnectionType.FAMILY, "Husband-Wife", 0.8, case_id=HARBOR),
    Connection("pieter-okafor", "ruben-okafor", ConnectionType.FAMILY, "Brothers", 1.0, case_id=HARBOR),
    # Professional
    Connection("amara-vos", "harborline", ConnectionType.PROFESSIONAL, "CEO", 1.0, case_id=HARBOR),
    Connection("lena-okafor", "harborline", ConnectionType.PROFESSIONAL, "Former GM", 0.6, case_id=HARBOR),
    Connection("harborline", "registry", ConnectionType.PROFESSIONAL, "Data partner (terminated)", 0.8, case_id=HARBOR),
    # Adversarial
    Connection("pieter-okafor", "amara-vos", ConnectionType.ADVERSARIAL, "Filed complaints", 1.0, case_id=HARBOR),
    Connection("ruben-okafor", "amara-vos", ConnectionType.ADVERSARIAL, "Surveillance and threats", 1.0, case_id=HARBOR),
    Connection("milan-dekker", "amara-vos", ConnectionType.ADVERSARIAL, "Intimidation plan", 0.9, case_id=HARBOR),
    Connection("bdc", "amara-vos", ConnectionType.ADVERSARIAL, "Raid and arrest", 0.8, case_id=HARBOR),
    Connection("ruben-okafor", "milan-dekker", ConnectionType.ADVERSARIAL, "Recorded coordination", 1.0, case_id=HARBOR),
    Connection("ruben-okafor", "registry", ConnectionType.ADVERSARIAL, "Lobbied for termination", 0.8, case_id=HARBOR),
    # Official / legal
    Connection("tomas-reyes", "bdc", ConnectionType.OFFICIAL, "Investigating officer", 0.8, case_id=HARBOR),
    Connection("pieter-okafor", "bdc", ConnectionType.LEGAL, "Filed complaints with", 0.8, case_id=HARBOR),
    Connection("ilse-brandt", "amara-vos", ConnectionType.LEGAL, "Granted acquittal", 1.0, case_id=HARBOR),
    Connection("tomas-reyes", "seizure-memo", ConnectionType.LEGAL, "Authored", 0.6, case_id=HARBOR),
    Connection("bdc", "registry", ConnectionType.OFFICIAL, "Coordinated action", 0.6),
    # Quarry case
    Connection("jonas-hale", "quarry-coop", ConnectionType.PROFESSIONAL, "Organiser", 1.0, case_id=QUARRY),
    Connection("bdc", "jonas-hale", ConnectionType.ADVERSARIAL, "Detention", 0.6, case_id=QUARRY),
]

_EVENTS: list[TimelineEvent] = [
    TimelineEvent("ev-hire", dt.date(2015, 1, 12), "Lena Okafor hired by Harborline.",
                  "Business Interference", "Amara Vos (CEO), Lena Okafor (Employee)", HARBOR),
    TimelineEvent("ev-promotion", dt.date(2016, 9, 30), "Lena Okafor promoted to general manager.",
                  "Business Interference", "Amara Vos, Lena Okafor", HARBOR),
    TimelineEvent("ev-assault", dt.date(2016, 11, 8), "Domestic incident; Lena seeks shelter with the Vos family.",
                  "Harassment", "Lena Okafor, Milan Dekker, Ruben Okafor", HARBOR),
    TimelineEvent("ev-complaint", dt.date(2017, 2, 3), "First complaint filed against Vos with the Bureau.",
                  "Criminal Allegation", "Pieter Okafor (Complainant)", HARBOR,
                  entity_ids=("bdc",)),
    TimelineEvent("ev-raid", dt.date(2017, 6, 21), "Bureau raids Harborline offices; devices seized.",
                  "Legal Proceeding", "Tomas Reyes, Amara Vos", HARBOR,
                  entity_ids=("bdc", "harborline", "seizure-memo")),
    TimelineEvent("ev-termination", dt.date(2017, 8, 1), "Registry terminates Harborline data contract.",
                  "Business Interference", "", HARBOR,
                  entity_ids=("registry", "harborline")),
    TimelineEvent("ev-acquittal", dt.date(2021, 5, 14), "Vos acquitted of all charges.",
                  "Legal Proceeding", "Ilse Brandt (Judge), Amara Vos", HARBOR),
    TimelineEvent("ev-quarry-detention", dt.date(2019, 3, 2), "Cooperative organiser detained.",
                  "Harassment", "Jonas Hale", QUARRY, entity_ids=("bdc",)),
]


def _in_case(record_case: str | None, case_id: str | None) -> bool:
    return case_id is None or record_case in (None, case_id)


def load_seed(
    case_id: str | None = None,
) -> tuple[list[Entity], list[Connection], list[TimelineEvent]]:
    """Return the seed entities, connections and events, optionally scoped to a case."""
    return (
        [e for e in _ENTITIES if _in_case(e.case_id, case_id)],
        [c for c in _CONNECTIONS if _in_case(c.case_id, case_id)],
        [ev for ev in _EVENTS if _in_case(ev.case_id, case_id)],
    )


def case_ids() -> list[str]:
    return sorted({e.case_id for e in _ENTITIES if e.case_id})
