"""Startup seeding: the competency catalog and the admin allow-list."""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from competency_tracker.models.admin import Admin
from competency_tracker.models.competency import Competency

logger = logging.getLogger(__name__)


def _items(category: str, prefix: str, texts: list[str]) -> list[dict]:
    return [
        {"id": f"{prefix}{i:02d}", "category": category, "text": text}
        for i, text in enumerate(texts, start=1)
    ]


GENERAL_COMPETENCIES = [
    {
        "id": "G01",
        "category": "General Competencies",
        "text": "Working as an effective team member.",
        "reference_code": "Saw Filer 1, 1-1-2; 1-2-4 to 1-2-6",
        "what": (
            "A saw filer is part of a production team of supervisors, millwrights, operators, "
            "electricians and filers across shifts. Communicate clearly, support shift "
            "transitions and meet your obligations to your sponsor."
        ),
        "looks_like": (
            "You brief the incoming filer on saw condition and upcoming changes, record unusual "
            "conditions in the shift log and follow tagging protocols for out-of-service saws."
        ),
        "critical": (
            "Filing rooms run continuously. Broken communication leads to incorrectly installed "
            "saws, reused worn tools, skipped safety steps and lost production."
        ),
    },
    {
        "id": "G02",
        "category": "General Competencies",
        "text": "Attention to detail and ability to focus.",
        "reference_code": "Saw Filer 1, 3-2-1 to 3-2-3; 6-8-2; 7-1-1; 13-1-1",
        "what": (
            "Precision is the cornerstone of filing work. Variations as small as 0.002\" must be "
            "caught and corrected with the right tool and technique, even late in a shift."
        ),
        "looks_like": (
            "You detect and correct a 0.002\" dish with a certified straightedge, double-check "
            "micrometer readings and inspect every band for gullet cracks and heat tint."
        ),
        "critical": (
            "A grind angle off by a single degree can cause wobble, cracking, lumber defects or "
            "injury. You are the final line of defense."
        ),
    },
    {
        "id": "G03",
        "category": "General Competencies",
        "text": "Active participation in learning process.",
        "reference_code": "Saw Filer 1, 1-2-3 to 1-2-6",
        "what": (
            "Take ownership of your development: engage in shop tasks, ask questions and track "
            "your progress in the competency log."
        ),
        "looks_like": (
            "You keep your log current, obtain sign-off based on direct observation and ask to "
            "repeat high-skill procedures such as tensioning and crack welding."
        ),
        "critical": (
            "Filing is learned by doing. Passive apprentices fall behind and develop unsafe habits."
        ),
    },
    {
        "id": "G04",
        "category": "General Competencies",
        "text": "Shares ideas.",
        "reference_code": "Saw Filer 1, 1-2-4 to 1-2-6",
        "what": (
            "Voice observations that prevent damage, reduce waste or improve safety, and offer "
            "constructive, evidence-based suggestions."
        ),
        "looks_like": (
            "You flag an unevenly wearing grinding wheel, propose a tagging system for saw status "
            "and report recurring guide problems on the edger."
        ),
        "critical": (
            "Filers are closest to the tools. An overlooked dull grinder or untagged saw can put "
            "unsafe equipment back into service."
        ),
    },
]

COMPETENCY_CATALOG: list[dict] = (
    GENERAL_COMPETENCIES
    + _items("Demonstrate Safe Work Practices", "DSWP", [
        "Explain proper PPE.",
        "Demonstrate safe handling of knives and saws.",
        "Demonstrate proper utilization of equipment.",
        "Properly store and maintain equipment and tools.",
        "Understands and exhibits proper housekeeping.",
        "Exhibit safety.",
        "Knife and chipper safety (access and replacement of components).",
    ])
    + _items("Quality Control", "QC", [
        "Explain proper tools to use for saw measurement.",
        "Demonstrate correct measuring techniques.",
        "Demonstrate proper utilization of equipment.",
        "Properly store and maintain equipment and tools.",
        "Understand, explain and set clearances.",
        "Perform calculations to achieve targeted lumber sizes.",
        "Explain and demonstrate understanding and application of torque.",
        "Understand standards and specifications.",
    ])
    + _items("Saw Guides", "SG", [
        "Dress and rebuild bandsaw guides.",
        "Properly maintain guides and guide dresser.",
        "Rebuild gang and edger saw guides.",
        "Measure and test guide thickness and evenness.",
        "Safe and proper handling of guides to maintain quality.",
        "Properly remove, pour and replace babbit.",
    ])
    + _items("Knife Care", "KC", [
        "Demonstrate proper knife grinding and honing.",
        "Maintain knife grinding equipment.",
        "Set clearances and other required measurements.",
        "Measure and set clearances.",
        "Demonstrate understanding of runout.",
    ])
    + _items("Circular Saws", "CS", [
        "Evaluate saws for repairability.",
        "Replace teeth as needed.",
        "Properly weld and repair cracks.",
        "Operate jointer, front and side dresser.",
        "Bench circular saws (level and tension).",
        "Operate and maintain saw shop equipment required for circular saw maintenance.",
    ])
    + _items("Band Saws", "BS", [
        "Properly swage teeth or replace Stellite inserts.",
        "Check and maintain tooth alignment.",
        "Grind teeth to proper geometry and regrind gullets as required.",
        "Repair weld and cracks.",
        "Explain and demonstrate proper leveling of band saw.",
        "Explain and demonstrate proper tensioning of band saws.",
        "Operate and maintain saw shop equipment required for band saw maintenance.",
        "Display proper technique for lapping a band saw.",
        "Proper disposal of band saws.",
        "Recognize and safely address hurt or wrecked band saws.",
        "Checking and maintaining straight edges and other tools.",
        "Calibration of back gage.",
        "Handling, storage and transportation of band saws.",
    ])
    + _items("Mill Maintenance and Setup", "MMS", [
        "Set-up and align head rig (incl. strain, guide pressure, crossline).",
        "Set-up circular saws (incl. arbor runout and wear).",
        "Set-up band mill (incl. strain, guide pressure, crossline).",
        "Regrind band saws as required.",
        "Calculate and set-up cooling and lubrication as needed.",
        "Calculate and set-up feed speeds and feeds.",
        "Checking and maintaining scrapers, shears and covers.",
    ])
)


async def seed_competencies(db: AsyncSession, catalog: list[dict] | None = None) -> int:
    """Insert catalog entries whose id is missing. Returns how many were added."""
    catalog = COMPETENCY_CATALOG if catalog is None else catalog
    result = await db.execute(select(Competency.id))
    existing = set(result.scalars().all())

    added = 0
    for entry in catalog:
        if entry["id"] in existing:
            continue
        db.add(Competency(**entry))
        added += 1
    if added:
        await db.commit()
        logger.info("Seeded %d competencies", added)
    return added


async def seed_admins(db: AsyncSession, emails: list[str]) -> None:
    """Make every allow-listed email a builtin admin."""
    for raw in emails:
        email = raw.strip().lower()
        if not email:
            continue
        admin = await db.get(Admin, email)
        if admin is None:
            db.add(Admin(email=email, builtin=True))
            logger.info("Seeded builtin admin %s", email)
        elif not admin.builtin:
            admin.builtin = True
    await db.commit()
