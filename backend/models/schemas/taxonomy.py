"""Closed vocabularies shared by extraction, filtering and percentile scoring."""

from enum import Enum


class AssessmentDimension(str, Enum):
    """Competency axes scored 1-5 by the video evaluation."""
    COMMUNICATION = "COMMUNICATION"
    PROBLEM_SOLVING = "PROBLEM_SOLVING"
    TECHNICAL_KNOWLEDGE = "TECHNICAL_KNOWLEDGE"
    COLLABORATION = "COLLABORATION"
    ADAPTABILITY = "ADAPTABILITY"
    LEADERSHIP = "LEADERSHIP"
    CREATIVITY = "CREATIVITY"
    TIME_MANAGEMENT = "TIME_MANAGEMENT"


class RoleArchetype(str, Enum):
    SENIOR_FRONTEND_ENGINEER = "SENIOR_FRONTEND_ENGINEER"
    SENIOR_BACKEND_ENGINEER = "SENIOR_BACKEND_ENGINEER"
    FULLSTACK_ENGINEER = "FULLSTACK_ENGINEER"
    ENGINEERING_MANAGER = "ENGINEERING_MANAGER"
    TECH_LEAD = "TECH_LEAD"
    DEVOPS_ENGINEER = "DEVOPS_ENGINEER"
    DATA_ENGINEER = "DATA_ENGINEER"
    GENERAL_SOFTWARE_ENGINEER = "GENERAL_SOFTWARE_ENGINEER"


ARCHETYPE_DISPLAY_NAMES: dict[RoleArchetype, str] = {
    RoleArchetype.SENIOR_FRONTEND_ENGINEER: "Frontend Engineer",
    RoleArchetype.SENIOR_BACKEND_ENGINEER: "Backend Engineer",
    RoleArchetype.FULLSTACK_ENGINEER: "Fullstack Engineer",
    RoleArchetype.ENGINEERING_MANAGER: "Engineering Manager",
    RoleArchetype.TECH_LEAD: "Tech Lead",
    RoleArchetype.DEVOPS_ENGINEER: "DevOps Engineer",
    RoleArchetype.DATA_ENGINEER: "Data Engineer",
    RoleArchetype.GENERAL_SOFTWARE_ENGINEER: "Software Engineer",
}


class SeniorityLevel(str, Enum):
    """Seniority vocabulary.

    JUNIOR, MID and SENIOR are the filtering levels. LEAD and PRINCIPAL exist
    for display and profile data and are folded into SENIOR by
    ``coarsen_seniority`` before any threshold lookup.
    """
    JUNIOR = "JUNIOR"
    MID = "MID"
    SENIOR = "SENIOR"
    LEAD = "LEAD"
    PRINCIPAL = "PRINCIPAL"


FILTER_SENIORITY_LEVELS: tuple[SeniorityLevel, ...] = (
    SeniorityLevel.JUNIOR,
    SeniorityLevel.MID,
    SeniorityLevel.SENIOR,
)

_COARSE_LEVEL = {
    SeniorityLevel.JUNIOR: SeniorityLevel.JUNIOR,
    SeniorityLevel.MID: SeniorityLevel.MID,
    SeniorityLevel.SENIOR: SeniorityLevel.SENIOR,
    SeniorityLevel.LEAD: SeniorityLevel.SENIOR,
    SeniorityLevel.PRINCIPAL: SeniorityLevel.SENIOR,
}


def coarsen_seniority(level: SeniorityLevel | str) -> SeniorityLevel:
    """Map any seniority level onto one of the three filtering levels."""
    return _COARSE_LEVEL[SeniorityLevel(level)]
