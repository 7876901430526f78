"""Deterministic query parser used when Gemini extraction fails.

Regex and keyword matching only, so it always answers. It populates fewer
fields than the LLM path but has the same output shape:
    job title    - role-noun regex with optional seniority prefix
    location     - known cities and abbreviations (NYC, SF, LA, remote)
    years        - "5+ years" / "3 yrs", else "senior" -> 6, "junior" -> 1
    skills       - whole-word vocabulary match + fuzzy match for typos
    company_type - startup, VC backed, enterprise, FAANG
    industry     - fintech, healthcare, retail
"""

import logging
import re

from rapidfuzz import fuzz

from models.schemas.extracted_intent import EntityExtractionResult, ExtractedIntent
from services.entity_extractor import infer_seniority_from_years, map_job_title_to_archetype

logger = logging.getLogger(__name__)

_JOB_TITLE_RE = re.compile(
    r"\b(?:(?:senior|junior|mid-level|staff|principal|lead)\s+)?"
    r"(?:software\s+engineers?|software\s+developers?|data\s+engineers?|ml\s+engineers?"
    r"|tech\s+leads?|engineering\s+managers?|frontend|front-end|backend|back-end"
    r"|fullstack|full-stack|devops|sre|developers?|engineers?)\b"
    r"(?:\s+(?:engineers?|developers?))?",
    re.IGNORECASE,
)

# (pattern, canonical location); full names before abbreviations
_LOCATION_PATTERNS: list[tuple[re.Pattern, str]] = [
    (re.compile(r"\bsan\s+francisco\b", re.IGNORECASE), "San Francisco"),
    (re.compile(r"\bnew\s+york\b", re.IGNORECASE), "New York"),
    (re.compile(r"\blos\s+angeles\b", re.IGNORECASE), "Los Angeles"),
    (re.compile(r"\bsilicon\s+valley\b", re.IGNORECASE), "Silicon Valley"),
    (re.compile(r"\bNYC\b"), "New York"),
    (re.compile(r"\bSF\b"), "San Francisco"),
    (re.compile(r"\bLA\b"), "Los Angeles"),
    (re.compile(r"\bboston\b", re.IGNORECASE), "Boston"),
    (re.compile(r"\bseattle\b", re.IGNORECASE), "Seattle"),
    (re.compile(r"\baustin\b", re.IGNORECASE), "Austin"),
    (re.compile(r"\bdenver\b", re.IGNORECASE), "Denver"),
    (re.compile(r"\bchicago\b", re.IGNORECASE), "Chicago"),
    (re.compile(r"\blondon\b", re.IGNORECASE), "London"),
    (re.compile(r"\bberlin\b", re.IGNORECASE), "Berlin"),
    (re.compile(r"\bremote\b", re.IGNORECASE), "remote"),
]

_YEARS_RE = re.compile(r"(\d+)\+?\s*(?:years?|yrs?)\b", re.IGNORECASE)
# Larger counts are typos or noise, not experience
MAX_YEARS = 60

# Vocabulary term -> canonical display name. Order is output order.
SKILL_VOCABULARY: dict[str, str] = {
    "python": "Python",
    "javascript": "JavaScript",
    "typescript": "TypeScript",
    "react": "React",
    "node": "Node.js",
    "nodejs": "Node.js",
    "node.js": "Node.js",
    "go": "Go",
    "golang": "Go",
    "rust": "Rust",
    "java": "Java",
    "c++": "C++",
    "ruby": "Ruby",
    "php": "PHP",
    "swift": "Swift",
    "kubernetes": "Kubernetes",
    "k8s": "Kubernetes",
    "docker": "Docker",
    "aws": "AWS",
    "gcp": "GCP",
    "azure": "Azure",
    "terraform": "Terraform",
    "ml": "ML",
    "machine learning": "Machine learning",
    "ai": "AI",
    "llm": "LLMs",
    "llms": "LLMs",
    "data science": "Data science",
    "sql": "SQL",
    "postgresql": "PostgreSQL",
    "postgres": "PostgreSQL",
    "mongodb": "MongoDB",
    "redis": "Redis",
    "graphql": "GraphQL",
    "rest": "REST",
}

# Typos are only tolerated on longer words; short terms like "go" must match exactly
FUZZY_THRESHOLD = 90
FUZZY_MIN_LENGTH = 6

_COMPANY_TYPE_KEYWORDS: list[tuple[tuple[str, ...], str]] = [
    (("startup", "start-up"), "startup"),
    (("vc backed", "vc-backed"), "VC backed"),
    (("enterprise",), "enterprise"),
    (("faang", "big tech"), "FAANG"),
]

_INDUSTRY_KEYWORDS: list[tuple[tuple[str, ...], str]] = [
    (("fintech", "finance"), "fintech"),
    (("healthcare", "health"), "healthcare"),
    (("retail", "e-commerce", "ecommerce"), "retail"),
]


def _normalize(text: str) -> str:
    """Lowercase and strip punctuation, keeping the characters used in tech terms."""
    text = re.sub(r"[.,;:!?](\s|$)", " ", text.lower())
    return re.sub(r"[^a-z0-9.#+/ -]", " ", text)


def _contains_term(normalized: str, term: str) -> bool:
    return re.search(rf"(?<![a-z0-9]){re.escape(term)}(?![a-z0-9+#])", normalized) is not None


def _contains_any(normalized: str, terms: tuple[str, ...]) -> bool:
    return any(_contains_term(normalized, t) for t in terms)


def extract_job_title(query: str) -> str | None:
    match = _JOB_TITLE_RE.search(query)
    return match.group(0).strip() if match else None


def extract_location(query: str) -> str | None:
    for pattern, location in _LOCATION_PATTERNS:
        if pattern.search(query):
            return location
    return None


def extract_years(query: str) -> int | None:
    match = _YEARS_RE.search(query)
    digits = match.group(1).lstrip("0") if match else ""
    if match and len(digits) <= 2 and int(digits or 0) <= MAX_YEARS:
        return int(digits or 0)
    normalized = _normalize(query)
    if _contains_term(normalized, "senior"):
        return 6
    if _contains_term(normalized, "junior"):
        return 1
    return None


def extract_skills(query: str) -> list[str]:
    """Match the skill vocabulary as whole words, then fuzzy-match long tokens."""
    normalized = _normalize(query)
    found: list[str] = []
    for term, canonical in SKILL_VOCABULARY.items():
        if canonical not in found and _contains_term(normalized, term):
            found.append(canonical)

    long_terms = [t for t in SKILL_VOCABULARY if len(t) >= FUZZY_MIN_LENGTH and " " not in t]
    for token in normalized.split():
        if len(token) < FUZZY_MIN_LENGTH or token in SKILL_VOCABULARY:
            continue
        for term in long_terms:
            canonical = SKILL_VOCABULARY[term]
            if canonical not in found and fuzz.ratio(token, term) >= FUZZY_THRESHOLD:
                found.append(canonical)
                break
    return found


def _match_labels(normalized: str, table: list[tuple[tuple[str, ...], str]]) -> list[str]:
    return [label for terms, label in table if _contains_any(normalized, terms)]


def extract_fallback_entities(query: str) -> EntityExtractionResult:
    """Parse a query without the LLM. Never raises."""
    if not query or not query.strip():
        return EntityExtractionResult(success=True)

    normalized = _normalize(query)
    intent = ExtractedIntent(
        job_title=extract_job_title(query),
        location=extract_location(query),
        years_experience=extract_years(query),
        skills=extract_skills(query),
        industry=_match_labels(normalized, _INDUSTRY_KEYWORDS),
        company_type=_match_labels(normalized, _COMPANY_TYPE_KEYWORDS),
    )
    if intent.is_empty():
        logger.info("Fallback extraction found no entities in query")

    return EntityExtractionResult(
        intent=intent,
        archetype=map_job_title_to_archetype(intent.job_title),
        seniority=infer_seniority_from_years(intent.years_experience),
        success=True,
    )
