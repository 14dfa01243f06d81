"""
Skills parser.

Extracts technical, HR and soft skills from document text by dictionary
matching, plus free-form entries from a dedicated skills section.
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from hr_assistant.utils.constants import SKILL_CATEGORIES
from hr_assistant.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ExtractedSkill:
    """A skill found in a document."""

    name: str
    category: Optional[str] = None
    confidence: float = 1.0
    source: str = "text"  # "text" or "section"
    position: int = 0  # offset of the first mention


@dataclass
class SkillsParseResult:
    """Result of skills parsing."""

    skills: list[ExtractedSkill] = field(default_factory=list)
    confidence: float = 0.0

    @property
    def names(self) -> list[str]:
        return [skill.name for skill in self.skills]


class SkillsParser:
    """Parser for extracting skills from document text."""

    # Extended skill database (in addition to SKILL_CATEGORIES)
    ADDITIONAL_SKILLS = {
        "programming_languages": [
            "html", "css", "bash", "shell", "powershell", "perl", "lua",
            "haskell", "elixir", "clojure", "dart", "julia", "solidity",
        ],
        "frameworks": [
            "nuxt.js", "svelte", "nestjs", "fastify", "asp.net", "flutter",
            "react native", "electron", "spring boot", "hibernate", "celery",
            "airflow", "huggingface", "langchain", "llamaindex",
        ],
        "databases": [
            "mariadb", "clickhouse", "neo4j", "couchdb", "memcached",
            "pinecone", "weaviate", "milvus", "qdrant", "pgvector",
            "snowflake", "databricks", "bigquery", "redshift",
        ],
        "cloud_platforms": [
            "cloudflare", "vercel", "netlify", "lambda", "ec2", "s3",
            "eks", "ecs", "cloud run", "openshift", "prometheus", "grafana",
            "datadog", "splunk", "jenkins", "gitlab ci", "github actions",
            "circleci", "argocd",
        ],
        "data_science": [
            "pandas", "numpy", "scipy", "matplotlib", "jupyter", "spark",
            "hadoop", "kafka", "dbt", "mlflow", "sagemaker", "opencv",
            "nltk", "spacy", "transformers", "xgboost", "lightgbm",
            "machine learning", "deep learning", "data analysis",
        ],
        "testing": [
            "jest", "cypress", "playwright", "selenium", "pytest", "junit",
            "postman", "jmeter", "locust", "tdd", "bdd", "unit testing",
        ],
        "hr_practices": [
            "succession planning", "workforce planning", "labor law",
            "employment law", "sourcing", "interviewing", "applicant tracking",
            "ats", "greenhouse", "bamboohr", "sap successfactors", "adp",
            "shrm", "phr", "sphr", "diversity and inclusion", "dei",
            "employee engagement", "learning and development", "hr analytics",
        ],
        "soft_skills": [
            "agile", "scrum", "kanban", "project management",
            "product management", "technical writing", "mentoring",
            "coaching", "stakeholder management", "cross-functional",
            "collaboration", "critical thinking", "decision making",
            "time management", "conflict resolution", "negotiation",
            "public speaking",
        ],
        "security": [
            "oauth", "jwt", "saml", "ldap", "encryption",
            "penetration testing", "soc2", "gdpr", "hipaa", "owasp",
        ],
        "methodologies": [
            "rest", "graphql", "grpc", "microservices", "serverless",
            "event-driven", "domain-driven design", "design patterns",
        ],
    }

    # Separators used inside skills sections
    SECTION_SPLIT_PATTERN = re.compile(r"[,;:|\u2022\u00b7\n]|\s{2,}|\s-\s")

    SKIP_WORDS = {
        "and", "or", "the", "with", "using", "including",
        "etc", "years", "year", "experience", "knowledge",
        "understanding", "familiar", "proficient", "skills",
        "technical skills", "languages", "tools", "frameworks",
    }

    def __init__(self):
        """Initialize the skills parser with combined skill lists."""
        self._build_skill_index()

    def _build_skill_index(self) -> None:
        """Build an index of all known skills for quick lookup."""
        self.skill_to_category: dict[str, str] = {}

        for category, skills in SKILL_CATEGORIES.items():
            for skill in skills:
                self.skill_to_category[skill.lower()] = category

        for category, skills in self.ADDITIONAL_SKILLS.items():
            for skill in skills:
                self.skill_to_category.setdefault(skill.lower(), category)

        # Lookarounds instead of \b so that "c++", "c#" and ".net" match
        self._skill_patterns = {
            skill: re.compile(rf"(?<![\w.]){re.escape(skill)}(?![\w+#])", re.IGNORECASE)
            for skill in self.skill_to_category
        }

    def parse(
        self,
        text: str,
        skills_section: Optional[str] = None,
    ) -> SkillsParseResult:
        """
        Parse skills from document text.

        Known skills are returned in order of first mention with their
        original casing; section-only entries follow.
        """
        skills: list[ExtractedSkill] = []
        seen_skills: set[str] = set()

        for skill in self._extract_known_skills(text):
            if skill.name.lower() not in seen_skills:
                skills.append(skill)
                seen_skills.add(skill.name.lower())

        if skills_section:
            for skill in self._parse_skills_section(skills_section):
                if skill.name.lower() not in seen_skills:
                    skills.append(skill)
                    seen_skills.add(skill.name.lower())

        if skills:
            avg_confidence = sum(s.confidence for s in skills) / len(skills)
        else:
            avg_confidence = 0.0

        return SkillsParseResult(skills=skills, confidence=avg_confidence)

    def _extract_known_skills(self, text: str) -> list[ExtractedSkill]:
        """Extract mentions of known skills from text, ordered by position."""
        skills = []

        for skill_name, pattern in self._skill_patterns.items():
            match = pattern.search(text)
            if match:
                skills.append(
                    ExtractedSkill(
                        name=match.group(0),
                        category=self.skill_to_category[skill_name],
                        confidence=0.85,
                        position=match.start(),
                    )
                )

        skills.sort(key=lambda s: (s.position, -len(s.name)))
        return skills

    def _parse_skills_section(self, section_text: str) -> list[ExtractedSkill]:
        """Parse free-form entries from a dedicated skills section."""
        skills = []

        for candidate in self.SECTION_SPLIT_PATTERN.split(section_text):
            clean_skill = self._clean_skill_name(candidate)
            if not clean_skill:
                continue

            skills.append(
                ExtractedSkill(
                    name=clean_skill,
                    category=self._get_skill_category(clean_skill),
                    confidence=0.7,
                    source="section",
                )
            )

        return skills

    def _clean_skill_name(self, name: str) -> Optional[str]:
        """Clean and validate a skill name."""
        # Remove leading/trailing punctuation and whitespace
        name = re.sub(r"^[\s\W]+|[\s\W]+$", "", name.strip())

        if not name or len(name) < 2 or len(name) > 40:
            return None

        if name.isdigit() or len(name.split()) > 4:
            return None

        if name.lower() in self.SKIP_WORDS:
            return None

        return name

    def _get_skill_category(self, skill_name: str) -> Optional[str]:
        """Get the category for a skill."""
        return self.skill_to_category.get(skill_name.lower())


# Singleton instance
_skills_parser: Optional[SkillsParser] = None


def get_skills_parser() -> SkillsParser:
    """Get the shared skills parser (the skill index is built once)."""
    global _skills_parser
    if _skills_parser is None:
        _skills_parser = SkillsParser()
    return _skills_parser
