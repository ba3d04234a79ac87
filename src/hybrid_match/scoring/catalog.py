"""Static skill catalog used to extract declared skills from requirement texts.

Terms are written the way recruiters write them; matching goes through
``hybrid_match.utils.text_utils`` so case, accents and light inflection do not
matter.
"""

from hybrid_match.scoring.models import ExperienceLevel, ProfileContext

SECTOR_KEYWORDS: dict[str, tuple[str, ...]] = {
    "tech_fullstack": (
        "javascript", "typescript", "react", "nextjs", "node.js",
        "api", "graphql", "sql", "postgresql", "mongodb", "docker",
        "aws", "cloud", "devops", "git", "frontend", "backend", "fullstack",
        "html", "css", "jest", "microservices", "ci/cd", "kubernetes", "redis",
        "elasticsearch", "python", "java", "php", "golang",
    ),
    "data_science": (
        "machine learning", "deep learning", "tensorflow", "pytorch",
        "scikit-learn", "pandas", "numpy", "jupyter", "statistics", "big data",
        "spark", "hadoop", "tableau", "power bi", "nlp", "computer vision",
        "mlops", "mlflow", "data mining", "predictive modeling",
    ),
    "finance_banking": (
        "risk management", "credit risk", "market risk", "operational risk",
        "liquidity risk", "basel", "ifrs", "gaap", "compliance", "audit",
        "regulatory", "derivatives", "portfolio management", "trading",
        "financial modeling", "valuation", "stress testing", "capital adequacy",
        "aml", "kyc", "mifid", "gdpr", "corep", "finrep", "srep",
        "asset management", "gestion d'actifs", "banque privée", "consolidation",
        "contrôle de gestion", "comptabilité",
    ),
    "insurance_sector": (
        "assurance", "insurance", "iard", "prévoyance", "mutuelle", "sinistre",
        "souscription", "actuariat", "courtage", "réassurance",
        "responsabilité civile", "solvabilité ii", "solvency ii",
    ),
    "project_management": (
        "project management", "chef de projet", "product owner",
        "business analyst", "scrum master", "agile", "scrum", "kanban",
        "prince2", "pmp", "cahier des charges", "recette",
        "conduite du changement", "pilotage", "copil", "user stories",
        "backlog", "jira", "confluence", "moa", "amoa", "pmo",
    ),
    "crm_salesforce": (
        "salesforce", "crm", "apex", "visualforce", "lightning", "lwc", "soql",
        "sales cloud", "service cloud", "marketing cloud", "copado",
    ),
    "marketing_digital": (
        "seo", "sem", "google ads", "social media", "content marketing",
        "email marketing", "google analytics", "growth hacking",
        "lead generation", "brand management", "performance marketing",
    ),
    "mobile_development": (
        "ios", "android", "swift", "kotlin", "react native", "flutter", "dart",
        "xamarin", "ionic", "firebase",
    ),
}

# Sentence markers that turn catalog skills into "preferred" skills
PREFERRED_MARKERS: tuple[str, ...] = (
    "preferred",
    "nice to have",
    "a plus",
    "is a plus",
    "bonus",
    "ideally",
    "desirable",
    "souhaité",
    "souhaitée",
    "apprécié",
    "appréciée",
    "un plus",
    "idéalement",
    "serait un atout",
    "atout",
)

# Compliance/regulatory skills boosted under the banking/insurance focus
COMPLIANCE_TERMS: frozenset[str] = frozenset(
    {
        "aml", "kyc", "basel", "mifid", "gdpr", "corep", "finrep", "srep",
        "ifrs", "compliance", "regulatory", "solvency ii", "solvabilité ii",
        "credit risk", "market risk", "operational risk", "liquidity risk",
        "stress testing", "capital adequacy", "audit",
    }
)

# Concept groups reported as conceptual matches when both texts cover them
BANKING_INSURANCE_CONCEPTS: dict[str, tuple[str, ...]] = {
    "risk_management": (
        "risque", "risk management", "contrôle des risques", "stress test",
        "bâle", "basel", "solvabilité", "credit risk", "market risk",
        "operational risk",
    ),
    "financial_control": (
        "contrôleur de gestion", "contrôle de gestion", "finance", "budget",
        "consolidation", "reporting financier", "analyse financière",
        "comptabilité",
    ),
    "data_analytics": (
        "data analyst", "business analyst", "data science", "analytics",
        "machine learning", "reporting", "kpi", "dashboard",
    ),
    "project_management": (
        "chef de projet", "project manager", "amoa", "scrum master", "agile",
        "gestion de projet", "coordination", "pilotage",
    ),
    "insurance_actuarial": (
        "actuaire", "actuariat", "tarification", "provisionnement",
        "solvency ii", "assurance vie", "iard", "souscription", "sinistre",
    ),
    "banking_operations": (
        "banque", "bancaire", "crédit", "front office", "back office",
        "conseiller clientèle", "compliance",
    ),
    "technology_fintech": (
        "fintech", "digital banking", "core banking", "api", "cloud",
        "cybersécurité",
    ),
}

# Keywords placing a candidate profile in a professional context
PROFILE_CONTEXT_KEYWORDS: dict[ProfileContext, tuple[str, ...]] = {
    ProfileContext.MANAGEMENT: (
        "manager", "directeur", "chef", "responsable", "head", "senior",
    ),
    ProfileContext.FINANCE: (
        "finance", "comptable", "contrôle", "audit", "budget", "analyste",
    ),
    ProfileContext.IT: (
        "développeur", "data", "senior", "lead", "tech", "informatique",
    ),
    ProfileContext.BANKING: (
        "banque", "crédit", "commercial", "conseiller", "compliance",
    ),
    ProfileContext.INSURANCE: (
        "assurance", "actuaire", "souscription", "sinistre",
    ),
}

# Seniority markers, checked in order; the first level with a hit wins
EXPERIENCE_LEVEL_MARKERS: tuple[tuple[ExperienceLevel, tuple[str, ...]], ...] = (
    (ExperienceLevel.SENIOR, ("senior", "expert", "lead")),
    (ExperienceLevel.JUNIOR, ("junior", "stagiaire", "débutant")),
    (ExperienceLevel.EXPERT, ("chief", "directeur", "head")),
)
