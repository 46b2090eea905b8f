"""Keyword-based task classification."""

from .errors import ValidationError

CATEGORY_KEYWORDS = {
    "work": ["meeting", "project", "client", "deadline", "report", "presentation", "email", "call", "review", "proposal"],
    "personal": ["doctor", "dentist", "gym", "shopping", "family", "friends", "birthday", "appointment", "home"],
    "learning": ["learn", "study", "course", "tutorial", "read", "book", "practice", "skill", "training"],
    "health": ["exercise", "workout", "meditation", "sleep", "diet", "health", "fitness", "run", "yoga"],
    "finance": ["budget", "payment", "bill", "tax", "invest", "savings", "expense", "bank", "money"],
}

TAG_PATTERNS = {
    "urgent": ["urgent", "asap", "immediately", "critical"],
    "meeting": ["meeting", "call", "discussion", "sync"],
    "review": ["review", "check", "approve", "feedback"],
    "creative": ["design", "create", "write", "develop"],
    "admin": ["schedule", "organize", "file", "update"],
    "research": ["research", "analyze", "study", "investigate"],
}

# Checked in order; first band with a hit wins.
DURATION_BANDS = [
    (15, ["email", "call", "reply", "quick", "check", "review briefly"]),
    (45, ["write", "prepare", "organize", "update", "create draft"]),
    (90, ["meeting", "presentation", "report", "analysis", "project"]),
    (120, ["complete", "finish", "develop", "implement", "design"]),
]
DEFAULT_DURATION = 30


def _text(title: str, description: str) -> str:
    return f"{title} {description}".lower()


def suggest_category(title: str, description: str = "") -> str:
    """Category with the most keyword hits; the first listed wins ties, `other` if none."""
    text = _text(title, description)
    best, best_hits = "other", 0
    for category, keywords in CATEGORY_KEYWORDS.items():
        hits = sum(1 for kw in keywords if kw in text)
        if hits > best_hits:
            best, best_hits = category, hits
    return best


def suggest_tags(title: str, description: str = "", limit: int = 3) -> list[str]:
    text = _text(title, description)
    tags = [tag for tag, patterns in TAG_PATTERNS.items() if any(p in text for p in patterns)]
    return tags[:limit]


def estimate_duration(title: str, description: str = "") -> int:
    text = _text(title, description)
    for minutes, patterns in DURATION_BANDS:
        if any(p in text for p in patterns):
            return minutes
    return DEFAULT_DURATION


def priority_for_estimate(minutes: int) -> str:
    if minutes > 60:
        return "high"
    if minutes > 30:
        return "medium"
    return "low"


def analyze_task(title: str, description: str = "") -> dict:
    minutes = estimate_duration(title, description)
    return {
        "suggestedCategory": suggest_category(title, description),
        "suggestedTags": suggest_tags(title, description),
        "estimatedTime": minutes,
        "priority": priority_for_estimate(minutes),
    }


def parse_task_fallback(text: str) -> dict:
    """Treat free text as a task title when no language model is available."""
    if text is None or len(text.strip()) < 3:
        raise ValidationError("Please provide a task description")
    text = text.strip()
    return {
        "title": text,
        "description": "",
        "priority": "medium",
        "category": suggest_category(text),
        "dueDate": None,
        "estimatedTime": DEFAULT_DURATION,
        "tags": suggest_tags(text),
    }
