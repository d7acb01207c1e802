"""
Visitor classification.

Turns (user agent, Accept header, host) into a Classification by walking an
ordered list of rules. The first rule whose predicate matches decides the
outcome, so precedence lives in RULES rather than in nested if/else.

Everything here is pure: no I/O, no state between calls.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from visits_app.schemas.visit import Classification, VisitorCategory
from visits_app.services.signatures import (
    BOT_PATTERNS,
    CLAUDE_CODE_FETCH_CLIENT,
    CODING_AGENT_SIGNATURES,
    PAGE_VIEW_CONTENT_TYPES,
    PREVIEW_HOST_PATTERNS,
    UNKNOWN_BOT,
)


@dataclass(frozen=True)
class ClassificationInput:
    """Lower-cased request attributes the rules look at"""

    user_agent: str
    accept: str
    host: str

    @classmethod
    def from_request(
        cls,
        user_agent: Optional[str],
        accept_header: Optional[str],
        host: Optional[str],
    ) -> "ClassificationInput":
        return cls(
            user_agent=(user_agent or "").lower(),
            accept=(accept_header or "").lower(),
            host=(host or "").lower(),
        )

    @property
    def wants_markdown(self) -> bool:
        return "text/markdown" in self.accept

    @property
    def wants_plain_text(self) -> bool:
        return "text/plain" in self.accept

    @property
    def has_quality_weights(self) -> bool:
        return "q=" in self.accept


@dataclass(frozen=True)
class Rule:
    """One step of the cascade: a predicate and the decision it produces"""

    name: str
    matches: Callable[[ClassificationInput], bool]
    outcome: Callable[[ClassificationInput], Classification]


def detect_bot_name(user_agent: str) -> str:
    """
    Return the first BOT_PATTERNS entry contained in the user agent.

    Falls back to "unknown-bot". The bot rule only fires when some entry
    matches, so the fallback is not expected in practice.
    """
    ua = user_agent.lower()
    for pattern in BOT_PATTERNS:
        if pattern in ua:
            return pattern
    return UNKNOWN_BOT


def is_page_view(accept_header: Optional[str]) -> bool:
    """True if the Accept header asks for HTML, markdown or plain text"""
    accept = (accept_header or "").lower()
    return any(content_type in accept for content_type in PAGE_VIEW_CONTENT_TYPES)


def _decision(category: VisitorCategory, agent: str, filtered: bool):
    decision = Classification(category=category, agent=agent, filtered=filtered)
    return lambda request: decision


def _coding_agent_label(request: ClassificationInput) -> Optional[str]:
    for signature, agent in CODING_AGENT_SIGNATURES:
        if signature in request.user_agent:
            return agent
    return None


def _is_claude_code_fetch(request: ClassificationInput) -> bool:
    # axios asking for markdown without weighted media ranges
    return (
        CLAUDE_CODE_FETCH_CLIENT in request.user_agent
        and request.wants_markdown
        and not request.has_quality_weights
    )


def _is_opencode_fetch(request: ClassificationInput) -> bool:
    # weighted text/plain + text/markdown
    return (
        request.wants_plain_text
        and request.wants_markdown
        and request.has_quality_weights
    )


def _is_claude_browsing(request: ClassificationInput) -> bool:
    ua = request.user_agent
    return "claude/1.0" in ua or ("claude" in ua and "compatible" in ua)


def _is_known_bot(request: ClassificationInput) -> bool:
    return any(pattern in request.user_agent for pattern in BOT_PATTERNS)


def _is_preview_host(request: ClassificationInput) -> bool:
    return any(pattern in request.host for pattern in PREVIEW_HOST_PATTERNS)


RULES: Tuple[Rule, ...] = (
    Rule(
        name="coding-agent-signature",
        matches=lambda request: _coding_agent_label(request) is not None,
        outcome=lambda request: Classification(
            category=VisitorCategory.CODING_AGENT,
            agent=_coding_agent_label(request),
            filtered=False,
        ),
    ),
    Rule(
        name="claude-code-fetch",
        matches=_is_claude_code_fetch,
        outcome=_decision(VisitorCategory.CODING_AGENT, "claude-code", False),
    ),
    Rule(
        name="opencode-fetch",
        matches=_is_opencode_fetch,
        outcome=_decision(VisitorCategory.CODING_AGENT, "opencode", False),
    ),
    Rule(
        name="claude-browsing-agent",
        matches=_is_claude_browsing,
        outcome=_decision(VisitorCategory.BROWSING_AGENT, "claude-computer-use", True),
    ),
    Rule(
        name="perplexity-browsing-agent",
        matches=lambda request: "perplexity-user" in request.user_agent,
        outcome=_decision(VisitorCategory.BROWSING_AGENT, "perplexity-comet", True),
    ),
    Rule(
        name="markdown-client",
        matches=lambda request: request.wants_markdown,
        outcome=_decision(VisitorCategory.CODING_AGENT, "unknown-coding-agent", False),
    ),
    Rule(
        name="known-bot",
        matches=_is_known_bot,
        outcome=lambda request: Classification(
            category=VisitorCategory.BOT,
            agent=detect_bot_name(request.user_agent),
            filtered=True,
        ),
    ),
    Rule(
        name="preview-host",
        matches=_is_preview_host,
        outcome=_decision(VisitorCategory.HUMAN, "browser", True),
    ),
)

DEFAULT_RULE = Rule(
    name="default",
    matches=lambda request: True,
    outcome=_decision(VisitorCategory.HUMAN, "browser", False),
)


def _first_match(request: ClassificationInput) -> Rule:
    for rule in RULES:
        if rule.matches(request):
            return rule
    return DEFAULT_RULE


def matching_rule(
    user_agent: Optional[str],
    accept_header: Optional[str],
    host: Optional[str],
) -> str:
    """Name of the rule that decides the classification for these inputs"""
    request = ClassificationInput.from_request(user_agent, accept_header, host)
    return _first_match(request).name


def classify(
    user_agent: Optional[str],
    accept_header: Optional[str],
    host: Optional[str],
) -> Classification:
    """
    Classify a request into bot / browsing-agent / coding-agent / human.

    Never fails: empty or unknown inputs end at the default human/browser
    decision.

    Examples:
        >>> classify("Mozilla/5.0 (compatible; Googlebot/2.1)", "text/html", "example.com").agent
        'googlebot'
        >>> classify("Mozilla/5.0", "text/html", "myapp.vercel.app").filtered
        True
    """
    request = ClassificationInput.from_request(user_agent, accept_header, host)
    return _first_match(request).outcome(request)
