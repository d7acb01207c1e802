"""
Tests for the visitor classification cascade.
"""
import pytest

from visits_app.schemas.visit import Classification, VisitorCategory
from visits_app.services.classifier import (
    RULES,
    classify,
    detect_bot_name,
    is_page_view,
    matching_rule,
)
from visits_app.services.signatures import BOT_PATTERNS, UNKNOWN_BOT

AXIOS_UA = "Mozilla/5.0 (X11; Linux x86_64) axios/1.0"


class TestCodingAgents:
    """Coding agents identified by user agent or fetch behaviour"""

    @pytest.mark.parametrize("user_agent, agent", [
        ("claude-code/1.0.33 (external, cli)", "claude-code"),
        ("ClaudeCode/2.0", "claude-code"),
        ("codex_cli_rs/0.1.0", "codex"),
        ("opencode/0.5.1", "opencode"),
        ("Mozilla/5.0 AppleWebKit/537.36; compatible; ChatGPT-User/1.0", "codex"),
    ])
    def test_signature_in_user_agent(self, user_agent, agent):
        """Test self-identifying coding agents"""
        result = classify(user_agent, "text/html", "example.com")

        assert result.category == VisitorCategory.CODING_AGENT
        assert result.agent == agent
        assert result.filtered is False

    @pytest.mark.parametrize("accept, host", [
        ("application/json", "example.com"),
        ("", "myapp.vercel.app"),
        ("text/markdown", "localhost:3000"),
    ])
    def test_signature_wins_over_accept_and_host(self, accept, host):
        """Test a coding agent signature beats every other rule"""
        # Also contains "curl" and "claude ... compatible"
        user_agent = "claude-code/1.0 (compatible; curl/8.0)"

        result = classify(user_agent, accept, host)

        assert result.category == VisitorCategory.CODING_AGENT
        assert result.agent == "claude-code"

    def test_claude_code_fetch(self):
        """Test axios asking for markdown without q= weights"""
        result = classify(AXIOS_UA, "text/markdown", "example.com")

        assert result == Classification(
            category=VisitorCategory.CODING_AGENT, agent="claude-code", filtered=False
        )

    def test_opencode_fetch(self):
        """Test weighted text/plain + text/markdown"""
        result = classify(AXIOS_UA, "text/plain;q=0.9,text/markdown;q=0.8", "example.com")

        assert result == Classification(
            category=VisitorCategory.CODING_AGENT, agent="opencode", filtered=False
        )

    def test_opencode_fetch_without_axios(self):
        """Test the OpenCode heuristic only looks at Accept"""
        result = classify("Mozilla/5.0", "text/plain;q=1.0, text/markdown;q=0.9", "example.com")

        assert result.agent == "opencode"

    def test_unknown_markdown_client(self):
        """Test markdown clients nobody recognises"""
        result = classify("Mozilla/5.0", "text/markdown, text/html;q=0.9", "example.com")

        assert result.category == VisitorCategory.CODING_AGENT
        assert result.agent == "unknown-coding-agent"
        assert result.filtered is False

    def test_markdown_client_beats_bot_catalog(self):
        """Test curl asking for markdown counts as a coding agent"""
        result = classify("curl/8.4.0", "text/markdown", "example.com")

        assert result.agent == "unknown-coding-agent"


class TestBrowsingAgents:
    """Browsing agents are recorded but filtered"""

    @pytest.mark.parametrize("user_agent", [
        "Claude/1.0",
        "Mozilla/5.0 (compatible; Claude-Web)",
    ])
    def test_claude_computer_use(self, user_agent):
        result = classify(user_agent, "text/html", "example.com")

        assert result == Classification(
            category=VisitorCategory.BROWSING_AGENT,
            agent="claude-computer-use",
            filtered=True,
        )

    def test_claude_without_compatible_is_not_browsing_agent(self):
        """Test "claude" alone is not enough"""
        result = classify("claude-desktop", "text/html", "example.com")

        assert result.category == VisitorCategory.HUMAN

    def test_perplexity_comet(self):
        result = classify("Mozilla/5.0 Perplexity-User/1.0", "text/html", "example.com")

        assert result == Classification(
            category=VisitorCategory.BROWSING_AGENT,
            agent="perplexity-comet",
            filtered=True,
        )

    def test_coding_heuristics_come_first(self):
        """Test weighted markdown Accept wins over the browsing agent rule"""
        result = classify("Claude/1.0", "text/plain;q=0.9,text/markdown", "example.com")

        assert result.agent == "opencode"


class TestBots:
    """Known crawler/monitoring/library signatures"""

    def test_googlebot(self):
        result = classify("Mozilla/5.0 (compatible; Googlebot/2.1)", "text/html", "example.com")

        assert result == Classification(
            category=VisitorCategory.BOT, agent="googlebot", filtered=True
        )

    @pytest.mark.parametrize("user_agent, agent", [
        ("python-requests/2.31.0", "python-requests"),
        ("Wget/1.21", "wget"),
        ("UptimeRobot/2.0", "uptimerobot"),
        ("Java/17.0.2", "java/"),
        ("axios/1.6.0", "axios"),
    ])
    def test_library_and_monitor_names(self, user_agent, agent):
        result = classify(user_agent, "text/html", "example.com")

        assert result.category == VisitorCategory.BOT
        assert result.agent == agent

    def test_catalog_order_breaks_ties(self):
        """Test the earliest catalog entry labels a UA matching several"""
        result = classify("Mozilla/5.0 (compatible; bingbot/2.0) curl", "text/html", "example.com")

        assert result.agent == "bingbot"

    def test_bot_on_preview_host_stays_bot(self):
        result = classify("curl/8.0", "text/html", "myapp.vercel.app")

        assert result.category == VisitorCategory.BOT

    def test_detect_bot_name_is_case_insensitive(self):
        assert detect_bot_name("Mozilla/5.0 (compatible; YandexBot/3.0)") == "yandexbot"

    def test_detect_bot_name_fallback(self):
        assert detect_bot_name("Mozilla/5.0 Firefox/128.0") == UNKNOWN_BOT

    def test_every_catalog_entry_labels_itself(self):
        """Test membership and label lookup scan the same catalog"""
        for pattern in BOT_PATTERNS:
            label = detect_bot_name(f"xx {pattern.upper()} xx")
            assert label in BOT_PATTERNS
            assert BOT_PATTERNS.index(label) <= BOT_PATTERNS.index(pattern)


class TestHumans:
    """Browsers on real and preview hosts"""

    def test_real_visit(self):
        result = classify("Mozilla/5.0", "text/html", "example.com")

        assert result == Classification(
            category=VisitorCategory.HUMAN, agent="browser", filtered=False
        )

    @pytest.mark.parametrize("host", [
        "myapp.vercel.app",
        "deploy-preview-42--docs.netlify.app",
        "docs.pages.dev",
        "localhost:3000",
        "127.0.0.1:8787",
        "MyApp.Vercel.App",
    ])
    def test_preview_hosts_are_filtered(self, host):
        result = classify("Mozilla/5.0", "text/html", host)

        assert result == Classification(
            category=VisitorCategory.HUMAN, agent="browser", filtered=True
        )

    def test_empty_inputs_fall_through_to_default(self):
        result = classify("", "", "")

        assert result == Classification(
            category=VisitorCategory.HUMAN, agent="browser", filtered=False
        )

    def test_none_inputs_are_tolerated(self):
        result = classify(None, None, None)

        assert result.category == VisitorCategory.HUMAN
        assert result.filtered is False


class TestCascade:
    """Rule ordering and purity"""

    def test_rule_order(self):
        assert [rule.name for rule in RULES] == [
            "coding-agent-signature",
            "claude-code-fetch",
            "opencode-fetch",
            "claude-browsing-agent",
            "perplexity-browsing-agent",
            "markdown-client",
            "known-bot",
            "preview-host",
        ]

    @pytest.mark.parametrize("user_agent, accept, host, rule", [
        ("opencode/1.0", "text/html", "example.com", "coding-agent-signature"),
        (AXIOS_UA, "text/markdown", "example.com", "claude-code-fetch"),
        (AXIOS_UA, "text/plain;q=0.9,text/markdown;q=0.8", "example.com", "opencode-fetch"),
        ("Claude/1.0", "text/html", "example.com", "claude-browsing-agent"),
        ("Perplexity-User/1.0", "text/html", "example.com", "perplexity-browsing-agent"),
        ("Mozilla/5.0", "text/markdown", "example.com", "markdown-client"),
        ("Googlebot/2.1", "text/html", "example.com", "known-bot"),
        ("Mozilla/5.0", "text/html", "localhost", "preview-host"),
        ("Mozilla/5.0", "text/html", "example.com", "default"),
    ])
    def test_matching_rule(self, user_agent, accept, host, rule):
        assert matching_rule(user_agent, accept, host) == rule

    def test_classify_is_pure(self):
        args = (AXIOS_UA, "text/markdown", "example.com")

        first = classify(*args)
        classify("Googlebot", "text/html", "localhost")
        second = classify(*args)

        assert first == second

    def test_classification_is_immutable(self):
        result = classify("Mozilla/5.0", "text/html", "example.com")

        with pytest.raises(Exception):
            result.filtered = True


class TestIsPageView:
    """Page view gate on the Accept header"""

    @pytest.mark.parametrize("accept", [
        "text/html",
        "TEXT/HTML,application/xhtml+xml",
        "text/markdown",
        "text/plain",
        "text/plain;q=0.9,text/markdown;q=0.8",
    ])
    def test_page_view_types(self, accept):
        assert is_page_view(accept) is True

    @pytest.mark.parametrize("accept", [
        "",
        "application/json",
        "*/*",
        "image/webp,image/*",
        "text/css",
    ])
    def test_not_page_views(self, accept):
        assert is_page_view(accept) is False

    def test_none_is_not_page_view(self):
        assert is_page_view(None) is False
