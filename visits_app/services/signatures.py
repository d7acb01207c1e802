"""
Signature catalogs used by the visitor classifier.

All entries are lower case and matched as substrings. Catalogs are read-only
and loaded once at import time. Order matters in BOT_PATTERNS: the first
entry contained in a user agent becomes the bot's agent label.
"""

from typing import Tuple


# (user-agent substring, agent label) for coding agents that identify themselves
CODING_AGENT_SIGNATURES: Tuple[Tuple[str, str], ...] = (
    ("claude-code", "claude-code"),
    ("claudecode", "claude-code"),
    ("codex", "codex"),
    ("opencode", "opencode"),
    ("chatgpt-user", "codex"),
)

# HTTP client used by Claude Code's web fetch tool
CLAUDE_CODE_FETCH_CLIENT = "axios"

BOT_PATTERNS: Tuple[str, ...] = (
    # Search engines
    "googlebot", "bingbot", "yandexbot", "baiduspider", "duckduckbot", "slurp",
    # Social previews
    "facebookexternalhit", "linkedinbot", "twitterbot",
    # SEO and AI crawlers
    "applebot", "semrushbot", "ahrefsbot", "mj12bot", "dotbot", "petalbot", "bytespider",
    "gptbot", "claudebot", "anthropic-ai", "ccbot", "cohere-ai", "perplexitybot",
    # Uptime monitoring
    "pingdom", "uptimerobot", "statuscake", "site24x7", "newrelic", "datadog", "checkly", "freshping",
    "vercel-healthcheck", "vercel-edge-functions",
    # HTTP libraries and CLIs
    "wget", "curl", "httpie", "python-requests", "go-http-client",
    "scrapy", "httpclient", "java/", "okhttp", "axios", "node-fetch", "undici",
)

UNKNOWN_BOT = "unknown-bot"

# Preview deploys and local development
PREVIEW_HOST_PATTERNS: Tuple[str, ...] = (
    ".vercel.app",
    ".netlify.app",
    ".pages.dev",
    "localhost",
    "127.0.0.1",
)

PAGE_VIEW_CONTENT_TYPES: Tuple[str, ...] = (
    "text/html",
    "text/markdown",
    "text/plain",
)
