"""Map applications to usage categories."""

from __future__ import annotations

from dataclasses import dataclass

UNCATEGORIZED = "Uncategorized"


@dataclass(frozen=True, slots=True)
class CategoryRule:
    label: str
    bundle_ids: frozenset[str]
    app_names: frozenset[str]


def _rule(label: str, bundle_ids: tuple[str, ...], app_names: tuple[str, ...]) -> CategoryRule:
    return CategoryRule(label, frozenset(bundle_ids), frozenset(app_names))


# Evaluated top to bottom. Windows executables reported by the Windows probe
# stand in for bundle identifiers.
CATEGORY_RULES: tuple[CategoryRule, ...] = (
    _rule(
        "Browser",
        (
            "com.google.Chrome",
            "com.google.Chrome.canary",
            "com.apple.Safari",
            "com.brave.Browser",
            "com.microsoft.edgemac",
            "chrome.exe",
            "brave.exe",
            "msedge.exe",
        ),
        ("Google Chrome", "Google Chrome Canary", "Safari", "Brave Browser", "Microsoft Edge"),
    ),
    _rule(
        "Terminal",
        (
            "com.apple.Terminal",
            "com.googlecode.iterm2",
            "com.apple.iTerm2",
            "WindowsTerminal.exe",
        ),
        ("Terminal", "iTerm2"),
    ),
    _rule(
        "Email",
        ("com.apple.mail", "com.microsoft.Outlook", "OUTLOOK.EXE", "olk.exe"),
        ("Mail", "Microsoft Outlook"),
    ),
    _rule(
        "Communication",
        (
            "com.tinyspeck.slackmacgap",
            "com.apple.Slack",
            "com.microsoft.teams",
            "com.microsoft.teams2",
            "slack.exe",
            "ms-teams.exe",
            "Teams.exe",
        ),
        ("Slack", "Microsoft Teams"),
    ),
    _rule(
        "Productivity",
        ("com.apple.Notes", "com.apple.TextEdit", "notepad.exe"),
        ("Notes", "TextEdit"),
    ),
)

BROWSER_BUNDLE_IDS: frozenset[str] = CATEGORY_RULES[0].bundle_ids


def categorize(app_name: str, bundle_id: str) -> str:
    """Return the category label for an application.

    Bundle identifiers are matched against every rule before any app name is
    considered, so an app reporting a known bundle id is categorized by it
    even if its display name belongs to another rule. Unknown or empty
    identities fall back to ``Uncategorized``.
    """
    if bundle_id:
        for rule in CATEGORY_RULES:
            if bundle_id in rule.bundle_ids:
                return rule.label
    if app_name:
        for rule in CATEGORY_RULES:
            if app_name in rule.app_names:
                return rule.label
    return UNCATEGORIZED
