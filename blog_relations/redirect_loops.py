"""
Redirect loop detection.

Rules form a graph whose nodes are normalized paths and whose edges are
active redirects. A proposed rule loops if walking from its target ever
comes back to a path already seen on the way.
"""
import logging
from dataclasses import dataclass
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)


def clean_path(path):
    """
    Collapse leading/trailing slashes into the canonical stored form.

    Case is preserved. Empty input becomes "/".
    """
    return "/" + (path or "").strip("/")


def normalize_path(path):
    """Return the comparison form of a path: cleaned and lowercased."""
    return clean_path(path).lower()


def clean_target(url):
    """
    Clean a redirect target.

    Site paths get the same treatment as sources ("landing/" -> "/landing").
    Absolute and protocol-relative URLs are returned untouched.
    """
    url = (url or "").strip()
    if urlsplit(url).scheme or url.startswith("//"):
        return url
    return clean_path(url)


@dataclass(frozen=True)
class RewriteRule:
    source_path: str
    target_path: str
    is_active: bool = True
    id: object = None


def build_rule_map(rules, exclude_id=None):
    """
    Build a ``{source: target}`` map of normalized paths.

    Inactive rules and the rule with ``exclude_id`` are skipped. The first
    rule seen for a given source wins.
    """
    rule_map = {}
    for rule in rules:
        if not rule.is_active:
            continue
        if exclude_id is not None and rule.id == exclude_id:
            continue
        rule_map.setdefault(normalize_path(rule.source_path), normalize_path(rule.target_path))
    return rule_map


def would_create_loop(candidate, active_rules):
    """
    Check whether adding ``candidate`` would create a redirect loop.

    Catches direct self-redirects (/a -> /a) as well as cycles through any
    number of existing rules (/a -> /b -> /c -> /a). The walk is capped at
    one step per rule plus one; running into the cap counts as a loop.
    """
    source = normalize_path(candidate.source_path)
    target = normalize_path(candidate.target_path)

    if source == target:
        return True

    active_rules = list(active_rules)
    rule_map = build_rule_map(active_rules, exclude_id=candidate.id)

    visited = {source}
    current = target
    for _ in range(len(active_rules) + 1):
        next_path = rule_map.get(current)
        if next_path is None:
            return False
        if next_path in visited:
            return True
        visited.add(current)
        current = next_path

    logger.warning(
        "Redirect chain from %s exceeded %d steps, treating as a loop",
        source,
        len(active_rules) + 1,
    )
    return True
