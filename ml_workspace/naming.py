# ============================================================
# RESOURCE NAMING
# ============================================================
import re

from .models import ResourceKind

STORAGE_PATTERN = re.compile(r"[^a-z0-9]")
HYPHENATED_PATTERN = re.compile(r"[^a-z0-9-]")

# kind -> (disallowed characters, suffix, max length)
NAME_RULES = {
    ResourceKind.STORAGE: (STORAGE_PATTERN, "storage", 24),
    ResourceKind.KEYVAULT: (HYPHENATED_PATTERN, "-kv", 24),
    ResourceKind.APPINSIGHTS: (HYPHENATED_PATTERN, "-insights", 255),
}


def derive_name(workspace_name: str, kind: ResourceKind | str) -> str:
    """
    Derive the name of a dependent resource from the workspace name.

    The result is lowercase, limited to the kind's charset and truncated by
    keeping a prefix, so the same workspace name always maps to the same
    resource. Distinct workspace names sharing a long prefix may collide.
    """
    if not workspace_name:
        raise ValueError("workspace_name must be a non-empty string")

    pattern, suffix, max_length = NAME_RULES[ResourceKind(kind)]
    cleaned = pattern.sub("", f"{workspace_name}{suffix}".lower())
    if "-" in suffix:
        # vault and insights names may not start or end with, or repeat, hyphens
        cleaned = re.sub(r"-{2,}", "-", cleaned).lstrip("-")
        return cleaned[:max_length].rstrip("-")
    return cleaned[:max_length]


def derive_names(workspace_name: str) -> dict[ResourceKind, str]:
    return {kind: derive_name(workspace_name, kind) for kind in NAME_RULES}
