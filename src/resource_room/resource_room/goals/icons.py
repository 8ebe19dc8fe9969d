from __future__ import annotations

from ..core.constants import FALLBACK_ICON, GROUP_ICONS
from ..core.enums import SubjectGroup


def default_icon(group: object) -> str:
    """Icon for a subject group; unknown groups get the generic book."""
    parsed = SubjectGroup.parse(group)
    if parsed is None:
        return FALLBACK_ICON
    return GROUP_ICONS.get(parsed, FALLBACK_ICON)
