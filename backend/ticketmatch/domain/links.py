from __future__ import annotations

import re
import unicodedata
from typing import Dict, Mapping, Optional

from .models import Source

BROWSE_URL_TEMPLATES: Mapping[str, str] = {
    Source.GETURTIX.value: "https://www.geturtix.com/performer/{slug}",
    Source.TN.value: "https://www.ticketnetwork.com/performer/{slug}-tickets",
    Source.TL.value: "https://www.ticketliquidator.com/performers/{slug}-tickets",
    Source.SBS.value: "https://www.stubsbysea.com/tickets/{slug}",
}

_NON_SLUG = re.compile(r"[^a-z0-9]+")


def slugify(name: Optional[str]) -> str:
    if not name:
        return ""
    text = unicodedata.normalize("NFKD", name)
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = text.replace("&", " and ").replace("'", "").replace("’", "").lower()
    return _NON_SLUG.sub("-", text).strip("-")


def browse_links(
    name: Optional[str],
    templates: Mapping[str, str] = BROWSE_URL_TEMPLATES,
) -> Dict[str, str]:
    slug = slugify(name)
    if not slug:
        return {}
    return {source: template.format(slug=slug) for source, template in templates.items()}
