from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

"""Named-placeholder formatting for user-editable message templates.

Tokens look like ``{count}``. Substitution is a single pass over the template,
so tokens sharing a prefix cannot clobber each other and substituted values are
never re-scanned. Unknown tokens and stray braces are left as written.
"""

__all__ = [
    "render_template",
]

_TOKEN = re.compile(r"\{(\w+)\}")


def render_template(template: str, values: Mapping[str, Any]) -> str:
    def _sub(match: re.Match[str]) -> str:
        key = match.group(1)
        if key in values:
            return str(values[key])
        return match.group(0)

    return _TOKEN.sub(_sub, template)
