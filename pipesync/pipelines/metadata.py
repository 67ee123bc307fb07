"""Matchers directive: the single metadata line embedded in a pipeline document.

A directive is a line comment of the form::

    // matchers: team=infra env=prod

``matcher`` is accepted as well as ``matchers`` and the colon is optional.
The directive is carried as metadata, so it is stripped from the body that
gets synced and written back in front of the body on export.
"""

from __future__ import annotations

import re

from pipesync.errors import MultipleDirectivesError

DIRECTIVE_PREFIX = "// matchers:"

# The line break ending the directive is part of the match so that removing it
# leaves no blank line behind.
DIRECTIVE_RE = re.compile(r"^[ \t]*//[ \t]*matchers?:?[ \t]+(.*)$\n?", re.MULTILINE)


def find_directives(document: str) -> list[str]:
    """Return the raw token string of every directive line in a document."""
    return DIRECTIVE_RE.findall(document)


def extract(document: str, source: str = "<string>") -> tuple[list[str], str]:
    """Split a document into its matchers and its body.

    Raises:
        MultipleDirectivesError: The document has more than one directive line.
    """
    found = find_directives(document)
    if len(found) > 1:
        raise MultipleDirectivesError(source, len(found))
    if not found:
        return [], document

    matchers = found[0].split()
    body = DIRECTIVE_RE.sub("", document)
    return matchers, body


def inject(matchers: list[str], body: str) -> str:
    """Prepend a directive line for ``matchers`` to ``body``."""
    if not matchers:
        return body
    return " ".join([DIRECTIVE_PREFIX, *matchers]) + "\n" + body
