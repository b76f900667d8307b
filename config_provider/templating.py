"""
Coordinate templates.

Namespace, repository, branch and path are each rendered from a small Jinja2
template against the triggering event. Unknown fields raise instead of
rendering empty text.
"""

import logging
import re
from typing import Any, Dict

import jinja2
from jinja2.sandbox import SandboxedEnvironment

from config_provider.errors import TemplateError
from config_provider.models import EventContext, ResolvedCoordinates

logger = logging.getLogger(__name__)

# Go-template field names used by existing Drone/Woodpecker deployments
LEGACY_FIELDS = {
    "Repo": {
        "Name": "repo.name",
        "Owner": "repo.owner",
        "Namespace": "repo.namespace",
        "FullName": "repo.full_name",
        "CloneURL": "repo.clone_url",
        "Branch": "repo.default_branch",
    },
    "Pipeline": {
        "Branch": "pipeline.branch",
        "Commit": "pipeline.commit",
        "Ref": "pipeline.ref",
    },
}

_EXPRESSION = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)
_LEGACY_REFERENCE = re.compile(r"(?<![\w.])\.(Repo|Pipeline)\.([A-Za-z]+)\b")


def _translate_reference(match: re.Match) -> str:
    section, field_name = match.group(1), match.group(2)
    # Unknown names stay as-is and fail to parse
    return LEGACY_FIELDS[section].get(field_name, match.group(0))


def translate_legacy(template: str) -> str:
    """Rewrite ``{{ .Repo.Owner }}``-style references to Jinja syntax."""
    def _translate_expression(match: re.Match) -> str:
        return "{{" + _LEGACY_REFERENCE.sub(_translate_reference, match.group(1)) + "}}"

    return _EXPRESSION.sub(_translate_expression, template)


class TemplateResolver:
    def __init__(self):
        self.env = SandboxedEnvironment(
            undefined=jinja2.StrictUndefined,
            autoescape=False,
            keep_trailing_newline=True,
        )

    def render(self, template: str, context: Dict[str, Any]) -> str:
        try:
            compiled = self.env.from_string(translate_legacy(template))
            result = compiled.render(context)
        except jinja2.TemplateError as e:
            raise TemplateError(template, str(e)) from e
        except Exception as e:
            # Evaluation errors such as {{ 1 // 0 }}
            raise TemplateError(template, f"{type(e).__name__}: {e}") from e
        logger.debug(f"Template: {template} => {result}")
        return result

    def resolve(self, settings, event: EventContext) -> ResolvedCoordinates:
        """Render all four coordinate templates; the first failure aborts."""
        data = event.template_data()
        slots = (
            ("namespace", settings.namespace_template),
            ("repo", settings.repo_name_template),
            ("branch", settings.branch_template),
            ("path", settings.path_template),
        )
        values = {}
        for slot, template in slots:
            try:
                values[slot] = self.render(template, data)
            except TemplateError as e:
                logger.error(f"Failed to render {slot} template: {e}")
                raise
        return ResolvedCoordinates(**values)
