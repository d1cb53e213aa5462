"""
Prompt template filling.

Category prompts are authored with ``{{placeholder}}`` markers. Every
occurrence of a known placeholder is replaced; unknown markers are left
untouched so authoring mistakes stay visible in the generated output.

Dependencies: json (stdlib)
System role: Builds the user message sent to the report writer
"""

import json
import re
from typing import Any, Mapping, Sequence

PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*([a-zA-Z_][a-zA-Z0-9_]*)\s*\}\}")


def fill_template(template: str, values: Mapping[str, str]) -> str:
    """
    Replace every ``{{name}}`` marker whose name is in ``values``.

    Args:
        template: Prompt template text
        values: Placeholder name -> replacement text

    Returns:
        str: Filled prompt
    """

    def _substitute(match: re.Match) -> str:
        name = match.group(1)
        if name in values:
            return values[name]
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(_substitute, template)


def build_report_prompt(
    template: str,
    archetype_key: str,
    archetype_name: str,
    answers: Sequence[Any],
) -> str:
    """
    Fill a category prompt with an attempt's archetype and answers.

    Args:
        template: Category prompt template for the job's product
        archetype_key: Scored archetype key
        archetype_name: Display name of the archetype
        answers: Stored answer list

    Returns:
        str: Prompt ready for the report writer
    """
    return fill_template(
        template,
        {
            "archetype_name": archetype_name,
            "archetype_key": archetype_key,
            "answers_json": json.dumps(list(answers), ensure_ascii=False),
        },
    )
