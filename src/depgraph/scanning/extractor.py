"""Line-level import/export extraction.

Each line is tested against the language's import rules and, separately,
its export rules; within each table the first matching rule wins. This is
string-shape matching, not parsing: statements split across lines are
only seen through whichever single line happens to match (usually none).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..logging_config import get_logger
from .languages import Grammar, get_grammar
from .models import ExportRecord, ImportRecord

logger = get_logger(__name__)


@dataclass
class ExtractionResult:
    """Records extracted from one file, in line order."""

    imports: list[ImportRecord] = field(default_factory=list)
    exports: list[ExportRecord] = field(default_factory=list)


class ImportExportExtractor:
    """Dispatches to a per-language Grammar keyed by language tag."""

    def extract(self, content: str, language: str) -> ExtractionResult:
        """Extract imports and exports from file content.

        Unknown languages and unmatched lines yield nothing; this never raises
        on odd input.
        """
        result = ExtractionResult()
        grammar = get_grammar(language)
        if grammar is None:
            return result

        for line_number, line in enumerate(content.splitlines(), start=1):
            if not line.strip() or self._is_comment(line, grammar):
                continue
            result.imports.extend(self._first_match(grammar.import_rules, line, line_number))
            result.exports.extend(self._first_match(grammar.export_rules, line, line_number))

        logger.debug(
            f"Extracted {len(result.imports)} imports, {len(result.exports)} exports ({language})"
        )
        return result

    @staticmethod
    def _is_comment(line: str, grammar: Grammar) -> bool:
        stripped = line.lstrip()
        return any(stripped.startswith(prefix) for prefix in grammar.comment_prefixes)

    @staticmethod
    def _first_match(rules, line: str, line_number: int) -> list:
        for rule in rules:
            match = rule.pattern.match(line)
            if match:
                return rule.build(match, line_number)
        return []
