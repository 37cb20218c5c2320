"""
Field-name heuristics.

Detects field roles from names alone: relationship links, identifiers,
grouping categories, word-cloud text and weights, part-to-whole values and
categories. Name matching is fuzzy by nature, so every name check used by the
type inferrer, the recommendation engine and the synthesizer lives here and
nowhere else.
"""

import re
from typing import Dict, List, Optional, Sequence


class FieldNameClassifier:
    """
    Match field names against role patterns.

    Patterns are case-insensitive regular expressions searched anywhere in
    the name unless anchored. Order inside a role does not matter; the first
    field (in column order) matching a role wins in find_field().

    Example:
        >>> FieldNameClassifier.matches('parent_id', 'relationship')
        True
        >>> FieldNameClassifier.find_field(['word', 'freq_count'], 'weight')
        'freq_count'
    """

    PATTERNS: Dict[str, List[str]] = {
        # Edges and hierarchy links between records
        'relationship': [r'(?i)parent', r'(?i)source', r'(?i)target'],
        # Graph edges only
        'link': [r'(?i)source', r'(?i)target'],
        # Row identifiers
        'identifier': [
            r'(?i)^(id|.*[_\s-]id)$',
            r'^.*[a-z]Id$',  # camelCase, case sensitive so 'paid' does not match
            r'(?i)^(uid|uuid|guid)$',
            r'(?i)^(key|.*_key)$',
            r'(?i)^(pk|primary_key|index|row|row_?num(ber)?)$',
        ],
        # Categories that group records
        'grouping': [r'(?i)category', r'(?i)type', r'(?i)group'],
        # Word-cloud text
        'text': [r'(?i)text', r'(?i)word', r'(?i)term'],
        # Display labels
        'label': [r'(?i)label'],
        # Word-cloud weight
        'weight': [r'(?i)value', r'(?i)count', r'(?i)size', r'(?i)weight'],
        # Part-to-whole angle (theta) value
        'value': [r'(?i)value', r'(?i)count', r'(?i)size', r'(?i)amount'],
        # Part-to-whole colour category
        'category': [r'(?i)category', r'(?i)name', r'(?i)type', r'(?i)group'],
    }

    _compiled: Dict[str, List[re.Pattern]] = {}

    @classmethod
    def _patterns_for(cls, role: str) -> List[re.Pattern]:
        if role not in cls.PATTERNS:
            raise KeyError(f"Unknown field role: {role}")
        if role not in cls._compiled:
            cls._compiled[role] = [re.compile(pattern) for pattern in cls.PATTERNS[role]]
        return cls._compiled[role]

    @classmethod
    def matches(cls, field_name: str, role: str) -> bool:
        """Check whether a field name suggests the given role."""
        return any(regex.search(field_name) for regex in cls._patterns_for(role))

    @classmethod
    def find_field(
        cls,
        field_names: Sequence[str],
        role: str,
        exclude: Sequence[str] = (),
    ) -> Optional[str]:
        """Return the first field whose name suggests the role, or None."""
        for name in field_names:
            if name in exclude:
                continue
            if cls.matches(name, role):
                return name
        return None


def is_relationship_name(field_name: str) -> bool:
    """Names containing parent/source/target describe links between records."""
    return FieldNameClassifier.matches(field_name, 'relationship')


def is_link_name(field_name: str) -> bool:
    """Names containing source/target describe graph edges."""
    return FieldNameClassifier.matches(field_name, 'link')


def is_text_name(field_name: str) -> bool:
    """Names suggesting free text or display labels."""
    return FieldNameClassifier.matches(field_name, 'text') or FieldNameClassifier.matches(field_name, 'label')


def is_identifier_name(field_name: str) -> bool:
    return FieldNameClassifier.matches(field_name, 'identifier')


def is_grouping_name(field_name: str) -> bool:
    """Names containing category/type/group describe record groupings."""
    return FieldNameClassifier.matches(field_name, 'grouping')


def find_text_field(field_names: Sequence[str]) -> Optional[str]:
    """Word-cloud text field: name contains text/word/term, else the first column."""
    found = FieldNameClassifier.find_field(field_names, 'text')
    if found is not None:
        return found
    return field_names[0] if field_names else None


def find_weight_field(field_names: Sequence[str]) -> Optional[str]:
    """Word-cloud weight field: name contains value/count/size/weight, else the second column."""
    found = FieldNameClassifier.find_field(field_names, 'weight')
    if found is not None:
        return found
    return _second_or_first(field_names)


def find_value_field(field_names: Sequence[str]) -> Optional[str]:
    """Radial theta field: name contains value/count/size/amount, else the second column."""
    found = FieldNameClassifier.find_field(field_names, 'value')
    if found is not None:
        return found
    return _second_or_first(field_names)


def find_category_field(field_names: Sequence[str]) -> Optional[str]:
    """Radial colour field: name contains category/name/type/group, else the first column."""
    found = FieldNameClassifier.find_field(field_names, 'category')
    if found is not None:
        return found
    return field_names[0] if field_names else None


def find_identifier_field(field_names: Sequence[str]) -> Optional[str]:
    """Identifier-like field for tracing folded rows, else the first column."""
    found = FieldNameClassifier.find_field(field_names, 'identifier')
    if found is not None:
        return found
    return field_names[0] if field_names else None


def humanize_field_name(field_name: str) -> str:
    """
    Turn a field name into a display title.

    'unit_price' -> 'Unit Price', 'orderDate' -> 'Order Date'
    """
    spaced = re.sub(r'([a-z0-9])([A-Z])', r'\1 \2', field_name)
    spaced = re.sub(r'[_\-.]+', ' ', spaced).strip()
    if not spaced:
        return field_name
    return ' '.join(word if word.isupper() else word.capitalize() for word in spaced.split())


def _second_or_first(field_names: Sequence[str]) -> Optional[str]:
    if not field_names:
        return None
    return field_names[1] if len(field_names) > 1 else field_names[0]
