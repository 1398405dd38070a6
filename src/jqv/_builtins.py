"""Catalog of jq builtins, operators and patterns offered by autocomplete."""

from __future__ import annotations

from functools import cache

from jqv._suggestion import Suggestion, SuggestionType

_P = SuggestionType.PATTERN
_O = SuggestionType.OPERATOR
_F = SuggestionType.FUNCTION

# (text, kind, description), grouped by category; order is display order
_CATALOG: tuple[tuple[str, SuggestionType, str], ...] = (
    # patterns
    (".[]", _P, "Iterate over array/object values"),
    (".[0]", _P, "First array element"),
    (".[-1]", _P, "Last array element"),
    ("..", _P, "Recursive descent (all values)"),
    # operators
    ("|", _O, "Pipe operator"),
    ("//", _O, "Alternative operator (default value)"),
    ("and", _O, "Logical AND"),
    ("or", _O, "Logical OR"),
    ("not", _O, "Logical NOT"),
    # array
    ("map", _F, "Apply expression to each element"),
    ("map_values", _F, "Apply expression to each value"),
    ("select", _F, "Filter elements by condition"),
    ("sort", _F, "Sort array"),
    ("sort_by", _F, "Sort array by expression"),
    ("reverse", _F, "Reverse array"),
    ("unique", _F, "Remove duplicate values"),
    ("unique_by", _F, "Remove duplicates by expression"),
    ("group_by", _F, "Group array elements by expression"),
    ("flatten", _F, "Flatten nested arrays"),
    ("add", _F, "Sum array elements or concatenate"),
    ("any", _F, "True if any element is true"),
    ("all", _F, "True if all elements are true"),
    ("length", _F, "Length of array/object/string"),
    ("first", _F, "First element"),
    ("last", _F, "Last element"),
    ("nth", _F, "Nth element"),
    ("indices", _F, "Find all indices of value"),
    ("index", _F, "Find first index of value"),
    ("rindex", _F, "Find last index of value"),
    ("inside", _F, "Check if element is inside array"),
    ("contains", _F, "Check if contains value"),
    ("startswith", _F, "Check if starts with value"),
    ("endswith", _F, "Check if ends with value"),
    ("limit", _F, "Limit output count"),
    ("range", _F, "Generate range"),
    ("min", _F, "Minimum value"),
    ("max", _F, "Maximum value"),
    ("min_by", _F, "Minimum by expression"),
    ("max_by", _F, "Maximum by expression"),
    # object
    ("keys", _F, "Get object keys or array indices"),
    ("keys_unsorted", _F, "Get object keys (unsorted)"),
    ("values", _F, "Get all values"),
    ("to_entries", _F, "Convert object to key-value pairs"),
    ("from_entries", _F, "Convert key-value pairs to object"),
    ("with_entries", _F, "Transform object entries"),
    ("has", _F, "Check if key exists"),
    ("in", _F, "Check if value is in object"),
    ("del", _F, "Delete key/path"),
    ("getpath", _F, "Get value at path"),
    ("setpath", _F, "Set value at path"),
    ("delpaths", _F, "Delete multiple paths"),
    ("paths", _F, "Get all paths (leaf paths)"),
    ("leaf_paths", _F, "Get all leaf paths"),
    # string
    ("tostring", _F, "Convert to string"),
    ("tonumber", _F, "Convert to number"),
    ("split", _F, "Split string by delimiter"),
    ("join", _F, "Join array with delimiter"),
    ("ltrimstr", _F, "Remove prefix string"),
    ("rtrimstr", _F, "Remove suffix string"),
    ("ascii_downcase", _F, "Convert to lowercase"),
    ("ascii_upcase", _F, "Convert to uppercase"),
    ("explode", _F, "String to codepoint array"),
    ("implode", _F, "Codepoint array to string"),
    ("test", _F, "Test regex match"),
    ("match", _F, "Match regex"),
    ("capture", _F, "Capture regex groups"),
    ("scan", _F, "Scan for all regex matches"),
    ("splits", _F, "Split by regex"),
    ("sub", _F, "Replace first regex match"),
    ("gsub", _F, "Replace all regex matches"),
    # type predicates
    ("type", _F, "Get value type"),
    ("arrays", _F, "Select arrays"),
    ("objects", _F, "Select objects"),
    ("iterables", _F, "Select arrays/objects"),
    ("booleans", _F, "Select booleans"),
    ("numbers", _F, "Select numbers"),
    ("strings", _F, "Select strings"),
    ("nulls", _F, "Select nulls"),
    ("scalars", _F, "Select non-iterable values"),
    ("tojson", _F, "Encode value as JSON text"),
    ("fromjson", _F, "Decode JSON text"),
    # math
    ("floor", _F, "Round down"),
    ("ceil", _F, "Round up"),
    ("round", _F, "Round to nearest"),
    ("sqrt", _F, "Square root"),
    ("abs", _F, "Absolute value"),
    ("pow", _F, "Raise to a power"),
    ("log", _F, "Natural logarithm"),
    # date
    ("now", _F, "Current Unix timestamp"),
    ("fromdateiso8601", _F, "Parse ISO8601 date"),
    ("todateiso8601", _F, "Format as ISO8601 date"),
    ("fromdate", _F, "Parse date string"),
    ("todate", _F, "Format date"),
    ("strftime", _F, "Format timestamp"),
    ("strptime", _F, "Parse timestamp"),
    ("mktime", _F, "Broken-down time to timestamp"),
    ("gmtime", _F, "Timestamp to broken-down time"),
    # formatting
    ("@json", _F, "Format as JSON string"),
    ("@text", _F, "Format as plain text"),
    ("@uri", _F, "URL encode"),
    ("@csv", _F, "Format as CSV"),
    ("@tsv", _F, "Format as TSV"),
    ("@html", _F, "HTML encode"),
    ("@sh", _F, "Quote for shell"),
    ("@base64", _F, "Base64 encode"),
    ("@base64d", _F, "Base64 decode"),
    # control flow
    ("if", _F, "Conditional expression"),
    ("then", _F, "Then clause"),
    ("elif", _F, "Else-if clause"),
    ("else", _F, "Else clause"),
    ("end", _F, "End block"),
    ("try", _F, "Catch errors"),
    ("catch", _F, "Error handler"),
    ("reduce", _F, "Fold values into an accumulator"),
    ("foreach", _F, "Fold emitting each state"),
    ("as", _F, "Bind variable"),
    # advanced
    ("recurse", _F, "Apply recursively"),
    ("walk", _F, "Apply to all values recursively"),
    ("transpose", _F, "Transpose matrix"),
    ("until", _F, "Repeat until condition"),
    ("while", _F, "Repeat while condition"),
    ("repeat", _F, "Repeat expression infinitely"),
    ("env", _F, "Access environment variables"),
    ("$ENV", _F, "Environment object"),
    ("input", _F, "Read next input"),
    ("debug", _F, "Print value to stderr"),
    ("error", _F, "Raise error"),
    ("empty", _F, "Produce no output"),
    ("path", _F, "Paths produced by expression"),
    # assignment
    ("|=", _O, "Update assignment"),
    ("+=", _O, "Addition assignment"),
    ("-=", _O, "Subtraction assignment"),
    ("*=", _O, "Multiplication assignment"),
    ("/=", _O, "Division assignment"),
    ("//=", _O, "Alternative assignment"),
)


@cache
def builtin_catalog() -> tuple[Suggestion, ...]:
    """The catalog in display order, built on first use."""
    return tuple(Suggestion(text, kind, desc) for text, kind, desc in _CATALOG)


def filter_builtins(prefix: str) -> list[Suggestion]:
    """Case-insensitive prefix match, kept in catalog order.

    An empty prefix yields nothing so the popup stays closed until the
    user has typed something.
    """
    if not prefix:
        return []
    needle = prefix.lower()
    return [s for s in builtin_catalog() if s.text.lower().startswith(needle)]
