import keyword
import re
import unicodedata

__all__ = (
    'camel_case',
    'upper_first',
    'is_valid_identifier',
    'sanitize_identifier',
    'sanitize_argument_name',
    'MODULE_NAMES',
)

# Names bound at module level by the generated client.
MODULE_NAMES = ('defaults', 'servers', 'runtime', 'qs')

# Words are runs of capitals followed by lowercase letters, lowercase runs,
# capital-only runs (acronyms) and digit runs.
_WORD_RE = re.compile(r'[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|\d+')


def upper_first(input_string):
    if not input_string:
        return ''
    return input_string[0].upper() + input_string[1:]


def remove_accents(input_str):
    nfkd_form = unicodedata.normalize('NFKD', input_str)
    return ''.join(c for c in nfkd_form if not unicodedata.combining(c))


def words(text: str) -> list[str]:
    """Split a string into words on case changes, digits and separators."""
    return _WORD_RE.findall(remove_accents(text))


def camel_case(text: str) -> str:
    """Convert a string to lower camel case.

    Examples:
        >>> camel_case('list books')
        'listBooks'
        >>> camel_case('fur.color')
        'furColor'
        >>> camel_case('GET /books/by color')
        'getBooksByColor'
    """
    parts = words(text)
    if not parts:
        return ''
    head, *tail = parts
    return head.lower() + ''.join(part[0].upper() + part[1:].lower() for part in tail)


def is_valid_identifier(name: str) -> bool:
    return name.isidentifier() and not keyword.iskeyword(name)


def sanitize_argument_name(name: str) -> str:
    """Make a camel-cased argument name usable as a Python parameter.

    Keywords, the reserved ``opts`` argument and the module-level names of
    the generated client get a trailing underscore. Names starting with a
    digit get a leading underscore.
    """
    if not name:
        return 'arg'
    if name[0].isdigit():
        name = f'_{name}'
    if keyword.iskeyword(name) or name == 'opts' or name in MODULE_NAMES:
        return f'{name}_'
    return name


def sanitize_identifier(name: str) -> str:
    """Convert a string into a valid Python type name.

    - Replace runs of invalid characters and join the parts in PascalCase
    - Ensure it doesn't start with a digit
    - Keep an already valid name unchanged apart from its first letter
    """
    if not name:
        return 'UnnamedType'

    parts = re.sub(r'[^A-Za-z0-9]+', '_', remove_accents(name)).split('_')

    if len(parts) == 1:
        sanitized = parts[0]
    else:
        sanitized = ''.join(upper_first(part) for part in parts if part)

    if sanitized and sanitized[0].isdigit():
        sanitized = '_' + sanitized

    return upper_first(sanitized) or 'UnnamedType'
