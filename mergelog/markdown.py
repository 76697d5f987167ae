import re

# order matters: fences and html first, emphasis last
_substitutions = (
    (re.compile(r'^ {0,3}(```|~~~)[^\n]*\n?', re.MULTILINE), ''),
    (re.compile(r'</?[A-Za-z][^>]*>'), ''),
    (re.compile(r'^[=\-]{2,}[ \t]*$', re.MULTILINE), ''),
    (re.compile(r'^ {0,3}([-*_])( *\1){2,} *$', re.MULTILINE), ''),
    (re.compile(r'\[\^[^\]]+\](:.*$)?', re.MULTILINE), ''),
    (re.compile(r'^ {0,3}\[[^\]]*\]:[ \t]*\S+.*$', re.MULTILINE), ''),
    (re.compile(r'!\[([^\]]*)\]\([^)]*\)'), r'\1'),
    (re.compile(r'!\[([^\]]*)\]\[[^\]]*\]'), r'\1'),
    (re.compile(r'\[([^\]]*)\]\([^)]*\)'), r'\1'),
    (re.compile(r'\[([^\]]*)\]\[[^\]]*\]'), r'\1'),
    (re.compile(r'^ {0,3}>\s?', re.MULTILINE), ''),
    (re.compile(r'^([ \t]*)([*+-]|\d+\.)[ \t]+', re.MULTILINE), r'\1'),
    (re.compile(r'^ {0,3}#{1,6}[ \t]+(.*?)([ \t]+#+)?[ \t]*$', re.MULTILINE), r'\1'),
    (re.compile(r'(\*{1,3})(\S(?:.*?\S)?)\1'), r'\2'),
    (re.compile(r'(?<!\w)(_{1,3})(\S(?:.*?\S)?)\1(?!\w)'), r'\2'),
    (re.compile(r'~~(\S(?:.*?\S)?)~~'), r'\1'),
    (re.compile(r'`+([^`]+?)`+'), r'\1'),
)


def strip_markdown(text: str) -> str:
    '''
    reduces markdown-formatted text to plain text. Headings, emphasis, code, links, images,
    block quotes, list markers, html tags and horizontal rules are removed, while their textual
    content is kept.
    '''
    if not text:
        return text

    for pattern, replacement in _substitutions:
        text = pattern.sub(replacement, text)

    return text.strip()


class MarkdownStripper:
    def __call__(self, text: str) -> str:
        return strip_markdown(text)


class Verbatim:
    '''
    sanitiser that leaves text as it is
    '''
    def __call__(self, text: str) -> str:
        return text
