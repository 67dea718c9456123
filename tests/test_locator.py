import pytest

from workspace_snippets.core.locator import (
    StanzaKind,
    apply_prefix,
    find_stanzas,
    strip_prefix,
)
from workspace_snippets.errors import StanzaNotFoundError, UnterminatedStanzaError

CONTENT = """Intro text.

  http_archive(
      name = "foo",
  )

Some more text with a closing paren:
)

# git_override(
#     module_name = "foo",
# )
"""


def test_finds_stanzas_in_order():
    stanzas = list(find_stanzas(CONTENT))

    assert [s.kind for s in stanzas] == [StanzaKind.HTTP_ARCHIVE, StanzaKind.GIT_OVERRIDE]
    assert [s.prefix for s in stanzas] == ["  ", "# "]
    assert [s.line for s in stanzas] == [3, 10]
    for stanza in stanzas:
        assert CONTENT[stanza.start:stanza.end] == stanza.text
    assert stanzas[0].text == '  http_archive(\n      name = "foo",\n  )'
    assert stanzas[1].text.endswith("# )")


def test_end_marker_must_reuse_prefix():
    content = '// http_archive(\n//     name = "foo",\n)\n// )\n'

    (stanza,) = find_stanzas(content)

    assert stanza.prefix == "// "
    assert stanza.text == content[:-1]


@pytest.mark.parametrize("line,prefix", [
    ("http_archive(", ""),
    ("    http_archive(", "    "),
    ("#http_archive(", "#"),
    ("## http_archive(", "## "),
    ("/// http_archive(", "/// "),
    ("  //  git_override(", "  //  "),
])
def test_prefixes(line, prefix):
    (stanza,) = find_stanzas(f"{line}\n{prefix})\n")
    assert stanza.prefix == prefix


def test_begin_marker_must_end_the_line():
    with pytest.raises(StanzaNotFoundError):
        list(find_stanzas('http_archive(name = "foo")\n'))


def test_no_stanza():
    with pytest.raises(StanzaNotFoundError):
        list(find_stanzas("nothing to see here\n"))


def test_unterminated_stanza():
    stanzas = find_stanzas('http_archive(\n)\n\ngit_override(\n    commit = "",\n')

    first = next(stanzas)
    assert first.kind == StanzaKind.HTTP_ARCHIVE
    with pytest.raises(UnterminatedStanzaError) as info:
        next(stanzas)
    assert info.value.line == 4
    assert info.value.kind == "git_override"


def test_strip_and_apply_prefix():
    text = '# http_archive(\n#     name = "foo",\n#\n# )'

    stripped = strip_prefix(text, "# ")

    assert stripped == 'http_archive(\n    name = "foo",\n\n)'
    assert apply_prefix(stripped, "# ") == text


def test_strip_prefix_rejects_lines_without_prefix():
    assert strip_prefix('# http_archive(\n    name = "foo",\n# )', "# ") is None


def test_empty_prefix():
    assert strip_prefix("a\n  b", "") == "a\n  b"
    assert apply_prefix("a\n\n  b", "") == "a\n\n  b"
