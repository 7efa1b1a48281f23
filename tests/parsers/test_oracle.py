import pytest
import yaml

from yamlcst.parsers import parse, to_python

# well-formed documents where PyYAML's untyped loader must agree with us
DOCUMENTS = [
    "name: John Doe\nage: 30\n",
    "- Apple\n- Banana\n- Cherry\n",
    "a:\n  b:\n    c: deep\n  d: [1, 2, {e: f}]\n",
    "one:\n- 2\n- 3\nfour: 5\n",
    "- - s1_i1\n  - s1_i2\n- s2\n",
    "text: |\n  line one\n  line two\nfolded: >-\n  a\n  b\n",
    "quoted: \"tab\\there\"\nsingle: 'it''s'\n",
    "plain:\n  This unquoted scalar\n  spans many lines.\n",
    "url: http://example.com:8080/path\n",
    "hr: # 1998 hr ranking\n  - Mark McGwire\n  - Sammy Sosa\n",
    "- name: Mark McGwire\n  hr: 65\n- name: Sammy Sosa\n  hr: 63\n",
    "{a: [x, y], b: {c: d}}\n",
    "key: [\n  one,\n  two\n]\n",
    "---\nmarker: yes\n...\n",
]


@pytest.mark.parametrize("text", DOCUMENTS)
def test_agrees_with_pyyaml_base_loader(text):
    errors = []
    ours = to_python(parse(text, errors))
    assert errors == []
    assert ours == yaml.load(text, Loader=yaml.BaseLoader)
