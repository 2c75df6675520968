from pathlib import Path

import pytest

from postman_collection_gen.errors import SourceParseError
from postman_collection_gen.scanner.base import HttpMethod
from postman_collection_gen.scanner.extract import extract_requests, extract_requests_from_file
from postman_collection_gen.scanner.source import parse_source

FIXTURES = Path(__file__).parent / "fixtures"
SOURCE = Path("tools/1_x/index.js")


def _extract(code: str, client_name: str = "axios"):
    return extract_requests(parse_source(code), SOURCE, client_name)


class TestParseSource:
    def test_accepts_modern_syntax(self):
        code = (
            "import axios from 'axios'\n"
            "type Card = { id: string }\n"
            "const url: string = import.meta.url\n"
            "const el = <div className=\"x\">{url}</div>\n"
            "await axios.get(url)\n"
        )
        assert parse_source(code).root_node.type == "program"

    def test_syntax_error_raises(self):
        with pytest.raises(SourceParseError, match="syntax error"):
            parse_source("const a = 1\nconst = \n")

    def test_invalid_utf8_raises(self):
        with pytest.raises(SourceParseError):
            parse_source(b"const a = '\xff\xfe'\n")


class TestMethodRecognition:
    def test_enumerated_methods(self):
        code = "\n".join(
            f"axios.{m}('/x')" for m in ("get", "post", "put", "patch", "delete", "head", "options")
        )
        methods = [r.method for r in _extract(code)]
        assert methods == list(HttpMethod)

    def test_any_casing(self):
        records = _extract("axios.post('/a', {})\naxios.PUT('/b', {})\n")
        assert [r.method for r in records] == [HttpMethod.POST, HttpMethod.PUT]

    def test_non_enumerated_method_ignored(self):
        assert _extract("axios.fetch('/a')\naxios.request({ url: '/b' })\n") == []

    def test_other_objects_ignored(self):
        code = "client.get('/a')\nthis.axios.get('/b')\napi.axios.get('/c')\nget('/d')\n"
        assert _extract(code) == []

    def test_optional_chain_ignored(self):
        assert _extract("axios?.get('/a')\n") == []

    def test_tagged_template_ignored(self):
        assert _extract("axios.get`/a`\n") == []

    def test_custom_client_name(self):
        records = _extract("http.get('/a')\naxios.get('/b')\n", client_name="http")
        assert [r.url_template for r in records] == ["/a"]

    def test_nested_calls_in_document_order(self):
        code = (
            "function f() { return axios.get('/first') }\n"
            "axios.post('/second', { inner: axios.get('/third') })\n"
        )
        assert [r.url_template for r in _extract(code)] == ["/first", "/second", "/third"]


class TestUrlRules:
    def test_variable_url_discarded(self):
        assert _extract("axios.get(someVariable)\n") == []

    def test_missing_url_discarded(self):
        assert _extract("axios.get()\n") == []

    def test_empty_url_discarded(self):
        assert _extract("axios.get('')\n") == []

    def test_template_url(self):
        records = _extract("axios.get(`${BASE}/x`)\n")
        assert len(records) == 1
        assert records[0].url_template == "{{BASE}}/x"

    def test_comment_before_url_ignored(self):
        records = _extract("axios.get(/* base */ '/x')\n")
        assert records[0].url_template == "/x"


class TestBodyRules:
    def test_unresolvable_body_falls_back_to_placeholder(self):
        records = _extract("axios.post(url, computeBody())\naxios.post('/u', computeBody())\n")
        assert len(records) == 1
        assert records[0].body == "{{VALUE}}"

    def test_get_never_has_body(self):
        records = _extract("axios.get('/u', computeBody())\naxios.delete('/u', { data: { a: 1 } })\n")
        assert [r.body for r in records] == [None, None]

    def test_missing_body_placeholder(self):
        records = _extract("axios.post('/u')\n")
        assert records[0].body == "{{BODY}}"

    def test_null_body_placeholder(self):
        records = _extract("axios.put('/u', null)\n")
        assert records[0].body == "{{BODY}}"

    def test_literal_body(self):
        records = _extract("axios.patch('/u', { cardType: 'Virtual', spendLimit: 1000, tags: [id] })\n")
        assert records[0].body == {"cardType": "Virtual", "spendLimit": 1000, "tags": ["{{id}}"]}

    def test_array_body_keeps_holes(self):
        records = _extract("axios.post('/a', [1,,2])\n")
        assert records[0].body == [1, None, 2]

    def test_config_argument_ignored(self):
        records = _extract("axios.post('/u', { a: 1 }, { headers: { x: 'y' } })\n")
        assert records[0].body == {"a": 1}

    def test_source_path_recorded(self):
        records = _extract("axios.get('/u')\n")
        assert records[0].source_path == SOURCE


class TestExtractFromFile:
    def test_fixture_file(self):
        path = FIXTURES / "tools" / "1_simulate_transaction" / "index.js"
        records = extract_requests_from_file(path)
        assert [(r.method, r.url_template) for r in records] == [
            (HttpMethod.POST, "{{API_BASE_URL}}/cards"),
            (HttpMethod.POST, "{{API_BASE_URL}}/simulate/authorisation"),
            (HttpMethod.GET, "{{API_BASE_URL}}/cards/{{cardId}}?expand=balance"),
        ]
        assert records[1].body == {"cardID": "{{cardId}}", "billAmount": 100, "simulateTimeout": True}

    def test_broken_file_yields_nothing(self):
        path = FIXTURES / "tools" / "3-broken" / "broken.js"
        assert extract_requests_from_file(path) == []

    def test_missing_file_yields_nothing(self, tmp_path):
        assert extract_requests_from_file(tmp_path / "gone.js") == []
