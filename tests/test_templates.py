"""Tests for the template engine and its helpers."""

import json
import os

import pytest

from yamlgen.codegen import (
    HELPERS,
    STDIN,
    GeneratorConfig,
    TemplateEngine,
    TemplateError,
    build_model,
)
from yamlgen.codegen.core.templates import basename, dirname, jsonify

from .conftest import SCENARIO_TEMPLATE


def model_for(data, origin=STDIN, package="demo"):
    config = GeneratorConfig(use="test-gen", version="v1.2.3", template="x")
    return build_model(config, origin, data, package)


class TestHelpers:
    """Helper function tests."""

    def test_registry_is_closed(self):
        assert set(HELPERS) == {"basename", "dirname", "abs", "jsonify"}

    @pytest.mark.parametrize(
        "path, expected",
        [
            ("/a/b/c.yaml", "c.yaml"),
            ("a/b/", "b"),
            ("c.yaml", "c.yaml"),
            ("/", "/"),
            ("", "."),
        ],
    )
    def test_basename(self, path, expected):
        assert basename(path) == expected

    @pytest.mark.parametrize(
        "path, expected",
        [
            ("/a/b/c.yaml", "/a/b"),
            ("c.yaml", "."),
            ("/c.yaml", "/"),
            ("a/b/", "a/b"),
            ("a//b", "a"),
        ],
    )
    def test_dirname(self, path, expected):
        assert dirname(path) == expected

    def test_abs(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        assert HELPERS["abs"]("x.yaml") == os.path.join(str(tmp_path), "x.yaml")

    def test_jsonify_indents(self):
        assert jsonify({"a": 1, "b": [1, 2]}) == (
            '{\n  "a": 1,\n  "b": [\n    1,\n    2\n  ]\n}\n'
        )

    def test_jsonify_does_not_escape_html(self):
        text = jsonify({"html": "<a href='x'>&amp;</a>", "name": "日本"})

        assert "<a href='x'>&amp;</a>" in text
        assert "日本" in text
        assert "\\u003c" not in text

    def test_jsonify_sorts_keys(self):
        assert jsonify({"b": 1, "a": 2}) == '{\n  "a": 2,\n  "b": 1\n}\n'

    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
    def test_jsonify_rejects_non_finite_numbers(self, value):
        with pytest.raises(ValueError):
            jsonify({"x": value})

    def test_jsonify_scalars(self):
        assert jsonify(None) == "null\n"
        assert jsonify("x") == '"x"\n'


class TestTemplateEngine:
    """TemplateEngine tests."""

    def test_widget_scenario(self):
        engine = TemplateEngine(SCENARIO_TEMPLATE)

        out = engine.render(model_for({"name": "widget"}))

        assert out == b'package demo\nvar Name = "widget"'

    def test_generator_identity(self):
        engine = TemplateEngine("{{ Gen.Name }} {{ Gen.Version }} {{ Input.Path }}")

        assert engine.render(model_for({})) == b"test-gen v1.2.3 (stdin)"

    def test_jsonify_as_function_and_filter(self):
        data = {"a": 1, "b": [1, 2]}
        expected = jsonify(data).encode()

        assert TemplateEngine("{{ jsonify(Input.Data) }}").render(model_for(data)) == expected
        assert TemplateEngine("{{ Input.Data | jsonify }}").render(model_for(data)) == expected

    def test_no_html_escaping_of_values(self):
        engine = TemplateEngine('x := "{{ Input.Data.expr }}"')

        out = engine.render(model_for({"expr": "a < b && c > d"}))

        assert out == b'x := "a < b && c > d"'

    def test_path_helpers(self):
        engine = TemplateEngine("{{ basename(Input.Path) }}|{{ dirname(Input.Path) }}")

        out = engine.render(model_for({}, origin="/src/app/data.yaml"))

        assert out == b"data.yaml|/src/app"

    def test_loops_and_conditionals(self):
        engine = TemplateEngine(
            "{% for item in Input.Data.items %}\n"
            "{% if item.enabled %}{{ item.name }}\n{% endif %}"
            "{% endfor %}"
        )
        data = {"items": [{"name": "a", "enabled": True}, {"name": "b", "enabled": False}]}

        assert engine.render(model_for(data)) == b"a\n"

    def test_trailing_newline_kept(self):
        assert TemplateEngine("x\n").render(model_for({})) == b"x\n"

    def test_parse_error(self):
        with pytest.raises(TemplateError, match="Failed to parse"):
            TemplateEngine("{% for x in %}")

    def test_missing_field_is_an_error(self):
        engine = TemplateEngine("{{ Input.Data.missing }}")

        with pytest.raises(TemplateError, match="Failed to execute"):
            engine.render(model_for({"name": "widget"}))

    def test_unknown_top_level_name_is_an_error(self):
        with pytest.raises(TemplateError):
            TemplateEngine("{{ Nope }}").render(model_for({}))

    def test_keys_named_like_dict_methods(self):
        engine = TemplateEngine(
            "{{ Input.Data.keys }}|{{ Input.Data.get }}|"
            "{% for x in Input.Data.items %}{{ x }}{% endfor %}"
        )

        out = engine.render(model_for({"items": ["a", "b"], "keys": "k", "get": 1}))

        assert out == b"k|1|ab"

    def test_dict_methods_without_matching_key(self):
        engine = TemplateEngine("{% for k, v in Input.Data.items() %}{{ k }}={{ v }};{% endfor %}")

        assert engine.render(model_for({"a": 1, "b": 2})) == b"a=1;b=2;"

    def test_infinity_in_document_is_an_error(self):
        engine = TemplateEngine("{{ jsonify(Input.Data) }}")

        with pytest.raises(TemplateError) as exc_info:
            engine.render(model_for({"x": float("inf")}))

        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_helper_failure_is_an_error(self):
        engine = TemplateEngine("{{ jsonify(Input.Data) }}")

        with pytest.raises(TemplateError) as exc_info:
            engine.render(model_for({1: "a", "b": 2}))

        assert exc_info.value.__cause__ is not None

    def test_rendering_is_deterministic(self):
        engine = TemplateEngine("{{ jsonify(Input.Data) }}")
        data = json.loads('{"z": [1, {"y": 2, "x": 3}], "a": null}')

        assert engine.render(model_for(data)) == engine.render(model_for(data))
