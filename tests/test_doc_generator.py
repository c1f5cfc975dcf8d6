"""Tests for the Gemini gateway."""

from unittest import mock

from RepoDoc.doc_generator import (
    DEFAULT_MODEL,
    MAX_FILE_CHARS,
    MAX_PROMPT_PATHS,
    DocGenerator,
)


def _generator(text="generated", side_effect=None):
    client = mock.MagicMock()
    if side_effect is not None:
        client.models.generate_content.side_effect = side_effect
    else:
        client.models.generate_content.return_value = mock.Mock(text=text)
    return DocGenerator(api_key="key", client=client), client


def _prompt(client) -> str:
    return client.models.generate_content.call_args.kwargs["contents"]


class TestAnalyzeArchitecture:
    def test_returns_text(self):
        gen, client = _generator("## Tech Stack")
        assert gen.analyze_architecture(["src/main.py"]) == "## Tech Stack"
        kwargs = client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == DEFAULT_MODEL
        assert kwargs["config"].temperature == 0.2

    def test_prompt_limits_paths(self):
        gen, client = _generator()
        paths = [f"file{i}.py" for i in range(MAX_PROMPT_PATHS + 50)]
        gen.analyze_architecture(paths)
        prompt = _prompt(client)
        assert f"file{MAX_PROMPT_PATHS - 1}.py" in prompt
        assert f"file{MAX_PROMPT_PATHS}.py" not in prompt

    def test_empty_response(self):
        gen, _ = _generator(text=None)
        assert gen.analyze_architecture(["a.py"]) == "Could not generate analysis."

    def test_failure_becomes_message(self):
        gen, _ = _generator(side_effect=RuntimeError("quota"))
        result = gen.analyze_architecture(["a.py"])
        assert result == "Failed to analyze repository structure: quota"


class TestGenerateDocumentation:
    def test_prompt_contains_file_and_code(self):
        gen, client = _generator("# main.py")
        assert gen.generate_documentation("main.py", "def f(): pass") == "# main.py"
        prompt = _prompt(client)
        assert '"main.py"' in prompt
        assert "def f(): pass" in prompt

    def test_braces_in_code_survive(self):
        gen, client = _generator()
        gen.generate_documentation("a.js", "const x = {a: 1};")
        assert "const x = {a: 1};" in _prompt(client)

    def test_truncates_large_files(self):
        gen, client = _generator()
        gen.generate_documentation("big.py", "x" * (MAX_FILE_CHARS + 10))
        prompt = _prompt(client)
        assert "...[File Truncated]" in prompt
        assert "x" * (MAX_FILE_CHARS + 1) not in prompt

    def test_empty_response(self):
        gen, _ = _generator(text="")
        assert gen.generate_documentation("a.py", "") == "Could not generate documentation."

    def test_failure_becomes_message(self):
        gen, _ = _generator(side_effect=RuntimeError("boom"))
        assert gen.generate_documentation("a.py", "x") == "Failed to generate documentation: boom"


class TestMissingKey:
    def test_missing_key_degrades(self):
        gen = DocGenerator(api_key=None)
        assert gen.generate_documentation("a.py", "x") == (
            "Failed to generate documentation: API key is missing."
        )

    @mock.patch("RepoDoc.doc_generator.genai.Client")
    def test_client_created_with_key(self, client_cls):
        client_cls.return_value.models.generate_content.return_value = mock.Mock(text="ok")
        gen = DocGenerator(api_key="secret")
        assert gen.analyze_architecture(["a.py"]) == "ok"
        client_cls.assert_called_once_with(api_key="secret")
