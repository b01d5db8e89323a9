import pytest


class ScriptedAsk:
    """Stands in for the console prompt: returns canned answers in order."""

    def __init__(self, answers):
        self.answers = list(answers)
        self.prompts = []

    def __call__(self, prompt):
        self.prompts.append(prompt)
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {prompt!r}")
        return self.answers.pop(0)


@pytest.fixture()
def scripted():
    return ScriptedAsk


@pytest.fixture()
def package_tree(tmp_path):
    root = tmp_path / "package"
    (root / "src" / "sub").mkdir(parents=True)
    (root / "dist").mkdir()
    (root / "src" / "a.js").write_text("console.log('a');")
    (root / "src" / "b.css").write_text("body {}")
    (root / "src" / "sub" / "c.js").write_text("c")
    (root / "dist" / "lib.js").write_text("lib")
    (root / "dist" / "lib.min.js").write_text("min")
    (root / "package.json").write_text('{"name": "lib"}')
    return root
