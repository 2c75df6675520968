from pathlib import Path

from postman_collection_gen.scanner.selector import select_source_files

FIXTURES = Path(__file__).parent / "fixtures"
TOOLS = FIXTURES / "tools"


def _touch(path: Path, content: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def _rel(files: list[Path], root: Path) -> list[str]:
    return [f.relative_to(root).as_posix() for f in files]


class TestSelectFixtureTree:
    def test_selects_numbered_dirs_in_numeric_order(self):
        files = select_source_files(TOOLS)
        assert _rel(files, TOOLS) == [
            "1_simulate_transaction/index.js",
            "2_cards/create.js",
            "2_cards/nested/update.js",
            "3-broken/broken.js",
            "10_webhooks/subscribe.js",
        ]

    def test_skips_node_modules(self):
        files = select_source_files(TOOLS)
        assert not any("node_modules" in f.parts for f in files)

    def test_non_numeric_prefix_excluded(self):
        files = select_source_files(TOOLS)
        assert not any(f.parent.name == "foo_3" for f in files)

    def test_zero_index_outside_range(self):
        files = select_source_files(TOOLS)
        assert not any(f.parent.name == "0_zero" for f in files)


class TestSelectEdgeCases:
    def test_missing_root_returns_empty(self, tmp_path):
        assert select_source_files(tmp_path / "nope") == []

    def test_file_root_returns_empty(self, tmp_path):
        f = _touch(tmp_path / "tools.js")
        assert select_source_files(f) == []

    def test_no_numbered_dirs(self, tmp_path):
        _touch(tmp_path / "scripts" / "a.js")
        assert select_source_files(tmp_path) == []

    def test_numeric_sort_not_lexical(self, tmp_path):
        _touch(tmp_path / "10_last" / "a.js")
        _touch(tmp_path / "9_middle" / "a.js")
        _touch(tmp_path / "1" / "a.js")
        files = select_source_files(tmp_path)
        assert _rel(files, tmp_path) == ["1/a.js", "9_middle/a.js", "10_last/a.js"]

    def test_name_pattern(self, tmp_path):
        _touch(tmp_path / "3_foo" / "a.js")
        _touch(tmp_path / "4-bar" / "a.js")
        _touch(tmp_path / "5foo" / "a.js")
        _touch(tmp_path / "foo_3" / "a.js")
        files = select_source_files(tmp_path)
        assert _rel(files, tmp_path) == ["3_foo/a.js", "4-bar/a.js"]

    def test_numbered_files_are_not_dirs(self, tmp_path):
        _touch(tmp_path / "1_script.js")
        assert select_source_files(tmp_path) == []

    def test_nested_node_modules_skipped_at_any_depth(self, tmp_path):
        _touch(tmp_path / "1_x" / "lib" / "node_modules" / "dep" / "index.js")
        _touch(tmp_path / "1_x" / "lib" / "util.js")
        files = select_source_files(tmp_path)
        assert _rel(files, tmp_path) == ["1_x/lib/util.js"]

    def test_depth_first_order_within_dir(self, tmp_path):
        _touch(tmp_path / "1_x" / "b" / "inner.js")
        _touch(tmp_path / "1_x" / "a.js")
        _touch(tmp_path / "1_x" / "c.js")
        files = select_source_files(tmp_path)
        assert _rel(files, tmp_path) == ["1_x/a.js", "1_x/b/inner.js", "1_x/c.js"]

    def test_custom_extensions(self, tmp_path):
        _touch(tmp_path / "1_x" / "a.js")
        _touch(tmp_path / "1_x" / "b.ts")
        _touch(tmp_path / "1_x" / "c.py")
        files = select_source_files(tmp_path, extensions=(".js", ".ts"))
        assert _rel(files, tmp_path) == ["1_x/a.js", "1_x/b.ts"]
