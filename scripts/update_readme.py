#!/usr/bin/env python3
"""Auto-generate README.md index table from the docs/ tree.

Usage:
    python3 scripts/update_readme.py             # overwrite README.md
    python3 scripts/update_readme.py --preview   # print to stdout instead
    python3 scripts/update_readme.py --no-sort   # keep discovery order
"""

import json
import os
import sys
from pathlib import Path
from urllib.parse import quote

import yaml

ROOT = Path(__file__).resolve().parent.parent
DOCS_DIR = ROOT / "docs"
TEMPLATE_PATH = ROOT / "README_TEMPLATE.md"
README_PATH = ROOT / "README.md"

GITHUB_USERNAME = "arichy"
REPO_NAME = "blogs"
BRANCH_NAME = "main"

START_MARKER = "<!-- START -->"
END_MARKER = "<!-- END -->"
DEFAULT_PREAMBLE = f"# My blogs\n\n{START_MARKER}\ngenerated table\n{END_MARKER}\n"

TABLE_HEADER = "\n| Link | 链接 |\n| ---- | ---- |\n"

# Checked in this order; the first one present wins
CONFIG_FILES = ("config.json", "config.yaml", "config.yml")
LANGS = ("en", "zh")
NA = "N/A"


class LocalFileSystem:
    """Thin pathlib wrapper so the traversal can run against a fake tree."""

    def list_dir(self, path):
        return sorted(p.name for p in Path(path).iterdir())

    def is_dir(self, path):
        return Path(path).is_dir()

    def is_file(self, path):
        return Path(path).is_file()

    def exists(self, path):
        return Path(path).exists()

    def read_text(self, path):
        return Path(path).read_text(encoding="utf-8")

    def write_text(self, path, text):
        Path(path).write_text(text, encoding="utf-8")


def _rel_url_path(path, repo_root):
    rel = os.path.relpath(os.path.abspath(path), os.path.abspath(repo_root))
    return quote(Path(rel).as_posix(), safe="/")


def github_blob_url(path, repo_root):
    return (
        f"https://github.com/{GITHUB_USERNAME}/{REPO_NAME}"
        f"/blob/{BRANCH_NAME}/{_rel_url_path(path, repo_root)}"
    )


def github_tree_url(path, repo_root):
    return (
        f"https://github.com/{GITHUB_USERNAME}/{REPO_NAME}"
        f"/tree/{BRANCH_NAME}/{_rel_url_path(path, repo_root)}"
    )


def load_preamble(template_path, fs):
    """Return template text before START_MARKER, or the default preamble."""
    if not fs.exists(template_path):
        return DEFAULT_PREAMBLE
    text = fs.read_text(template_path)
    start = text.find(START_MARKER)
    end = text.find(END_MARKER)
    if start == -1 or end == -1:
        return DEFAULT_PREAMBLE
    return text[:start]


def load_dir_config(dir_path, fs):
    """Read the directory's config file.

    Returns None when there is no config or it cannot be parsed; parse
    failures are reported on stderr and otherwise ignored.
    """
    for name in CONFIG_FILES:
        config_path = Path(dir_path) / name
        if not fs.is_file(config_path):
            continue
        # ValueError covers JSONDecodeError and UnicodeDecodeError
        try:
            text = fs.read_text(config_path)
            if name.endswith(".json"):
                config = json.loads(text)
            else:
                config = yaml.safe_load(text)
        except (ValueError, yaml.YAMLError) as e:
            print(f"  [WARN] invalid config {config_path}: {e}", file=sys.stderr)
            return None
        if not isinstance(config, dict):
            print(f"  [WARN] invalid config {config_path}: not a mapping", file=sys.stderr)
            return None
        return config
    return None


def _is_article_file(name):
    # leading "." marks a WIP article
    return name.endswith(".md") and not name.startswith(".")


def _first_md(dir_path, fs):
    for name in fs.list_dir(dir_path):
        candidate = Path(dir_path) / name
        if _is_article_file(name) and fs.is_file(candidate):
            return candidate
    return None


def _record(records, article_name):
    return records.setdefault(article_name, {"en": NA, "zh": NA})


def _config_titles(config):
    titles = config.get("title") or {}
    if not isinstance(titles, dict):
        return {}
    return {lang: titles[lang] for lang in LANGS if titles.get(lang)}


def _apply_config(dir_path, config, records, fs, repo_root):
    """Populate the record for a configured directory. No further recursion."""
    dir_path = Path(dir_path)
    titles = _config_titles(config)
    links = {}

    if config.get("type") == "series":
        link = github_tree_url(dir_path, repo_root)
        for lang, title in (titles or {"en": dir_path.name}).items():
            links[lang] = f"[{title}]({link})"
    else:
        lang_dirs = [lang for lang in LANGS if fs.is_dir(dir_path / lang)]
        if lang_dirs:
            for lang in lang_dirs:
                md = _first_md(dir_path / lang, fs)
                if md is not None:
                    title = titles.get(lang, md.stem)
                    links[lang] = f"[{title}]({github_blob_url(md, repo_root)})"
        else:
            md = _first_md(dir_path, fs)
            if md is not None:
                link = github_blob_url(md, repo_root)
                for lang, title in (titles or {"en": md.stem}).items():
                    links[lang] = f"[{title}]({link})"

    if links:
        _record(records, dir_path.name).update(links)


def _add_md_file(md_path, records, repo_root):
    parts = Path(os.path.relpath(os.path.abspath(md_path), os.path.abspath(repo_root))).parts
    title = md_path.stem
    lang_index = next((i for i, part in enumerate(parts) if part in LANGS), None)

    if lang_index is not None:
        lang = parts[lang_index]
        if lang_index > 0:
            article_name = parts[lang_index - 1]
        else:
            # language dir sits directly under repo_root
            article_name = Path(os.path.abspath(repo_root)).name
    else:
        lang = "en"
        article_name = Path(os.path.abspath(md_path)).parent.name

    record = _record(records, article_name)
    record[lang] = f"[{title}]({github_blob_url(md_path, repo_root)})"


def traverse_dir(dir_path, records, fs, repo_root):
    """Walk dir_path, merging discovered articles into records (in place)."""
    dir_path = Path(dir_path)
    config = load_dir_config(dir_path, fs)
    if config is not None:
        if config.get("wip"):
            return
        _apply_config(dir_path, config, records, fs, repo_root)
        return

    for name in fs.list_dir(dir_path):
        # digit prefix is reserved for ordering / drafts
        if name[:1].isdigit():
            continue
        entry = dir_path / name
        if fs.is_dir(entry):
            traverse_dir(entry, records, fs, repo_root)
        elif fs.is_file(entry) and _is_article_file(name):
            _add_md_file(entry, records, repo_root)


def render_table(records, sort_output=True):
    rows = list(records.values())
    if sort_output:
        rows.sort(key=lambda r: r["en"])
    return TABLE_HEADER + "".join(f"| {r['en']} | {r['zh']} |\n" for r in rows)


def build_readme(docs_root, template_path, fs, repo_root, sort_output=True):
    """Return (README text, article count)."""
    preamble = load_preamble(template_path, fs)
    records = {}
    traverse_dir(docs_root, records, fs, repo_root)
    return f"{preamble}\n{render_table(records, sort_output)}", len(records)


def generate_index(docs_root, template_path, output_path,
                   sort_output=True, fs=None, repo_root=None):
    """Write the README index to output_path and return the article count."""
    fs = fs or LocalFileSystem()
    repo_root = repo_root or Path.cwd()
    readme, count = build_readme(docs_root, template_path, fs, repo_root, sort_output)
    fs.write_text(output_path, readme)
    return count


def main():
    sort_output = "--no-sort" not in sys.argv

    if "--preview" in sys.argv:
        readme, _ = build_readme(
            DOCS_DIR, TEMPLATE_PATH, LocalFileSystem(), Path.cwd(), sort_output
        )
        print(readme)
        print("\n--- Run without --preview to overwrite README.md ---")
        return

    count = generate_index(DOCS_DIR, TEMPLATE_PATH, README_PATH, sort_output)
    print(f"README.md updated: {count} articles")


if __name__ == "__main__":
    main()
