#!/usr/bin/env python3
"""Rewrite relative image paths in markdown files to absolute GitHub URLs.

Run from repo root, e.g. in a pre-commit hook:
    python3 scripts/replace_image_url.py docs/rust/en/Lifetimes.md ...

Image syntax inside inline code or fenced code blocks is left untouched.
"""

import os
import re
import sys
from pathlib import Path
from urllib.parse import quote, unquote

GITHUB_USERNAME = "arichy"
REPO_NAME = "blogs"
BRANCH_NAME = "main"

BASE_URL = f"https://github.com/{GITHUB_USERNAME}/{REPO_NAME}/blob/{BRANCH_NAME}/"

# One capture group, so re.split alternates prose (even) / code (odd).
# An unclosed ``` fence runs to end of file.
CODE_RE = re.compile(r"(```[\s\S]*?(?:```|\Z)|`[^`]*`)")
MD_IMAGE_RE = re.compile(r"(!\[.*?\]\()(?!http)(.*?)(\))")
HTML_IMAGE_RE = re.compile(r'(<img [^>]*src=")(?!http)([^"]+)("[^>]*>)')


def split_code_segments(content):
    """Split content into alternating prose / code segments."""
    return CODE_RE.split(content)


def github_image_url(file_path, rel_path, base_dir=None):
    """Resolve rel_path against file_path's directory, relative to base_dir (cwd).

    rel_path may already be percent-encoded (e.g. %20); it is decoded first.
    """
    base_dir = base_dir or os.getcwd()
    img_abs = os.path.normpath(os.path.join(os.path.abspath(os.path.dirname(file_path)), unquote(rel_path)))
    img_rel = Path(os.path.relpath(img_abs, os.path.abspath(base_dir))).as_posix()
    return f"{BASE_URL}{quote(img_rel, safe='/')}?raw=true"


def rewrite_content(content, file_path, base_dir=None):
    def _replace(m):
        return f"{m.group(1)}{github_image_url(file_path, m.group(2), base_dir)}{m.group(3)}"

    segments = split_code_segments(content)
    for i in range(0, len(segments), 2):
        segments[i] = HTML_IMAGE_RE.sub(_replace, MD_IMAGE_RE.sub(_replace, segments[i]))
    return "".join(segments)


def rewrite_file(file_path):
    """Rewrite one file in place. Returns True if the content changed."""
    path = Path(file_path)
    content = path.read_text(encoding="utf-8")
    new_content = rewrite_content(content, file_path)
    path.write_text(new_content, encoding="utf-8")
    return new_content != content


def rewrite_image_links(file_paths):
    """Rewrite every file in order and return how many were processed."""
    for file_path in file_paths:
        rewrite_file(file_path)
    return len(file_paths)


def main(argv=None):
    files = sys.argv[1:] if argv is None else argv
    count = rewrite_image_links(files)
    print(f"{count} file(s) processed.")


if __name__ == "__main__":
    main()
