"""
Initialize .dropIgnore files with sensible defaults
"""

from pathlib import Path
from typing import Optional, List
from datetime import datetime

from .constants import IGNORE_FILENAME, DEFAULT_PATTERNS, MINIMAL_PATTERNS


def generate_ignore_content(custom_patterns: Optional[List[str]] = None,
                            minimal: bool = False,
                            ignore_filename: str = IGNORE_FILENAME) -> str:
    """
    Generate content for a rule file

    Args:
        custom_patterns: Additional patterns to include
        minimal: Generate minimal file with just essential patterns
        ignore_filename: Name shown in the header comment

    Returns:
        Content for the rule file
    """
    lines = [
        f"# {ignore_filename} - files Dropbox should not sync",
        f"# Generated on {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        "#",
        "# This file uses gitignore syntax.",
        "# Patterns are matched relative to the location of this file",
        "# and apply to every directory below it.",
        "# Use ! to re-include files matched earlier in this file.",
        "",
    ]

    if minimal:
        lines.extend([
            "# Minimal exclusions",
            "# ------------------",
        ])
        lines.extend(MINIMAL_PATTERNS)
        lines.append("")
    else:
        for category, patterns in DEFAULT_PATTERNS.items():
            lines.extend([
                f"# {category}",
                f"# {'-' * len(category)}",
            ])
            lines.extend(patterns)
            lines.append("")

    if custom_patterns:
        lines.extend([
            "# Custom patterns",
            "# ---------------",
        ])
        lines.extend(custom_patterns)
        lines.append("")

    lines.extend([
        "# Examples:",
        "# data/raw/             # Large data files",
        "# *.iso                 # Disk images",
        "# !keep.tmp             # Exception - keep syncing this one",
        "#",
        f"# {ignore_filename} files in subdirectories add to the rules above;",
        "# a file is ignored when any of them matches it.",
        "",
    ])

    return '\n'.join(lines)


def init_ignore_file(directory: Path,
                     force: bool = False,
                     minimal: bool = False,
                     custom_patterns: Optional[List[str]] = None,
                     ignore_filename: str = IGNORE_FILENAME) -> bool:
    """
    Initialize a rule file in the given directory

    Args:
        directory: Directory where to create the rule file
        force: Overwrite existing file
        minimal: Create minimal file instead of comprehensive
        custom_patterns: Additional patterns to include
        ignore_filename: Rule file name

    Returns:
        True if file was created, False if already exists and not forced
    """
    ignore_path = Path(directory) / ignore_filename

    if ignore_path.exists() and not force:
        return False

    content = generate_ignore_content(
        custom_patterns=custom_patterns,
        minimal=minimal,
        ignore_filename=ignore_filename,
    )

    ignore_path.write_text(content, encoding='utf-8')
    return True
