"""
Report assembly: prose, tables and figure references in order.

The report only formats what it is given; it computes nothing.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import html
import logging
import os
from pathlib import Path

import pandas as pd

logger = logging.getLogger(__name__)


@dataclass
class Block:
    kind: str  # heading | text | table | figure
    text: str
    frame: pd.DataFrame | None = None
    path: Path | None = None


@dataclass
class Report:
    title: str
    blocks: list[Block] = field(default_factory=list)

    def add_heading(self, text: str) -> "Report":
        self.blocks.append(Block("heading", text))
        return self

    def add_text(self, text: str) -> "Report":
        self.blocks.append(Block("text", text))
        return self

    def add_table(self, title: str, frame: pd.DataFrame) -> "Report":
        self.blocks.append(Block("table", title, frame=frame))
        return self

    def add_figure(self, caption: str, path: Path) -> "Report":
        self.blocks.append(Block("figure", caption, path=Path(path)))
        return self

    # -------------------------------------------------------------------------
    def render_text(self, base_dir: Path | None = None) -> str:
        lines = [self.title, "=" * len(self.title), ""]
        for b in self.blocks:
            if b.kind == "heading":
                lines += [f"[{b.text}]", ""]
            elif b.kind == "text":
                lines += [b.text, ""]
            elif b.kind == "table":
                lines += [f"{b.text}:", b.frame.to_string(), ""]
            elif b.kind == "figure":
                lines += [f"Figure: {b.text} -> {_relative(b.path, base_dir)}", ""]
        return "\n".join(lines)

    def render_html(self, base_dir: Path | None = None) -> str:
        parts = [
            "<!DOCTYPE html>",
            "<html><head><meta charset='utf-8'>",
            f"<title>{html.escape(self.title)}</title></head><body>",
            f"<h1>{html.escape(self.title)}</h1>",
        ]
        for b in self.blocks:
            if b.kind == "heading":
                parts.append(f"<h2>{html.escape(b.text)}</h2>")
            elif b.kind == "text":
                parts.append(f"<p>{html.escape(b.text)}</p>")
            elif b.kind == "table":
                parts.append(f"<h3>{html.escape(b.text)}</h3>")
                parts.append(b.frame.to_html(border=0))
            elif b.kind == "figure":
                src = html.escape(_relative(b.path, base_dir))
                parts.append(
                    f"<figure><img src='{src}' alt='{html.escape(b.text)}' style='max-width:100%'>"
                    f"<figcaption>{html.escape(b.text)}</figcaption></figure>"
                )
        parts.append("</body></html>")
        return "\n".join(parts)

    def write(self, out_dir: Path, stem: str = "report") -> dict[str, Path]:
        """Write `<stem>.txt` and `<stem>.html` into `out_dir`."""
        out_dir = Path(out_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        paths = {"text": out_dir / f"{stem}.txt", "html": out_dir / f"{stem}.html"}
        paths["text"].write_text(self.render_text(out_dir), encoding="utf-8")
        paths["html"].write_text(self.render_html(out_dir), encoding="utf-8")
        logger.info("Report written to %s", out_dir)
        return paths


def _relative(path: Path, base_dir: Path | None) -> str:
    if base_dir is None:
        return Path(path).as_posix()
    return Path(os.path.relpath(path, base_dir)).as_posix()
