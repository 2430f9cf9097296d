"""Front-matter template rendering.

:class:`TemplateWriter` renders the flat field map built by the document
assembler through a Jinja2 template and writes the result to disk.
Templates see the fields as top-level names::

    ---
    title: {{ Title | quote }}
    tags: {{ Tags }}
    ---

    {{ Content }}

Of Go template syntax only bare field references are understood: the
leading dot of ``{{ .Title }}`` is dropped before the template is compiled,
and a ``quote`` filter mirrors Hugo's function of the same name, so
``{{ .Title | quote }}`` works unchanged.  Go control structures such as
``{{ if .Draft }}`` or ``{{ with .Image }}`` are not translated; a template
using them is rejected when it is loaded.  Write them as Jinja2
``{% if Draft %}`` blocks instead.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, Template, TemplateError

from hugoify.errors import HugoifyConfigurationError, HugoifyTemplateError

DEFAULT_TEMPLATE = """\
---
title: {{ Title | quote }}
{%- if MetaTitle %}
metaTitle: {{ MetaTitle | quote }}
{%- endif %}
description: {{ Description | quote }}
date: {{ Date }}
lastmod: {{ Lastmod }}
{%- if Image %}
image: {{ Image | quote }}
{%- endif %}
author: {{ Author | quote }}
draft: {{ "true" if Draft else "false" }}
weight: {{ Weight }}
toc: {{ "true" if Toc else "false" }}
comments: {{ "true" if Comments else "false" }}
{%- if Slug %}
slug: {{ Slug | quote }}
{%- endif %}
tags: {{ Tags }}
categories: {{ Categories }}
---

{{ Content }}"""

_GO_FIELD_RE = re.compile(r"(\{\{-?\s*)\.(?=[A-Za-z_])")
_GO_ACTION_RE = re.compile(r"\{\{-?\s*(if|with|range|else|end|define|block|template)\b")


def _from_go_fields(source: str) -> str:
    return _GO_FIELD_RE.sub(r"\1", source)


def quote(value: Any) -> str:
    """Double-quoted YAML scalar for *value*; non-ASCII text is kept as-is."""
    return json.dumps("" if value is None else str(value), ensure_ascii=False)


class TemplateWriter:
    """Render documents through a Jinja2 template.

    Parameters
    ----------
    template_path:
        Template file.  ``{% include %}`` resolves relative to its
        directory.  When ``None`` :data:`DEFAULT_TEMPLATE` is used.

    Raises
    ------
    HugoifyConfigurationError
        If the template cannot be read or does not compile.
    """

    def __init__(self, template_path: str | Path | None = None) -> None:
        self._template_path = Path(template_path) if template_path else None
        search_path = str(self._template_path.parent) if self._template_path else "."
        self._env = Environment(
            loader=FileSystemLoader(search_path),
            keep_trailing_newline=True,
            autoescape=False,
        )
        self._env.filters["quote"] = quote
        self._template = self._compile()

    @property
    def template_path(self) -> Path | None:
        return self._template_path

    def _compile(self) -> Template:
        if self._template_path is None:
            source = DEFAULT_TEMPLATE
        else:
            try:
                source = self._template_path.read_text(encoding="utf-8")
            except OSError as exc:
                raise HugoifyConfigurationError(
                    f"Cannot read template {self._template_path}: {exc}",
                    context={"field": "template_path", "path": str(self._template_path)},
                    cause=exc,
                ) from exc
        action = _GO_ACTION_RE.search(source)
        if action is not None:
            raise HugoifyConfigurationError(
                f"Unsupported Go template action {{{{ {action.group(1)} }}}} in "
                f"{self._template_path}; use Jinja2 {{% {action.group(1)} %}} syntax",
                context={"field": "template_path", "path": str(self._template_path)},
            )
        try:
            return self._env.from_string(_from_go_fields(source))
        except TemplateError as exc:
            raise HugoifyConfigurationError(
                f"Invalid template {self._template_path or '<default>'}: {exc}",
                context={"field": "template_path"},
                cause=exc,
            ) from exc

    def render(self, fields: Mapping[str, Any]) -> str:
        """Render *fields* to text.

        Raises
        ------
        HugoifyTemplateError
            If the template fails at render time.
        """
        try:
            return self._template.render(**fields)
        except TemplateError as exc:
            raise HugoifyTemplateError(
                f"Template rendering failed: {exc}",
                context={"template": str(self._template_path or "<default>")},
                cause=exc,
            ) from exc

    def write(self, path: str | Path, fields: Mapping[str, Any]) -> Path:
        """Render *fields* and write the result to *path*, creating parent
        directories.  Returns the written path."""
        target = Path(path)
        text = self.render(fields)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise HugoifyTemplateError(
                f"Failed to write {target}: {exc}",
                context={"path": str(target)},
                cause=exc,
            ) from exc
        return target
